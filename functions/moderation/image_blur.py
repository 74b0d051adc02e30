# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

from PIL import Image, ImageFilter

from shared.constants import DEFAULT_BLUR_RADIUS

# Pillow cannot filter these modes directly.
UNFILTERABLE_MODES = ("1", "P")


def blur_file(path: str, radius: float = DEFAULT_BLUR_RADIUS) -> None:
    """
    Applies a Gaussian blur to every band of the image at `path`, in place.

    The image keeps its original file format. Palette and bilevel images are
    blurred as RGBA; JPEG output is written back as RGB since JPEG has no
    alpha channel.

    Args:
        path (str): Local path of the image file.
        radius (float): Standard deviation of the Gaussian kernel.

    Raises:
        PIL.UnidentifiedImageError: If the file is not a readable image.
        OSError: If the image cannot be read or written.
    """
    with Image.open(path) as img:
        image_format = img.format
        img.load()
        working = img.convert("RGBA") if img.mode in UNFILTERABLE_MODES else img
        blurred = working.filter(ImageFilter.GaussianBlur(radius=radius))

    if image_format == "JPEG" and blurred.mode != "RGB":
        blurred = blurred.convert("RGB")
    blurred.save(path, format=image_format)
