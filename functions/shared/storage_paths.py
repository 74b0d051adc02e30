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

from dataclasses import dataclass

STORAGE_PATH_SEPARATOR = "/"
MIN_MESSAGE_IMAGE_SEGMENTS = 3
RESERVED_SEGMENTS = (".", "..")


class MalformedObjectPathError(ValueError):
    pass


@dataclass(frozen=True)
class MessageImagePath:
    owner: str
    message_id: str
    file_name: str


def parse_message_image_path(path: str) -> MessageImagePath:
    """
    Decodes the storage path of an image attached to a chat message.

    The web client uploads message images to `{owner}/{messageId}/{fileName}`,
    so the second segment names the Firestore message the image belongs to.

    Args:
        path (str): The object path within the bucket.

    Returns:
        MessageImagePath: The decoded path segments.

    Raises:
        MalformedObjectPathError: If the path has fewer than three segments,
            or any segment is empty, "." or "..".
    """
    if not path:
        raise MalformedObjectPathError("Object path is empty.")

    segments = path.split(STORAGE_PATH_SEPARATOR)
    if len(segments) < MIN_MESSAGE_IMAGE_SEGMENTS:
        raise MalformedObjectPathError(
            f"Object path '{path}' does not match '<owner>/<messageId>/<fileName>'."
        )
    if any(not segment for segment in segments):
        raise MalformedObjectPathError(
            f"Object path '{path}' contains an empty segment."
        )
    if any(segment in RESERVED_SEGMENTS for segment in segments):
        raise MalformedObjectPathError(
            f"Object path '{path}' contains a '.' or '..' segment."
        )

    return MessageImagePath(
        owner=segments[0], message_id=segments[1], file_name=segments[-1]
    )
