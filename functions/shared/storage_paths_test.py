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

import unittest

from shared.storage_paths import (
    MalformedObjectPathError,
    MessageImagePath,
    parse_message_image_path,
)


class ParseMessageImagePathTest(unittest.TestCase):

    def test_parses_owner_message_and_file(self):
        self.assertEqual(
            parse_message_image_path("images/msg123/photo.png"),
            MessageImagePath(owner="images", message_id="msg123", file_name="photo.png"),
        )

    def test_uses_last_segment_as_file_name(self):
        parsed = parse_message_image_path("uid/msg1/nested/photo.jpg")
        self.assertEqual(parsed.message_id, "msg1")
        self.assertEqual(parsed.file_name, "photo.jpg")

    def test_rejects_malformed_paths(self):
        for path in ["", "photo.png", "uid/photo.png", "uid//photo.png", "uid/msg1/"]:
            with self.subTest(path=path):
                with self.assertRaises(MalformedObjectPathError):
                    parse_message_image_path(path)

    def test_rejects_dot_segments(self):
        # A "." or ".." file name would make the scratch path a directory.
        for path in ["uid/msg1/.", "uid/msg1/..", "uid/../photo.png", "./msg1/photo.png"]:
            with self.subTest(path=path):
                with self.assertRaises(MalformedObjectPathError):
                    parse_message_image_path(path)

    def test_malformed_path_error_is_value_error(self):
        with self.assertRaises(ValueError):
            parse_message_image_path("photo.png")


if __name__ == "__main__":
    unittest.main()
