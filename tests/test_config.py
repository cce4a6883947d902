# Copyright 2026 Justin Cook
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

import unittest
from unittest.mock import patch
import os

from resume_checker import config


class TestMaxUploadBytes(unittest.TestCase):
    """Test upload limit resolution priority."""

    def setUp(self):
        config.clear_overrides()

    def tearDown(self):
        config.clear_overrides()

    def test_default_is_ten_mib(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config.get_max_upload_bytes(), 10 * 1024 * 1024)

    def test_env_var(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_MAX_UPLOAD_MB": "2"}, clear=True):
            self.assertEqual(config.get_max_upload_bytes(), 2 * 1024 * 1024)

    def test_invalid_env_var_falls_back(self):
        """Non-numeric and non-positive values are ignored."""
        for value in ("lots", "0", "-3"):
            with patch.dict(os.environ, {"RESUME_CHECKER_MAX_UPLOAD_MB": value}, clear=True):
                self.assertEqual(config.get_max_upload_bytes(), 10 * 1024 * 1024)

    def test_cli_override_beats_env(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_MAX_UPLOAD_MB": "2"}, clear=True):
            config.set_override('max_upload_mb', 0.5)
            self.assertEqual(config.get_max_upload_bytes(), 512 * 1024)


class TestExtractTimeout(unittest.TestCase):
    def setUp(self):
        config.clear_overrides()

    def tearDown(self):
        config.clear_overrides()

    def test_default(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config.get_extract_timeout(), 30.0)

    def test_env_var(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_EXTRACT_TIMEOUT": "7.5"}, clear=True):
            self.assertEqual(config.get_extract_timeout(), 7.5)

    def test_cli_override_beats_env(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_EXTRACT_TIMEOUT": "7.5"}, clear=True):
            config.set_override('extract_timeout', 3)
            self.assertEqual(config.get_extract_timeout(), 3.0)


class TestLogDir(unittest.TestCase):
    def setUp(self):
        config.clear_overrides()

    def tearDown(self):
        config.clear_overrides()

    def test_default(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config.get_log_dir(), "user_content/logs")

    def test_env_var(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_LOG_DIR": "/var/log/rc"}, clear=True):
            self.assertEqual(config.get_log_dir(), "/var/log/rc")

    def test_cli_override_beats_env(self):
        with patch.dict(os.environ, {"RESUME_CHECKER_LOG_DIR": "/var/log/rc"}, clear=True):
            config.set_override('log_dir', "/tmp/rc")
            self.assertEqual(config.get_log_dir(), "/tmp/rc")


if __name__ == '__main__':
    unittest.main()
