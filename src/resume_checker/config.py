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

"""
Centralised runtime settings for the resume checker.

Each setting is resolved in priority order:
  1. Explicit override via CLI flag
  2. Environment variable
  3. Built-in default
"""

import os
import logging

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_MB = 10.0
DEFAULT_EXTRACT_TIMEOUT = 30.0
DEFAULT_LOG_DIR = "user_content/logs"

ENV_MAX_UPLOAD_MB = "RESUME_CHECKER_MAX_UPLOAD_MB"
ENV_EXTRACT_TIMEOUT = "RESUME_CHECKER_EXTRACT_TIMEOUT"
ENV_LOG_DIR = "RESUME_CHECKER_LOG_DIR"

# Module-level overrides set by CLI flags
_overrides: dict = {}


def set_override(name: str, value) -> None:
    """Set an explicit value for a setting from a CLI argument."""
    _overrides[name] = value
    logger.info(f"Setting override: {name}={value}")


def clear_overrides() -> None:
    _overrides.clear()


def _float_from_env(var: str, default: float) -> float:
    value = os.environ.get(var)
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {var}={value!r}; using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"Ignoring non-positive {var}={value!r}; using {default}")
        return default
    logger.debug(f"Using {var}={parsed}")
    return parsed


def get_max_upload_bytes() -> int:
    """
    Resolve the largest accepted resume upload, in bytes.

    Returns:
        int: Size limit in bytes (10 MiB unless configured otherwise).
    """
    if _overrides.get('max_upload_mb'):
        megabytes = float(_overrides['max_upload_mb'])
    else:
        megabytes = _float_from_env(ENV_MAX_UPLOAD_MB, DEFAULT_MAX_UPLOAD_MB)
    return int(megabytes * 1024 * 1024)


def get_extract_timeout() -> float:
    """Seconds allowed for a single text extraction before it is abandoned."""
    if _overrides.get('extract_timeout'):
        return float(_overrides['extract_timeout'])
    return _float_from_env(ENV_EXTRACT_TIMEOUT, DEFAULT_EXTRACT_TIMEOUT)


def get_log_dir() -> str:
    if _overrides.get('log_dir'):
        return _overrides['log_dir']
    return os.environ.get(ENV_LOG_DIR) or DEFAULT_LOG_DIR
