"""Runtime configuration read from the environment.

Command line options in ``notevault.cli`` take precedence over these values.
"""

from __future__ import annotations

import os
from typing import Optional


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


APP_NAME = "notevault"

VAULT_FILE: str = _env("NOTEVAULT_FILE", "vault.json")
LOG_LEVEL: str = (_env("NOTEVAULT_LOG_LEVEL", "WARNING") or "WARNING").upper()
LOG_FILE: Optional[str] = _env("NOTEVAULT_LOG_FILE")
