"""Common utilities for Cherry."""

from cherry.common.filelog import LeveledLogger, RotatingFileLogger
from cherry.common.hmac import sign, verify
from cherry.common.settings import Settings, get_settings

__all__ = [
    "LeveledLogger",
    "RotatingFileLogger",
    "Settings",
    "get_settings",
    "sign",
    "verify",
]
