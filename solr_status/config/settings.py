"""Environment settings provided by the collectd exec plugin."""

import os
import re
from typing import Optional


DEFAULT_HOSTNAME = "localhost"
DEFAULT_INTERVAL_SECS = 20

_INT32_MAX = 2 ** 31 - 1
_BASE10_INT = re.compile(r"[+-]?[0-9]+")


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if unset or empty

        Returns:
            str: Environment variable value
        """
        value = os.getenv(key)
        if not value:
            return default or ""
        return value

    @staticmethod
    def hostname(default: str = DEFAULT_HOSTNAME) -> str:
        """Reporting hostname from COLLECTD_HOSTNAME."""
        return Settings.get("COLLECTD_HOSTNAME", default)

    @staticmethod
    def interval(default: int = DEFAULT_INTERVAL_SECS) -> int:
        """
        Poll interval in seconds from COLLECTD_INTERVAL.

        Only a plain base-10 integer is accepted. Unset, malformed, out of
        32-bit range or non-positive values fall back to the default.
        """
        raw = os.getenv("COLLECTD_INTERVAL", "")
        if not _BASE10_INT.fullmatch(raw):
            return default

        value = int(raw, 10)
        if value < 1 or value > _INT32_MAX:
            return default
        return value

    @staticmethod
    def log_level(default: str = "INFO") -> str:
        return str(Settings.get("LOG_LEVEL", default)).upper()
