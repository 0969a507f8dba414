"""
athantimes exceptions

Exception Hierarchy:
    PrayerTimesError (base)
    └── InvalidInput
"""

from typing import Any, Optional


class PrayerTimesError(Exception):
    """Base exception for all athantimes errors.

    Attributes:
        message: Human-readable error description
        details: Optional dict with additional error context
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class InvalidInput(PrayerTimesError, ValueError):
    """Malformed request: coordinate out of range, bad date, unknown method.

    Retrying with the same input can never succeed.
    """
