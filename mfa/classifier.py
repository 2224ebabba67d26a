"""
Author: Ian Young
Purpose: Decide whether the current OTP is about to expire.
"""

from enum import Enum

from mfa.custom_exceptions import ConfigurationError
from mfa.generator import Timestamp, unix_seconds

DEFAULT_WARNING_SECONDS = 5


class Severity(Enum):
    """How close an OTP is to expiring."""

    NORMAL = "normal"
    WARNING = "warning"


def seconds_remaining(timestamp: Timestamp, period: int) -> int:
    """
    Seconds until the next time-step boundary.

    Args:
        timestamp: A datetime or Unix seconds.
        period (int): Seconds each code is valid for.

    Returns:
        int: A value between 1 and `period`.
    """
    if period <= 0:
        raise ConfigurationError(f"Period must be positive, got {period}")
    return period - unix_seconds(timestamp) % period


def classify(
    timestamp: Timestamp,
    period: int = 30,
    threshold: int = DEFAULT_WARNING_SECONDS,
) -> Severity:
    """
    Classify a timestamp by how soon its OTP expires.

    With the default 30 second period and 5 second threshold, seconds
    25-29 and 55-59 of every minute are a WARNING.

    Args:
        timestamp: A datetime or Unix seconds.
        period (int): Seconds each code is valid for.
        threshold (int): Remaining seconds at or below which to warn.

    Returns:
        Severity: WARNING when the code is about to expire, else NORMAL.
    """
    if threshold < 0:
        raise ConfigurationError(
            f"Warning threshold must not be negative, got {threshold}"
        )
    if seconds_remaining(timestamp, period) <= threshold:
        return Severity.WARNING
    return Severity.NORMAL
