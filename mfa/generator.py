"""
Author: Ian Young
Purpose: Generates a TOTP code for any point in time.

Returns:
    str: A zero-padded code that stays the same for a whole period.
"""

import hashlib
import time
from datetime import datetime
from enum import Enum
from typing import Union

import pyotp

from mfa.custom_exceptions import ConfigurationError, GenerationError

Timestamp = Union[datetime, int, float]

MAX_DIGITS = 10  # pyotp refuses anything longer


class Algorithm(Enum):
    """Hash algorithms that may be used in the HMAC."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"
    MD5 = "MD5"

    @property
    def digest(self):
        """The hashlib constructor backing this algorithm."""
        return _DIGESTS[self]


_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
    Algorithm.MD5: hashlib.md5,
}


def lookup_algorithm(name: Union[str, Algorithm]) -> Algorithm:
    """
    Translate an algorithm name into an Algorithm.

    Args:
        name (str): The algorithm name, e.g. "SHA256". Case-insensitive.

    Returns:
        Algorithm: The matching algorithm.

    Raises:
        ConfigurationError: If the name is not a known algorithm.
    """
    if isinstance(name, Algorithm):
        return name
    try:
        return Algorithm[str(name).strip().upper()]
    except KeyError as e:
        valid = ", ".join(alg.value for alg in Algorithm)
        raise ConfigurationError(
            f"Unknown algorithm {name!r}. Valid algorithms are {valid}"
        ) from e


def normalize_secret(secret: str) -> str:
    """Strip whitespace and upper-case a base32 secret."""
    if isinstance(secret, bytes):
        try:
            secret = secret.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigurationError("The OTP secret is not valid text") from e
    return "".join(secret.split()).upper()


def unix_seconds(timestamp: Timestamp) -> int:
    """
    Whole Unix seconds for a timestamp.

    Naive datetimes are treated as local time, aware ones are converted
    from their own zone.
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            return int(time.mktime(timestamp.timetuple()))
        return int(timestamp.timestamp())
    return int(timestamp)


def time_step_counter(timestamp: Timestamp, period: int) -> int:
    """Number of whole periods elapsed since the Unix epoch."""
    if period <= 0:
        raise ConfigurationError(f"Period must be positive, got {period}")
    return unix_seconds(timestamp) // period


def generate(
    secret: str,
    timestamp: Timestamp,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
    digits: int = 6,
    period: int = 30,
) -> str:
    """Generates the TOTP that is valid at the given timestamp.

    Args:
        secret (str): A base32 encoded secret.
        timestamp: A datetime or Unix seconds.
        algorithm: The HMAC hash algorithm or its name.
        digits (int): Length of the returned code.
        period (int): Seconds each code is valid for.

    Returns:
        str: The OTP, left-padded with zeros to exactly `digits` characters.

    Raises:
        ConfigurationError: If the secret is empty, digits is out of range,
            period is not positive or the algorithm is unknown.
        GenerationError: If the OTP could not be computed from the inputs.
    """
    secret = normalize_secret(secret or "")
    if not secret:
        raise ConfigurationError("An OTP secret is required")
    if not 0 < digits <= MAX_DIGITS:
        raise ConfigurationError(
            f"Digits must be between 1 and {MAX_DIGITS}, got {digits}"
        )
    algorithm = lookup_algorithm(algorithm)
    counter = time_step_counter(timestamp, period)

    try:
        totp = pyotp.TOTP(
            secret, digits=digits, digest=algorithm.digest, interval=period
        )
        return totp.generate_otp(counter)
    except (ValueError, TypeError, IndexError) as e:
        # binascii.Error (bad base32) is a ValueError
        raise GenerationError(
            f"Could not generate {algorithm.value} OTP: {e}"
        ) from e
