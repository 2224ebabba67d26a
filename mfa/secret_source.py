"""
Author: Ian Young
Purpose: Find and read the OTP secret before an MFA device starts.

The secret is taken from the first source that is set:
    1. an explicit secret value (least secure)
    2. an explicit secret file
    3. the file named by the MFA_SECRET_FILE environment variable
    4. $HOME/.mfa/secret
"""

import os
import stat
from os import getenv
from typing import Optional

from mfa.custom_exceptions import SecretSourceError
from mfa.generator import normalize_secret
from mfa.log import log
from mfa.terminal import OutputSink

SECRET_FILE_ENV = "MFA_SECRET_FILE"
DEFAULT_SECRET_FILE = os.path.join("~", ".mfa", "secret")


def is_insecure(path: str) -> bool:
    """
    Check whether anyone other than the owner may access a file.

    Args:
        path (str): Path to the file.

    Returns:
        bool: True if any group or world permission bit is set.
    """
    mode = os.stat(path).st_mode
    return bool(stat.S_IMODE(mode) & 0o077)


def read_secret_file(path: str, sink: Optional[OutputSink] = None) -> str:
    """
    Read a secret from a file, warning once through the sink if the file
    is readable by more than its owner.

    Args:
        path (str): Path to the secret file.
        sink (OutputSink): Where to send the permission warning.

    Returns:
        str: The normalized secret.

    Raises:
        SecretSourceError: If the file cannot be read or is empty.
    """
    path = os.path.expanduser(path)
    log.debug("Reading secret from %s", path)

    try:
        if is_insecure(path):
            log.debug("Secret file %s is not secure", path)
            if sink is not None:
                sink.warn(f"WARNING - secret file {path!r} is not secure\n")

        with open(path, "r", encoding="utf-8") as file:
            secret = normalize_secret(file.read())
    except OSError as e:
        raise SecretSourceError(
            f"Could not read secret file {path!r}: {e.strerror or e}"
        ) from e
    except UnicodeDecodeError as e:
        raise SecretSourceError(
            f"Secret file {path!r} is not valid text"
        ) from e

    if not secret:
        raise SecretSourceError(f"Secret file {path!r} is empty")

    return secret


def resolve_secret(
    secret: Optional[str] = None,
    secret_file: Optional[str] = None,
    sink: Optional[OutputSink] = None,
) -> str:
    """
    Resolve the OTP secret from the highest priority source that is set.

    Args:
        secret (str): An explicit secret.
        secret_file (str): An explicit path to a secret file.
        sink (OutputSink): Where to send file permission warnings.

    Returns:
        str: The normalized secret.

    Raises:
        SecretSourceError: If the chosen source yields no secret.
    """
    if secret:
        log.debug("Using secret passed on the command line")
        secret = normalize_secret(secret)
        if not secret:
            raise SecretSourceError("The secret passed is blank")
        return secret

    if secret_file:
        return read_secret_file(secret_file, sink)

    if env_file := getenv(SECRET_FILE_ENV):
        log.debug("Using secret file from %s", SECRET_FILE_ENV)
        return read_secret_file(env_file, sink)

    return read_secret_file(DEFAULT_SECRET_FILE, sink)
