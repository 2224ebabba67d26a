"""
Author: Ian Young
Purpose: Shared logger for the mfa package so every module logs the same way.
"""

import logging

log = logging.getLogger("mfa")

LOG_FORMAT = "%(levelname)s: %(message)s"


def set_logging(verbose: bool = False) -> None:
    """
    Configure the root logger for command line use.

    Args:
        verbose (bool): Log debug messages when True, otherwise only
            warnings and above are shown.
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    log.setLevel(log_level)
