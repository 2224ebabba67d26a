"""
Author: Ian Young
Purpose: Prints a One-Time-Passcode (OTP) in the terminal, recalculating it
every few seconds so it can stand in for a hardware MFA device.
"""

import argparse
import sys
from typing import List, Optional

import colorama
from colorama import Fore, Style
from dotenv import load_dotenv

from mfa import (
    ConfigurationError,
    DeviceConfig,
    MFADevice,
    MFAError,
    Terminal,
    log,
    lookup_color,
    resolve_secret,
    set_logging,
)
from mfa.secret_source import SECRET_FILE_ENV

DESCRIPTION = (
    "Prints a One-Time-Passcode (OTP), refreshing it every n seconds as "
    "defined by --update-frequency.\n"
    "If --secret is provided, it takes precedence (NOTE this is the least "
    "secure option).\n"
    "Else, if --secret-file is provided, the secret will be read from that "
    "file.\n"
    f"Else, if environment variable {SECRET_FILE_ENV} is provided, the "
    "secret will be read from that file.\n"
    "Else, an attempt will be made to read the secret from $HOME/.mfa/secret."
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse the command line.

    Args:
        argv (list): Arguments to parse. Defaults to sys.argv.

    Returns:
        argparse.Namespace: The parsed options.
    """
    parser = argparse.ArgumentParser(
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--secret", default="", help="the OTP secret")
    parser.add_argument(
        "--secret-file",
        default="",
        help="filename containing the OTP secret",
    )
    parser.add_argument(
        "--update-frequency",
        type=float,
        default=1,
        help="the number of seconds between OTP recalculations (default: 1)",
    )
    parser.add_argument(
        "--refresh-period",
        type=int,
        default=30,
        help="the number of seconds an OTP is valid for (default: 30)",
    )
    parser.add_argument(
        "--prefix",
        default="mfa",
        help="a prefix to print before the OTP",
    )
    parser.add_argument(
        "--digits",
        type=int,
        default=6,
        help="the number of digits in the OTP (default: 6)",
    )
    parser.add_argument(
        "--algorithm",
        default="SHA1",
        help="the algorithm to use to calculate the OTP: SHA1, SHA256 or "
        "SHA512 (default: SHA1). MD5 is refused because its digest is too "
        "short for an OTP",
    )
    parser.add_argument(
        "--warn-seconds",
        type=int,
        default=5,
        help="warn when the OTP expires within this many seconds "
        "(default: 5)",
    )
    parser.add_argument(
        "--color",
        default="",
        help="terminal text color for default output. Valid colors are "
        "red, green, yellow, blue, purple, cyan, gray & white",
    )
    parser.add_argument(
        "--warn-color",
        default="",
        help="terminal text color for warning output (when the OTP is "
        "close to expiry)",
    )
    parser.add_argument(
        "--error-color",
        default="",
        help="terminal text color for outputting errors",
    )
    parser.add_argument(
        "--halt-on-error",
        action="store_true",
        help="stop instead of carrying on when an OTP can not be shown",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug messages",
    )
    return parser.parse_args(argv)


def build_device(args: argparse.Namespace) -> MFADevice:
    """
    Turn parsed options into a ready to run MFADevice.

    Raises:
        ConfigurationError: If any option or the secret is invalid.
    """
    terminal = Terminal(
        prefix=args.prefix,
        default_color=lookup_color(args.color, Fore.GREEN),
        warning_color=lookup_color(args.warn_color, Fore.CYAN),
        error_color=lookup_color(args.error_color, Fore.RED),
    )
    secret = resolve_secret(args.secret, args.secret_file, terminal)
    config = DeviceConfig.from_options(
        secret,
        algorithm=args.algorithm,
        digits=args.digits,
        period=args.refresh_period,
        update_frequency=args.update_frequency,
        warning_seconds=args.warn_seconds,
        halt_on_error=args.halt_on_error,
    )
    return MFADevice(config, terminal)


def main(argv: Optional[List[str]] = None) -> int:
    """Driver function. Runs the device until interrupted."""
    args = parse_args(argv)
    set_logging(args.verbose)
    load_dotenv()  # MFA_SECRET_FILE may be set in a .env file
    colorama.init(autoreset=True)

    try:
        device = build_device(args)
        device.run()
    except ConfigurationError as e:
        print(f"{Fore.RED}{e.message}{Style.RESET_ALL}", file=sys.stderr)
        return 1
    except MFAError as e:
        log.critical(e.message)
        return 1
    except KeyboardInterrupt:
        print("\nLeaving program.")

    return 0


# Run directly if not being imported as a module
if __name__ == "__main__":
    sys.exit(main())
