"""Streamline imports"""

from .classifier import Severity, classify, seconds_remaining
from .custom_exceptions import (
    ConfigurationError,
    GenerationError,
    MFAError,
    SecretSourceError,
    SinkError,
)
from .device import DeviceConfig, ErrorPolicy, MFADevice, OTPSample
from .generator import Algorithm, generate, lookup_algorithm, time_step_counter
from .log import log, set_logging
from .secret_source import SECRET_FILE_ENV, read_secret_file, resolve_secret
from .terminal import TERMINAL_COLORS, OutputSink, Terminal, lookup_color
