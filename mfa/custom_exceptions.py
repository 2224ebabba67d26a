"""
Author: Ian Young
Purpose: Import into other modules to use custom exceptions and save space.
"""


class MFAError(Exception):
    """
    Base exception for every error raised by the mfa package.

    :param message: A human-readable description of the exception.
    :type message: str
    """

    def __init__(self, message="An unknown MFA device error occurred."):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(MFAError):
    """
    Raised when the device configuration is invalid. The refresh loop will
    never start with a configuration that raised this.

    :param message: A human-readable description of the exception.
    :type message: str
    """

    def __init__(self, message="Invalid MFA device configuration."):
        super().__init__(message)


class SecretSourceError(ConfigurationError):
    """
    Raised when no usable secret could be read from any secret source.

    :param message: A human-readable description of the exception.
    :type message: str
    """

    def __init__(self, message="Unable to load the OTP secret."):
        super().__init__(message)


class GenerationError(MFAError):
    """
    Raised when computing an OTP fails for a single tick.

    :param message: A human-readable description of the exception.
    :type message: str
    """

    def __init__(self, message="Failed to generate an OTP."):
        super().__init__(message)


class SinkError(MFAError):
    """
    Raised when an output sink could not write a message.

    :param message: A human-readable description of the exception.
    :type message: str
    """

    def __init__(self, message="Failed to write to the output sink."):
        super().__init__(message)
