"""
Author: Ian Young
Purpose: A software MFA device. Recalculates the current OTP on a fixed
cadence and writes it to an output sink, switching to the warning style
when the code is about to expire.
"""

import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Optional, Union

from mfa.classifier import DEFAULT_WARNING_SECONDS, Severity, classify
from mfa.custom_exceptions import (
    ConfigurationError,
    GenerationError,
    SinkError,
)
from mfa.generator import (
    MAX_DIGITS,
    Algorithm,
    generate,
    lookup_algorithm,
    normalize_secret,
)
from mfa.log import log
from mfa.terminal import OutputSink


class ErrorPolicy(Enum):
    """What the refresh loop does after a failed tick."""

    CONTINUE = "continue"
    HALT = "halt"


@dataclass(frozen=True)
class DeviceConfig:
    """
    Immutable settings for an MFADevice. Validated on construction.

    Attributes:
        secret (str): Base32 encoded secret. Never shown in the repr.
        algorithm (Algorithm): HMAC hash algorithm.
        digits (int): Length of each code.
        period (int): Seconds each code is valid for.
        update_frequency (float): Seconds between recalculations.
        warning_seconds (int): Remaining validity at which to warn.
        error_policy (ErrorPolicy): Keep ticking or stop after an error.
    """

    secret: str = field(repr=False)
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = 6
    period: int = 30
    update_frequency: float = 1
    warning_seconds: int = DEFAULT_WARNING_SECONDS
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE

    def __post_init__(self):
        # Frozen, so normalized values go through object.__setattr__
        object.__setattr__(self, "secret", normalize_secret(self.secret or ""))
        object.__setattr__(self, "algorithm", lookup_algorithm(self.algorithm))
        try:
            policy = ErrorPolicy(self.error_policy)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown error policy {self.error_policy!r}"
            ) from e
        object.__setattr__(self, "error_policy", policy)

        if not self.secret:
            raise ConfigurationError("An OTP secret is required")
        if not isinstance(self.digits, int) or not 0 < self.digits <= MAX_DIGITS:
            raise ConfigurationError(
                f"Digits must be between 1 and {MAX_DIGITS}, got {self.digits}"
            )
        if not isinstance(self.period, int) or self.period <= 0:
            raise ConfigurationError(
                f"Refresh period must be a positive number of seconds, "
                f"got {self.period}"
            )
        if self.update_frequency <= 0:
            raise ConfigurationError(
                f"Update frequency must be a positive number of seconds, "
                f"got {self.update_frequency}"
            )
        if self.warning_seconds < 0:
            raise ConfigurationError(
                f"Warning threshold must not be negative, "
                f"got {self.warning_seconds}"
            )

        # A trial run catches secrets that are not base32 and digests too
        # short for dynamic truncation before the first tick.
        try:
            generate(self.secret, 0, self.algorithm, self.digits, self.period)
        except GenerationError as e:
            raise ConfigurationError(e.message) from e

    @classmethod
    def from_options(
        cls,
        secret: str,
        algorithm: Union[str, Algorithm] = "SHA1",
        digits: int = 6,
        period: int = 30,
        update_frequency: float = 1,
        warning_seconds: int = DEFAULT_WARNING_SECONDS,
        halt_on_error: bool = False,
    ) -> "DeviceConfig":
        """Build a configuration from plain command line values."""
        return cls(
            secret=secret,
            algorithm=lookup_algorithm(algorithm),
            digits=digits,
            period=period,
            update_frequency=update_frequency,
            warning_seconds=warning_seconds,
            error_policy=(
                ErrorPolicy.HALT if halt_on_error else ErrorPolicy.CONTINUE
            ),
        )


@dataclass(frozen=True)
class OTPSample:
    """A code produced by a single tick."""

    code: str
    timestamp: datetime
    severity: Severity


class MFADevice:
    """
    Recalculates the OTP every `update_frequency` seconds and writes it to
    an output sink. Ticks are scheduled at fixed offsets from the moment
    `run` starts so a slow sink never makes the schedule drift.

    Args:
        config (DeviceConfig): Validated device settings.
        sink (OutputSink): Where codes, warnings and errors are written.
        now (Callable): Returns the wall-clock time for each tick.
        clock (Callable): Monotonic clock used for scheduling.
        sleep (Callable): Blocks for the given number of seconds.
    """

    def __init__(
        self,
        config: DeviceConfig,
        sink: OutputSink,
        now: Optional[Callable[[], datetime]] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not isinstance(config, DeviceConfig):
            raise ConfigurationError("An MFADevice needs a DeviceConfig")
        if sink is None:
            raise ConfigurationError("An MFADevice needs an output sink")

        self.config = config
        self.sink = sink
        self._now = now or (lambda: datetime.now().astimezone())
        self._clock = clock
        self._sleep = sleep

    def sample(self, timestamp: datetime) -> OTPSample:
        """
        Generate and classify the OTP for a timestamp.

        Raises:
            GenerationError: If the OTP could not be generated.
        """
        config = self.config
        code = generate(
            config.secret,
            timestamp,
            config.algorithm,
            config.digits,
            config.period,
        )
        severity = classify(timestamp, config.period, config.warning_seconds)
        return OTPSample(code=code, timestamp=timestamp, severity=severity)

    def tick(self) -> Optional[OTPSample]:
        """
        Run a single refresh. Makes exactly one call to the sink.

        Returns:
            OTPSample: The sample written, or None if generation failed.

        Raises:
            GenerationError: If generation failed and the policy is HALT.
            SinkError: If the sink failed and the policy is HALT.
        """
        halt = self.config.error_policy is ErrorPolicy.HALT
        timestamp = self._now()

        try:
            try:
                otp = self.sample(timestamp)
            except GenerationError as e:
                log.error("OTP generation failed: %s", e.message)
                self.sink.error(f"ERROR - {e.message}\n")
                if halt:
                    raise
                return None

            if otp.severity is Severity.WARNING:
                self.sink.warn(otp.code)
            else:
                self.sink.write(otp.code)
            return otp

        except SinkError as e:
            log.error("Output failed: %s", e.message)
            if halt:
                raise
            return None

    def run(self, max_ticks: Optional[int] = None) -> int:
        """
        Tick forever, or until `max_ticks` ticks have run.

        The first tick happens one `update_frequency` after the call. If a
        tick overruns one or more deadlines the missed ones are skipped.

        Args:
            max_ticks (int): Stop after this many ticks. None runs forever.

        Returns:
            int: The number of ticks run.
        """
        frequency = self.config.update_frequency
        log.debug(
            "Starting MFA device: %s, %d digits, %ds period, every %ss",
            self.config.algorithm.value,
            self.config.digits,
            self.config.period,
            frequency,
        )

        start = self._clock()
        ticks = 0
        deadline_index = 1

        while max_ticks is None or ticks < max_ticks:
            delay = start + deadline_index * frequency - self._clock()
            if delay > 0:
                self._sleep(delay)

            self.tick()
            ticks += 1

            elapsed = self._clock() - start
            # Deadlines due right now still run, only past ones are skipped
            due = math.ceil(elapsed / frequency)
            if due > deadline_index + 1:
                log.debug("Skipping %d missed ticks", due - deadline_index - 1)
            deadline_index = max(deadline_index + 1, due)

        return ticks
