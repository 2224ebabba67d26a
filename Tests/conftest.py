"""
Author: Ian Young
Purpose: Shared fixtures for the MFA device tests.
"""

import pytest

from mfa.terminal import OutputSink


class RecordingSink(OutputSink):
    """Keeps every call made to it as a (method, text) tuple."""

    def __init__(self):
        self.calls = []

    def write(self, text):
        self.calls.append(("write", text))

    def warn(self, text):
        self.calls.append(("warn", text))

    def error(self, text):
        self.calls.append(("error", text))

    def methods(self):
        """Names of the methods called, in order."""
        return [method for method, _ in self.calls]


class FakeClock:
    """A monotonic clock that only moves when slept on or advanced."""

    def __init__(self, start=0.0):
        self.time = start
        self.sleeps = []

    def __call__(self):
        return self.time

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.time += seconds

    def advance(self, seconds):
        self.time += seconds


@pytest.fixture
def sink():
    """A sink that records everything written to it."""
    return RecordingSink()


@pytest.fixture
def clock():
    """A fake monotonic clock starting at zero."""
    return FakeClock()
