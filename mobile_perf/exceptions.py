"""Custom exception types for the test bootstrap layer."""

from __future__ import annotations


class PerfTestError(RuntimeError):
    """Base class for test bootstrap failures."""


class ConfigurationError(PerfTestError):
    """Raised when the test configuration is missing, malformed or inconsistent."""


class UploadError(PerfTestError):
    """Raised when the device cloud accepts an upload but returns no file id."""
