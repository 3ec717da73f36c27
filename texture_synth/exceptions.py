"""Error taxonomy for texture synthesis."""

from __future__ import annotations


class TextureSynthError(Exception):
    """Base class for every error raised by the package."""


class InvalidDimensions(TextureSynthError, ValueError):
    """Sample, output, seed or window sizes are unusable together."""


class InternalInvariantViolation(TextureSynthError, RuntimeError):
    """A state that correct frontier semantics rule out was reached."""


class PassLimitExceeded(TextureSynthError, RuntimeError):
    """The caller-supplied pass cap ran out before the output was full."""
