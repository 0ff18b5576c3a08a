"""
Exceptions raised by logmask.

Only configuration problems ever reach the caller. Template faults are
raised internally and absorbed by the rewrite engine.
"""


class LogMaskError(Exception):
    """Base class for all logmask errors."""


class ConfigurationError(LogMaskError, ValueError):
    """Invalid masking policy, raised once at setup time."""


class TemplateError(LogMaskError):
    """Malformed message template structure."""
