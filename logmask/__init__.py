"""
logmask - marker-driven masking of sensitive log arguments.

A log event tagged with the CONFIDENTIAL marker (alone or combined with
other markers) and logged with a parameterized message is re-rendered with
each argument replaced by a mask token, before any sink sees it.

Architecture:
    - markers: Marker, CompositeMarker and the predefined SecurityMarkers
    - message: ParameterizedMessage / RenderedMessage variants
    - engine: MaskingRewritePolicy and the RewritePipeline it plugs into
    - stdlib: MaskingFilter for the logging module
    - scrubbing: opt-in pattern masking of pre-rendered text

Example:
    import logging
    from logmask import SecurityMarkers, install

    handler = logging.StreamHandler()
    install(handler)
    log = logging.getLogger("app")
    log.addHandler(handler)
    log.warning("ssn=%s", "123-45-6789", extra={"marker": SecurityMarkers.CONFIDENTIAL})
    # ssn=*****
"""

from .config import MaskConfig, MismatchPolicy
from .engine import MaskingRewritePolicy, RewritePipeline, RewritePolicy
from .errors import ConfigurationError, LogMaskError, TemplateError
from .event import LogEvent
from .markers import CompositeMarker, Marker, MarkerRegistry, SecurityMarkers, contains, get_marker
from .message import ParameterizedMessage, RenderedMessage, is_parameterized
from .profile import MaskingProfile, RedactionPattern
from .scrubbing import PatternMaskingPolicy
from .stdlib import MaskingFilter, install

__all__ = [
    "MaskConfig",
    "MismatchPolicy",
    "MaskingRewritePolicy",
    "RewritePipeline",
    "RewritePolicy",
    "ConfigurationError",
    "LogMaskError",
    "TemplateError",
    "LogEvent",
    "CompositeMarker",
    "Marker",
    "MarkerRegistry",
    "SecurityMarkers",
    "contains",
    "get_marker",
    "ParameterizedMessage",
    "RenderedMessage",
    "is_parameterized",
    "MaskingProfile",
    "RedactionPattern",
    "PatternMaskingPolicy",
    "MaskingFilter",
    "install",
]
