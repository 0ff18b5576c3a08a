"""
Bridge between the masking engine and Python's logging module.

Call sites tag records through `extra`:

    logger.info("ssn=%s", ssn, extra={"marker": SecurityMarkers.CONFIDENTIAL})

MaskingFilter reads that marker, turns the record's %-style format string and
args into a ParameterizedMessage, runs the rewrite policy, and writes the
masked text back into the record. A message that was concatenated before the
call ("ssn=" + ssn) has no args and is left alone.

Usage:
    handler = logging.StreamHandler()
    install(handler)
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional, Union

from .config import MaskConfig
from .engine import MaskingRewritePolicy, RewritePolicy
from .errors import TemplateError
from .event import LogEvent
from .markers import CompositeMarker, Marker, MarkerRegistry, contains, default_registry
from .message import ParameterizedMessage, RenderedMessage

logger = logging.getLogger(__name__)

MARKER_ATTR = "marker"

_CONVERSION = re.compile(
    r"%"
    r"(?:\((?P<key>[^)]*)\))?"
    r"[#0\- +]*"
    r"(?P<width>\*|\d+)?"
    r"(?:\.(?P<precision>\*|\d+))?"
    r"[hlL]?"
    r"(?P<type>[diouxXeEfFgGcrsa%])"
)


def parse_percent_format(fmt: str) -> tuple[tuple[str, ...], tuple[Optional[str], ...]]:
    """
    Split a printf-style format string into literal segments and slot keys.

    Returns (segments, keys) where keys holds the mapping key of each
    placeholder, or None for positional ones. "%%" becomes a literal "%".

    Raises TemplateError for dangling "%" and for "*" widths, which pull
    extra values out of the argument tuple.
    """
    segments = []
    keys = []
    buf = []
    pos = 0
    while True:
        idx = fmt.find("%", pos)
        if idx < 0:
            buf.append(fmt[pos:])
            break
        buf.append(fmt[pos:idx])
        match = _CONVERSION.match(fmt, idx)
        if match is None:
            raise TemplateError(f"Unsupported format character at index {idx}")
        if match.group("type") == "%":
            buf.append("%")
        elif match.group("width") == "*" or match.group("precision") == "*":
            raise TemplateError("'*' width or precision is not supported")
        else:
            segments.append("".join(buf))
            buf = []
            keys.append(match.group("key"))
        pos = match.end()
    segments.append("".join(buf))
    return tuple(segments), tuple(keys)


def message_from_record(record: logging.LogRecord):
    """Build the message variant that matches how the record was logged."""
    if not record.args:
        if record.msg is None:
            return None
        return RenderedMessage(str(record.msg))

    segments, keys = parse_percent_format(str(record.msg))
    args = record.args
    if isinstance(args, Mapping) and all(key is None for key in keys):
        # A lone dict formatted positionally, as in "%s" % {...}
        arguments = (args,)
    elif isinstance(args, Mapping):
        if any(key is None for key in keys):
            raise TemplateError("Positional placeholder used with mapping arguments")
        arguments = tuple(args.get(key) for key in keys)
    else:
        if any(key is not None for key in keys):
            raise TemplateError("Mapping key placeholder used with positional arguments")
        arguments = tuple(args)
    return ParameterizedMessage(segments, arguments)


class MaskingFilter(logging.Filter):
    """
    logging.Filter that applies a rewrite policy to each record.

    Never drops a record and never raises. If the record cannot be
    interpreted and carries the trigger marker, its message is replaced by
    the configured fault text.
    """

    def __init__(
        self,
        policy: Union[RewritePolicy, MaskConfig, None] = None,
        name: str = "",
        registry: Optional[MarkerRegistry] = None,
        fallback: Optional[MaskingRewritePolicy] = None,
    ):
        super().__init__(name)
        if policy is None or isinstance(policy, MaskConfig):
            policy = MaskingRewritePolicy(policy)
        self._policy = policy
        self._registry = registry or default_registry
        # Supplies the trigger and fault text when a record can't be parsed
        if fallback is None:
            fallback = policy if isinstance(policy, MaskingRewritePolicy) else MaskingRewritePolicy()
        self._fallback = fallback

    @property
    def policy(self) -> RewritePolicy:
        return self._policy

    def record_to_event(self, record: logging.LogRecord) -> LogEvent:
        return LogEvent(
            message=message_from_record(record),
            marker=self._marker_of(record),
            level=record.levelno,
            logger_name=record.name,
            timestamp=record.created,
            exc_info=record.exc_info,
        )

    def _marker_of(self, record: logging.LogRecord):
        value = getattr(record, MARKER_ATTR, None)
        if isinstance(value, str):
            # Unregistered names stay plain strings so the registry can't grow per record
            return self._registry.find(value) or value
        if value is None or isinstance(value, (Marker, CompositeMarker)):
            return value
        logger.warning(f"Ignoring unusable marker on record from '{record.name}': {type(value).__name__}")
        return None

    def _emit_fault(self, record: logging.LogRecord, stage: str, error: Exception) -> None:
        if contains(self._marker_of(record), self._fallback.config.trigger):
            logger.warning(f"Cannot {stage} sensitive record from '{record.name}', emitting fault text: {type(error).__name__}")
            record.msg = self._fallback.config.fault_text
            record.args = ()
        else:
            logger.warning(f"Cannot {stage} record from '{record.name}', leaving it as logged: {type(error).__name__}")

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            event = self.record_to_event(record)
        except Exception as e:
            self._emit_fault(record, "parse", e)
            return True

        try:
            result = self._policy.rewrite(event)
        except Exception as e:
            self._emit_fault(record, "rewrite", e)
            return True

        if result is not event:
            record.msg = result.formatted_message
            record.args = ()
        return True


def install(target: Union[logging.Logger, logging.Handler], policy: Union[RewritePolicy, MaskConfig, None] = None) -> MaskingFilter:
    """
    Attach a MaskingFilter to a logger or handler and return it.

    Filters on a logger only see records logged through that exact logger;
    attach to a handler to cover everything it emits.
    """
    masking_filter = MaskingFilter(policy)
    target.addFilter(masking_filter)
    return masking_filter
