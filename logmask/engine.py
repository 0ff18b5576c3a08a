"""
Masking Rewrite Engine - redacts argument values of sensitive log events.

An event is masked when its marker carries the configured trigger marker
(CONFIDENTIAL by default) and its message is parameterized. The literal text
of the template is kept; every argument slot is replaced by the mask token.
Pre-rendered messages are passed through, since there is no way to tell
which part of a flat string was the sensitive value.

Thread-safe: rewrite() reads only immutable state and never blocks.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .config import DEFAULT_CONFIG, MaskConfig, MismatchPolicy
from .event import LogEvent
from .markers import contains
from .message import PLACEHOLDER, ParameterizedMessage, RenderedMessage, is_parameterized

logger = logging.getLogger(__name__)


class RewritePolicy(ABC):
    """
    A stage in a log event rewrite pipeline.

    Implementations must not raise from rewrite() and must not mutate the
    event they receive.
    """

    @abstractmethod
    def rewrite(self, event: LogEvent) -> LogEvent:
        """Return the event to pass on: the input itself or a modified copy."""
        pass

    def __call__(self, event: LogEvent) -> LogEvent:
        return self.rewrite(event)


class MaskingRewritePolicy(RewritePolicy):
    """
    Replaces the arguments of trigger-marked, parameterized messages.

    Example:
        policy = MaskingRewritePolicy()
        event = LogEvent.of("ssn={}", "123-45-6789", marker=SecurityMarkers.CONFIDENTIAL)
        policy.rewrite(event).formatted_message
        # "ssn=*****"
    """

    def __init__(self, config: Optional[MaskConfig] = None):
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> MaskConfig:
        return self._config

    def should_mask(self, event: LogEvent) -> bool:
        return contains(event.marker, self._config.trigger)

    def rewrite(self, event: LogEvent) -> LogEvent:
        if event.message is None:
            return event
        if not self.should_mask(event):
            return event
        if not is_parameterized(event.message):
            return event

        try:
            masked = self.mask(event.message)
        except Exception as e:
            logger.warning(f"Masking failed for event from '{event.logger_name}', emitting fault text: {type(e).__name__}")
            return event.with_message(RenderedMessage(self._config.fault_text))
        return event.with_message(RenderedMessage(masked))

    def mask(self, message: ParameterizedMessage) -> str:
        """
        Render a parameterized message with every argument slot masked.

        Raises TemplateError on inconsistent template structure; rewrite()
        turns that into the fault text.
        """
        message.check()
        token = self._config.mask_token
        mirror = self._config.mismatch_policy is MismatchPolicy.MIRROR_RENDERING
        available = len(message.arguments)

        parts = [message.segments[0]]
        for index, segment in enumerate(message.segments[1:]):
            if mirror and index >= available:
                parts.append(PLACEHOLDER)
            else:
                parts.append(token)
            parts.append(segment)
        return "".join(parts)


class RewritePipeline(RewritePolicy):
    """Applies rewrite policies in order, each seeing the previous result."""

    def __init__(self, policies: Iterable[RewritePolicy] = ()):
        self._policies: list[RewritePolicy] = list(policies)

    def add(self, policy: RewritePolicy) -> "RewritePipeline":
        self._policies.append(policy)
        return self

    @property
    def policies(self) -> tuple:
        return tuple(self._policies)

    def rewrite(self, event: LogEvent) -> LogEvent:
        for policy in self._policies:
            event = policy.rewrite(event)
        return event

    def __len__(self) -> int:
        return len(self._policies)
