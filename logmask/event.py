"""
LogEvent - the immutable record that flows through rewrite stages.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .markers import AnyMarker
from .message import Message, ParameterizedMessage, RenderedMessage


@dataclass(frozen=True)
class LogEvent:
    """
    A single log call.

    Only `marker` and `message` matter to masking. Everything else is
    carried through rewrite stages untouched. A string marker is matched
    by name.
    """
    message: Optional[Message] = None
    marker: Union[AnyMarker, str, None] = None
    level: int = logging.INFO
    logger_name: str = ""
    timestamp: float = field(default_factory=time.time)
    exc_info: Any = None
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.context, MappingProxyType):
            object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    @classmethod
    def of(cls, template: Optional[str], *arguments: Any, marker: Union[AnyMarker, str, None] = None, **fields) -> "LogEvent":
        """
        Build an event the way a logging call site would.

        With arguments the message is parameterized; without them it is
        taken as already rendered.
        """
        if template is None:
            message = None
        elif arguments:
            message = ParameterizedMessage.from_template(template, *arguments)
        else:
            message = RenderedMessage(template)
        return cls(message=message, marker=marker, **fields)

    @property
    def formatted_message(self) -> Optional[str]:
        if self.message is None:
            return None
        return self.message.render()

    def with_message(self, message: Optional[Message]) -> "LogEvent":
        return replace(self, message=message)
