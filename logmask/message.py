"""
Message Template Model.

A log message is one of two variants, fixed by whoever issues the log call:

    ParameterizedMessage - literal segments with placeholder slots between
                           them, plus the argument values for those slots
    RenderedMessage      - an opaque, already-interpolated string

Templates use "{}" as the placeholder. A backslash escapes it ("\\{}" is a
literal "{}"), and a doubled backslash before "{}" is a literal backslash
followed by a real placeholder.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .errors import TemplateError

PLACEHOLDER = "{}"
_ESCAPE = "\\"


def parse_template(template: str) -> tuple[str, ...]:
    """
    Split a "{}" template into its literal segments.

    The result always has one more segment than the template has
    placeholders.
    """
    if not isinstance(template, str):
        raise TemplateError(f"Template must be a string, got {type(template).__name__}")

    segments = []
    buf = []
    i = 0
    n = len(template)
    while i < n:
        if template.startswith(PLACEHOLDER, i):
            segments.append("".join(buf))
            buf = []
            i += 2
        elif template.startswith(_ESCAPE * 2 + PLACEHOLDER, i):
            buf.append(_ESCAPE)
            segments.append("".join(buf))
            buf = []
            i += 4
        elif template.startswith(_ESCAPE + PLACEHOLDER, i):
            buf.append(PLACEHOLDER)
            i += 3
        else:
            buf.append(template[i])
            i += 1
    segments.append("".join(buf))
    return tuple(segments)


@dataclass(frozen=True)
class ParameterizedMessage:
    """Literal skeleton plus the call-site arguments for its placeholders."""
    segments: tuple
    arguments: tuple = field(default=())

    def __post_init__(self):
        object.__setattr__(self, "segments", tuple(self.segments))
        object.__setattr__(self, "arguments", tuple(self.arguments))

    @classmethod
    def from_template(cls, template: str, *arguments: Any) -> "ParameterizedMessage":
        return cls(parse_template(template), arguments)

    @property
    def placeholder_count(self) -> int:
        return max(len(self.segments) - 1, 0)

    def check(self) -> None:
        """Raise TemplateError if the segment bookkeeping is inconsistent."""
        if not self.segments:
            raise TemplateError("Parameterized message has no literal segments")
        for segment in self.segments:
            if not isinstance(segment, str):
                raise TemplateError(f"Literal segment is not a string: {type(segment).__name__}")

    def render(self) -> str:
        """
        Ordinary (unmasked) rendering.

        Each placeholder receives str(argument) in order. Placeholders with no
        argument are left as a literal "{}"; surplus arguments are ignored.
        """
        self.check()
        parts = [self.segments[0]]
        for index, segment in enumerate(self.segments[1:]):
            if index < len(self.arguments):
                parts.append(str(self.arguments[index]))
            else:
                parts.append(PLACEHOLDER)
            parts.append(segment)
        return "".join(parts)

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class RenderedMessage:
    """A flat string with no recoverable placeholder structure."""
    text: str

    def render(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


Message = Union[ParameterizedMessage, RenderedMessage]


def is_parameterized(message: Optional[Message]) -> bool:
    """True only for messages built as ParameterizedMessage."""
    return isinstance(message, ParameterizedMessage)
