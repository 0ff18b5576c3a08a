"""
Marker Model - classification tags attached to log events.

A Marker is a named, immutable tag. A CompositeMarker is an unordered set of
two or more markers combined at a call site; it has no name of its own and
only answers membership questions.

Example:
    from logmask.markers import SecurityMarkers, get_marker, contains

    marker = get_marker(SecurityMarkers.CONFIDENTIAL, SecurityMarkers.SECURITY_FAILURE)
    contains(marker, SecurityMarkers.CONFIDENTIAL)  # True
"""

import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class Marker:
    """A single named classification tag."""
    name: str

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError(f"Marker name must be a non-empty string, got {self.name!r}")

    @property
    def members(self) -> frozenset:
        return frozenset((self,))

    def contains(self, other: "Marker") -> bool:
        return self == other

    def __contains__(self, other: "Marker") -> bool:
        return self.contains(other)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class CompositeMarker:
    """An order-independent combination of at least two markers."""
    members: frozenset

    def __post_init__(self):
        flat = set()
        for member in self.members:
            if isinstance(member, CompositeMarker):
                flat.update(member.members)
            elif isinstance(member, Marker):
                flat.add(member)
            else:
                raise TypeError(f"Not a marker: {member!r}")
        if len(flat) < 2:
            raise ValueError("A composite marker needs at least two distinct markers")
        object.__setattr__(self, "members", frozenset(flat))

    @property
    def name(self) -> str:
        return " ".join(sorted(m.name for m in self.members))

    def contains(self, other: Marker) -> bool:
        return other in self.members

    def __contains__(self, other: Marker) -> bool:
        return self.contains(other)

    def __str__(self) -> str:
        return "[" + ", ".join(sorted(m.name for m in self.members)) + "]"


AnyMarker = Union[Marker, CompositeMarker]


def contains(event_marker: Union[AnyMarker, str, None], trigger: Marker) -> bool:
    """
    Test whether an event's marker carries the trigger marker.

    Returns True if event_marker is the trigger itself, or a composite that
    includes it. A bare string is taken as a marker name. An absent marker,
    or anything that is not a marker, never contains anything.
    """
    if isinstance(event_marker, str):
        return event_marker == trigger.name
    if isinstance(event_marker, (Marker, CompositeMarker)):
        return event_marker.contains(trigger)
    return False


def get_marker(*markers: AnyMarker) -> AnyMarker:
    """
    Combine markers at a call site.

    A single distinct marker is returned as-is; two or more are wrapped in a
    CompositeMarker.
    """
    if not markers:
        raise ValueError("get_marker() needs at least one marker")
    flat = set()
    for marker in markers:
        if isinstance(marker, CompositeMarker):
            flat.update(marker.members)
        elif isinstance(marker, Marker):
            flat.add(marker)
        else:
            raise TypeError(f"Not a marker: {marker!r}")
    if len(flat) == 1:
        return next(iter(flat))
    return CompositeMarker(frozenset(flat))


class MarkerRegistry:
    """
    Name-to-marker registry.

    Markers are created on first lookup and the same instance is returned
    afterwards. Registration normally happens at import or setup time.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._markers: dict[str, Marker] = {}
        self._lock = threading.Lock()
        for name in names:
            self.get(name)

    def get(self, name: str) -> Marker:
        marker = self._markers.get(name)
        if marker is not None:
            return marker
        with self._lock:
            marker = self._markers.get(name)
            if marker is None:
                marker = Marker(name)
                self._markers[name] = marker
            return marker

    def find(self, name: str) -> Optional[Marker]:
        """Return the marker registered under name, or None. Never registers."""
        return self._markers.get(name)

    def resolve(self, value: Union[str, AnyMarker, None]) -> Optional[AnyMarker]:
        """Turn a marker name (or a marker) into a marker; None stays None."""
        if value is None or isinstance(value, (Marker, CompositeMarker)):
            return value
        if isinstance(value, str):
            return self.get(value)
        raise TypeError(f"Cannot resolve {value!r} to a marker")

    def names(self) -> list[str]:
        return sorted(self._markers)

    def __contains__(self, name: str) -> bool:
        return name in self._markers


default_registry = MarkerRegistry()


class SecurityMarkers:
    """Predefined security and classification markers."""

    SECURITY_SUCCESS = default_registry.get("SECURITY_SUCCESS")
    SECURITY_FAILURE = default_registry.get("SECURITY_FAILURE")
    SECURITY_AUDIT = default_registry.get("SECURITY_AUDIT")

    EVENT_SUCCESS = default_registry.get("EVENT_SUCCESS")
    EVENT_FAILURE = default_registry.get("EVENT_FAILURE")

    # Information classification, least to most sensitive
    RESTRICTED = default_registry.get("RESTRICTED")
    CONFIDENTIAL = default_registry.get("CONFIDENTIAL")
    SECRET = default_registry.get("SECRET")
    TOP_SECRET = default_registry.get("TOP_SECRET")
