"""
Masking profiles - named sets of regex patterns for scrubbing rendered text.

Structural masking only works for parameterized messages. A profile lets
PatternMaskingPolicy catch well-known sensitive formats inside text that was
flattened before it was logged.

Each profile defines:
    - name: Unique identifier for the profile
    - description: Human-readable description
    - get_patterns(): RedactionPatterns to apply
    - get_scrubadub_detectors(): Optional extra scrubadub detectors
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Pattern


@dataclass(frozen=True)
class RedactionPattern:
    """
    A single pattern.

    A replacement of None substitutes the mask token for the whole match.
    Otherwise it is an re.sub template in which "{token}" expands to the
    mask token.
    """
    name: str
    pattern: Pattern[str]
    replacement: Optional[str] = None
    description: str = ""


class MaskingProfile(ABC):
    """
    Abstract base class for masking profiles.

    Example:
        class EmployeeIdProfile(MaskingProfile):
            @property
            def name(self) -> str:
                return "employee_id"

            @property
            def description(self) -> str:
                return "Internal employee numbers"

            def get_patterns(self) -> list[RedactionPattern]:
                return [RedactionPattern("employee_id", re.compile(r"EMP-\\d{6}"))]
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @abstractmethod
    def get_patterns(self) -> list[RedactionPattern]:
        """Patterns applied in order, after any scrubadub detectors."""
        pass

    def get_scrubadub_detectors(self) -> list:
        return []

    def __repr__(self) -> str:
        return f"<MaskingProfile: {self.name}>"
