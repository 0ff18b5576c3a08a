"""
Security profile - default patterns for PatternMaskingPolicy.

Covers the values most often leaked through hand-built log strings:
    - US Social Security Numbers
    - Payment card numbers, plain or grouped by spaces/dashes
    - password / secret / token key=value pairs (the value only)
    - Bearer tokens in authorization headers
"""

import re

from ..profile import MaskingProfile, RedactionPattern


class SecurityProfile(MaskingProfile):

    @property
    def name(self) -> str:
        return "security"

    @property
    def description(self) -> str:
        return "SSNs, payment cards, credentials and bearer tokens"

    def get_patterns(self) -> list[RedactionPattern]:
        return [
            RedactionPattern(
                name="ssn",
                pattern=re.compile(r"\b(?!000|666|9\d{2})\d{3}-(?!00)\d{2}-(?!0000)\d{4}\b"),
                description="US Social Security Number",
            ),
            RedactionPattern(
                name="payment_card",
                pattern=re.compile(r"\b(?:\d{4}[- ]?){3}\d{4}\b|\b3[47]\d{13}\b"),
                description="16-digit card (optionally grouped) or 15-digit Amex",
            ),
            # Keep the key, mask the value
            RedactionPattern(
                name="credential",
                pattern=re.compile(
                    r"(?i)\b(password|passwd|pwd|secret|api[_-]?key|token)(\s*[=:]\s*)[\"']?[^\s\"',;]+[\"']?"
                ),
                replacement=r"\1\2{token}",
                description="Credential in key=value form",
            ),
            RedactionPattern(
                name="bearer",
                pattern=re.compile(r"(?i)\b(Bearer\s+)[A-Za-z0-9\-._~+/]+=*"),
                replacement=r"\1{token}",
                description="Bearer token",
            ),
        ]


DEFAULT_PROFILE = SecurityProfile()
