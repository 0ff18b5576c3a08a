"""
PatternMaskingPolicy - best-effort scrubbing of rendered log text.

MaskingRewritePolicy never touches pre-rendered messages: once a value has
been concatenated into a string there is no structure left to tell it apart.
This opt-in stage fills that gap with pattern matching:

1. scrubadub's built-in detectors (emails, phone numbers, etc.), if enabled
2. RedactionPatterns from the loaded masking profiles

Put it after MaskingRewritePolicy in a RewritePipeline so that structurally
masked output is already final when the patterns run.
"""

import logging
from typing import Iterable, Optional, Sequence

import scrubadub
from scrubadub.filth import Filth
from scrubadub.post_processors.base import PostProcessor

from .config import DEFAULT_CONFIG, MaskConfig
from .engine import RewritePolicy
from .event import LogEvent
from .markers import Marker, contains
from .message import RenderedMessage
from .profile import MaskingProfile, RedactionPattern
from .profiles import DEFAULT_PROFILE

logger = logging.getLogger(__name__)

TOKEN_FIELD = "{token}"


class MaskTokenReplacer(PostProcessor):
    """scrubadub post-processor that replaces every filth with the mask token."""
    name = "mask_token_replacer"

    def __init__(self, token: str, name: Optional[str] = None):
        super().__init__(name=name)
        self.token = token

    def process_filth(self, filth_list: Sequence[Filth]) -> Sequence[Filth]:
        for filth in filth_list:
            filth.replacement_string = self.token
        return filth_list


class PatternMaskingPolicy(RewritePolicy):
    """
    Rewrites the formatted text of events that match sensitive patterns.

    Example:
        policy = PatternMaskingPolicy()
        policy.scrub("login ok, ssn 123-45-6789")
        # ("login ok, ssn *****", True)

    Args:
        config: Supplies the mask token.
        markers: Only events carrying one of these markers are scrubbed.
                 None scrubs every event.
        use_scrubadub: Run scrubadub's detectors before the regex patterns.
        load_default_profile: Start with the security profile loaded.

    load_profile()/unload_profile() are meant for setup time; scrub() and
    rewrite() are safe to call from any thread afterwards.
    """

    def __init__(
        self,
        config: Optional[MaskConfig] = None,
        markers: Optional[Iterable[Marker]] = None,
        use_scrubadub: bool = True,
        load_default_profile: bool = True,
    ):
        self._config = config or DEFAULT_CONFIG
        self._markers = frozenset(markers) if markers is not None else None
        self._profiles: dict[str, MaskingProfile] = {}
        self._scrubber = None
        if use_scrubadub:
            self._scrubber = scrubadub.Scrubber(post_processor_list=[MaskTokenReplacer(self._config.mask_token)])

        if load_default_profile:
            self.load_profile(DEFAULT_PROFILE)

    def load_profile(self, profile: MaskingProfile) -> None:
        """Add a profile; one with the same name is replaced."""
        self._profiles[profile.name] = profile
        logger.info(f"Loaded masking profile: {profile.name}")

        if self._scrubber is not None:
            for detector in profile.get_scrubadub_detectors():
                self._scrubber.add_detector(detector)

    def unload_profile(self, profile_name: str) -> bool:
        if profile_name in self._profiles:
            del self._profiles[profile_name]
            logger.info(f"Unloaded masking profile: {profile_name}")
            return True
        return False

    def list_profiles(self) -> list[str]:
        return list(self._profiles.keys())

    def applies_to(self, event: LogEvent) -> bool:
        if self._markers is None:
            return True
        return any(contains(event.marker, marker) for marker in self._markers)

    def _replacement(self, pattern: RedactionPattern):
        token = self._config.mask_token
        if pattern.replacement is None:
            return lambda match: token
        return pattern.replacement.replace(TOKEN_FIELD, token.replace("\\", r"\\"))

    def scrub(self, text: Optional[str]) -> tuple[Optional[str], bool]:
        """
        Mask sensitive patterns in text.

        Returns (scrubbed_text, was_scrubbed). Empty or None text comes back
        unchanged.
        """
        if not text:
            return text, False

        original_text = text

        if self._scrubber is not None:
            try:
                text = self._scrubber.clean(text)
            except Exception as e:
                logger.warning(f"Scrubadub error (continuing with patterns): {type(e).__name__}")

        for profile in list(self._profiles.values()):
            try:
                patterns = profile.get_patterns()
            except Exception as e:
                logger.warning(f"Profile '{profile.name}' failed to supply patterns: {type(e).__name__}")
                continue
            for pattern in patterns:
                try:
                    text = pattern.pattern.sub(self._replacement(pattern), text)
                except Exception as e:
                    logger.warning(f"Pattern '{pattern.name}' in profile '{profile.name}' failed: {e}")

        return text, text != original_text

    def rewrite(self, event: LogEvent) -> LogEvent:
        if event.message is None or not self.applies_to(event):
            return event

        try:
            text = event.formatted_message
        except Exception as e:
            logger.warning(f"Cannot render event from '{event.logger_name}', emitting fault text: {type(e).__name__}")
            return event.with_message(RenderedMessage(self._config.fault_text))

        scrubbed, was_scrubbed = self.scrub(text)
        if not was_scrubbed:
            return event
        return event.with_message(RenderedMessage(scrubbed))
