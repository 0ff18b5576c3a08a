"""
Mask Configuration - the immutable masking policy.

A MaskConfig is built once at setup time and shared by every thread that
logs. Invalid settings fail here, never on a log call.

Environment variables (read by MaskConfig.from_env, .env files supported):
    LOGMASK_TRIGGER_MARKER   marker name that activates masking (CONFIDENTIAL)
    LOGMASK_MASK_TOKEN       replacement for each masked argument (*****)
    LOGMASK_FAULT_TEXT       message emitted when masking itself fails
    LOGMASK_MISMATCH_POLICY  mask_all | mirror_rendering
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Union

from dotenv import load_dotenv

from .errors import ConfigurationError
from .markers import CompositeMarker, Marker, MarkerRegistry, SecurityMarkers, default_registry

DEFAULT_MASK_TOKEN = "*****"
DEFAULT_FAULT_TEXT = "[MASKING FAULT]"

ENV_TRIGGER_MARKER = "LOGMASK_TRIGGER_MARKER"
ENV_MASK_TOKEN = "LOGMASK_MASK_TOKEN"
ENV_FAULT_TEXT = "LOGMASK_FAULT_TEXT"
ENV_MISMATCH_POLICY = "LOGMASK_MISMATCH_POLICY"


class MismatchPolicy(Enum):
    """
    What to emit for placeholders that have no matching argument.

    MASK_ALL masks every placeholder. MIRROR_RENDERING masks only the
    supplied arguments and leaves surplus placeholders as a literal "{}",
    which is what the log4j rewrite policy this library descends from did.
    """
    MASK_ALL = "mask_all"
    MIRROR_RENDERING = "mirror_rendering"


def _is_blank(value) -> bool:
    return value is None or not isinstance(value, str) or not value.strip()


@dataclass(frozen=True)
class MaskConfig:
    """
    Masking policy.

    Args:
        trigger: Marker (or registered marker name) whose presence masks an event.
        mask_token: Text substituted for every masked argument.
        fault_text: Text that replaces the whole message if masking fails.
        mismatch_policy: Handling of placeholders beyond the last argument.
    """
    trigger: Union[Marker, str] = SecurityMarkers.CONFIDENTIAL
    mask_token: str = DEFAULT_MASK_TOKEN
    fault_text: str = DEFAULT_FAULT_TEXT
    mismatch_policy: Union[MismatchPolicy, str] = MismatchPolicy.MASK_ALL

    def __post_init__(self):
        trigger = self.trigger
        if isinstance(trigger, str):
            if _is_blank(trigger):
                raise ConfigurationError("Trigger marker name must not be empty")
            trigger = default_registry.get(trigger.strip())
        if isinstance(trigger, CompositeMarker):
            raise ConfigurationError("Trigger must be a single marker, not a composite")
        if not isinstance(trigger, Marker):
            raise ConfigurationError(f"Trigger must be a Marker, got {type(trigger).__name__}")
        object.__setattr__(self, "trigger", trigger)

        if _is_blank(self.mask_token):
            raise ConfigurationError("Mask token must be a non-empty string")
        if _is_blank(self.fault_text):
            raise ConfigurationError("Fault text must be a non-empty string")

        policy = self.mismatch_policy
        if not isinstance(policy, MismatchPolicy):
            try:
                policy = MismatchPolicy(str(policy).strip().lower())
            except ValueError:
                raise ConfigurationError(f"Unknown mismatch policy: {self.mismatch_policy!r}") from None
        object.__setattr__(self, "mismatch_policy", policy)

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None,
        registry: Optional[MarkerRegistry] = None,
    ) -> "MaskConfig":
        """
        Build a config from environment variables.

        When `env` is given it is used as-is; otherwise a .env file is loaded
        (without overriding variables already set) and os.environ is read.
        Unset variables fall back to the defaults.
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        kwargs = {}
        trigger_name = env.get(ENV_TRIGGER_MARKER)
        if trigger_name is not None:
            if _is_blank(trigger_name):
                raise ConfigurationError(f"{ENV_TRIGGER_MARKER} is set but empty")
            kwargs["trigger"] = (registry or default_registry).get(trigger_name.strip())
        if env.get(ENV_MASK_TOKEN) is not None:
            kwargs["mask_token"] = env[ENV_MASK_TOKEN]
        if env.get(ENV_FAULT_TEXT) is not None:
            kwargs["fault_text"] = env[ENV_FAULT_TEXT]
        if env.get(ENV_MISMATCH_POLICY) is not None:
            kwargs["mismatch_policy"] = env[ENV_MISMATCH_POLICY]
        return cls(**kwargs)


DEFAULT_CONFIG = MaskConfig()
