"""
Masking profiles for PatternMaskingPolicy.

Available profiles:
    - security: SSNs, payment cards, credentials, bearer tokens (default)

To add a profile, subclass logmask.profile.MaskingProfile and pass an
instance to PatternMaskingPolicy.load_profile().
"""

from .security import SecurityProfile, DEFAULT_PROFILE

__all__ = ["SecurityProfile", "DEFAULT_PROFILE"]
