"""
Scorer weight profiles for faction AI.

This package provides named weight profiles for the action scorer.
"""

from .profiles import (
    load_profile,
    get_available_profiles,
    apply_profile_to_weights,
    get_profile_info,
)

__all__ = [
    "load_profile",
    "get_available_profiles",
    "apply_profile_to_weights",
    "get_profile_info",
]
