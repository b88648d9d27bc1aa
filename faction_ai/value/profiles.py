"""
Scorer weight profiles for faction AI.

This module provides pre-configured weight profiles for different faction
temperaments, allowing quick tuning of the action scorer without editing
individual weights.
"""

from __future__ import annotations
import os
from typing import Dict, Any, Optional
import yaml


_PROFILES_CACHE: Optional[Dict[str, Dict[str, float]]] = None

WEIGHT_KEYS = ("base_weight", "tag_weight", "goal_weight", "min_score_threshold")


def load_all_profiles() -> Dict[str, Dict[str, float]]:
    """Load all scorer profiles from profiles.yaml."""
    global _PROFILES_CACHE
    if _PROFILES_CACHE is not None:
        return _PROFILES_CACHE

    profiles_path = os.path.join(os.path.dirname(__file__), "profiles.yaml")
    with open(profiles_path, "r", encoding="utf-8") as f:
        _PROFILES_CACHE = yaml.safe_load(f) or {}

    return _PROFILES_CACHE


def get_available_profiles() -> list[str]:
    """Get list of available profile names."""
    profiles = load_all_profiles()
    return sorted(profiles.keys())


def load_profile(profile_name: str) -> Dict[str, float]:
    """
    Load a specific scorer profile.

    Args:
        profile_name: Name of the profile (e.g., "aggressive", "cautious", "balanced")

    Returns:
        Dictionary of weight overrides for the specified profile

    Raises:
        ValueError: If profile_name doesn't exist
    """
    profiles = load_all_profiles()

    if profile_name not in profiles:
        available = ", ".join(get_available_profiles())
        raise ValueError(
            f"Profile '{profile_name}' not found. "
            f"Available profiles: {available}"
        )

    return dict(profiles[profile_name] or {})


def apply_profile_to_weights(
    base_weights: Dict[str, float],
    profile: Optional[str] = None
) -> Dict[str, float]:
    """
    Apply a profile's overrides to base weights if a profile is given.

    Args:
        base_weights: Base weight dictionary
        profile: Optional profile name to apply

    Returns:
        New dictionary with the profile applied, or a copy of base weights
    """
    merged = dict(base_weights)
    if profile is None:
        return merged
    if not isinstance(profile, str):
        raise ValueError(f"Profile name must be a string, got {type(profile).__name__}")
    if profile.lower() in ("none", "default"):
        return merged
    merged.update(load_profile(profile))
    return merged


def get_profile_info(profile_name: str) -> Dict[str, Any]:
    """
    Get metadata about a scorer profile.

    Returns:
        Dictionary with the profile weights and the component it emphasises
    """
    profile = load_profile(profile_name)
    weights = {k: float(profile.get(k, 0.0 if k == "min_score_threshold" else 1.0)) for k in WEIGHT_KEYS}
    emphasis = max(("base_weight", "tag_weight", "goal_weight"), key=lambda k: weights[k])
    return {
        "name": profile_name,
        "override_count": len(profile),
        "weights": weights,
        "emphasis": emphasis.replace("_weight", ""),
    }


__all__ = [
    "WEIGHT_KEYS",
    "load_profile",
    "load_all_profiles",
    "get_available_profiles",
    "apply_profile_to_weights",
    "get_profile_info",
]
