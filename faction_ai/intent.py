"""Strategic intent supplied to the action scorer.

The intent is produced by the goal-selection layer; this package only
consumes it. :func:`default_intent` exists for tooling that has no goal layer
(CLI, inspector).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .game_models import Faction
from .tags import aggression_shift


class PrimaryFocus(str, Enum):
    MILITARY = "military"
    ECONOMIC = "economic"
    COVERT = "covert"
    EXPANSION = "expansion"
    DEFENSIVE = "defensive"
    BALANCED = "balanced"


@dataclass(frozen=True)
class StrategicIntent:
    primary_focus: PrimaryFocus = PrimaryFocus.BALANCED
    aggression_level: float = 50.0  # 0..100
    target_faction_id: Optional[str] = None
    priority_system_ids: Tuple[str, ...] = ()
    reasoning: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StrategicIntent":
        return cls(
            primary_focus=PrimaryFocus(data.get("primary_focus", PrimaryFocus.BALANCED.value)),
            aggression_level=float(data.get("aggression_level", 50.0)),
            target_faction_id=data.get("target_faction_id"),
            priority_system_ids=tuple(data.get("priority_system_ids") or ()),
            reasoning=str(data.get("reasoning", "")),
        )


def default_intent(faction: Faction, focus: PrimaryFocus = PrimaryFocus.BALANCED) -> StrategicIntent:
    """Neutral intent: tag-adjusted aggression around 50, homeworld as priority."""
    aggression = max(0, min(100, 50 + aggression_shift(faction.tags)))
    return StrategicIntent(
        primary_focus=focus,
        aggression_level=float(aggression),
        target_faction_id=None,
        priority_system_ids=(faction.homeworld,),
        reasoning=f"default {focus.value} intent",
    )


__all__ = ["PrimaryFocus", "StrategicIntent", "default_intent"]
