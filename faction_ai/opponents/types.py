from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

from ..game_models import AssetCategory


class DefenseLevel(str, Enum):
    NONE = "none"
    MINIMAL = "minimal"
    MODERATE = "moderate"
    HEAVY = "heavy"
    CRITICAL = "critical"


class Posture(str, Enum):
    AGGRESSIVE = "aggressive"
    BALANCED = "balanced"
    DEFENSIVE = "defensive"
    TURTLE = "turtle"


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class AssetThreat:
    asset_id: str
    asset_name: str
    faction_id: str
    category: AssetCategory
    location: str  # system id
    distance: int  # hex distance from the reference system
    threat_score: float
    can_attack: bool
    attack_damage: Optional[str] = None  # raw damage text
    is_stealthed: bool = False


@dataclass(frozen=True)
class FactionThreat:
    faction_id: str
    faction_name: str
    force: int
    cunning: int
    wealth: int
    military_threat: float
    covert_threat: float
    economic_threat: float
    total_threat: float
    visible_assets: Tuple[AssetThreat, ...] = ()
    estimated_stealthed_assets: int = 0  # cunning // 2, never enumerated
    closest_asset_distance: int = -1  # -1 when no located asset
    assets_in_range: int = 0  # within 2 hexes


@dataclass(frozen=True)
class SystemThreatAssessment:
    system_id: str
    system_name: str
    danger_level: float = 0.0  # 0..10
    military_danger: float = 0.0  # 0..10
    covert_danger: float = 0.0
    economic_danger: float = 0.0
    faction_threats: Tuple[FactionThreat, ...] = ()
    immediate_threats: Tuple[AssetThreat, ...] = ()
    recommended_defense_level: DefenseLevel = DefenseLevel.NONE
    should_retreat: bool = False


@dataclass(frozen=True)
class SystemThreatInfo:
    # all values scaled to 0..100
    system_id: str
    overall_danger_level: float = 0.0
    military_danger: float = 0.0
    covert_danger: float = 0.0
    economic_danger: float = 0.0


@dataclass(frozen=True)
class SectorThreatOverview:
    faction_id: str
    primary_threat: Optional[FactionThreat] = None
    threatened_systems: Tuple[str, ...] = ()
    safe_systems: Tuple[str, ...] = ()
    overall_threat_level: float = 0.0  # 0..100
    recommended_posture: Posture = Posture.BALANCED
    system_threats: Mapping[str, SystemThreatInfo] = field(default_factory=dict)

    def danger_at(self, system_id: str) -> Optional[float]:
        """Overall danger (0..100) at an assessed system, ``None`` if not assessed."""
        info = self.system_threats.get(system_id)
        return info.overall_danger_level if info is not None else None


@dataclass(frozen=True)
class RetreatAdvice:
    should_retreat: bool
    reason: str
    urgency: Urgency
