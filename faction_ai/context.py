from __future__ import annotations

from dataclasses import dataclass, field

from .influence import InfluenceMap
from .intent import StrategicIntent
from .opponents.types import SectorThreatOverview


@dataclass(frozen=True)
class Context:
    """Per-turn analysis passed into action scoring."""

    # SPATIAL
    influence_map: InfluenceMap
    # THREATS
    threat_overview: SectorThreatOverview
    # INTENT
    strategic_intent: StrategicIntent = field(default_factory=StrategicIntent)
