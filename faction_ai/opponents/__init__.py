from .types import (
    AssetThreat,
    DefenseLevel,
    FactionThreat,
    Posture,
    RetreatAdvice,
    SectorThreatOverview,
    SystemThreatAssessment,
    SystemThreatInfo,
    Urgency,
)
from .threat import (
    asset_threat_score,
    assess_system_threat,
    calculate_defensive_strength,
    generate_sector_threat_overview,
    get_immediate_attack_threats,
    should_consider_retreat,
)

__all__ = [
    "AssetThreat",
    "DefenseLevel",
    "FactionThreat",
    "Posture",
    "RetreatAdvice",
    "SectorThreatOverview",
    "SystemThreatAssessment",
    "SystemThreatInfo",
    "Urgency",
    "asset_threat_score",
    "assess_system_threat",
    "calculate_defensive_strength",
    "generate_sector_threat_overview",
    "get_immediate_attack_threats",
    "should_consider_retreat",
]
