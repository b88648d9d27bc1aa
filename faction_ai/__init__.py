"""Faction AI: influence maps, threat assessment and utility-scored turn planning for hex-sector factions."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "recommend",
    "build_context",
    "HexCoordinate",
    "hex_distance",
    "StarSystem",
    "Faction",
    "FactionAsset",
    "Sector",
    "AssetCatalog",
    "get_catalog",
    "StrategicIntent",
    "PrimaryFocus",
    "Context",
    "InfluenceMap",
    "compute_influence_map",
    "SectorThreatOverview",
    "generate_sector_threat_overview",
    "assess_system_threat",
    "should_consider_retreat",
    "ScorerConfig",
    "score_all_actions",
    "Scenario",
    "load_scenario",
    "__version__",
]

_EXPORTS = {
    "HexCoordinate": ("map.coordinates", "HexCoordinate"),
    "hex_distance": ("map.coordinates", "hex_distance"),
    "StarSystem": ("game_models", "StarSystem"),
    "Faction": ("game_models", "Faction"),
    "FactionAsset": ("game_models", "FactionAsset"),
    "Sector": ("game_models", "Sector"),
    "AssetCatalog": ("assets", "AssetCatalog"),
    "get_catalog": ("assets", "get_catalog"),
    "StrategicIntent": ("intent", "StrategicIntent"),
    "PrimaryFocus": ("intent", "PrimaryFocus"),
    "Context": ("context", "Context"),
    "InfluenceMap": ("influence", "InfluenceMap"),
    "compute_influence_map": ("influence", "compute_influence_map"),
    "SectorThreatOverview": ("opponents.types", "SectorThreatOverview"),
    "generate_sector_threat_overview": ("opponents.threat", "generate_sector_threat_overview"),
    "assess_system_threat": ("opponents.threat", "assess_system_threat"),
    "should_consider_retreat": ("opponents.threat", "should_consider_retreat"),
    "ScorerConfig": ("action_gen.utility", "ScorerConfig"),
    "score_all_actions": ("action_gen.ranking", "score_all_actions"),
    "Scenario": ("state.loaders", "Scenario"),
    "load_scenario": ("state.loaders", "load_scenario"),
    "recommend": ("main", "recommend"),
    "build_context": ("main", "build_context"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
