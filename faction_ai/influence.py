"""Spatial influence map: who controls each system, and how firmly.

Every asset projects influence over the systems within its range, decaying by
half per hex. Influence is split by the asset's category (force, cunning,
wealth) and also summed per faction to decide which faction controls a hex.
The map is always rebuilt from the full faction list.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .assets import AssetCatalog, AssetDefinition, get_catalog
from .game_models import AssetCategory, AssetType, Faction, FactionAsset, StarSystem, index_systems
from .map.coordinates import hex_distance

logger = logging.getLogger(__name__)

INFLUENCE_FALLOFF = 0.5
STEALTH_INFLUENCE_FACTOR = 0.3
HOMEWORLD_BONUS = 5.0
UNOCCUPIED_BELOW = 2.0
CONTESTED_AT = 5

BASE_OF_INFLUENCE_STRENGTH = 10.0

# type -> (multiplier on rating x 2, range in hexes)
_TYPE_PROFILES: Dict[AssetType, Tuple[float, int]] = {
    AssetType.STARSHIP: (1.2, 2),
    AssetType.FACILITY: (1.5, 0),
    AssetType.LOGISTICS_FACILITY: (1.5, 0),
    AssetType.MILITARY_UNIT: (1.3, 1),
    AssetType.SPECIAL_FORCES: (0.8, 1),
    AssetType.TACTIC: (0.5, 0),
}
_DEFAULT_PROFILE: Tuple[float, int] = (1.0, 1)


@dataclass(frozen=True)
class InfluenceProfile:
    base: float
    range: int


@dataclass(frozen=True)
class HexInfluence:
    system_id: str
    x: int
    y: int
    force: float = 0.0
    cunning: float = 0.0
    wealth: float = 0.0
    total: float = 0.0
    controlling_faction_id: Optional[str] = None
    contested_level: int = 0  # 0..10
    faction_totals: Mapping[str, float] = field(default_factory=dict)

    def faction_influence(self, faction_id: str) -> float:
        return self.faction_totals.get(faction_id, 0.0)


@dataclass(frozen=True)
class InfluenceMap:
    faction_id: str
    hexes: Mapping[str, HexInfluence] = field(default_factory=dict)
    friendly_controlled: Tuple[str, ...] = ()
    enemy_controlled: Tuple[str, ...] = ()
    contested: Tuple[str, ...] = ()
    unoccupied: Tuple[str, ...] = ()

    def classification(self, system_id: str) -> Optional[str]:
        for name in ("friendly_controlled", "enemy_controlled", "contested", "unoccupied"):
            if system_id in getattr(self, name):
                return name
        return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def influence_profile(definition: AssetDefinition) -> InfluenceProfile:
    """Base influence and projection range of an asset definition."""
    if definition.is_base_of_influence:
        return InfluenceProfile(base=BASE_OF_INFLUENCE_STRENGTH, range=0)
    multiplier, reach = _TYPE_PROFILES.get(definition.type, _DEFAULT_PROFILE)
    return InfluenceProfile(base=definition.rating * 2 * multiplier, range=reach)


def projected_influence(
    asset: FactionAsset,
    definition: AssetDefinition,
    distance: int,
) -> float:
    """Influence ``asset`` projects onto a hex ``distance`` steps away (0 beyond range)."""
    profile = influence_profile(definition)
    if distance > profile.range or asset.max_hp <= 0:
        return 0.0
    value = profile.base * (INFLUENCE_FALLOFF ** distance)
    value *= asset.hp / asset.max_hp
    if asset.stealthed:
        value *= STEALTH_INFLUENCE_FACTOR
    return value


class _HexAccumulator:
    __slots__ = ("force", "cunning", "wealth", "by_faction")

    def __init__(self) -> None:
        self.force = 0.0
        self.cunning = 0.0
        self.wealth = 0.0
        self.by_faction: Dict[str, float] = {}

    def add(self, category: AssetCategory, faction_id: str, amount: float) -> None:
        if category == AssetCategory.FORCE:
            self.force += amount
        elif category == AssetCategory.CUNNING:
            self.cunning += amount
        else:
            self.wealth += amount
        self.by_faction[faction_id] = self.by_faction.get(faction_id, 0.0) + amount


def _control(by_faction: Mapping[str, float]) -> Tuple[Optional[str], int]:
    """Controlling faction and contested level for one hex.

    Highest positive total wins; equal totals go to the lexicographically
    smallest faction id.
    """
    ranked = sorted(
        ((fid, amount) for fid, amount in by_faction.items() if amount > 0),
        key=lambda item: (-item[1], item[0]),
    )
    if not ranked:
        return None, 0
    controller, highest = ranked[0]
    if len(ranked) == 1:
        return controller, 0
    second = ranked[1][1]
    return controller, round_half_up(10 * second / highest)


def compute_influence_map(
    assessing_faction_id: str,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> InfluenceMap:
    """Build the influence map for every system from one faction's perspective.

    Args:
        assessing_faction_id: Faction whose friendly/enemy view is produced
        factions: Every faction in the sector, including the assessing one
        systems: Every star system in the sector
        catalog: Asset catalog; the packaged catalog when omitted

    Returns:
        InfluenceMap with one HexInfluence per system and the four
        classification lists in system order
    """
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    acc: Dict[str, _HexAccumulator] = {system.id: _HexAccumulator() for system in systems}

    for faction in factions:
        for asset in faction.assets:
            definition = catalog.get(asset.definition_id)
            if definition is None:
                logger.debug("Skipping asset %s: unknown definition %s", asset.id, asset.definition_id)
                continue
            origin = system_map.get(asset.location)
            if origin is None:
                logger.debug("Skipping asset %s: unknown location %s", asset.id, asset.location)
                continue
            reach = influence_profile(definition).range
            for system in systems:
                distance = hex_distance(origin.coordinates, system.coordinates)
                if distance > reach:
                    continue
                amount = projected_influence(asset, definition, distance)
                acc[system.id].add(definition.category, faction.id, amount)

        home = acc.get(faction.homeworld)
        if home is not None:
            home.by_faction[faction.id] = home.by_faction.get(faction.id, 0.0) + HOMEWORLD_BONUS

    hexes: Dict[str, HexInfluence] = {}
    friendly: List[str] = []
    enemy: List[str] = []
    contested: List[str] = []
    unoccupied: List[str] = []

    for system in systems:
        a = acc[system.id]
        controller, contested_level = _control(a.by_faction)
        total = a.force + a.cunning + a.wealth
        hexes[system.id] = HexInfluence(
            system_id=system.id,
            x=system.coordinates.x,
            y=system.coordinates.y,
            force=a.force,
            cunning=a.cunning,
            wealth=a.wealth,
            total=total,
            controlling_faction_id=controller,
            contested_level=contested_level,
            faction_totals=dict(a.by_faction),
        )
        if total < UNOCCUPIED_BELOW:
            unoccupied.append(system.id)
        elif contested_level >= CONTESTED_AT:
            contested.append(system.id)
        elif controller == assessing_faction_id:
            friendly.append(system.id)
        else:
            enemy.append(system.id)

    return InfluenceMap(
        faction_id=assessing_faction_id,
        hexes=hexes,
        friendly_controlled=tuple(friendly),
        enemy_controlled=tuple(enemy),
        contested=tuple(contested),
        unoccupied=tuple(unoccupied),
    )


def get_system_influence(influence_map: InfluenceMap, system_id: str) -> Optional[HexInfluence]:
    return influence_map.hexes.get(system_id)


def _distance_to_homeworld(system: StarSystem, faction: Faction, system_map: Mapping[str, StarSystem]) -> Optional[int]:
    homeworld = system_map.get(faction.homeworld)
    if homeworld is None:
        return None
    return hex_distance(system.coordinates, homeworld.coordinates)


def find_best_expansion_targets(
    influence_map: InfluenceMap,
    faction: Faction,
    systems: Sequence[StarSystem],
    limit: int = 5,
) -> List[StarSystem]:
    """Rank unoccupied and contested systems as expansion targets.

    Score = 2 x friendly influence - 1.5 x enemy influence - 0.5 x distance to
    the homeworld (10 when the homeworld is unknown).
    """
    system_map = index_systems(systems)
    candidates: List[Tuple[StarSystem, float]] = []
    for system_id in influence_map.unoccupied + influence_map.contested:
        system = system_map.get(system_id)
        hex_inf = influence_map.hexes.get(system_id)
        if system is None or hex_inf is None:
            continue
        distance = _distance_to_homeworld(system, faction, system_map)
        if distance is None:
            distance = 10
        controller = hex_inf.controlling_faction_id
        friendly = hex_inf.total if controller == faction.id else 0.0
        enemy = hex_inf.total if controller is not None and controller != faction.id else 0.0
        candidates.append((system, friendly * 2 - enemy * 1.5 - distance * 0.5))

    candidates.sort(key=lambda item: item[1], reverse=True)
    return [system for system, _ in candidates[:limit]]


def calculate_system_strategic_value(
    system: StarSystem,
    faction: Faction,
    influence_map: InfluenceMap,
    systems: Sequence[StarSystem],
) -> float:
    hex_inf = influence_map.hexes.get(system.id)
    if hex_inf is None:
        return 0.0

    value = system.primary_world.tech_level * 2.0
    value += system.primary_world.population
    value += len(system.routes) * 1.5
    if hex_inf.controlling_faction_id == faction.id:
        value += 5
    distance = _distance_to_homeworld(system, faction, index_systems(systems))
    if distance is not None:
        value += max(0, 10 - distance * 2)
    value -= hex_inf.contested_level * 0.5
    return max(0.0, value)


__all__ = [
    "HexInfluence",
    "InfluenceMap",
    "InfluenceProfile",
    "calculate_system_strategic_value",
    "compute_influence_map",
    "find_best_expansion_targets",
    "get_system_influence",
    "influence_profile",
    "projected_influence",
    "round_half_up",
]
