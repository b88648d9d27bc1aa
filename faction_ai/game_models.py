from __future__ import annotations
import sys
from dataclasses import dataclass, field, asdict, is_dataclass, fields
from typing import Dict, List, Optional, Tuple, Any, Union, get_args, get_origin, get_type_hints
from enum import Enum
import json

from .map.coordinates import HexCoordinate


def _coerce_value(ft: Any, v: Any) -> Any:
    """Coerce a raw JSON/YAML value into the annotated field type."""
    origin = get_origin(ft)
    if origin is Union:
        inner = [arg for arg in get_args(ft) if arg is not type(None)]
        if v is None or len(inner) != 1:
            return v
        return _coerce_value(inner[0], v)
    if ft is HexCoordinate:
        return HexCoordinate.from_value(v)
    if isinstance(ft, type) and issubclass(ft, Enum) and not isinstance(v, ft):
        return ft(v)
    if is_dataclass(ft) and isinstance(v, dict):
        return _build_dataclass(ft, v)
    if origin in (list, set, tuple) and isinstance(v, (list, set, tuple)):
        args = [a for a in get_args(ft) if a is not Ellipsis] or [Any]
        inner = args[0]
        items = [x if inner is Any else _coerce_value(inner, x) for x in v]
        if origin is set:
            return set(items)
        if origin is tuple:
            return tuple(items)
        return items
    if origin is dict and isinstance(v, dict):
        kt, vt = get_args(ft) or (Any, Any)
        if vt is not Any:
            return {k: _coerce_value(vt, x) for k, x in v.items()}
        return dict(v)
    return v


def _build_dataclass(cls, data: Dict[str, Any]):
    """Recursively coerce nested dicts/lists into a dataclass instance."""
    if not is_dataclass(cls):
        return data
    type_hints = get_type_hints(cls, globalns=sys.modules[cls.__module__].__dict__)
    kwargs = {}
    for f in fields(cls):
        if f.name not in data:
            continue  # keep default
        v = data[f.name]
        ft = type_hints.get(f.name, f.type)
        if v is None and get_origin(ft) in (list, tuple, dict, set):
            # Serializers emit null for empty collections; keep the default
            continue
        kwargs[f.name] = _coerce_value(ft, v)
    return cls(**kwargs)


def _to_plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_plain(v) for v in value]
    return value


class AssetCategory(str, Enum):
    FORCE = "Force"
    CUNNING = "Cunning"
    WEALTH = "Wealth"


class AssetType(str, Enum):
    MILITARY_UNIT = "Military Unit"
    SPECIAL_FORCES = "Special Forces"
    STARSHIP = "Starship"
    FACILITY = "Facility"
    TACTIC = "Tactic"
    LOGISTICS_FACILITY = "Logistics Facility"
    SPECIAL = "Special"


class FactionTag(str, Enum):
    COLONISTS = "Colonists"
    DEEP_ROOTED = "Deep Rooted"
    EUGENICS_CULT = "Eugenics Cult"
    EXCHANGE_CONSULATE = "Exchange Consulate"
    FANATICAL = "Fanatical"
    IMPERIALISTS = "Imperialists"
    MACHIAVELLIAN = "Machiavellian"
    MERCENARY_GROUP = "Mercenary Group"
    PERIMETER_AGENCY = "Perimeter Agency"
    PIRATES = "Pirates"
    PLANETARY_GOVERNMENT = "Planetary Government"
    PLUTOCRATIC = "Plutocratic"
    PRECEPTOR_ARCHIVE = "Preceptor Archive"
    PSYCHIC_ACADEMY = "Psychic Academy"
    SAVAGE = "Savage"
    SCAVENGERS = "Scavengers"
    SECRETIVE = "Secretive"
    TECHNICAL_EXPERTISE = "Technical Expertise"
    THEOCRATIC = "Theocratic"
    WARLIKE = "Warlike"


class FactionGoalType(str, Enum):
    MILITARY_CONQUEST = "Military Conquest"
    COMMERCIAL_EXPANSION = "Commercial Expansion"
    INTELLIGENCE_COUP = "Intelligence Coup"
    PLANETARY_SEIZURE = "Planetary Seizure"
    EXPAND_INFLUENCE = "Expand Influence"
    BLOOD_THE_ENEMY = "Blood the Enemy"
    PEACEABLE_KINGDOM = "Peaceable Kingdom"
    DESTROY_THE_FOE = "Destroy the Foe"
    INSIDE_ENEMY_TERRITORY = "Inside Enemy Territory"
    INVINCIBLE_VALOR = "Invincible Valor"
    WEALTH_OF_WORLDS = "Wealth of Worlds"


BASE_OF_INFLUENCE_ID = "base_of_influence"


@dataclass(frozen=True)
class PrimaryWorld:
    name: str = ""
    population: int = 0  # population index 0..6
    tech_level: int = 0  # 0..5
    atmosphere: str = ""
    temperature: str = ""
    biosphere: str = ""
    government: str = ""
    tags: Tuple[str, ...] = ()
    trade_codes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Route:
    system_id: str
    is_trade_route: bool = False


@dataclass(frozen=True)
class StarSystem:
    id: str
    name: str
    coordinates: HexCoordinate
    primary_world: PrimaryWorld = field(default_factory=PrimaryWorld)
    routes: Tuple[Route, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StarSystem":
        return _build_dataclass(cls, data)


@dataclass(frozen=True)
class FactionAttributes:
    hp: int = 0
    max_hp: int = 0
    force: int = 0
    cunning: int = 0
    wealth: int = 0

    @property
    def total(self) -> int:
        return self.force + self.cunning + self.wealth


@dataclass(frozen=True)
class FactionGoal:
    type: FactionGoalType
    requirements: Dict[str, Any] = field(default_factory=dict)
    progress: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FactionAsset:
    id: str
    definition_id: str
    location: str  # system id
    hp: int
    max_hp: int
    stealthed: bool = False

    @property
    def hp_ratio(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp


@dataclass(frozen=True)
class Faction:
    id: str
    name: str
    homeworld: str  # system id
    attributes: FactionAttributes = field(default_factory=FactionAttributes)
    fac_creds: int = 0
    tags: Tuple[FactionTag, ...] = ()
    goal: Optional[FactionGoal] = None
    assets: Tuple[FactionAsset, ...] = ()

    def has_tag(self, tag: FactionTag) -> bool:
        return tag in self.tags

    def find_asset(self, asset_id: str) -> Optional[FactionAsset]:
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Faction":
        return _build_dataclass(cls, data)


@dataclass(frozen=True)
class Sector:
    """Snapshot of every system and faction at the start of an AI turn."""

    systems: Tuple[StarSystem, ...] = ()
    factions: Tuple[Faction, ...] = ()

    def faction(self, faction_id: str) -> Optional[Faction]:
        for faction in self.factions:
            if faction.id == faction_id:
                return faction
        return None

    def to_json(self) -> str:
        return json.dumps(_to_plain(asdict(self)), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sector":
        return _build_dataclass(cls, data)


def index_systems(systems: List[StarSystem] | Tuple[StarSystem, ...]) -> Dict[str, StarSystem]:
    """Build a system-id lookup preserving the input order."""
    return {system.id: system for system in systems}


__all__ = [
    "AssetCategory",
    "AssetType",
    "BASE_OF_INFLUENCE_ID",
    "Faction",
    "FactionAsset",
    "FactionAttributes",
    "FactionGoal",
    "FactionGoalType",
    "FactionTag",
    "PrimaryWorld",
    "Route",
    "Sector",
    "StarSystem",
    "index_systems",
]
