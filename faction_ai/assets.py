"""Static catalog of faction asset definitions."""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any, Dict, Iterable, Optional

import yaml

from .dice import DiceExpression
from .game_models import AssetCategory, AssetType, BASE_OF_INFLUENCE_ID


@dataclass(frozen=True)
class AttackPattern:
    attacker: AssetCategory
    defender: AssetCategory
    damage_text: str
    damage: Optional[DiceExpression] = None


@dataclass(frozen=True)
class CounterattackPattern:
    damage_text: str
    damage: Optional[DiceExpression] = None


@dataclass(frozen=True)
class AssetDefinition:
    """Immutable catalog entry shared by every instance of an asset."""

    id: str
    name: str
    category: AssetCategory
    type: AssetType
    rating: int
    hp: int
    cost: int = 0
    tech_level: int = 0
    attack: Optional[AttackPattern] = None
    counterattack: Optional[CounterattackPattern] = None
    mobile: bool = False
    description: str = ""

    @property
    def can_attack(self) -> bool:
        return self.attack is not None

    @property
    def is_base_of_influence(self) -> bool:
        return self.id == BASE_OF_INFLUENCE_ID or self.name == "Base of Influence"

    @property
    def is_facility(self) -> bool:
        return self.type in (AssetType.FACILITY, AssetType.LOGISTICS_FACILITY)


def _parse_attack(block: Any) -> Optional[AttackPattern]:
    if not block:
        return None
    damage_text = str(block.get("damage", ""))
    return AttackPattern(
        attacker=AssetCategory(block["attacker"]),
        defender=AssetCategory(block["defender"]),
        damage_text=damage_text,
        damage=DiceExpression.parse(damage_text),
    )


def _parse_counterattack(value: Any) -> Optional[CounterattackPattern]:
    if not value:
        return None
    if isinstance(value, dict):
        value = value.get("damage", "")
    damage_text = str(value)
    return CounterattackPattern(damage_text=damage_text, damage=DiceExpression.parse(damage_text))


def definition_from_mapping(asset_id: str, block: Dict[str, Any]) -> AssetDefinition:
    """Build an :class:`AssetDefinition` from one catalog entry.

    Raises:
        ValueError: If the entry names an unknown category or type, or omits
            a required field.
    """
    try:
        return AssetDefinition(
            id=asset_id,
            name=str(block.get("name", asset_id)),
            category=AssetCategory(block["category"]),
            type=AssetType(block["type"]),
            rating=int(block.get("rating", 0)),
            hp=int(block["hp"]),
            cost=int(block.get("cost", 0)),
            tech_level=int(block.get("tech_level", 0)),
            attack=_parse_attack(block.get("attack")),
            counterattack=_parse_counterattack(block.get("counterattack")),
            mobile=bool(block.get("mobile", False)),
            description=str(block.get("description", "")),
        )
    except (KeyError, ValueError) as exc:
        raise ValueError(f"Invalid asset definition '{asset_id}': {exc}") from exc


class AssetCatalog:
    """Registry that loads asset definitions from YAML on demand."""

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = path or os.path.join(os.path.dirname(__file__), "data", "assets.yaml")
        self._data: Dict[str, AssetDefinition] = {}
        self._loaded = False

    @classmethod
    def from_definitions(cls, definitions: Iterable[AssetDefinition]) -> "AssetCatalog":
        catalog = cls()
        for definition in definitions:
            catalog._data[definition.id] = definition
        catalog._loaded = True
        return catalog

    def load(self) -> None:
        if self._loaded:
            return
        if not os.path.exists(self._path):
            raise FileNotFoundError(f"Asset catalog not found: {self._path}")
        with open(self._path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Asset catalog {self._path} must be a mapping of id -> definition")
        for asset_id, block in payload.items():
            self._data[asset_id] = definition_from_mapping(asset_id, block or {})
        self._loaded = True

    def get(self, asset_id: str) -> Optional[AssetDefinition]:
        self.load()
        return self._data.get(asset_id)

    def require(self, asset_id: str) -> AssetDefinition:
        self.load()
        try:
            return self._data[asset_id]
        except KeyError as exc:
            available = ", ".join(sorted(self._data))
            raise KeyError(f"Unknown asset '{asset_id}'. Available: {available}") from exc

    def __contains__(self, asset_id: object) -> bool:
        self.load()
        return asset_id in self._data

    def __len__(self) -> int:
        self.load()
        return len(self._data)


_catalog: Optional[AssetCatalog] = None


def get_catalog(path: Optional[str] = None) -> AssetCatalog:
    global _catalog
    if _catalog is None or path is not None:
        _catalog = AssetCatalog(path=path)
    return _catalog


def get_asset_by_id(asset_id: str) -> Optional[AssetDefinition]:
    return get_catalog().get(asset_id)


__all__ = [
    "AssetCatalog",
    "AssetDefinition",
    "AttackPattern",
    "CounterattackPattern",
    "definition_from_mapping",
    "get_asset_by_id",
    "get_catalog",
]
