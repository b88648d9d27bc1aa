"""Candidate action generators.

Each generator is a pure function of the faction snapshot and emits
candidates in a deterministic order (asset order, then system order).
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..assets import AssetCatalog, AssetDefinition, get_catalog
from ..game_models import (
    AssetType,
    Faction,
    FactionAsset,
    FactionTag,
    StarSystem,
    index_systems,
)
from ..map.coordinates import are_adjacent
from .schema import AttackAction, CandidateAction, DefendAction, ExpandAction, MoveAction

logger = logging.getLogger(__name__)

MAX_DEFEND_NAMES = 3


def can_move(faction: Faction, definition: AssetDefinition) -> bool:
    return (
        definition.mobile
        or definition.type == AssetType.STARSHIP
        or faction.has_tag(FactionTag.MERCENARY_GROUP)
    )


def movement_destinations(source_id: str, systems: Sequence[StarSystem]) -> List[str]:
    """Systems one move away: route targets first, then hex neighbours."""
    system_map = index_systems(systems)
    source = system_map.get(source_id)
    if source is None:
        return []
    out: List[str] = []
    for route in source.routes:
        if route.system_id in system_map and route.system_id != source_id and route.system_id not in out:
            out.append(route.system_id)
    for system in systems:
        if system.id == source_id or system.id in out:
            continue
        if are_adjacent(source.coordinates, system.coordinates):
            out.append(system.id)
    return out


def generate_move_actions(
    faction: Faction,
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> List[MoveAction]:
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    out: List[MoveAction] = []
    for asset in faction.assets:
        definition = catalog.get(asset.definition_id)
        if definition is None or not can_move(faction, definition):
            continue
        for dest_id in movement_destinations(asset.location, systems):
            out.append(
                MoveAction(
                    acting_asset_id=asset.id,
                    acting_asset_name=definition.name,
                    source_location=asset.location,
                    target_location=dest_id,
                    description=f"Move {definition.name} to {system_map[dest_id].name}",
                )
            )
    return out


def _visible_enemies_by_location(
    faction: Faction,
    factions: Sequence[Faction],
    catalog: AssetCatalog,
) -> Dict[str, List[Tuple[Faction, FactionAsset, AssetDefinition]]]:
    by_location: Dict[str, List[Tuple[Faction, FactionAsset, AssetDefinition]]] = {}
    for enemy in factions:
        if enemy.id == faction.id:
            continue
        for asset in enemy.assets:
            if asset.stealthed:
                continue
            definition = catalog.get(asset.definition_id)
            if definition is None:
                continue
            by_location.setdefault(asset.location, []).append((enemy, asset, definition))
    return by_location


def generate_attack_actions(
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> List[AttackAction]:
    """One candidate per (own attacker, visible enemy asset at the same system)."""
    catalog = catalog or get_catalog()
    enemies = _visible_enemies_by_location(faction, factions, catalog)
    out: List[AttackAction] = []
    for asset in faction.assets:
        definition = catalog.get(asset.definition_id)
        if definition is None or definition.attack is None:
            continue
        for enemy, target, target_def in enemies.get(asset.location, ()):
            out.append(
                AttackAction(
                    acting_asset_id=asset.id,
                    acting_asset_name=definition.name,
                    source_location=asset.location,
                    target_faction_id=enemy.id,
                    target_asset_id=target.id,
                    target_asset_name=target_def.name,
                    description=f"{definition.name} attacks {enemy.name}'s {target_def.name}",
                )
            )
    return out


def _occupied_systems(faction: Faction) -> List[str]:
    seen: List[str] = []
    for asset in faction.assets:
        if asset.location not in seen:
            seen.append(asset.location)
    return seen


def generate_expand_actions(
    faction: Faction,
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> List[ExpandAction]:
    """Expand where the faction has assets but no Base of Influence.

    The homeworld always counts as holding one.
    """
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    anchored = set()
    for asset in faction.assets:
        definition = catalog.get(asset.definition_id)
        if definition is not None and definition.is_base_of_influence:
            anchored.add(asset.location)
    anchored.add(faction.homeworld)
    out: List[ExpandAction] = []
    for system_id in _occupied_systems(faction):
        if system_id in anchored:
            continue
        system = system_map.get(system_id)
        name = system.name if system is not None else system_id
        out.append(ExpandAction(source_location=system_id, description=f"Expand influence on {name}"))
    return out


def generate_defend_actions(
    faction: Faction,
    systems: Sequence[StarSystem] = (),
    catalog: Optional[AssetCatalog] = None,
) -> List[DefendAction]:
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    out: List[DefendAction] = []
    for system_id in _occupied_systems(faction):
        here = [a for a in faction.assets if a.location == system_id]
        names = []
        for asset in here[:MAX_DEFEND_NAMES]:
            definition = catalog.get(asset.definition_id)
            names.append(definition.name if definition is not None else "Unknown")
        more = "..." if len(here) > MAX_DEFEND_NAMES else ""
        system = system_map.get(system_id)
        where = system.name if system is not None else system_id
        out.append(DefendAction(source_location=system_id, description=f"Defend {', '.join(names)}{more} at {where}"))
    return out


def generate_all_actions(
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> List[CandidateAction]:
    actions: List[CandidateAction] = []
    actions.extend(generate_move_actions(faction, systems, catalog))
    actions.extend(generate_attack_actions(faction, factions, systems, catalog))
    actions.extend(generate_expand_actions(faction, systems, catalog))
    actions.extend(generate_defend_actions(faction, systems, catalog))
    logger.debug("Generated %d candidate actions for %s", len(actions), faction.id)
    return actions


__all__ = [
    "can_move",
    "generate_all_actions",
    "generate_attack_actions",
    "generate_defend_actions",
    "generate_expand_actions",
    "generate_move_actions",
    "movement_destinations",
]
