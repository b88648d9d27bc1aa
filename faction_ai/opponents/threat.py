"""Threat assessment against rival factions.

Enemy assets are scored relative to a reference system: stronger, better
armed, closer and healthier assets are more threatening. Stealthed assets
contribute to the danger totals but never appear in the visible asset lists;
their number is only estimated from the enemy's cunning rating.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence

from ..assets import AssetCatalog, AssetDefinition, get_catalog
from ..dice import average_damage
from ..game_models import AssetCategory, Faction, FactionAsset, StarSystem, index_systems
from ..map.coordinates import hex_distance
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

logger = logging.getLogger(__name__)

DANGER_CALIBRATION = 100.0
MILITARY_WEIGHT = 0.5
COVERT_WEIGHT = 0.3
ECONOMIC_WEIGHT = 0.2
THREATENED_AT = 4.0
RANGE_WINDOW = 2


def asset_threat_score(asset: FactionAsset, definition: AssetDefinition, distance: int) -> float:
    """Threat an enemy asset poses to a system ``distance`` hexes away."""
    score = definition.rating * 3 + asset.hp * 0.5
    if definition.attack is not None:
        score += 5 + average_damage(definition.attack.damage)
    if definition.counterattack is not None:
        score += 2
    score *= max(0.2, 1 - distance * 0.2)
    if asset.stealthed:
        score *= 0.7
    if asset.max_hp <= 0:
        return 0.0
    return score * (asset.hp / asset.max_hp)


def _faction_threat(
    enemy: Faction,
    reference: StarSystem,
    system_map: Mapping[str, StarSystem],
    catalog: AssetCatalog,
) -> FactionThreat:
    visible: List[AssetThreat] = []
    by_category: Dict[AssetCategory, float] = {
        AssetCategory.FORCE: 0.0,
        AssetCategory.CUNNING: 0.0,
        AssetCategory.WEALTH: 0.0,
    }
    closest: Optional[int] = None
    in_range = 0

    for asset in enemy.assets:
        definition = catalog.get(asset.definition_id)
        if definition is None:
            logger.debug("Ignoring %s asset %s: unknown definition", enemy.id, asset.id)
            continue
        located = system_map.get(asset.location)
        if located is None:
            logger.debug("Ignoring %s asset %s: unknown location %s", enemy.id, asset.id, asset.location)
            continue

        distance = hex_distance(located.coordinates, reference.coordinates)
        if closest is None or distance < closest:
            closest = distance
        if distance <= RANGE_WINDOW:
            in_range += 1

        score = asset_threat_score(asset, definition, distance)
        by_category[definition.category] += score
        if not asset.stealthed:
            visible.append(
                AssetThreat(
                    asset_id=asset.id,
                    asset_name=definition.name,
                    faction_id=enemy.id,
                    category=definition.category,
                    location=asset.location,
                    distance=distance,
                    threat_score=score,
                    can_attack=definition.attack is not None,
                    attack_damage=definition.attack.damage_text if definition.attack else None,
                    is_stealthed=False,
                )
            )

    attrs = enemy.attributes
    military = by_category[AssetCategory.FORCE] + attrs.force * 2
    covert = by_category[AssetCategory.CUNNING] + attrs.cunning * 2
    economic = by_category[AssetCategory.WEALTH] + attrs.wealth * 2

    return FactionThreat(
        faction_id=enemy.id,
        faction_name=enemy.name,
        force=attrs.force,
        cunning=attrs.cunning,
        wealth=attrs.wealth,
        military_threat=military,
        covert_threat=covert,
        economic_threat=economic,
        total_threat=military + covert + economic,
        visible_assets=tuple(visible),
        estimated_stealthed_assets=attrs.cunning // 2,
        closest_asset_distance=closest if closest is not None else -1,
        assets_in_range=in_range,
    )


def _defense_level(danger: float) -> DefenseLevel:
    if danger < 1:
        return DefenseLevel.NONE
    if danger < 3:
        return DefenseLevel.MINIMAL
    if danger < 5:
        return DefenseLevel.MODERATE
    if danger < 7:
        return DefenseLevel.HEAVY
    return DefenseLevel.CRITICAL


def _normalise(raw: float) -> float:
    return min(10.0, raw / DANGER_CALIBRATION * 10)


def assess_system_threat(
    system_id: str,
    assessing_faction_id: str,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> SystemThreatAssessment:
    """Danger posed to one system by every faction other than the assessor.

    Unknown systems yield a zero assessment named ``"Unknown"``.
    """
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    system = system_map.get(system_id)
    if system is None:
        return SystemThreatAssessment(system_id=system_id, system_name="Unknown")

    threats = [
        _faction_threat(enemy, system, system_map, catalog)
        for enemy in factions
        if enemy.id != assessing_faction_id
    ]

    military = covert = economic = 0.0
    immediate: List[AssetThreat] = []
    for threat in threats:
        military += threat.military_threat
        covert += threat.covert_threat
        economic += threat.economic_threat
        immediate.extend(a for a in threat.visible_assets if a.distance <= 1 and a.can_attack)

    military_n = _normalise(military)
    covert_n = _normalise(covert)
    economic_n = _normalise(economic)
    danger = military_n * MILITARY_WEIGHT + covert_n * COVERT_WEIGHT + economic_n * ECONOMIC_WEIGHT

    immediate_sum = sum(a.threat_score for a in immediate)
    return SystemThreatAssessment(
        system_id=system_id,
        system_name=system.name,
        danger_level=danger,
        military_danger=military_n,
        covert_danger=covert_n,
        economic_danger=economic_n,
        faction_threats=tuple(threats),
        immediate_threats=tuple(immediate),
        recommended_defense_level=_defense_level(danger),
        should_retreat=len(immediate) >= 3 or immediate_sum > 50,
    )


def get_immediate_attack_threats(
    system_id: str,
    assessing_faction_id: str,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> List[AssetThreat]:
    """Visible attackers within one hex, most dangerous first."""
    assessment = assess_system_threat(system_id, assessing_faction_id, factions, systems, catalog)
    return sorted(assessment.immediate_threats, key=lambda a: a.threat_score, reverse=True)


def _posture(ratio: float) -> Posture:
    if ratio > 1.5:
        return Posture.TURTLE
    if ratio > 1.0:
        return Posture.DEFENSIVE
    if ratio > 0.5:
        return Posture.BALANCED
    return Posture.AGGRESSIVE


def generate_sector_threat_overview(
    faction_id: str,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> SectorThreatOverview:
    """Assess the homeworld and every system holding one of the faction's assets."""
    catalog = catalog or get_catalog()
    faction = next((f for f in factions if f.id == faction_id), None)
    if faction is None:
        return SectorThreatOverview(faction_id=faction_id)

    occupied: List[str] = [faction.homeworld]
    for asset in faction.assets:
        if asset.location not in occupied:
            occupied.append(asset.location)

    threatened: List[str] = []
    safe: List[str] = []
    system_threats: Dict[str, SystemThreatInfo] = {}
    danger_sum = 0.0
    for system_id in occupied:
        assessment = assess_system_threat(system_id, faction_id, factions, systems, catalog)
        danger_sum += assessment.danger_level
        system_threats[system_id] = SystemThreatInfo(
            system_id=system_id,
            overall_danger_level=assessment.danger_level * 10,
            military_danger=assessment.military_danger * 10,
            covert_danger=assessment.covert_danger * 10,
            economic_danger=assessment.economic_danger * 10,
        )
        if assessment.danger_level >= THREATENED_AT:
            threatened.append(system_id)
        else:
            safe.append(system_id)

    overall = danger_sum / len(occupied) * 10

    system_map = index_systems(systems)
    primary = None
    homeworld = system_map.get(faction.homeworld)
    if homeworld is not None:
        best = 0.0
        for enemy in factions:
            if enemy.id == faction_id:
                continue
            threat = _faction_threat(enemy, homeworld, system_map, catalog)
            if threat.total_threat > best:
                best = threat.total_threat
                primary = threat

    ratio = 0.0
    if primary is not None:
        strength = faction.attributes.total * 5
        ratio = primary.total_threat / strength if strength > 0 else math.inf

    logger.debug(
        "Threat overview for %s: overall %.1f, %d threatened, posture %s",
        faction_id, overall, len(threatened), _posture(ratio).value,
    )
    return SectorThreatOverview(
        faction_id=faction_id,
        primary_threat=primary,
        threatened_systems=tuple(threatened),
        safe_systems=tuple(safe),
        overall_threat_level=overall,
        recommended_posture=_posture(ratio),
        system_threats=system_threats,
    )


def calculate_defensive_strength(
    system_id: str,
    faction: Faction,
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> float:
    """Defensive value of the faction's own assets at or next to a system."""
    catalog = catalog or get_catalog()
    system_map = index_systems(systems)
    reference = system_map.get(system_id)
    if reference is None:
        return 0.0

    strength = 0.0
    for asset in faction.assets:
        definition = catalog.get(asset.definition_id)
        located = system_map.get(asset.location)
        if definition is None or located is None:
            continue
        distance = hex_distance(located.coordinates, reference.coordinates)
        if distance > 1:
            continue
        value = float(asset.hp)
        if definition.counterattack is not None:
            value += average_damage(definition.counterattack.damage)
        if definition.is_facility:
            value *= 1.2
        if distance == 1:
            value *= 0.5
        strength += value

    if system_id == faction.homeworld:
        strength *= 1.3
    return strength


def should_consider_retreat(
    system_id: str,
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    catalog: Optional[AssetCatalog] = None,
) -> RetreatAdvice:
    assessment = assess_system_threat(system_id, faction.id, factions, systems, catalog)
    defense = calculate_defensive_strength(system_id, faction, systems, catalog)
    threat_sum = sum(a.threat_score for a in assessment.immediate_threats)

    ratio = threat_sum / defense if defense > 0 else math.inf

    if ratio > 3:
        return RetreatAdvice(True, "Overwhelming enemy force, retreat recommended", Urgency.CRITICAL)
    if ratio > 2:
        return RetreatAdvice(True, "Significant enemy advantage, retreat advised", Urgency.HIGH)
    if ratio > 1.5:
        return RetreatAdvice(
            assessment.danger_level > 6,
            "Enemy has the advantage, retreat if high value assets are at risk",
            Urgency.MEDIUM,
        )
    if ratio > 1:
        return RetreatAdvice(False, "Slight enemy advantage, hold position with caution", Urgency.LOW)
    return RetreatAdvice(False, "Defensive position is strong", Urgency.LOW)


__all__ = [
    "asset_threat_score",
    "assess_system_threat",
    "calculate_defensive_strength",
    "generate_sector_threat_overview",
    "get_immediate_attack_threats",
    "should_consider_retreat",
]
