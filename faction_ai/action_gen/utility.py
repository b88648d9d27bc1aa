"""Utility scoring for candidate actions.

Score = base utility x base_weight + tag modifier x tag_weight
        + goal synergy x goal_weight, floored at zero.

Base utility looks at the tactical situation (enemies at source and target,
danger levels from the threat overview, strategic value of the system).
The tag modifier comes from the tag affinity table and the goal synergy from
the supplied strategic intent.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..assets import AssetCatalog, AssetDefinition, get_catalog
from ..context import Context
from ..dice import average_damage
from ..game_models import Faction, StarSystem, index_systems
from ..influence import calculate_system_strategic_value
from ..intent import PrimaryFocus, StrategicIntent
from ..tags import tag_action_biases
from .schema import (
    ActionType,
    AttackAction,
    CandidateAction,
    DefendAction,
    ExpandAction,
    MoveAction,
    ScoredAction,
    target_location_of,
)


@dataclass(frozen=True)
class ScorerConfig:
    base_weight: float = 1.0
    tag_weight: float = 1.0
    goal_weight: float = 1.0
    min_score_threshold: float = 0.0


DEFAULT_SCORER_CONFIG = ScorerConfig()

_BASE_UTILITY = {
    ActionType.MOVE: 15.0,
    ActionType.ATTACK: 50.0,
    ActionType.EXPAND: 40.0,
    ActionType.DEFEND: 5.0,
}

# focus -> action type -> (synergy, reason)
_FOCUS_SYNERGY: Dict[PrimaryFocus, Dict[ActionType, Tuple[float, str]]] = {
    PrimaryFocus.MILITARY: {
        ActionType.ATTACK: (40, "military focus strongly favors attacks"),
        ActionType.MOVE: (15, "military values positioning"),
        ActionType.DEFEND: (-5, "military prefers offense"),
    },
    PrimaryFocus.ECONOMIC: {
        ActionType.EXPAND: (25, "economic focus favors expansion"),
        ActionType.DEFEND: (10, "economic focus protects assets"),
    },
    PrimaryFocus.COVERT: {
        ActionType.ATTACK: (30, "covert focus supports strikes"),
        ActionType.MOVE: (15, "covert focus values positioning"),
    },
    PrimaryFocus.EXPANSION: {
        ActionType.EXPAND: (35, "expansion focus strongly favors new bases"),
        ActionType.MOVE: (20, "expansion focus values movement"),
        ActionType.ATTACK: (15, "clearing path for expansion"),
    },
    PrimaryFocus.DEFENSIVE: {
        ActionType.DEFEND: (25, "defensive focus favors defense"),
        ActionType.ATTACK: (-10, "defensive focus discourages attacks"),
    },
    PrimaryFocus.BALANCED: {
        ActionType.ATTACK: (15, "balanced approach allows attacks"),
        ActionType.MOVE: (10, "balanced values flexibility"),
    },
}

ATTACK_POSITION_BONUS = 60
ENEMY_BASE_BONUS = 25
HEALTHY_MOVER_BONUS = 15
WEAK_ENEMY_BONUS = 20
WEAK_ENEMY_HP = 6
APPROACH_BONUS = 30
NON_COMBAT_PENALTY = 20
EXPANDING_TERRITORY_BONUS = 10
RETREAT_BONUS = 25
STAY_AND_FIGHT_PENALTY = 30
STRATEGIC_LOCATION_BONUS = 8
STRATEGIC_LOCATION_AT = 20.0
SAFE_DANGER_BELOW = 30.0


@dataclass(frozen=True)
class _Part:
    value: float
    reasoning: str


def _joined(reasons: List[str], fallback: str) -> str:
    return ", ".join(reasons) if reasons else fallback


def _visible_enemy_assets(faction: Faction, factions: Sequence[Faction]):
    for enemy in factions:
        if enemy.id == faction.id:
            continue
        for asset in enemy.assets:
            if not asset.stealthed:
                yield enemy, asset


def _strategic_value(system_id: str, faction: Faction, systems: Sequence[StarSystem], context: Context) -> float:
    system = index_systems(systems).get(system_id)
    if system is None:
        return 0.0
    return calculate_system_strategic_value(system, faction, context.influence_map, systems)


def _score_move(
    action: MoveAction,
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    context: Context,
    catalog: AssetCatalog,
) -> _Part:
    score = _BASE_UTILITY[ActionType.MOVE]
    reasons: List[str] = []

    mover = faction.find_asset(action.acting_asset_id)
    mover_def: Optional[AssetDefinition] = catalog.get(mover.definition_id) if mover else None
    attacks = mover_def is not None and mover_def.attack is not None

    enemies_at_target = 0
    enemy_hp_at_target = 0
    enemy_base_at_target = False
    enemies_at_source = 0
    attackable_at_target = False
    if mover_def is not None:
        for _, asset in _visible_enemy_assets(faction, factions):
            if asset.location == action.target_location:
                enemies_at_target += 1
                enemy_hp_at_target += asset.hp
                enemy_def = catalog.get(asset.definition_id)
                if enemy_def is not None and enemy_def.is_base_of_influence:
                    enemy_base_at_target = True
                if attacks and enemy_def is not None and enemy_def.category == mover_def.attack.defender:
                    attackable_at_target = True
            if asset.location == action.source_location:
                enemies_at_source += 1

    if attacks and attackable_at_target:
        score += ATTACK_POSITION_BONUS
        reasons.append("attack position")
        if enemy_base_at_target:
            score += ENEMY_BASE_BONUS
            reasons.append("enemy base")
        if mover is not None and mover.hp >= mover.max_hp * 0.6:
            score += HEALTHY_MOVER_BONUS
            reasons.append("healthy attacker")
        if enemy_hp_at_target <= WEAK_ENEMY_HP:
            score += WEAK_ENEMY_BONUS
            reasons.append("weak enemy")
    elif attacks and enemies_at_target > 0:
        score += APPROACH_BONUS
        reasons.append("approaching enemies")

    if not attacks and enemies_at_target > 0:
        score -= NON_COMBAT_PENALTY
        reasons.append("non-combat asset avoiding enemies")

    target_hex = context.influence_map.hexes.get(action.target_location)
    if target_hex is not None and target_hex.controlling_faction_id != faction.id and enemies_at_target == 0:
        score += EXPANDING_TERRITORY_BONUS
        reasons.append("expanding territory")

    target_danger = context.threat_overview.danger_at(action.target_location)
    if mover is not None and mover.hp < mover.max_hp * 0.4 and enemies_at_source > 0:
        if target_danger is None or target_danger < SAFE_DANGER_BELOW:
            score += RETREAT_BONUS
            reasons.append("retreating damaged asset")

    if attacks and enemies_at_source > 0 and enemies_at_target == 0:
        score -= STAY_AND_FIGHT_PENALTY
        reasons.append("stay and fight")

    if _strategic_value(action.target_location, faction, systems, context) >= STRATEGIC_LOCATION_AT:
        score += STRATEGIC_LOCATION_BONUS
        reasons.append("strategic location")

    return _Part(max(0.0, score), _joined(reasons, "standard movement"))


def _score_attack(
    action: AttackAction,
    faction: Faction,
    factions: Sequence[Faction],
    context: Context,
    catalog: AssetCatalog,
) -> _Part:
    attacker = faction.find_asset(action.acting_asset_id)
    attacker_def = catalog.get(attacker.definition_id) if attacker else None
    target_faction = next((f for f in factions if f.id == action.target_faction_id), None)
    target = target_faction.find_asset(action.target_asset_id) if target_faction else None
    target_def = catalog.get(target.definition_id) if target else None
    if attacker is None or attacker_def is None or target is None or target_def is None:
        return _Part(0.0, "invalid target")

    score = _BASE_UTILITY[ActionType.ATTACK]
    reasons: List[str] = []

    expected = average_damage(attacker_def.attack.damage) if attacker_def.attack else 0.0
    if expected >= target.hp:
        score += 40
        reasons.append("likely kill shot")
    elif expected >= target.hp * 0.7:
        score += 25
        reasons.append("heavy damage expected")

    if target.hp <= 3:
        score += 30
        reasons.append("target near destruction")
    elif target.hp <= 5:
        score += 15
        reasons.append("target weakened")

    if target_def.cost >= 15:
        score += 25
        reasons.append("high-value target")
    elif target_def.cost >= 8:
        score += 15
        reasons.append("moderate-value target")
    elif target_def.cost >= 4:
        score += 8
        reasons.append("reasonable target")

    if target_def.is_base_of_influence:
        score += 20
        reasons.append("targeting enemy base")

    hp_ratio = attacker.hp / max(1, target.hp)
    if hp_ratio >= 2:
        score += 25
        reasons.append("strong HP advantage")
    elif hp_ratio >= 1.3:
        score += 15
        reasons.append("HP advantage")
    elif hp_ratio < 0.7:
        score -= 10
        reasons.append("HP disadvantage")

    if target_def.counterattack is not None:
        counter = average_damage(target_def.counterattack.damage)
        if counter >= attacker.hp:
            score -= 20
            reasons.append("risky counterattack")
        elif counter >= attacker.hp * 0.5:
            score -= 8
            reasons.append("moderate counterattack risk")

    danger = context.threat_overview.danger_at(action.source_location)
    if danger is not None and danger < SAFE_DANGER_BELOW:
        score += 10
        reasons.append("favorable battlefield")

    if attacker.hp <= 2 and attacker.max_hp > 4:
        score -= 10
        reasons.append("attacker weakened")
    if attacker.hp >= attacker.max_hp * 0.8:
        score += 10
        reasons.append("attacker healthy")

    return _Part(max(0.0, score), _joined(reasons, "standard attack"))


def _score_expand(
    action: ExpandAction,
    faction: Faction,
    systems: Sequence[StarSystem],
    context: Context,
) -> _Part:
    score = _BASE_UTILITY[ActionType.EXPAND]
    reasons: List[str] = []

    if _strategic_value(action.target_location, faction, systems, context) >= 25:
        score += 20
        reasons.append("high strategic value")

    hex_inf = context.influence_map.hexes.get(action.target_location)
    if hex_inf is not None and hex_inf.controlling_faction_id == faction.id:
        score += 15
        reasons.append("strong existing presence")

    if faction.fac_creds > 10:
        score += 10
        reasons.append("can afford expansion")
    if faction.fac_creds < 5:
        score -= 20
        reasons.append("low on credits")

    return _Part(max(0.0, score), _joined(reasons, "standard expansion"))


def _score_defend(action: DefendAction, faction: Faction, context: Context) -> _Part:
    score = _BASE_UTILITY[ActionType.DEFEND]
    reasons: List[str] = []

    danger = context.threat_overview.danger_at(action.source_location)
    if danger is not None and danger > 70:
        score += 25
        reasons.append("high threat level")
    elif danger is not None and danger > 50:
        score += 12
        reasons.append("moderate threat")

    if action.source_location == faction.homeworld:
        if danger is not None and danger > 40:
            score += 15
            reasons.append("defending threatened homeworld")
        else:
            score += 5
            reasons.append("homeworld garrison")

    if any(a.location == action.source_location and a.hp < a.max_hp for a in faction.assets):
        score += 5
        reasons.append("protecting damaged assets")

    return _Part(max(0.0, score), _joined(reasons, "passive stance"))


def calculate_base_utility(
    action: CandidateAction,
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    context: Context,
    catalog: Optional[AssetCatalog] = None,
) -> Tuple[float, str]:
    catalog = catalog or get_catalog()
    if isinstance(action, MoveAction):
        part = _score_move(action, faction, factions, systems, context, catalog)
    elif isinstance(action, AttackAction):
        part = _score_attack(action, faction, factions, context, catalog)
    elif isinstance(action, ExpandAction):
        part = _score_expand(action, faction, systems, context)
    elif isinstance(action, DefendAction):
        part = _score_defend(action, faction, context)
    else:
        raise TypeError(f"Unsupported action variant: {type(action).__name__}")
    return part.value, part.reasoning


def calculate_tag_modifier(action: CandidateAction, faction: Faction) -> Tuple[float, str]:
    modifier = 0.0
    reasons: List[str] = []
    for tag, bias in tag_action_biases(faction.tags, action.action_type.value):
        modifier += bias.value
        reasons.append(f"{tag.value} {bias.reason}")
    return modifier, _joined(reasons, "no tag modifiers")


def calculate_goal_synergy(action: CandidateAction, intent: StrategicIntent) -> Tuple[float, str]:
    synergy = 0.0
    reasons: List[str] = []
    kind = action.action_type

    entry = _FOCUS_SYNERGY.get(intent.primary_focus, {}).get(kind)
    if entry is not None:
        synergy += entry[0]
        reasons.append(entry[1])

    if isinstance(action, AttackAction) and action.target_faction_id == intent.target_faction_id:
        synergy += 30
        reasons.append("targeting primary threat")
    if kind == ActionType.MOVE and intent.target_faction_id:
        synergy += 10
        reasons.append("moving toward threat")

    target = target_location_of(action)
    if action.source_location in intent.priority_system_ids or (
        target is not None and target in intent.priority_system_ids
    ):
        synergy += 10
        reasons.append("priority system")

    if intent.aggression_level > 70:
        if kind == ActionType.ATTACK:
            synergy += 25
            reasons.append("high aggression")
        elif kind == ActionType.DEFEND:
            synergy -= 10
            reasons.append("too aggressive to defend")
    elif intent.aggression_level > 50 and kind == ActionType.ATTACK:
        synergy += 10
        reasons.append("moderate aggression")
    if intent.aggression_level < 30 and kind == ActionType.DEFEND:
        synergy += 15
        reasons.append("low aggression favors defense")

    return synergy, _joined(reasons, "no goal synergy")


def score_action(
    action: CandidateAction,
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    context: Context,
    config: Optional[ScorerConfig] = None,
    catalog: Optional[AssetCatalog] = None,
) -> ScoredAction:
    config = config or DEFAULT_SCORER_CONFIG
    base, base_why = calculate_base_utility(action, faction, factions, systems, context, catalog)
    tag, tag_why = calculate_tag_modifier(action, faction)
    goal, goal_why = calculate_goal_synergy(action, context.strategic_intent)

    score = base * config.base_weight + tag * config.tag_weight + goal * config.goal_weight
    return ScoredAction(
        action=action,
        base_utility=base,
        tag_modifier=tag,
        goal_synergy=goal,
        score=max(0.0, score),
        reasoning=f"Base: {base_why}. Tags: {tag_why}. Goal: {goal_why}",
    )


__all__ = [
    "DEFAULT_SCORER_CONFIG",
    "ScorerConfig",
    "calculate_base_utility",
    "calculate_goal_synergy",
    "calculate_tag_modifier",
    "score_action",
]
