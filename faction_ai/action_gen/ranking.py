"""Rank scored actions and project the decision for one faction turn.

A faction takes a single action type per turn, possibly with several assets,
so the projections here group by :class:`ActionType`.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..assets import AssetCatalog
from ..context import Context
from ..game_models import Faction, StarSystem
from .actions import generate_all_actions
from .schema import ActionType, ScoredAction, ScoredActionResult
from .utility import DEFAULT_SCORER_CONFIG, ScorerConfig, score_action

logger = logging.getLogger(__name__)


def score_all_actions(
    faction: Faction,
    factions: Sequence[Faction],
    systems: Sequence[StarSystem],
    context: Context,
    config: Optional[ScorerConfig] = None,
    catalog: Optional[AssetCatalog] = None,
) -> ScoredActionResult:
    """Generate, score, filter and rank every candidate action of ``faction``."""
    config = config or DEFAULT_SCORER_CONFIG
    candidates = generate_all_actions(faction, factions, systems, catalog)
    scored = [
        score_action(action, faction, factions, systems, context, config, catalog)
        for action in candidates
    ]
    kept = [s for s in scored if s.score >= config.min_score_threshold]
    # sort is stable, so equal scores keep generation order
    kept.sort(key=lambda s: s.score, reverse=True)

    by_type: Dict[ActionType, List[ScoredAction]] = {kind: [] for kind in ActionType}
    for s in kept:
        by_type[s.action_type].append(s)

    best = kept[0] if kept else None
    parts = [f"Generated {len(candidates)} potential actions", f"{len(kept)} passed threshold"]
    if best is not None:
        parts.append(f"Best: {best.action.description} (score: {best.score:.0f})")
    else:
        parts.append("No viable actions found")
    reasoning = ". ".join(parts)
    logger.debug("%s: %s", faction.id, reasoning)

    return ScoredActionResult(
        faction_id=faction.id,
        scored_actions=tuple(kept),
        actions_by_type={kind: tuple(items) for kind, items in by_type.items()},
        best_action=best,
        reasoning=reasoning,
        generated_count=len(candidates),
    )


def get_best_action_of_type(result: ScoredActionResult, action_type: ActionType) -> Optional[ScoredAction]:
    actions = result.actions_by_type.get(action_type, ())
    return actions[0] if actions else None


def get_actions_above_threshold(result: ScoredActionResult, threshold: float) -> List[ScoredAction]:
    return [s for s in result.scored_actions if s.score >= threshold]


def get_recommended_action_type(result: ScoredActionResult) -> Optional[ActionType]:
    if result.best_action is None:
        return None
    return result.best_action.action_type


def get_recommended_actions(result: ScoredActionResult) -> List[ScoredAction]:
    """Every ranked action of the recommended type, best first."""
    kind = get_recommended_action_type(result)
    if kind is None:
        return []
    return list(result.actions_by_type.get(kind, ()))


__all__ = [
    "get_actions_above_threshold",
    "get_best_action_of_type",
    "get_recommended_action_type",
    "get_recommended_actions",
    "score_all_actions",
]
