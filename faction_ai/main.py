"""Faction AI decision entry point.

This module provides the `recommend()` function that runs one faction's
decision cycle. It orchestrates:
- Influence map computation from the faction's perspective
- Sector threat overview
- Candidate generation and utility scoring under a strategic intent
"""
from __future__ import annotations
import logging
from typing import Optional, Dict, Any, Union

from .action_gen.ranking import get_recommended_actions, score_all_actions
from .action_gen.utility import ScorerConfig
from .assets import AssetCatalog
from .context import Context
from .game_models import Sector
from .influence import compute_influence_map
from .intent import StrategicIntent, default_intent
from .opponents.threat import generate_sector_threat_overview
from .state.loaders import Scenario

logger = logging.getLogger(__name__)


def build_context(
    sector: Sector,
    faction_id: str,
    intent: StrategicIntent,
    catalog: Optional[AssetCatalog] = None,
) -> Context:
    influence_map = compute_influence_map(faction_id, sector.factions, sector.systems, catalog)
    overview = generate_sector_threat_overview(faction_id, sector.factions, sector.systems, catalog)
    return Context(influence_map=influence_map, threat_overview=overview, strategic_intent=intent)


def recommend(
    scenario: Union[Scenario, Sector],
    faction_id: str,
    intent: Optional[StrategicIntent] = None,
    config: Optional[ScorerConfig] = None,
    catalog: Optional[AssetCatalog] = None,
    top_k: int = 5,
) -> Dict[str, Any]:
    """
    Run the full analysis for one faction turn. Execution of the chosen
    action is left to the caller.

    Args:
        scenario: Scenario (sector plus intents) or a bare Sector
        faction_id: Faction taking its turn
        intent: Strategic intent; falls back to the scenario's intent for the
            faction, then to a tag-derived balanced intent
        config: Scorer weights; defaults to 1/1/1 with no threshold
        catalog: Asset catalog; the packaged catalog when omitted
        top_k: Number of ranked actions copied into ``top``

    Returns:
        Dict with 'context', 'result', 'top' and 'recommended'

    Raises:
        KeyError: If faction_id is not part of the sector
    """
    if isinstance(scenario, Scenario):
        sector = scenario.sector
        intent = intent or scenario.intent_for(faction_id)
    else:
        sector = scenario

    faction = sector.faction(faction_id)
    if faction is None:
        known = ", ".join(f.id for f in sector.factions)
        raise KeyError(f"Unknown faction '{faction_id}'. Available: {known}")

    intent = intent or default_intent(faction)
    context = build_context(sector, faction_id, intent, catalog)
    result = score_all_actions(faction, sector.factions, sector.systems, context, config, catalog)
    logger.info("%s: %s", faction_id, result.reasoning)

    return {
        "context": context,
        "result": result,
        "top": list(result.scored_actions[:top_k]),
        "recommended": get_recommended_actions(result),
    }


__all__ = ["build_context", "recommend"]
