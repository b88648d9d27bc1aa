"""API routes for the faction AI inspector."""

import logging
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..config import scorer_config_from_mapping
from ..influence import compute_influence_map
from ..intent import StrategicIntent
from ..main import recommend
from ..opponents.threat import (
    assess_system_threat,
    generate_sector_threat_overview,
    should_consider_retreat,
)
from ..state.loaders import Scenario, scenario_from_dict
from ..value.profiles import get_available_profiles, get_profile_info

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class ScenarioRequest(BaseModel):
    scenario: Dict[str, Any]
    faction_id: str


class ThreatRequest(ScenarioRequest):
    system_id: Optional[str] = None


class ActionsRequest(ScenarioRequest):
    intent: Optional[Dict[str, Any]] = None
    scorer: Dict[str, Any] = Field(default_factory=dict)
    top_k: int = 10


def _load(req: ScenarioRequest) -> Scenario:
    try:
        scenario = scenario_from_dict(req.scenario)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if scenario.sector.faction(req.faction_id) is None:
        raise HTTPException(status_code=404, detail=f"Faction '{req.faction_id}' not found")
    return scenario


# ============================================================================
# Profiles
# ============================================================================

@router.get("/profiles")
async def list_profiles() -> List[Dict[str, Any]]:
    """List the scorer weight profiles."""
    return [get_profile_info(name) for name in get_available_profiles()]


# ============================================================================
# Analysis
# ============================================================================

@router.post("/influence")
async def influence(req: ScenarioRequest) -> Dict[str, Any]:
    """Influence map for every system from the requesting faction's perspective."""
    scenario = _load(req)
    sector = scenario.sector
    im = compute_influence_map(req.faction_id, sector.factions, sector.systems)
    return {
        "faction_id": im.faction_id,
        "hexes": {sid: asdict(h) for sid, h in im.hexes.items()},
        "friendly_controlled": list(im.friendly_controlled),
        "enemy_controlled": list(im.enemy_controlled),
        "contested": list(im.contested),
        "unoccupied": list(im.unoccupied),
    }


@router.post("/threat")
async def threat(req: ThreatRequest) -> Dict[str, Any]:
    """Sector threat overview, plus a single-system assessment when requested."""
    scenario = _load(req)
    sector = scenario.sector
    faction = sector.faction(req.faction_id)
    out: Dict[str, Any] = {
        "overview": asdict(generate_sector_threat_overview(req.faction_id, sector.factions, sector.systems)),
    }
    if req.system_id:
        out["assessment"] = asdict(assess_system_threat(req.system_id, req.faction_id, sector.factions, sector.systems))
        out["retreat"] = asdict(should_consider_retreat(req.system_id, faction, sector.factions, sector.systems))
    return out


@router.post("/actions")
async def actions(req: ActionsRequest) -> Dict[str, Any]:
    """Ranked candidate actions for one faction turn."""
    scenario = _load(req)
    try:
        config = scorer_config_from_mapping({"scorer": req.scorer})
        intent = StrategicIntent.from_dict(req.intent) if req.intent is not None else None
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    res = recommend(scenario, req.faction_id, intent=intent, config=config, top_k=req.top_k)
    result = res["result"]
    logger.debug("Inspector scored %d actions for %s", result.generated_count, req.faction_id)
    return {
        "faction_id": result.faction_id,
        "generated": result.generated_count,
        "reasoning": result.reasoning,
        "best_action": result.best_action.to_dict() if result.best_action else None,
        "recommended_type": result.best_action.action_type.value if result.best_action else None,
        "actions": [s.to_dict() for s in res["top"]],
        "intent": asdict(res["context"].strategic_intent),
    }
