from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone
import json

from ..action_gen.schema import ScoredActionResult, action_to_dict
from ..context import Context


@dataclass
class ActionDiag:
    type: str
    description: str
    score: float
    base_utility: float
    tag_modifier: float
    goal_synergy: float
    reasoning: str
    payload: Dict[str, Any]


@dataclass
class InfluenceDiag:
    friendly_controlled: List[str]
    enemy_controlled: List[str]
    contested: List[str]
    unoccupied: List[str]


@dataclass
class ThreatDiag:
    overall_threat_level: float
    recommended_posture: str
    primary_threat: Optional[str]
    threatened_systems: List[str]
    top_systems: List[Tuple[str, float]] = field(default_factory=list)


@dataclass
class DecisionReport:
    timestamp: str
    faction_id: str
    params: Dict[str, Any]
    intent: Dict[str, Any]
    generated: int
    recommended_type: Optional[str]
    reasoning: str
    top_actions: List[ActionDiag]
    influence_summary: InfluenceDiag | None
    threat_summary: ThreatDiag | None

    def to_json(self) -> str:
        d = asdict(self)
        return json.dumps(d, indent=2, sort_keys=False)

    def to_markdown(self) -> str:
        lines = []
        lines.append(f"# Faction AI Decision Report ({self.faction_id})")
        lines.append(f"- **Timestamp:** {self.timestamp}")
        lines.append(f"- **Focus:** {self.intent.get('primary_focus')}  |  **Aggression:** {self.intent.get('aggression_level')}  |  **Generated:** {self.generated}")
        if self.recommended_type:
            lines.append(f"- **Recommended action type:** `{self.recommended_type}`")
        lines.append(f"- {self.reasoning}")
        lines.append("\n## Top Actions")
        for i, a in enumerate(self.top_actions, 1):
            lines.append(f"{i}. `{a.type}` {a.description}  | score={a.score:.1f}  (base {a.base_utility:.0f}, tags {a.tag_modifier:+.0f}, goal {a.goal_synergy:+.0f})")
            lines.append(f"    - {a.reasoning}")
        if self.influence_summary:
            inf = self.influence_summary
            lines.append("\n## Influence")
            lines.append(f"- friendly: {', '.join(inf.friendly_controlled) or '-'}")
            lines.append(f"- enemy: {', '.join(inf.enemy_controlled) or '-'}")
            lines.append(f"- contested: {', '.join(inf.contested) or '-'}")
            lines.append(f"- unoccupied: {len(inf.unoccupied)} systems")
        if self.threat_summary:
            ts = self.threat_summary
            lines.append("\n## Threat Summary")
            lines.append(f"- overall threat: {ts.overall_threat_level:.1f} | posture: {ts.recommended_posture} | primary threat: {ts.primary_threat or '-'}")
            if ts.top_systems:
                top = ", ".join([f"{sid}:{d:.1f}" for sid, d in ts.top_systems])
                lines.append(f"- most dangerous systems: {top}")
        return "\n".join(lines)


def build_decision_report(
    result: ScoredActionResult,
    context: Context | None,
    params: Dict[str, Any] | None = None,
    top_k: int = 5,
) -> DecisionReport:
    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    top_actions: List[ActionDiag] = []
    for s in result.scored_actions[:top_k]:
        payload = action_to_dict(s.action)
        top_actions.append(ActionDiag(
            type=s.action_type.value,
            description=s.action.description,
            score=float(s.score),
            base_utility=float(s.base_utility),
            tag_modifier=float(s.tag_modifier),
            goal_synergy=float(s.goal_synergy),
            reasoning=s.reasoning,
            payload={k: v for k, v in payload.items() if k not in ("type", "description")},
        ))

    intent: Dict[str, Any] = {}
    influence = None
    threat = None
    if context is not None:
        si = context.strategic_intent
        intent = {
            "primary_focus": si.primary_focus.value,
            "aggression_level": si.aggression_level,
            "target_faction_id": si.target_faction_id,
            "priority_system_ids": list(si.priority_system_ids),
        }
        im = context.influence_map
        influence = InfluenceDiag(
            friendly_controlled=list(im.friendly_controlled),
            enemy_controlled=list(im.enemy_controlled),
            contested=list(im.contested),
            unoccupied=list(im.unoccupied),
        )
        ov = context.threat_overview
        ranked = sorted(
            ((sid, info.overall_danger_level) for sid, info in ov.system_threats.items()),
            key=lambda x: x[1],
            reverse=True,
        )
        threat = ThreatDiag(
            overall_threat_level=float(ov.overall_threat_level),
            recommended_posture=ov.recommended_posture.value,
            primary_threat=ov.primary_threat.faction_id if ov.primary_threat else None,
            threatened_systems=list(ov.threatened_systems),
            top_systems=ranked[:3],
        )

    best = result.best_action
    return DecisionReport(
        timestamp=timestamp,
        faction_id=result.faction_id,
        params=dict(params or {}),
        intent=intent,
        generated=result.generated_count,
        recommended_type=best.action_type.value if best else None,
        reasoning=result.reasoning,
        top_actions=top_actions,
        influence_summary=influence,
        threat_summary=threat,
    )


__all__ = ["ActionDiag", "DecisionReport", "InfluenceDiag", "ThreatDiag", "build_decision_report"]
