from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Union


class ActionType(str, Enum):
    MOVE = "move"
    ATTACK = "attack"
    EXPAND = "expand"
    DEFEND = "defend"


@dataclass(frozen=True)
class MoveAction:
    action_type: ClassVar[ActionType] = ActionType.MOVE

    acting_asset_id: str
    acting_asset_name: str
    source_location: str
    target_location: str
    description: str = ""


@dataclass(frozen=True)
class AttackAction:
    action_type: ClassVar[ActionType] = ActionType.ATTACK

    acting_asset_id: str
    acting_asset_name: str
    source_location: str
    target_faction_id: str
    target_asset_id: str
    target_asset_name: str
    description: str = ""


@dataclass(frozen=True)
class ExpandAction:
    action_type: ClassVar[ActionType] = ActionType.EXPAND
    acting_asset_name: ClassVar[str] = "Faction"

    source_location: str
    description: str = ""

    @property
    def target_location(self) -> str:
        return self.source_location


@dataclass(frozen=True)
class DefendAction:
    action_type: ClassVar[ActionType] = ActionType.DEFEND
    acting_asset_name: ClassVar[str] = "Garrison"

    source_location: str
    description: str = ""


CandidateAction = Union[MoveAction, AttackAction, ExpandAction, DefendAction]


def target_location_of(action: CandidateAction) -> Optional[str]:
    """Destination system of a Move or Expand, ``None`` for other actions."""
    if isinstance(action, (MoveAction, ExpandAction)):
        return action.target_location
    return None


def action_to_dict(action: CandidateAction) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": action.action_type.value, "acting_asset_name": action.acting_asset_name}
    out.update(asdict(action))
    target = target_location_of(action)
    if target is not None:
        out["target_location"] = target
    return out


@dataclass(frozen=True)
class ScoredAction:
    action: CandidateAction
    base_utility: float
    tag_modifier: float
    goal_synergy: float
    score: float
    reasoning: str

    @property
    def action_type(self) -> ActionType:
        return self.action.action_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": action_to_dict(self.action),
            "base_utility": self.base_utility,
            "tag_modifier": self.tag_modifier,
            "goal_synergy": self.goal_synergy,
            "score": self.score,
            "reasoning": self.reasoning,
        }


@dataclass(frozen=True)
class ScoredActionResult:
    faction_id: str
    scored_actions: Tuple[ScoredAction, ...] = ()
    actions_by_type: Mapping[ActionType, Tuple[ScoredAction, ...]] = field(default_factory=dict)
    best_action: Optional[ScoredAction] = None
    reasoning: str = ""
    generated_count: int = 0
