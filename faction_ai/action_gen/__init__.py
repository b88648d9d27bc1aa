from .schema import (
    ActionType,
    AttackAction,
    CandidateAction,
    DefendAction,
    ExpandAction,
    MoveAction,
    ScoredAction,
    ScoredActionResult,
    action_to_dict,
)
from .actions import (
    generate_all_actions,
    generate_attack_actions,
    generate_defend_actions,
    generate_expand_actions,
    generate_move_actions,
)
from .utility import ScorerConfig, score_action
from .ranking import (
    get_actions_above_threshold,
    get_best_action_of_type,
    get_recommended_action_type,
    get_recommended_actions,
    score_all_actions,
)

__all__ = [
    "ActionType",
    "AttackAction",
    "CandidateAction",
    "DefendAction",
    "ExpandAction",
    "MoveAction",
    "ScoredAction",
    "ScoredActionResult",
    "ScorerConfig",
    "action_to_dict",
    "generate_all_actions",
    "generate_attack_actions",
    "generate_defend_actions",
    "generate_expand_actions",
    "generate_move_actions",
    "get_actions_above_threshold",
    "get_best_action_of_type",
    "get_recommended_action_type",
    "get_recommended_actions",
    "score_action",
    "score_all_actions",
]
