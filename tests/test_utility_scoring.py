"""Tests for utility scoring and ranking."""
import pytest

from faction_ai.action_gen.ranking import (
    get_actions_above_threshold,
    get_best_action_of_type,
    get_recommended_action_type,
    get_recommended_actions,
    score_all_actions,
)
from faction_ai.action_gen.schema import (
    ActionType,
    AttackAction,
    DefendAction,
    ExpandAction,
    MoveAction,
)
from faction_ai.action_gen.utility import (
    ScorerConfig,
    calculate_base_utility,
    calculate_goal_synergy,
    calculate_tag_modifier,
    score_action,
)
from faction_ai.game_models import FactionTag, Sector
from faction_ai.intent import PrimaryFocus, StrategicIntent
from faction_ai.main import build_context

from builders import make_asset, make_faction, make_system


def _systems():
    return [
        make_system("h", 0, 0, "Home"),
        make_system("x", 3, 0, "Outpost"),
        make_system("y", 4, 0, "Yonder"),
    ]


def _setup(fac_creds=0, intent=None, red_assets=None, blue_assets=None):
    red = make_faction("red", "h", red_assets if red_assets is not None else [
        make_asset("r1", "force_4_postech_infantry", "x"),
    ], fac_creds=fac_creds)
    blue = make_faction("blue", "y", blue_assets if blue_assets is not None else [
        make_asset("b1", "force_1_security_personnel", "x"),
    ])
    sector = Sector(systems=tuple(_systems()), factions=(red, blue))
    ctx = build_context(sector, "red", intent or StrategicIntent())
    return red, sector, ctx


class TestGoalSynergy:
    def test_military_attack_on_target(self):
        intent = StrategicIntent(PrimaryFocus.MILITARY, 80, "blue")
        attack = AttackAction("r1", "Postech Infantry", "x", "blue", "b1", "Security Personnel")
        value, why = calculate_goal_synergy(attack, intent)
        assert value == 95
        assert why == "military focus strongly favors attacks, targeting primary threat, high aggression"

    def test_defensive_low_aggression_defend(self):
        intent = StrategicIntent(PrimaryFocus.DEFENSIVE, 20)
        assert calculate_goal_synergy(DefendAction("h"), intent)[0] == 40

    def test_move_toward_threat_into_priority_system(self):
        intent = StrategicIntent(PrimaryFocus.BALANCED, 50, "blue", ("x",))
        value, why = calculate_goal_synergy(MoveAction("r1", "Strike Fleet", "h", "x"), intent)
        assert value == 30
        assert "priority system" in why

    def test_no_synergy(self):
        intent = StrategicIntent(PrimaryFocus.MILITARY, 50)
        assert calculate_goal_synergy(ExpandAction("x"), intent) == (0.0, "no goal synergy")


class TestTagModifier:
    def test_tags_can_cancel(self):
        red = make_faction("red", "h", tags=(FactionTag.WARLIKE, FactionTag.EXCHANGE_CONSULATE))
        attack = AttackAction("r1", "a", "x", "blue", "b1", "b")
        value, why = calculate_tag_modifier(attack, red)
        assert value == 0
        assert why == "Warlike favors aggression, Exchange Consulate discourages aggression"

    def test_expansion_tag(self):
        red = make_faction("red", "h", tags=(FactionTag.COLONISTS,))
        assert calculate_tag_modifier(ExpandAction("x"), red) == (15.0, "Colonists favors expansion")

    @pytest.mark.parametrize("tag", [
        FactionTag.EUGENICS_CULT,
        FactionTag.COLONISTS,
        FactionTag.PLUTOCRATIC,
        FactionTag.PRECEPTOR_ARCHIVE,
    ])
    def test_mild_tags_leave_attacks_alone(self, tag):
        red = make_faction("red", "h", tags=(tag,))
        attack = AttackAction("r1", "a", "x", "blue", "b1", "b")
        assert calculate_tag_modifier(attack, red) == (0.0, "no tag modifiers")

    def test_untagged(self):
        red = make_faction("red", "h")
        assert calculate_tag_modifier(DefendAction("h"), red) == (0.0, "no tag modifiers")


class TestBaseUtility:
    def test_expand_with_credits(self):
        red, sector, ctx = _setup(fac_creds=20, blue_assets=[])
        value, why = calculate_base_utility(ExpandAction("x"), red, sector.factions, sector.systems, ctx)
        assert value == 65
        assert why == "strong existing presence, can afford expansion"

    def test_expand_short_of_credits(self):
        red, sector, ctx = _setup(fac_creds=3, blue_assets=[])
        value, why = calculate_base_utility(ExpandAction("x"), red, sector.factions, sector.systems, ctx)
        assert value == 35
        assert "low on credits" in why

    def test_attack_on_weak_target(self):
        red, sector, ctx = _setup()
        attack = AttackAction("r1", "Postech Infantry", "x", "blue", "b1", "Security Personnel")
        value, why = calculate_base_utility(attack, red, sector.factions, sector.systems, ctx)
        assert value == 165
        assert why.split(", ") == [
            "likely kill shot",
            "target near destruction",
            "strong HP advantage",
            "favorable battlefield",
            "attacker healthy",
        ]

    def test_attack_on_vanished_target(self):
        red, sector, ctx = _setup()
        attack = AttackAction("r1", "Postech Infantry", "x", "blue", "gone", "Ghost")
        assert calculate_base_utility(attack, red, sector.factions, sector.systems, ctx) == (0.0, "invalid target")

    def test_attacker_leaving_a_fight(self):
        red, sector, ctx = _setup(red_assets=[make_asset("r1", "force_4_strike_fleet", "x")])
        value, why = calculate_base_utility(
            MoveAction("r1", "Strike Fleet", "x", "y"), red, sector.factions, sector.systems, ctx
        )
        assert "stay and fight" in why

    def test_homeworld_garrison(self):
        red, sector, ctx = _setup(red_assets=[make_asset("r1", "force_1_security_personnel", "h")], blue_assets=[])
        value, why = calculate_base_utility(DefendAction("h"), red, sector.factions, sector.systems, ctx)
        assert value == 10
        assert why == "homeworld garrison"

    def test_unknown_variant(self):
        red, sector, ctx = _setup()
        with pytest.raises(TypeError):
            calculate_base_utility(object(), red, sector.factions, sector.systems, ctx)


class TestScoreAction:
    def test_weighted_sum_and_reasoning(self):
        red, sector, ctx = _setup(fac_creds=20, blue_assets=[])
        cfg = ScorerConfig(base_weight=2.0)
        scored = score_action(ExpandAction("x"), red, sector.factions, sector.systems, ctx, cfg)
        assert scored.base_utility == 65
        assert scored.score == pytest.approx(65 * 2 + scored.tag_modifier + scored.goal_synergy)
        assert scored.reasoning == (
            "Base: strong existing presence, can afford expansion. Tags: no tag modifiers. Goal: no goal synergy"
        )

    def test_score_never_negative(self):
        intent = StrategicIntent(PrimaryFocus.BALANCED, 90)
        red, sector, ctx = _setup(intent=intent, blue_assets=[])
        cfg = ScorerConfig(base_weight=0.0)
        scored = score_action(DefendAction("x"), red, sector.factions, sector.systems, ctx, cfg)
        assert scored.goal_synergy == -10
        assert scored.score == 0.0


class TestRanking:
    def test_sorted_descending_and_grouped(self):
        red, sector, ctx = _setup(fac_creds=20)
        result = score_all_actions(red, sector.factions, sector.systems, ctx)
        scores = [s.score for s in result.scored_actions]
        assert scores == sorted(scores, reverse=True)
        assert set(result.actions_by_type) == set(ActionType)
        assert result.best_action is result.scored_actions[0]
        assert result.generated_count == len(result.scored_actions)
        assert get_recommended_action_type(result) == ActionType.ATTACK
        assert get_best_action_of_type(result, ActionType.MOVE) is None
        assert all(s.action_type == ActionType.ATTACK for s in get_recommended_actions(result))

    def test_threshold_filters_everything(self):
        red, sector, ctx = _setup()
        result = score_all_actions(red, sector.factions, sector.systems, ctx, ScorerConfig(min_score_threshold=1000))
        assert result.scored_actions == ()
        assert result.best_action is None
        assert result.reasoning == "Generated 3 potential actions. 0 passed threshold. No viable actions found"
        assert get_recommended_action_type(result) is None
        assert get_recommended_actions(result) == []

    def test_actions_above_threshold(self):
        red, sector, ctx = _setup(fac_creds=20)
        result = score_all_actions(red, sector.factions, sector.systems, ctx)
        cut = result.scored_actions[1].score
        above = get_actions_above_threshold(result, cut)
        assert all(s.score >= cut for s in above)
        assert len(above) >= 2
