"""Full decision cycle on a four-system line: A - B - C - D."""
import json

import pytest

from faction_ai.action_gen.schema import ActionType, MoveAction
from faction_ai.influence import compute_influence_map, find_best_expansion_targets
from faction_ai.intent import PrimaryFocus, StrategicIntent
from faction_ai.main import recommend
from faction_ai.opponents.threat import assess_system_threat
from faction_ai.state.loaders import load_scenario, scenario_from_dict

from builders import line_scenario, make_asset, make_faction, make_system


def test_strike_fleet_moves_on_weak_enemy() -> None:
    scenario = scenario_from_dict(line_scenario())
    res = recommend(scenario, "red")
    result = res["result"]

    assert result.generated_count == 5
    best = result.best_action
    assert isinstance(best.action, MoveAction)
    assert best.action.acting_asset_id == "r2"
    assert best.action.target_location == "C"
    assert best.base_utility == 110
    assert best.goal_synergy == 25
    assert result.reasoning == (
        "Generated 5 potential actions. 5 passed threshold. Best: Move Strike Fleet to Gamma (score: 135)"
    )
    assert [s.action.target_location for s in res["recommended"]] == ["C", "A"]
    assert len(res["top"]) == 5


def test_influence_and_threat_context() -> None:
    res = recommend(scenario_from_dict(line_scenario()), "red")
    ctx = res["context"]
    assert ctx.strategic_intent.primary_focus == PrimaryFocus.MILITARY
    assert ctx.influence_map.hexes["A"].controlling_faction_id == "red"
    assert ctx.influence_map.hexes["D"].controlling_faction_id == "blue"
    assert "A" in ctx.influence_map.friendly_controlled
    assert list(ctx.threat_overview.system_threats) == ["A", "B"]
    assert ctx.threat_overview.primary_threat.faction_id == "blue"


def test_explicit_intent_wins_over_scenario() -> None:
    res = recommend(
        scenario_from_dict(line_scenario()),
        "red",
        intent=StrategicIntent(PrimaryFocus.EXPANSION, 40),
    )
    assert res["context"].strategic_intent.primary_focus == PrimaryFocus.EXPANSION


def test_blue_uses_default_intent() -> None:
    res = recommend(scenario_from_dict(line_scenario()), "blue")
    intent = res["context"].strategic_intent
    assert intent.primary_focus == PrimaryFocus.BALANCED
    assert intent.priority_system_ids == ("D",)
    kinds = {s.action_type for s in res["result"].scored_actions}
    assert ActionType.DEFEND in kinds


def test_unknown_faction_raises() -> None:
    with pytest.raises(KeyError, match="green"):
        recommend(scenario_from_dict(line_scenario()), "green")


def test_yaml_and_json_scenarios_agree(tmp_path) -> None:
    import yaml

    payload = line_scenario()
    yml = tmp_path / "line.yaml"
    yml.write_text(yaml.safe_dump(payload), encoding="utf-8")
    jsn = tmp_path / "line.json"
    jsn.write_text(json.dumps(payload), encoding="utf-8")

    a = recommend(load_scenario(yml), "red")["result"]
    b = recommend(load_scenario(jsn), "red")["result"]
    assert a.reasoning == b.reasoning
    assert [s.score for s in a.scored_actions] == [s.score for s in b.scored_actions]


def test_lone_security_detail_facing_infantry() -> None:
    systems = [
        make_system("A", 0, 0, routes=["B"]),
        make_system("B", 1, 0, routes=["A", "C"]),
        make_system("C", 2, 0, routes=["B", "D"]),
        make_system("D", 3, 0, routes=["C"]),
    ]
    faction1 = make_faction("faction1", "A", [make_asset("f1", "force_1_security_personnel", "A")], force=1)
    faction2 = make_faction("faction2", "B", [make_asset("f2", "force_4_postech_infantry", "B")], force=4)
    factions = [faction1, faction2]

    im = compute_influence_map("faction1", factions, systems)
    assert im.hexes["A"].total > 0
    assert im.hexes["A"].total > im.hexes["D"].total
    assert "B" in im.enemy_controlled

    threat = assess_system_threat("A", "faction1", factions, systems)
    assert threat.military_danger > 0
    assert [t.asset_id for t in threat.immediate_threats] == ["f2"]

    # B is held outright by faction2, so only open or contested ground is offered
    targets = [s.id for s in find_best_expansion_targets(im, faction1, systems)]
    assert "B" not in targets
    assert "D" in targets
