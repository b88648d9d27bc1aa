"""Tests for candidate action generators."""
from dataclasses import replace

from faction_ai.action_gen.actions import (
    generate_all_actions,
    generate_attack_actions,
    generate_defend_actions,
    generate_expand_actions,
    generate_move_actions,
    movement_destinations,
)
from faction_ai.action_gen.schema import (
    ActionType,
    AttackAction,
    ExpandAction,
    MoveAction,
    action_to_dict,
)
from faction_ai.assets import AssetCatalog, get_asset_by_id
from faction_ai.game_models import FactionTag

from builders import make_asset, make_faction, make_system


def _systems():
    return [
        make_system("s", 0, 0, "Sol", routes=["far"]),
        make_system("n", 1, 0, "Nova"),
        make_system("q", 0, 1, "Quell"),
        make_system("far", 5, 5, "Farpoint"),
    ]


class TestMove:
    def test_destinations_routes_then_neighbors(self):
        assert movement_destinations("s", _systems()) == ["far", "n", "q"]
        assert movement_destinations("nowhere", _systems()) == []

    def test_only_mobile_assets_move(self):
        red = make_faction("red", "s", [
            make_asset("r1", "force_4_postech_infantry", "s"),
            make_asset("r2", "force_4_strike_fleet", "s"),
        ])
        moves = generate_move_actions(red, _systems())
        assert {m.acting_asset_id for m in moves} == {"r2"}
        assert [m.target_location for m in moves] == ["far", "n", "q"]
        assert moves[0].description == "Move Strike Fleet to Farpoint"

    def test_mercenaries_move_everything(self):
        red = make_faction("red", "s", [make_asset("r1", "force_4_postech_infantry", "s")],
                           tags=(FactionTag.MERCENARY_GROUP,))
        assert len(generate_move_actions(red, _systems())) == 3

    def test_never_moves_in_place(self):
        red = make_faction("red", "s", [make_asset("r1", "cunning_1_smugglers", "n")])
        assert all(m.target_location != m.source_location for m in generate_move_actions(red, _systems()))


class TestAttack:
    def test_one_candidate_per_visible_target_in_system(self):
        red = make_faction("red", "far", [
            make_asset("r1", "force_1_security_personnel", "s"),
            make_asset("r2", "wealth_1_harvesters", "s"),
        ])
        blue = make_faction("blue", "far", [
            make_asset("b1", "force_1_security_personnel", "s"),
            make_asset("b2", "force_4_postech_infantry", "s", stealthed=True),
            make_asset("b3", "force_1_security_personnel", "n"),
        ], name="Blue Lantern")
        attacks = generate_attack_actions(red, [red, blue], _systems())
        assert len(attacks) == 1
        a = attacks[0]
        assert isinstance(a, AttackAction)
        assert (a.acting_asset_id, a.target_faction_id, a.target_asset_id) == ("r1", "blue", "b1")
        assert a.description == "Security Personnel attacks Blue Lantern's Security Personnel"

    def test_no_friendly_fire(self):
        red = make_faction("red", "s", [
            make_asset("r1", "force_1_security_personnel", "s"),
            make_asset("r2", "force_1_security_personnel", "s"),
        ])
        assert generate_attack_actions(red, [red], _systems()) == []


class TestExpandAndDefend:
    def test_expand_skips_homeworld_and_bases(self):
        red = make_faction("red", "s", [
            make_asset("r1", "force_1_security_personnel", "s"),
            make_asset("r2", "force_1_security_personnel", "n"),
            make_asset("r3", "force_1_security_personnel", "q"),
            make_asset("r4", "base_of_influence", "q"),
        ])
        expands = generate_expand_actions(red, _systems())
        assert [e.target_location for e in expands] == ["n"]
        assert expands[0].description == "Expand influence on Nova"

    def test_expand_recognises_base_by_name(self):
        outpost = replace(get_asset_by_id("base_of_influence"), id="house_outpost")
        catalog = AssetCatalog.from_definitions([get_asset_by_id("force_1_security_personnel"), outpost])
        red = make_faction("red", "s", [
            make_asset("r1", "force_1_security_personnel", "n"),
            make_asset("r2", "force_1_security_personnel", "q"),
            make_asset("r3", "house_outpost", "q", hp=10, max_hp=10),
        ])
        expands = generate_expand_actions(red, _systems(), catalog)
        assert [e.target_location for e in expands] == ["n"]

    def test_defend_once_per_occupied_system(self):
        red = make_faction("red", "s", [
            make_asset("r1", "force_1_security_personnel", "s"),
            make_asset("r2", "force_4_postech_infantry", "s"),
            make_asset("r3", "force_1_hitmen", "s"),
            make_asset("r4", "force_1_militia_unit", "s"),
            make_asset("r5", "force_1_security_personnel", "n"),
        ])
        defends = generate_defend_actions(red, _systems())
        assert [d.source_location for d in defends] == ["s", "n"]
        assert defends[0].description == "Defend Security Personnel, Postech Infantry, Hitmen... at Sol"
        assert defends[1].description == "Defend Security Personnel at Nova"

    def test_faction_without_assets(self):
        red = make_faction("red", "s")
        assert generate_all_actions(red, [red], _systems()) == []


def test_all_actions_in_generator_order():
    red = make_faction("red", "s", [
        make_asset("r1", "force_4_strike_fleet", "n"),
    ])
    blue = make_faction("blue", "far", [make_asset("b1", "force_1_security_personnel", "n")])
    kinds = [a.action_type for a in generate_all_actions(red, [red, blue], _systems())]
    assert kinds == [ActionType.MOVE] * kinds.count(ActionType.MOVE) + [
        ActionType.ATTACK, ActionType.EXPAND, ActionType.DEFEND,
    ]


def test_action_to_dict_includes_type_and_target():
    d = action_to_dict(ExpandAction(source_location="n", description="Expand influence on Nova"))
    assert d["type"] == "expand"
    assert d["target_location"] == "n"
    assert d["acting_asset_name"] == "Faction"
    m = action_to_dict(MoveAction("r1", "Strike Fleet", "s", "n"))
    assert m["type"] == "move" and m["target_location"] == "n"
