import json

import pytest

from faction_ai.game_models import FactionGoalType, FactionTag, HexCoordinate, Sector
from faction_ai.state.loaders import load_scenario, scenario_from_dict

from builders import line_scenario


def test_sector_from_dict_coerces_nested_types() -> None:
    payload = line_scenario()
    payload["factions"][0]["tags"] = ["Warlike", "Pirates"]
    payload["factions"][0]["goal"] = {"type": "Blood the Enemy", "requirements": {"kills": 2}}
    payload["systems"][0]["routes"] = [{"system_id": "B", "is_trade_route": True}]
    sector = Sector.from_dict(payload)

    red = sector.faction("red")
    assert red.tags == (FactionTag.WARLIKE, FactionTag.PIRATES)
    assert red.has_tag(FactionTag.PIRATES)
    assert red.goal.type == FactionGoalType.BLOOD_THE_ENEMY
    assert red.attributes.total == 8
    assert red.find_asset("r2").definition_id == "force_4_strike_fleet"
    assert red.find_asset("nope") is None
    assert sector.systems[0].coordinates == HexCoordinate(0, 0)
    assert sector.systems[0].routes[0].is_trade_route
    assert sector.faction("green") is None


def test_to_json_is_plain() -> None:
    sector = Sector.from_dict(line_scenario())
    data = json.loads(sector.to_json())
    assert data["systems"][1]["coordinates"] == {"x": 1, "y": 0}
    assert data["factions"][0]["assets"][0]["hp"] == 12


def test_asset_hp_ratio() -> None:
    asset = Sector.from_dict(line_scenario()).factions[1].assets[0]
    assert asset.hp_ratio == 1.0


def test_unknown_tag_is_rejected() -> None:
    payload = line_scenario()
    payload["factions"][0]["tags"] = ["Pacifists"]
    with pytest.raises(ValueError, match="Malformed scenario"):
        scenario_from_dict(payload)


def test_non_mapping_scenario() -> None:
    with pytest.raises(ValueError):
        scenario_from_dict(["systems"])


def test_scenario_intents() -> None:
    scenario = scenario_from_dict(line_scenario())
    assert scenario.intent_for("red").target_faction_id == "blue"
    assert scenario.intent_for("blue") is None


def test_missing_scenario_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_scenario(tmp_path / "missing.yaml")


def test_unparseable_scenario_file(tmp_path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Could not parse"):
        load_scenario(bad)
