import json

import pytest
import yaml

from faction_ai.cli import main

from builders import line_scenario


@pytest.fixture
def scenario_path(tmp_path):
    path = tmp_path / "line.yaml"
    path.write_text(yaml.safe_dump(line_scenario()), encoding="utf-8")
    return str(path)


def test_plan_prints_ranked_actions(scenario_path, capsys):
    assert main(["plan", "--scenario", scenario_path, "--faction", "red", "--top-k", "2"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "1. [move] Move Strike Fleet to Gamma  score=135.0"
    assert out[1].startswith("2. ")
    assert out[2].startswith("Generated 5 potential actions")


def test_plan_writes_json_report(scenario_path, tmp_path):
    report = tmp_path / "report.json"
    assert main(["plan", "--scenario", scenario_path, "--faction", "red", "--profile", "cautious",
                 "--report", str(report)]) == 0
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["faction_id"] == "red"
    assert data["params"]["min_score_threshold"] == 10.0
    assert data["recommended_type"] == "move"


def test_plan_intent_flags(scenario_path, tmp_path):
    report = tmp_path / "report.md"
    assert main(["plan", "--scenario", scenario_path, "--faction", "blue", "--focus", "defensive",
                 "--aggression", "10", "--report", str(report)]) == 0
    text = report.read_text(encoding="utf-8")
    assert text.startswith("# Faction AI Decision Report (blue)")
    assert "**Focus:** defensive" in text


def test_plan_env_overrides(scenario_path, tmp_path, monkeypatch):
    monkeypatch.setenv("FACTION_AI__SCORER__MIN_SCORE_THRESHOLD", "1000")
    report = tmp_path / "report.json"
    assert main(["plan", "--scenario", scenario_path, "--faction", "red", "--report", str(report)]) == 0
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["top_actions"] == []
    assert data["recommended_type"] is None


def test_bad_report_extension(scenario_path, tmp_path, capsys):
    assert main(["plan", "--scenario", scenario_path, "--faction", "red",
                 "--report", str(tmp_path / "report.txt")]) == 2
    assert ".json or .md" in capsys.readouterr().err


def test_influence_json(scenario_path, capsys):
    assert main(["influence", "--scenario", scenario_path, "--faction", "red", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["faction_id"] == "red"
    assert list(data["hexes"]) == ["A", "B", "C", "D"]
    assert "A" in data["friendly_controlled"]


def test_influence_table(scenario_path, capsys):
    assert main(["influence", "--scenario", scenario_path, "--faction", "blue"]) == 0
    out = capsys.readouterr().out
    assert "enemy_controlled" in out


def test_threat_single_system(scenario_path, capsys):
    assert main(["threat", "--scenario", scenario_path, "--faction", "red", "--system", "B", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["assessment"]["system_name"] == "Beta"
    assert data["retreat"]["urgency"] == "low"


def test_threat_overview_text(scenario_path, capsys):
    assert main(["threat", "--scenario", scenario_path, "--faction", "red"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Overall threat")
    assert "primary threat blue" in out


def test_unknown_faction(scenario_path, capsys):
    assert main(["influence", "--scenario", scenario_path, "--faction", "green"]) == 2
    assert "error:" in capsys.readouterr().err


def test_missing_scenario(tmp_path, capsys):
    assert main(["plan", "--scenario", str(tmp_path / "nope.yaml"), "--faction", "red"]) == 2
    assert "not found" in capsys.readouterr().err


def test_no_subcommand():
    with pytest.raises(SystemExit):
        main([])
