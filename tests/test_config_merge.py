import pytest

from faction_ai.config import (
    _deep_merge,
    apply_cli_overrides,
    env_overrides,
    load_configs,
    scorer_config_from_mapping,
)


def test_deep_merge_simple():
    a = {"scorer": {"base_weight": 1.0, "tag_weight": 1.0}, "report": {"top_k": 5}}
    b = {"scorer": {"tag_weight": 2.0}, "report": {"path": "out.md"}}
    c = _deep_merge(a, b)
    assert c["scorer"]["base_weight"] == 1.0 and c["scorer"]["tag_weight"] == 2.0
    assert c["report"]["top_k"] == 5 and c["report"]["path"] == "out.md"
    assert a["scorer"]["tag_weight"] == 1.0


def test_env_overrides_parsing(monkeypatch):
    monkeypatch.setenv("FACTION_AI__SCORER__TAG_WEIGHT", "1.5")
    monkeypatch.setenv("FACTION_AI__SCORER__PROFILE", "zealot")
    monkeypatch.setenv("FACTION_AI__REPORT__TOP_K", "3")
    monkeypatch.setenv("FACTION_AI__DEBUG", "true")
    d = env_overrides()
    assert d["scorer"]["tag_weight"] == 1.5
    assert d["scorer"]["profile"] == "zealot"
    assert d["report"]["top_k"] == 3
    assert d["debug"] is True


def test_env_overrides_custom_prefix():
    d = env_overrides("X__", {"X__SCORER__GOAL_WEIGHT": "0.5", "OTHER": "1"})
    assert d == {"scorer": {"goal_weight": 0.5}}


def test_load_configs_merges_in_order(tmp_path):
    first = tmp_path / "a.yaml"
    first.write_text("scorer:\n  base_weight: 2\n  tag_weight: 3\n", encoding="utf-8")
    second = tmp_path / "b.json"
    second.write_text('{"scorer": {"tag_weight": 4}}', encoding="utf-8")
    cfg = load_configs([str(first), str(second)])
    assert cfg == {"scorer": {"base_weight": 2, "tag_weight": 4}}
    assert load_configs(None) == {}


def test_load_configs_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_configs([str(tmp_path / "missing.yaml")])
    listy = tmp_path / "list.yaml"
    listy.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_configs([str(listy)])


def test_scorer_config_profile_then_explicit_keys():
    cfg = apply_cli_overrides({"scorer": {"profile": "cautious"}}, {"scorer": {"goal_weight": 2}})
    sc = scorer_config_from_mapping(cfg)
    assert sc.base_weight == 1.2
    assert sc.tag_weight == 1.0
    assert sc.goal_weight == 2.0
    assert sc.min_score_threshold == 10.0


def test_scorer_config_defaults_and_errors():
    sc = scorer_config_from_mapping({})
    assert (sc.base_weight, sc.tag_weight, sc.goal_weight, sc.min_score_threshold) == (1.0, 1.0, 1.0, 0.0)
    with pytest.raises(ValueError):
        scorer_config_from_mapping({"scorer": {"tag_weight": "lots"}})
    with pytest.raises(ValueError, match="not found"):
        scorer_config_from_mapping({"scorer": {"profile": "berserk"}})
