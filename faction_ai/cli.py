from __future__ import annotations
import argparse, json, logging, sys
from dataclasses import asdict
from typing import Any, Dict

from .config import load_configs, env_overrides, apply_cli_overrides, scorer_config_from_mapping, ENV_PREFIX
from .intent import PrimaryFocus, StrategicIntent, default_intent
from .influence import compute_influence_map
from .opponents.threat import assess_system_threat, generate_sector_threat_overview, should_consider_retreat
from .reports.run_report import build_decision_report
from .state.loaders import Scenario, load_scenario
from . import main as main_mod

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m faction_ai.cli",
        description="Faction AI CLI"
    )
    sub = p.add_subparsers(dest="cmd")

    # plan
    pl = sub.add_parser("plan", help="Score every candidate action for one faction and emit a report")
    _add_common_args(pl)
    pl.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    pl.add_argument("--env-prefix", type=str, default=ENV_PREFIX, help="Env prefix for overrides")
    pl.add_argument("--profile", type=str, default=None, help="Scorer profile (overrides config)")
    pl.add_argument("--focus", choices=[f.value for f in PrimaryFocus], default=None,
                    help="Strategic focus when the scenario carries no intent")
    pl.add_argument("--aggression", type=float, default=None, help="Aggression level 0..100")
    pl.add_argument("--target", type=str, default=None, help="Target faction id for the intent")
    pl.add_argument("--top-k", dest="top_k", type=int, default=5)
    pl.add_argument("--report", type=str, default=None, help="Path to save report (.json or .md)")
    pl.add_argument("--print-md", action="store_true", help="Print Markdown report to stdout")

    # influence
    inf = sub.add_parser("influence", help="Print the influence map from one faction's perspective")
    _add_common_args(inf)
    inf.add_argument("--json", action="store_true", help="Emit JSON instead of a table")

    # threat
    th = sub.add_parser("threat", help="Print the sector threat overview (or one system's assessment)")
    _add_common_args(th)
    th.add_argument("--system", type=str, default=None, help="Assess a single system in detail")
    th.add_argument("--json", action="store_true", help="Emit JSON instead of text")

    args = p.parse_args(argv)
    if getattr(args, "cmd", None) is None:
        p.print_help()
        sys.exit(2)
    return args


def _add_common_args(ap: argparse.ArgumentParser) -> None:
    ap.add_argument("--scenario", type=str, required=True, help="Scenario file (.yaml or .json)")
    ap.add_argument("--faction", type=str, required=True, help="Faction id to evaluate")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _require_faction(scenario: Scenario, faction_id: str):
    faction = scenario.sector.faction(faction_id)
    if faction is None:
        known = ", ".join(f.id for f in scenario.sector.factions)
        raise KeyError(f"Unknown faction '{faction_id}'. Available: {known}")
    return faction


def _intent_from_args(args: argparse.Namespace, scenario: Scenario) -> StrategicIntent:
    faction = _require_faction(scenario, args.faction)
    base = scenario.intent_for(args.faction)
    if base is None:
        base = default_intent(faction, PrimaryFocus(args.focus) if args.focus else PrimaryFocus.BALANCED)
    elif args.focus:
        base = StrategicIntent(PrimaryFocus(args.focus), base.aggression_level, base.target_faction_id,
                               base.priority_system_ids, base.reasoning)
    if args.aggression is not None or args.target is not None:
        base = StrategicIntent(
            base.primary_focus,
            float(args.aggression) if args.aggression is not None else base.aggression_level,
            args.target if args.target is not None else base.target_faction_id,
            base.priority_system_ids,
            base.reasoning,
        )
    return base


def _plan(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = load_configs(getattr(args, "config", []))
    cfg = apply_cli_overrides(cfg, env_overrides(args.env_prefix))
    if args.profile:
        cfg = apply_cli_overrides(cfg, {"scorer": {"profile": args.profile}})
    scorer = scorer_config_from_mapping(cfg)

    scenario = load_scenario(args.scenario)
    intent = _intent_from_args(args, scenario)
    res = main_mod.recommend(scenario, args.faction, intent=intent, config=scorer, top_k=args.top_k)
    report = build_decision_report(
        res["result"], res["context"],
        params={"scenario": args.scenario, **asdict(scorer)},
        top_k=args.top_k,
    )
    return {"result": res["result"], "report": report}


def _influence(args: argparse.Namespace) -> int:
    scenario = load_scenario(args.scenario)
    _require_faction(scenario, args.faction)
    sector = scenario.sector
    im = compute_influence_map(args.faction, sector.factions, sector.systems)
    if args.json:
        print(json.dumps({
            "faction_id": im.faction_id,
            "hexes": {sid: asdict(h) for sid, h in im.hexes.items()},
            "friendly_controlled": list(im.friendly_controlled),
            "enemy_controlled": list(im.enemy_controlled),
            "contested": list(im.contested),
            "unoccupied": list(im.unoccupied),
        }, indent=2))
        return 0
    print(f"{'system':<16}{'total':>8}{'force':>8}{'cunning':>9}{'wealth':>8}  {'control':<14}{'cont':>5}  class")
    for sid, h in im.hexes.items():
        print(f"{sid:<16}{h.total:>8.2f}{h.force:>8.2f}{h.cunning:>9.2f}{h.wealth:>8.2f}  "
              f"{(h.controlling_faction_id or '-'):<14}{h.contested_level:>5}  {im.classification(sid)}")
    return 0


def _threat(args: argparse.Namespace) -> int:
    scenario = load_scenario(args.scenario)
    faction = _require_faction(scenario, args.faction)
    sector = scenario.sector
    if args.system:
        assessment = assess_system_threat(args.system, args.faction, sector.factions, sector.systems)
        advice = should_consider_retreat(args.system, faction, sector.factions, sector.systems)
        if args.json:
            print(json.dumps({"assessment": asdict(assessment), "retreat": asdict(advice)}, indent=2))
            return 0
        print(f"{assessment.system_name} ({assessment.system_id}): danger {assessment.danger_level:.2f} "
              f"[military {assessment.military_danger:.2f}, covert {assessment.covert_danger:.2f}, "
              f"economic {assessment.economic_danger:.2f}] -> {assessment.recommended_defense_level.value}")
        for t in assessment.immediate_threats:
            print(f"  ! {t.asset_name} ({t.faction_id}) at {t.location}, d={t.distance}, threat {t.threat_score:.1f}")
        print(f"Retreat: {'yes' if advice.should_retreat else 'no'} ({advice.urgency.value}) {advice.reason}")
        return 0

    ov = generate_sector_threat_overview(args.faction, sector.factions, sector.systems)
    if args.json:
        print(json.dumps(asdict(ov), indent=2))
        return 0
    primary = ov.primary_threat.faction_id if ov.primary_threat else "-"
    print(f"Overall threat {ov.overall_threat_level:.1f} | posture {ov.recommended_posture.value} | primary threat {primary}")
    for sid, info in ov.system_threats.items():
        mark = "THREATENED" if sid in ov.threatened_systems else "safe"
        print(f"  {sid:<16}{info.overall_danger_level:>7.1f}  {mark}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    _configure_logging(getattr(args, "verbose", False))
    try:
        if args.cmd == "plan":
            res = _plan(args)
            report = res["report"]
            if args.report:
                if args.report.endswith(".json"):
                    with open(args.report, "w", encoding="utf-8") as f:
                        f.write(report.to_json())
                elif args.report.endswith(".md"):
                    with open(args.report, "w", encoding="utf-8") as f:
                        f.write(report.to_markdown())
                else:
                    print("Report path must end with .json or .md", file=sys.stderr)
                    return 2
            if args.print_md:
                print(report.to_markdown())
            else:
                for i, s in enumerate(res["result"].scored_actions[:args.top_k], 1):
                    print(f"{i}. [{s.action_type.value}] {s.action.description}  score={s.score:.1f}")
                print(res["result"].reasoning)
            return 0

        if args.cmd == "influence":
            return _influence(args)

        if args.cmd == "threat":
            return _threat(args)
    except (FileNotFoundError, ValueError, KeyError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
