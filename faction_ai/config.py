from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping
import os, json

import yaml

from .action_gen.utility import ScorerConfig
from .value.profiles import WEIGHT_KEYS, apply_profile_to_weights

ENV_PREFIX = "FACTION_AI__"


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _load_one(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    try:
        if path.lower().endswith(".json"):
            d = json.loads(text)
        else:
            d = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Could not parse config {path}: {exc}") from exc
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ValueError(f"Config {path} must contain a mapping at top level")
    return d


def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg


def env_overrides(prefix: str = ENV_PREFIX, environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    # Nested via double underscores: FACTION_AI__SCORER__TAG_WEIGHT=1.5
    out: Dict[str, Any] = {}
    source = os.environ if environ is None else environ
    for k, v in source.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out


def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s


def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})


def scorer_config_from_mapping(cfg: Mapping[str, Any] | None) -> ScorerConfig:
    """Build a ScorerConfig from the ``scorer`` section of a merged config.

    The named ``profile`` is applied first; explicit weight keys win over it.
    """
    section = dict((cfg or {}).get("scorer") or {})
    defaults = ScorerConfig()
    weights = {k: getattr(defaults, k) for k in WEIGHT_KEYS}
    weights = apply_profile_to_weights(weights, section.get("profile"))
    for key in WEIGHT_KEYS:
        if key in section:
            weights[key] = section[key]
    try:
        return ScorerConfig(**{k: float(weights[k]) for k in WEIGHT_KEYS})
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid scorer configuration: {exc}") from exc


__all__ = [
    "ENV_PREFIX",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "scorer_config_from_mapping",
    "_deep_merge",
]
