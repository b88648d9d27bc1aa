"""Utilities for loading sector scenario snapshots."""
from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from ..game_models import Sector
from ..intent import StrategicIntent


PathLike = Union[str, Path]


@dataclass(frozen=True)
class Scenario:
    """A sector snapshot plus optional per-faction strategic intents."""

    sector: Sector
    intents: Mapping[str, StrategicIntent] = field(default_factory=dict)

    def intent_for(self, faction_id: str) -> Optional[StrategicIntent]:
        return self.intents.get(faction_id)


def scenario_from_dict(payload: Any) -> Scenario:
    """Build a :class:`Scenario` from ``{systems, factions, intents?}``.

    Raises:
        ValueError: If the payload is not a mapping or an entry is malformed.
    """
    if not isinstance(payload, dict):
        raise ValueError("Scenario payload must be a mapping with 'systems' and 'factions'")
    try:
        sector = Sector.from_dict({
            "systems": payload.get("systems") or [],
            "factions": payload.get("factions") or [],
        })
        intents: Dict[str, StrategicIntent] = {
            str(fid): StrategicIntent.from_dict(block or {})
            for fid, block in (payload.get("intents") or {}).items()
        }
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed scenario: {exc}") from exc
    return Scenario(sector=sector, intents=intents)


def load_scenario(path: PathLike) -> Scenario:
    """Load a :class:`Scenario` from a YAML or JSON file.

    Relative paths are resolved from the current working directory. Files
    ending in ``.json`` are parsed as JSON, everything else as YAML.
    """

    candidate = Path(path)
    if not candidate.exists():
        raise FileNotFoundError(f"Scenario file not found: {path}")
    with candidate.open("r", encoding="utf-8") as handle:
        try:
            if candidate.suffix.lower() == ".json":
                payload: Any = json.load(handle)
            else:
                payload = yaml.safe_load(handle)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"Could not parse scenario {path}: {exc}") from exc
    return scenario_from_dict(payload)


__all__ = ["Scenario", "load_scenario", "scenario_from_dict"]
