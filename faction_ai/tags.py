"""Faction tag dispositions loaded from ``data/tag_affinities.yaml``."""
from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Dict, Iterable, List, Optional, Tuple

import yaml

from .game_models import FactionTag


@dataclass(frozen=True)
class TagBias:
    value: float
    reason: str


@dataclass(frozen=True)
class TagAffinity:
    tag: FactionTag
    aggression: int = 0
    action_bias: Dict[str, TagBias] = field(default_factory=dict)

    def bias_for(self, action_type: str) -> Optional[TagBias]:
        return self.action_bias.get(action_type)


_AFFINITY_CACHE: Optional[Dict[FactionTag, TagAffinity]] = None


def _default_path() -> str:
    return os.path.join(os.path.dirname(__file__), "data", "tag_affinities.yaml")


def load_tag_affinities(path: Optional[str] = None) -> Dict[FactionTag, TagAffinity]:
    """Load the tag affinity table, cached after the first default load.

    Raises:
        ValueError: If the file names a tag that is not a :class:`FactionTag`.
    """
    global _AFFINITY_CACHE
    if path is None and _AFFINITY_CACHE is not None:
        return _AFFINITY_CACHE

    with open(path or _default_path(), "r", encoding="utf-8") as f:
        payload = yaml.safe_load(f) or {}

    table: Dict[FactionTag, TagAffinity] = {}
    for name, block in payload.items():
        try:
            tag = FactionTag(name)
        except ValueError as exc:
            raise ValueError(f"Unknown faction tag '{name}' in tag affinity table") from exc
        block = block or {}
        biases = {
            str(action): TagBias(value=float(entry["value"]), reason=str(entry.get("reason", "")))
            for action, entry in (block.get("action_bias") or {}).items()
        }
        table[tag] = TagAffinity(tag=tag, aggression=int(block.get("aggression", 0)), action_bias=biases)

    if path is None:
        _AFFINITY_CACHE = table
    return table


def tag_action_biases(tags: Iterable[FactionTag], action_type: str) -> List[Tuple[FactionTag, TagBias]]:
    """Biases that the given tags apply to ``action_type``, in tag order."""
    table = load_tag_affinities()
    out: List[Tuple[FactionTag, TagBias]] = []
    for tag in tags:
        affinity = table.get(tag)
        if affinity is None:
            continue
        bias = affinity.bias_for(action_type)
        if bias is not None:
            out.append((tag, bias))
    return out


def aggression_shift(tags: Iterable[FactionTag]) -> int:
    table = load_tag_affinities()
    return sum(table[tag].aggression for tag in tags if tag in table)


__all__ = [
    "TagAffinity",
    "TagBias",
    "aggression_shift",
    "load_tag_affinities",
    "tag_action_biases",
]
