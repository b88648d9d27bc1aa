"""Typed dice expressions for asset attack and counterattack damage.

Damage strings such as ``"2d6"`` or ``"1d4+1"`` are parsed once, when the
asset catalog is loaded, into a :class:`DiceExpression`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_DICE_RE = re.compile(r"^\s*(\d+)\s*d\s*(\d+)\s*([+-]\s*\d+)?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class DiceExpression:
    count: int
    sides: int
    modifier: int = 0

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["DiceExpression"]:
        """Parse ``NdM``, ``NdM+K`` or ``NdM-K``.

        Returns ``None`` for empty text or non-dice damage such as ``"special"``.
        """
        if not text:
            return None
        match = _DICE_RE.match(str(text))
        if not match:
            return None
        count = int(match.group(1))
        sides = int(match.group(2))
        modifier = int(match.group(3).replace(" ", "")) if match.group(3) else 0
        return cls(count, sides, modifier)

    @property
    def average(self) -> float:
        return self.count * (self.sides / 2 + 0.5) + self.modifier

    @property
    def minimum(self) -> int:
        return self.count + self.modifier

    @property
    def maximum(self) -> int:
        return self.count * self.sides + self.modifier

    def __str__(self) -> str:
        if self.modifier > 0:
            return f"{self.count}d{self.sides}+{self.modifier}"
        if self.modifier < 0:
            return f"{self.count}d{self.sides}{self.modifier}"
        return f"{self.count}d{self.sides}"


def average_damage(dice: Optional[DiceExpression]) -> float:
    """Average roll of ``dice``; 0 when there is nothing to roll."""
    if dice is None:
        return 0.0
    return dice.average


__all__ = ["DiceExpression", "average_damage"]
