"""
better_casts/rounding.py
════════════════════════

Strategies for collapsing a floating-point value to an integral candidate
before the range check of a float → integer cast.

    TRUNCATE   toward zero (the default)
    FLOOR      toward −∞
    CEILING    toward +∞
    ROUND      to nearest, ties to even

The candidate is a Python ``int`` and therefore exact; range validation
happens afterwards against the destination type.  NaN and ±∞ have no
integral candidate and yield ``None``.
"""

from __future__ import annotations

import math
from enum import Enum, auto
from typing import Callable, Dict, Optional


class RoundingMode(Enum):
    CEILING = auto()
    FLOOR = auto()
    ROUND = auto()
    TRUNCATE = auto()

    @classmethod
    def parse(cls, name: str) -> RoundingMode:
        """Look a mode up by case-insensitive name (``"ceil"`` also works)."""
        key = name.strip().upper()
        key = _ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ValueError(
                f"unknown rounding mode {name!r}; expected one of "
                f"{', '.join(m.name.lower() for m in cls)}"
            ) from None


_ALIASES: Dict[str, str] = {
    "CEIL": "CEILING",
    "TRUNC": "TRUNCATE",
    "NEAREST": "ROUND",
}

_STRATEGIES: Dict[RoundingMode, Callable[[float], int]] = {
    RoundingMode.CEILING: math.ceil,
    RoundingMode.FLOOR: math.floor,
    # builtin round() on a float resolves ties to the even neighbour
    RoundingMode.ROUND: round,
    RoundingMode.TRUNCATE: math.trunc,
}


def round_integral(value: float, mode: RoundingMode) -> Optional[int]:
    """Integral candidate for *value* under *mode*, or ``None`` if non-finite."""
    if not math.isfinite(value):
        return None
    return _STRATEGIES[mode](value)


__all__ = ["RoundingMode", "round_integral"]
