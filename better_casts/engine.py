"""
better_casts/engine.py
══════════════════════

Checked and unchecked conversions, one family per cast category.

Every function takes the destination type, the source type and the value:

    >>> narrow_cast_checked("int8_t", "int", 100)
    100
    >>> narrow_cast_checked("int8_t", "int", 300)
    Traceback (most recent call last):
      ...
    better_casts.errors.NarrowCastError: narrow_cast failed: input exceeded max value for output type

Checked variants validate, then convert; the first violation raises the
category's ``CastError`` and nothing is converted.  Unchecked variants
skip validation and never raise for finite input: integers wrap modulo
2**bits, ``float`` narrowing rounds to nearest (overflowing to ±inf), and
out-of-range float → integer results wrap after rounding.  For NaN the
unchecked float cast yields 0 and ±inf saturate to the target limits.

The unqualified entry points (``narrow_cast`` …) are bound once, at import
time, to the checked or unchecked variant by ``config.CHECK_CASTS``.

Both variants raise ``CastDefinitionError`` when the type pair does not
belong to the function's category.
"""

from __future__ import annotations

import enum
import functools
import logging
import math
import numbers
import struct
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Type

from better_casts import config
from better_casts.errors import (
    CastError,
    CastType,
    EnumCastError,
    FloatCastError,
    NarrowCastError,
    SignCastError,
)
from better_casts.outcome import CastOutcome
from better_casts.predicates import classify, require_category
from better_casts.rounding import RoundingMode, round_integral
from better_casts.type_model import CType, TypeKind, as_ctype, underlying_type

_log = logging.getLogger(__name__)

Rounding = Optional[RoundingMode]


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — REPRESENTATION HELPERS
# ═════════════════════════════════════════════════════════════════════════

def _wrap(value: int, t: CType) -> int:
    """Two's-complement truncation of *value* to the width of *t*."""
    bits = t.bits
    value &= (1 << bits) - 1
    if t.is_signed and value >> (bits - 1):
        value -= 1 << bits
    return value


def _to_float(value: Any, t: CType) -> float:
    """Round *value* to the precision of floating type *t*."""
    x = float(value)
    if t.kind == TypeKind.DOUBLE:
        return x
    try:
        return struct.unpack("f", struct.pack("f", x))[0]
    except OverflowError:
        return math.copysign(math.inf, x)


def _fail(
    exc_type: Type[CastError],
    message: str,
    to: CType,
    from_: CType,
    value: Any,
) -> CastError:
    exc = exc_type(message, to_type=to, from_type=from_, value=value)
    _log.debug("cast violation: %s", exc.violation.describe())
    return exc


@functools.lru_cache(maxsize=None)
def _members_by_value(enum_cls: Type[enum.Enum]) -> Mapping[int, enum.Enum]:
    return {m.value: m for m in enum_cls.__members__.values()}


@functools.lru_cache(maxsize=None)
def _flag_mask(enum_cls: Type[enum.Enum]) -> int:
    mask = 0
    for member in enum_cls.__members__.values():
        mask |= member.value
    return mask


def _is_flag(enum_cls: Type[enum.Enum]) -> bool:
    return issubclass(enum_cls, enum.Flag)


def _enum_contains(enum_cls: Type[enum.Enum], value: int) -> bool:
    if _is_flag(enum_cls):
        return value >= 0 and value & ~_flag_mask(enum_cls) == 0
    return value in _members_by_value(enum_cls)


def _enum_member(enum_cls: Type[enum.Enum], value: int) -> enum.Enum:
    member = _members_by_value(enum_cls).get(value)
    if member is None:
        # Flag combination without a named member
        member = enum_cls(value)
    return member


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — SOURCE VALIDATION (checked path only)
# ═════════════════════════════════════════════════════════════════════════

def _source_value(from_: CType, value: Any) -> Any:
    """Make sure *value* is a value of type *from_*; return it normalised."""
    if from_.is_integer:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise TypeError(f"expected an integer for source type {from_}, got {value!r}")
        value = int(value)
        if not from_.min_value <= value <= from_.max_value:
            raise ValueError(f"{value} is not a value of source type {from_}")
        return value
    if from_.is_floating:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise TypeError(f"expected a real number for source type {from_}, got {value!r}")
        try:
            x = float(value)
        except OverflowError:
            raise ValueError(f"{value} is not a value of source type {from_}") from None
        if from_.kind == TypeKind.FLOAT and not math.isnan(x) and _to_float(x, from_) != x:
            raise ValueError(f"{value!r} is not a value of source type {from_}")
        return x
    return value


def _enum_source(from_: CType, value: Any) -> int:
    enum_cls = from_.py_type
    if isinstance(value, enum_cls):
        return int(value.value)
    if isinstance(value, enum.Enum):
        raise TypeError(f"{value!r} is not a member of {enum_cls.__name__}")
    return _source_value(underlying_type(from_), value)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — CATEGORY IMPLEMENTATIONS (types already classified)
# ═════════════════════════════════════════════════════════════════════════

# ── narrow ──────────────────────────────────────────────────────────────

def _narrow_unchecked(to: CType, from_: CType, value: Any) -> Any:
    if to.is_floating:
        return _to_float(value, to)
    return _wrap(int(value), to)


def _narrow_checked(to: CType, from_: CType, value: Any) -> Any:
    value = _source_value(from_, value)
    if to.is_floating:
        result = _to_float(value, to)
        if result == value or (math.isnan(result) and math.isnan(value)):
            return result
        raise _fail(
            NarrowCastError,
            "narrow_cast failed: input not representable in output type",
            to, from_, value,
        )
    if value > to.max_value:
        raise _fail(
            NarrowCastError,
            "narrow_cast failed: input exceeded max value for output type",
            to, from_, value,
        )
    if value < to.min_value:
        raise _fail(
            NarrowCastError,
            "narrow_cast failed: input exceeded min value for output type",
            to, from_, value,
        )
    return value


# ── sign ────────────────────────────────────────────────────────────────

def _sign_unchecked(to: CType, from_: CType, value: Any) -> int:
    return _wrap(int(value), to)


def _sign_checked(to: CType, from_: CType, value: Any) -> int:
    value = _source_value(from_, value)
    if not to.is_signed and value < 0:
        raise _fail(
            SignCastError,
            "sign_cast failed: cannot cast a negative number to unsigned",
            to, from_, value,
        )
    if value > to.max_value:
        raise _fail(
            SignCastError,
            "sign_cast failed: input exceeded max value for output type",
            to, from_, value,
        )
    return value


# ── float ───────────────────────────────────────────────────────────────

def _float_unchecked(to: CType, from_: CType, value: Any, rounding: Rounding = None) -> Any:
    if to.is_floating:
        return _to_float(value, to)
    x = float(value)
    candidate = round_integral(x, rounding or config.DEFAULT_ROUNDING)
    if candidate is None:
        if math.isnan(x):
            return 0
        return to.max_value if x > 0 else to.min_value
    return _wrap(candidate, to)


def _float_checked(to: CType, from_: CType, value: Any, rounding: Rounding = None) -> Any:
    value = _source_value(from_, value)

    if to.is_floating:
        result = _to_float(value, to)
        if math.isfinite(result) and int(result) == value:
            return result
        raise _fail(
            FloatCastError,
            "float_cast failed: integer not exactly representable in output type",
            to, from_, value,
        )

    mode = rounding or config.DEFAULT_ROUNDING
    candidate = round_integral(value, mode)
    if candidate is None:
        what = "NaN" if math.isnan(value) else "Infinity"
        raise _fail(FloatCastError, f"float_cast failed: cannot cast from {what}", to, from_, value)
    op = mode.name.lower()
    if candidate > to.max_value:
        raise _fail(
            FloatCastError,
            f"float_cast ({op}) failed: input exceeded max value for output type",
            to, from_, value,
        )
    if candidate < to.min_value:
        raise _fail(
            FloatCastError,
            f"float_cast ({op}) failed: input exceeded min value for output type",
            to, from_, value,
        )
    return candidate


# ── enum ────────────────────────────────────────────────────────────────

def _enum_unchecked(to: CType, from_: CType, value: Any) -> Any:
    if to.is_enum:
        raw = _wrap(int(value), to)
        enum_cls = to.py_type
        if raw in _members_by_value(enum_cls) or (_is_flag(enum_cls) and _enum_contains(enum_cls, raw)):
            return _enum_member(enum_cls, raw)
        # No member carries this value; hand back the representation.
        return raw
    if isinstance(value, enum.Enum):
        value = value.value
    return _wrap(int(value), to)


def _enum_checked(to: CType, from_: CType, value: Any) -> Any:
    if to.is_enum:
        raw = _source_value(from_, value)
        enum_cls = to.py_type
        if not _enum_contains(enum_cls, raw):
            raise _fail(
                EnumCastError,
                "enum_cast failed: value not contained within enum",
                to, from_, raw,
            )
        return _enum_member(enum_cls, raw)

    raw = _enum_source(from_, value)
    if not isinstance(value, from_.py_type) and not _enum_contains(from_.py_type, raw):
        raise _fail(
            EnumCastError,
            "enum_cast failed: value not contained within enum",
            to, from_, raw,
        )
    return raw


# ── up / void ───────────────────────────────────────────────────────────

def _up(to: CType, from_: CType, value: Any) -> Any:
    if to.is_bool:
        return bool(value)
    if to.is_integer:
        return int(value)
    if to.is_floating:
        return float(value)
    return value


def _void(to: CType, from_: CType, value: Any) -> Any:
    return value


# ═════════════════════════════════════════════════════════════════════════
#  PART 4 — PUBLIC API, PER CATEGORY
# ═════════════════════════════════════════════════════════════════════════

def up_cast(to: Any, from_: Any, value: Any) -> Any:
    """Widening or derived-to-base conversion; never fails."""
    t, f = require_category(CastType.UP_CAST, to, from_)
    return _up(t, f, value)


def void_cast(to: Any, from_: Any, value: Any) -> Any:
    """Pointer conversion to or from ``void*``; the value is unchanged."""
    t, f = require_category(CastType.VOID_CAST, to, from_)
    return _void(t, f, value)


def narrow_cast_checked(to: Any, from_: Any, value: Any) -> Any:
    t, f = require_category(CastType.NARROW_CAST, to, from_)
    return _narrow_checked(t, f, value)


def narrow_cast_unchecked(to: Any, from_: Any, value: Any) -> Any:
    t, f = require_category(CastType.NARROW_CAST, to, from_)
    return _narrow_unchecked(t, f, value)


def sign_cast_checked(to: Any, from_: Any, value: Any) -> int:
    t, f = require_category(CastType.SIGN_CAST, to, from_)
    return _sign_checked(t, f, value)


def sign_cast_unchecked(to: Any, from_: Any, value: Any) -> int:
    t, f = require_category(CastType.SIGN_CAST, to, from_)
    return _sign_unchecked(t, f, value)


def float_cast_checked(to: Any, from_: Any, value: Any, rounding: Rounding = None) -> Any:
    """Float ↔ integer conversion with range validation.

    *rounding* selects how a fractional source collapses to an integer;
    it defaults to ``config.DEFAULT_ROUNDING`` and is ignored for
    integer → float conversions, which must be exact.
    """
    t, f = require_category(CastType.FLOAT_CAST, to, from_)
    return _float_checked(t, f, value, rounding)


def float_cast_unchecked(to: Any, from_: Any, value: Any, rounding: Rounding = None) -> Any:
    t, f = require_category(CastType.FLOAT_CAST, to, from_)
    return _float_unchecked(t, f, value, rounding)


def enum_cast_checked(to: Any, from_: Any, value: Any) -> Any:
    """Enumeration ↔ integer conversion; the value must name an enumerator.

    For ``enum.Flag`` enumerations any combination of declared bits is
    accepted.
    """
    t, f = require_category(CastType.ENUM_CAST, to, from_)
    return _enum_checked(t, f, value)


def enum_cast_unchecked(to: Any, from_: Any, value: Any) -> Any:
    t, f = require_category(CastType.ENUM_CAST, to, from_)
    return _enum_unchecked(t, f, value)


if config.CHECK_CASTS:
    narrow_cast = narrow_cast_checked
    sign_cast = sign_cast_checked
    float_cast = float_cast_checked
    enum_cast = enum_cast_checked
else:
    narrow_cast = narrow_cast_unchecked
    sign_cast = sign_cast_unchecked
    float_cast = float_cast_unchecked
    enum_cast = enum_cast_unchecked


# ═════════════════════════════════════════════════════════════════════════
#  PART 5 — CATEGORY-AGNOSTIC DISPATCH
# ═════════════════════════════════════════════════════════════════════════

_Impl = Callable[[CType, CType, Any, Rounding], Any]


def _ignore_rounding(fn: Callable[[CType, CType, Any], Any]) -> _Impl:
    def impl(to: CType, from_: CType, value: Any, rounding: Rounding) -> Any:
        return fn(to, from_, value)
    return impl


_CHECKED: Dict[CastType, _Impl] = {
    CastType.UP_CAST: _ignore_rounding(_up),
    CastType.VOID_CAST: _ignore_rounding(_void),
    CastType.NARROW_CAST: _ignore_rounding(_narrow_checked),
    CastType.SIGN_CAST: _ignore_rounding(_sign_checked),
    CastType.FLOAT_CAST: _float_checked,
    CastType.ENUM_CAST: _ignore_rounding(_enum_checked),
}

_UNCHECKED: Dict[CastType, _Impl] = {
    CastType.UP_CAST: _ignore_rounding(_up),
    CastType.VOID_CAST: _ignore_rounding(_void),
    CastType.NARROW_CAST: _ignore_rounding(_narrow_unchecked),
    CastType.SIGN_CAST: _ignore_rounding(_sign_unchecked),
    CastType.FLOAT_CAST: _float_unchecked,
    CastType.ENUM_CAST: _ignore_rounding(_enum_unchecked),
}


def cast_checked(to: Any, from_: Any, value: Any, rounding: Rounding = None) -> Any:
    """Classify the pair and run the checked variant of its category.

    *rounding* only affects float casts.
    """
    t, f = as_ctype(to).unqualified, as_ctype(from_).unqualified
    return _CHECKED[classify(t, f)](t, f, value, rounding)


def cast_unchecked(to: Any, from_: Any, value: Any, rounding: Rounding = None) -> Any:
    t, f = as_ctype(to).unqualified, as_ctype(from_).unqualified
    return _UNCHECKED[classify(t, f)](t, f, value, rounding)


cast = cast_checked if config.CHECK_CASTS else cast_unchecked


def try_cast(to: Any, from_: Any, value: Any, rounding: Rounding = None) -> CastOutcome:
    """Checked cast that returns failures instead of raising them."""
    try:
        return CastOutcome(value=cast_checked(to, from_, value, rounding))
    except CastError as exc:
        return CastOutcome(error=exc)


@dataclass(frozen=True)
class Caster:
    """A conversion specialised for one (To, From) pair.

    Classification happens once, when the caster is made; calling it only
    runs the category's conversion.
    """

    to: CType
    from_: CType
    category: CastType
    checked: bool = True
    rounding: Rounding = None

    def __call__(self, value: Any) -> Any:
        table = _CHECKED if self.checked else _UNCHECKED
        return table[self.category](self.to, self.from_, value, self.rounding)

    def __str__(self) -> str:
        mode = "checked" if self.checked else "unchecked"
        return f"{self.category.value}<{self.to}, {self.from_}> ({mode})"


def make_caster(
    to: Any,
    from_: Any,
    checked: Optional[bool] = None,
    rounding: Rounding = None,
) -> Caster:
    """Classify *to* ← *from_* and return a reusable ``Caster``.

    *checked* defaults to ``config.CHECK_CASTS``.  Raises
    ``CastDefinitionError`` for pairs no category converts.
    """
    t, f = as_ctype(to).unqualified, as_ctype(from_).unqualified
    return Caster(
        to=t,
        from_=f,
        category=classify(t, f),
        checked=config.CHECK_CASTS if checked is None else checked,
        rounding=rounding,
    )


__all__ = [
    "up_cast",
    "void_cast",
    "narrow_cast",
    "narrow_cast_checked",
    "narrow_cast_unchecked",
    "sign_cast",
    "sign_cast_checked",
    "sign_cast_unchecked",
    "float_cast",
    "float_cast_checked",
    "float_cast_unchecked",
    "enum_cast",
    "enum_cast_checked",
    "enum_cast_unchecked",
    "cast",
    "cast_checked",
    "cast_unchecked",
    "try_cast",
    "Caster",
    "make_caster",
]
