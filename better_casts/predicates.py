"""
better_casts/predicates.py
══════════════════════════

Classification of a (To, From) type pair into exactly one cast category.

Resolution order
────────────────
1. ``UP_CAST`` / ``VOID_CAST`` — safe by construction, no runtime check.
2. Otherwise exactly one of ``NARROW_CAST``, ``SIGN_CAST``, ``FLOAT_CAST``,
   ``ENUM_CAST``.  The predicates below are written so that these four
   never overlap, and none of them overlaps the first two.

A pair matched by no predicate is not convertible; ``classify`` raises
``CastDefinitionError`` for it.

All predicates take type designators (anything ``as_ctype`` accepts) and
are pure functions of the two types.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from better_casts.errors import CastDefinitionError, CastType
from better_casts.type_model import CType, as_ctype, underlying_type

_log = logging.getLogger(__name__)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — STRUCTURAL HELPERS
# ═════════════════════════════════════════════════════════════════════════

def _plain_integer(t: CType) -> bool:
    """Integer that is neither ``bool`` nor an enumeration."""
    return t.is_integer and not t.is_bool


def _same_arithmetic_kind(to: CType, from_: CType) -> bool:
    return (
        (_plain_integer(to) and _plain_integer(from_))
        or (to.is_floating and from_.is_floating)
    )


def _pointee_const(t: CType) -> bool:
    pointee = t.pointee
    return pointee is not None and pointee.is_const


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — PREDICATES (on resolved CTypes)
# ═════════════════════════════════════════════════════════════════════════

def _up(to: CType, from_: CType) -> bool:
    # Numeric widening
    if from_.is_bool:
        return to.is_integer
    if _plain_integer(to) and _plain_integer(from_):
        if to.bits <= from_.bits:
            return False
        return to.is_signed == from_.is_signed or to.is_signed
    if to.is_floating and from_.is_floating:
        return to.bits > from_.bits

    # Derived-to-base pointer / reference
    same_shape = (
        (to.is_pointer and from_.is_pointer)
        or (to.is_reference and from_.is_reference)
    )
    if not same_shape:
        return False
    base, derived = to.pointee, from_.pointee
    if not (base.is_record and derived.is_record):
        return False
    if base.is_const != derived.is_const:
        return False
    return base.py_type is not derived.py_type and issubclass(derived.py_type, base.py_type)


def _void(to: CType, from_: CType) -> bool:
    if not ((to.is_pointer or to.is_nullptr) and (from_.is_pointer or from_.is_nullptr)):
        return False
    erases = (
        (to.pointee is not None and to.pointee.is_void)
        or (from_.pointee is not None and from_.pointee.is_void)
    )
    return erases and _pointee_const(to) == _pointee_const(from_)


def _narrow(to: CType, from_: CType) -> bool:
    return (
        _same_arithmetic_kind(to, from_)
        and to.is_signed == from_.is_signed
        and to.bits <= from_.bits
    )


def _sign(to: CType, from_: CType) -> bool:
    return (
        _plain_integer(to)
        and _plain_integer(from_)
        and to.is_signed != from_.is_signed
        and to.bits >= from_.bits
        and not _up(to, from_)
    )


def _float(to: CType, from_: CType) -> bool:
    return (
        (to.is_floating and _plain_integer(from_))
        or (_plain_integer(to) and from_.is_floating)
    )


def _enum(to: CType, from_: CType) -> bool:
    if to.is_enum == from_.is_enum:
        return False
    if to.is_enum:
        if not _plain_integer(from_):
            return False
        # Every source value must fit the enumeration's storage.
        return (
            to.bits >= from_.bits
            and underlying_type(to).is_signed == from_.is_signed
        )
    if not _plain_integer(to):
        return False
    rep = underlying_type(from_)
    return to.bits >= rep.bits and rep.is_signed == to.is_signed


_PREDICATES: Tuple[Tuple[CastType, Callable[[CType, CType], bool]], ...] = (
    (CastType.UP_CAST, _up),
    (CastType.VOID_CAST, _void),
    (CastType.NARROW_CAST, _narrow),
    (CastType.SIGN_CAST, _sign),
    (CastType.FLOAT_CAST, _float),
    (CastType.ENUM_CAST, _enum),
)

_BY_CATEGORY: Dict[CastType, Callable[[CType, CType], bool]] = dict(_PREDICATES)


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — PUBLIC API
# ═════════════════════════════════════════════════════════════════════════

def _resolve(to: Any, from_: Any) -> Tuple[CType, CType]:
    return as_ctype(to).unqualified, as_ctype(from_).unqualified


def is_up_castable(to: Any, from_: Any) -> bool:
    return _up(*_resolve(to, from_))


def is_void_castable(to: Any, from_: Any) -> bool:
    return _void(*_resolve(to, from_))


def is_narrow_castable(to: Any, from_: Any) -> bool:
    return _narrow(*_resolve(to, from_))


def is_sign_castable(to: Any, from_: Any) -> bool:
    return _sign(*_resolve(to, from_))


def is_float_castable(to: Any, from_: Any) -> bool:
    return _float(*_resolve(to, from_))


def is_enum_castable(to: Any, from_: Any) -> bool:
    return _enum(*_resolve(to, from_))


def is_castable(category: CastType, to: Any, from_: Any) -> bool:
    return _BY_CATEGORY[category](*_resolve(to, from_))


def castable_categories(to: Any, from_: Any) -> Tuple[CastType, ...]:
    """Every category whose predicate holds for the pair."""
    t, f = _resolve(to, from_)
    return tuple(cat for cat, pred in _PREDICATES if pred(t, f))


@functools.lru_cache(maxsize=1024)
def _classify(to: CType, from_: CType) -> CastType:
    for category, pred in _PREDICATES:
        if pred(to, from_):
            _log.debug("classified %s -> %s as %s", from_, to, category.value)
            return category
    raise CastDefinitionError(to, from_)


def classify(to: Any, from_: Any) -> CastType:
    """The single cast category for converting *from_* to *to*.

    Raises
    ------
    CastDefinitionError
        If no category defines the conversion.
    """
    return _classify(*_resolve(to, from_))


def require_category(category: CastType, to: Any, from_: Any) -> Tuple[CType, CType]:
    """Resolve the pair and make sure it belongs to *category*."""
    t, f = _resolve(to, from_)
    if _classify_or_none(t, f) is not category:
        raise CastDefinitionError(t, f, category)
    return t, f


def _classify_or_none(to: CType, from_: CType) -> Optional[CastType]:
    try:
        return _classify(to, from_)
    except CastDefinitionError:
        return None


__all__ = [
    "is_up_castable",
    "is_void_castable",
    "is_narrow_castable",
    "is_sign_castable",
    "is_float_castable",
    "is_enum_castable",
    "is_castable",
    "castable_categories",
    "classify",
    "require_category",
]
