"""
better_casts/errors.py
══════════════════════

Failure values raised by checked casts.

Error Hierarchy
───────────────
    CastError (base)
    ├── NarrowCastError   value lost range or precision
    ├── SignCastError     value does not survive the signedness change
    ├── FloatCastError    non-finite source, or rounded value out of range
    └── EnumCastError     value is not a declared enumerator

    CastDefinitionError (TypeError)
                          the type pair is not defined for the requested
                          category; the analogue of a compile error

Every ``CastError`` carries a ``CastViolation`` record so that callers can
log, compare or re-raise the failure without string matching.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, ClassVar, Dict, Optional, Type

from better_casts.type_model import CType


@unique
class CastType(Enum):
    """The six cast categories."""
    ENUM_CAST = "enum_cast"
    FLOAT_CAST = "float_cast"
    NARROW_CAST = "narrow_cast"
    SIGN_CAST = "sign_cast"
    UP_CAST = "up_cast"
    VOID_CAST = "void_cast"

    @property
    def needs_validation(self) -> bool:
        return self not in (CastType.UP_CAST, CastType.VOID_CAST)


@dataclass(frozen=True)
class CastViolation:
    """A single detected cast failure."""
    category: CastType
    message: str
    to_type: Optional[CType] = None
    from_type: Optional[CType] = None
    value: Any = None

    def describe(self) -> str:
        if self.to_type is None or self.from_type is None:
            return self.message
        return f"{self.message} ({self.from_type} {self.value!r} -> {self.to_type})"


class CastError(Exception):
    """
    Base exception for every cast failure.

    Catch this to handle "any cast failure" uniformly, or one of the
    subclasses to react to a specific category.
    """

    category: ClassVar[CastType]

    def __init__(
        self,
        message: str,
        to_type: Optional[CType] = None,
        from_type: Optional[CType] = None,
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.to_type = to_type
        self.from_type = from_type
        self.value = value

    @property
    def violation(self) -> CastViolation:
        return CastViolation(
            category=self.category,
            message=self.message,
            to_type=self.to_type,
            from_type=self.from_type,
            value=self.value,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, value={self.value!r})"


class NarrowCastError(CastError):
    """Narrowed value does not convert back to the original."""
    category = CastType.NARROW_CAST


class SignCastError(CastError):
    """Value cannot be represented after the signedness change."""
    category = CastType.SIGN_CAST


class FloatCastError(CastError):
    """Non-finite source or rounded candidate outside the target range."""
    category = CastType.FLOAT_CAST


class EnumCastError(CastError):
    """Integral value does not name a declared enumerator."""
    category = CastType.ENUM_CAST


class CastDefinitionError(TypeError):
    """The cast is not defined for this (To, From) pair."""

    def __init__(
        self,
        to_type: CType,
        from_type: CType,
        category: Optional[CastType] = None,
    ) -> None:
        if category is None:
            msg = f"no cast category converts {from_type} to {to_type}"
        else:
            msg = f"{category.value} is not defined from {from_type} to {to_type}"
        super().__init__(msg)
        self.to_type = to_type
        self.from_type = from_type
        self.category = category


_ERROR_TYPES: Dict[CastType, Type[CastError]] = {
    CastType.NARROW_CAST: NarrowCastError,
    CastType.SIGN_CAST: SignCastError,
    CastType.FLOAT_CAST: FloatCastError,
    CastType.ENUM_CAST: EnumCastError,
}


def error_for(violation: CastViolation) -> CastError:
    """Build the exception matching *violation*'s category."""
    try:
        exc_type = _ERROR_TYPES[violation.category]
    except KeyError:
        raise ValueError(f"{violation.category.value} never fails") from None
    return exc_type(
        violation.message,
        to_type=violation.to_type,
        from_type=violation.from_type,
        value=violation.value,
    )


__all__ = [
    "CastType",
    "CastViolation",
    "CastError",
    "NarrowCastError",
    "SignCastError",
    "FloatCastError",
    "EnumCastError",
    "CastDefinitionError",
    "error_for",
]
