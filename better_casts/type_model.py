"""
better_casts/type_model.py
══════════════════════════

C primitive type descriptors used to classify and validate conversions.

Python values carry no C type, so every cast names its destination and
source types explicitly as ``CType`` descriptors.  This module models
exactly the part of the C type system that casts need:

    τ ::= void | bool | char | signed char | unsigned char
        | short | int | long | long long   (each signed / unsigned)
        | float | double
        | enum(E : underlying)
        | record(C)                  (a class, for pointer up-casts)
        | ptr(τ) | ref(τ)
        | nullptr_t

Integer widths depend on the data model (``LP64`` by default), the same
way they depend on the target platform in C.

License: MIT — same as better-casts.
"""

from __future__ import annotations

import enum as _enum
import sys
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import (
    Any,
    Dict,
    FrozenSet,
    Optional,
    Tuple,
)


# ═════════════════════════════════════════════════════════════════════════
#  PART 1 — KINDS, QUALIFIERS, DATA MODELS
# ═════════════════════════════════════════════════════════════════════════

class TypeKind(Enum):
    """Discriminant for the type term algebra."""
    VOID = auto()
    BOOL = auto()
    CHAR = auto()
    SCHAR = auto()
    UCHAR = auto()
    SHORT = auto()
    USHORT = auto()
    INT = auto()
    UINT = auto()
    LONG = auto()
    ULONG = auto()
    LONG_LONG = auto()
    ULONG_LONG = auto()
    FLOAT = auto()
    DOUBLE = auto()
    ENUM = auto()          # enum(E), children[0] = underlying type
    RECORD = auto()        # struct/class, py_type = the Python class
    PTR = auto()           # ptr(τ)
    REF = auto()           # ref(τ)
    NULLPTR = auto()       # std::nullptr_t


class Qualifier(Enum):
    CONST = auto()
    VOLATILE = auto()


_SIGNED_KINDS: FrozenSet[TypeKind] = frozenset({
    TypeKind.SCHAR, TypeKind.SHORT, TypeKind.INT,
    TypeKind.LONG, TypeKind.LONG_LONG,
})

_UNSIGNED_KINDS: FrozenSet[TypeKind] = frozenset({
    TypeKind.BOOL, TypeKind.UCHAR, TypeKind.USHORT, TypeKind.UINT,
    TypeKind.ULONG, TypeKind.ULONG_LONG,
})

_INTEGER_KINDS: FrozenSet[TypeKind] = (
    _SIGNED_KINDS | _UNSIGNED_KINDS | frozenset({TypeKind.CHAR})
)

_FLOAT_KINDS: FrozenSet[TypeKind] = frozenset({
    TypeKind.FLOAT, TypeKind.DOUBLE,
})


@dataclass(frozen=True)
class DataModel:
    """Bit widths of the standard integer types on a target platform."""
    name: str
    char_bits: int = 8
    short_bits: int = 16
    int_bits: int = 32
    long_bits: int = 64
    long_long_bits: int = 64
    pointer_bits: int = 64
    char_signed: bool = True

    def bits_of(self, kind: TypeKind) -> int:
        return {
            TypeKind.BOOL: self.char_bits,
            TypeKind.CHAR: self.char_bits,
            TypeKind.SCHAR: self.char_bits,
            TypeKind.UCHAR: self.char_bits,
            TypeKind.SHORT: self.short_bits,
            TypeKind.USHORT: self.short_bits,
            TypeKind.INT: self.int_bits,
            TypeKind.UINT: self.int_bits,
            TypeKind.LONG: self.long_bits,
            TypeKind.ULONG: self.long_bits,
            TypeKind.LONG_LONG: self.long_long_bits,
            TypeKind.ULONG_LONG: self.long_long_bits,
            TypeKind.FLOAT: 32,
            TypeKind.DOUBLE: 64,
            TypeKind.PTR: self.pointer_bits,
            TypeKind.NULLPTR: self.pointer_bits,
        }.get(kind, 0)


LP64 = DataModel(name="LP64")
LLP64 = DataModel(name="LLP64", long_bits=32)
ILP32 = DataModel(name="ILP32", long_bits=32, pointer_bits=32)

DATA_MODELS: Dict[str, DataModel] = {m.name: m for m in (LP64, LLP64, ILP32)}


def _default_model() -> DataModel:
    # Imported lazily: config imports this module.
    from better_casts import config
    return config.DATA_MODEL


# ═════════════════════════════════════════════════════════════════════════
#  PART 2 — TYPE DESCRIPTOR
# ═════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CType:
    """
    A node in the type term algebra.

    For compound types the children encode structure:
      - PTR / REF: children[0] = pointee / referee type
      - ENUM:      children[0] = underlying integer type (None = int);
                   py_type = the ``enum.Enum`` subclass
      - RECORD:    py_type = the Python class standing for the record

    ``name`` is the spelling used for display (``"int32_t"``); it does not
    take part in equality, so ``int32_t`` and ``int`` compare equal under
    ``LP64``.
    """

    kind: TypeKind
    bits: int = 0
    signed: bool = False                      # integer types
    children: Tuple[CType, ...] = ()
    qualifiers: FrozenSet[Qualifier] = frozenset()
    py_type: Optional[type] = None
    name: str = field(default="", compare=False)

    # ── Factory methods ──────────────────────────────────────────────

    @classmethod
    def _integer(
        cls,
        kind: TypeKind,
        model: Optional[DataModel],
        name: str = "",
    ) -> CType:
        model = model or _default_model()
        if kind == TypeKind.CHAR:
            signed = model.char_signed
        else:
            signed = kind in _SIGNED_KINDS
        return cls(kind=kind, bits=model.bits_of(kind), signed=signed, name=name)

    @classmethod
    def void(cls) -> CType:
        return cls(kind=TypeKind.VOID)

    @classmethod
    def bool_type(cls, model: Optional[DataModel] = None) -> CType:
        return cls._integer(TypeKind.BOOL, model)

    @classmethod
    def char_type(
        cls,
        signed: Optional[bool] = None,
        model: Optional[DataModel] = None,
    ) -> CType:
        if signed is True:
            return cls._integer(TypeKind.SCHAR, model)
        if signed is False:
            return cls._integer(TypeKind.UCHAR, model)
        return cls._integer(TypeKind.CHAR, model)

    @classmethod
    def short_type(cls, signed: bool = True, model: Optional[DataModel] = None) -> CType:
        return cls._integer(TypeKind.SHORT if signed else TypeKind.USHORT, model)

    @classmethod
    def int_type(cls, signed: bool = True, model: Optional[DataModel] = None) -> CType:
        return cls._integer(TypeKind.INT if signed else TypeKind.UINT, model)

    @classmethod
    def long_type(cls, signed: bool = True, model: Optional[DataModel] = None) -> CType:
        return cls._integer(TypeKind.LONG if signed else TypeKind.ULONG, model)

    @classmethod
    def long_long_type(cls, signed: bool = True, model: Optional[DataModel] = None) -> CType:
        return cls._integer(
            TypeKind.LONG_LONG if signed else TypeKind.ULONG_LONG, model)

    @classmethod
    def fixed(
        cls,
        bits: int,
        signed: bool = True,
        model: Optional[DataModel] = None,
    ) -> CType:
        """``int8_t`` … ``uint64_t``: the narrowest standard type of *bits*."""
        model = model or _default_model()
        name = f"{'' if signed else 'u'}int{bits}_t"
        ladder = (
            (TypeKind.SCHAR, TypeKind.UCHAR),
            (TypeKind.SHORT, TypeKind.USHORT),
            (TypeKind.INT, TypeKind.UINT),
            (TypeKind.LONG, TypeKind.ULONG),
            (TypeKind.LONG_LONG, TypeKind.ULONG_LONG),
        )
        for s_kind, u_kind in ladder:
            if model.bits_of(s_kind) == bits:
                return cls._integer(s_kind if signed else u_kind, model, name)
        raise ValueError(f"no {bits}-bit integer type in data model {model.name}")

    @classmethod
    def float_type(cls) -> CType:
        return cls(kind=TypeKind.FLOAT, bits=32)

    @classmethod
    def double_type(cls) -> CType:
        return cls(kind=TypeKind.DOUBLE, bits=64)

    @classmethod
    def enum_type(
        cls,
        py_enum: type,
        underlying: Optional[CType] = None,
    ) -> CType:
        """Describe a Python ``enum.Enum`` subclass as a C enumeration.

        *underlying* mirrors ``enum E : uint8_t``; without it the
        enumeration is backed by ``int``.
        """
        if not (isinstance(py_enum, type) and issubclass(py_enum, _enum.Enum)):
            raise TypeError(f"{py_enum!r} is not an enum.Enum subclass")
        if underlying is not None and (not underlying.is_integer or underlying.is_bool):
            raise TypeError(f"enumeration underlying type must be integral, got {underlying}")
        rep = underlying or cls.int_type()
        for member in py_enum.__members__.values():
            v = member.value
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{py_enum.__name__}.{member.name} has non-integer value {v!r}")
            if not rep.min_value <= v <= rep.max_value:
                raise TypeError(
                    f"{py_enum.__name__}.{member.name} = {v} does not fit {rep}")
        children = (underlying,) if underlying is not None else ()
        return cls(
            kind=TypeKind.ENUM,
            bits=rep.bits,
            children=children,
            py_type=py_enum,
            name=py_enum.__name__,
        )

    @classmethod
    def record(cls, py_class: type) -> CType:
        return cls(kind=TypeKind.RECORD, py_type=py_class, name=py_class.__name__)

    @classmethod
    def ptr(cls, pointee: CType, model: Optional[DataModel] = None) -> CType:
        model = model or _default_model()
        return cls(kind=TypeKind.PTR, bits=model.pointer_bits, children=(pointee,))

    @classmethod
    def ref(cls, referee: CType) -> CType:
        return cls(kind=TypeKind.REF, children=(referee,))

    @classmethod
    def nullptr(cls, model: Optional[DataModel] = None) -> CType:
        model = model or _default_model()
        return cls(kind=TypeKind.NULLPTR, bits=model.pointer_bits)

    def with_qualifiers(self, *quals: Qualifier) -> CType:
        return replace(self, qualifiers=self.qualifiers | frozenset(quals))

    def const(self) -> CType:
        return self.with_qualifiers(Qualifier.CONST)

    @property
    def unqualified(self) -> CType:
        """Strip top-level qualifiers."""
        if not self.qualifiers:
            return self
        return replace(self, qualifiers=frozenset())

    # ── Predicates ───────────────────────────────────────────────────

    @property
    def is_integer(self) -> bool:
        return self.kind in _INTEGER_KINDS

    @property
    def is_bool(self) -> bool:
        return self.kind == TypeKind.BOOL

    @property
    def is_floating(self) -> bool:
        return self.kind in _FLOAT_KINDS

    @property
    def is_arithmetic(self) -> bool:
        return self.is_integer or self.is_floating

    @property
    def is_enum(self) -> bool:
        return self.kind == TypeKind.ENUM

    @property
    def is_record(self) -> bool:
        return self.kind == TypeKind.RECORD

    @property
    def is_pointer(self) -> bool:
        return self.kind == TypeKind.PTR

    @property
    def is_reference(self) -> bool:
        return self.kind == TypeKind.REF

    @property
    def is_nullptr(self) -> bool:
        return self.kind == TypeKind.NULLPTR

    @property
    def is_void(self) -> bool:
        return self.kind == TypeKind.VOID

    @property
    def is_const(self) -> bool:
        return Qualifier.CONST in self.qualifiers

    @property
    def is_signed(self) -> bool:
        """Signedness of an integer (or enumeration) type."""
        if self.kind == TypeKind.ENUM:
            return underlying_type(self).is_signed
        if self.kind in _FLOAT_KINDS:
            return True
        return self.signed

    @property
    def pointee(self) -> Optional[CType]:
        if self.kind in {TypeKind.PTR, TypeKind.REF}:
            return self.children[0]
        return None

    # ── Limits ───────────────────────────────────────────────────────

    @property
    def min_value(self) -> int:
        if self.kind == TypeKind.ENUM:
            return underlying_type(self).min_value
        self._require_integer()
        if self.is_signed:
            return -(1 << (self.bits - 1))
        return 0

    @property
    def max_value(self) -> int:
        if self.kind == TypeKind.ENUM:
            return underlying_type(self).max_value
        self._require_integer()
        if self.kind == TypeKind.BOOL:
            return 1
        if self.is_signed:
            return (1 << (self.bits - 1)) - 1
        return (1 << self.bits) - 1

    @property
    def max_finite(self) -> float:
        """Largest finite value of a floating type."""
        if self.kind == TypeKind.FLOAT:
            return FLT_MAX
        if self.kind == TypeKind.DOUBLE:
            return sys.float_info.max
        raise TypeError(f"{self} is not a floating type")

    def _require_integer(self) -> None:
        if not self.is_integer:
            raise TypeError(f"{self} is not an integer type")

    def __str__(self) -> str:
        return _type_to_str(self)

    def __repr__(self) -> str:
        return f"CType({_type_to_str(self)})"


FLT_MAX: float = (2.0 - 2.0 ** -23) * 2.0 ** 127


_KIND_SPELLING: Dict[TypeKind, str] = {
    TypeKind.VOID: "void",
    TypeKind.BOOL: "bool",
    TypeKind.CHAR: "char",
    TypeKind.SCHAR: "signed char",
    TypeKind.UCHAR: "unsigned char",
    TypeKind.SHORT: "short",
    TypeKind.USHORT: "unsigned short",
    TypeKind.INT: "int",
    TypeKind.UINT: "unsigned int",
    TypeKind.LONG: "long",
    TypeKind.ULONG: "unsigned long",
    TypeKind.LONG_LONG: "long long",
    TypeKind.ULONG_LONG: "unsigned long long",
    TypeKind.FLOAT: "float",
    TypeKind.DOUBLE: "double",
    TypeKind.NULLPTR: "std::nullptr_t",
}


def _type_to_str(t: CType, depth: int = 0) -> str:
    """Pretty-print a CType in C declarator order."""
    if depth > 20:
        return "..."
    quals = " ".join(q.name.lower() for q in sorted(t.qualifiers, key=lambda q: q.value))
    if t.kind in {TypeKind.PTR, TypeKind.REF}:
        sigil = "*" if t.kind == TypeKind.PTR else "&"
        text = f"{_type_to_str(t.children[0], depth + 1)}{sigil}"
        return f"{text} {quals}" if quals else text
    if t.kind == TypeKind.ENUM:
        base = f"enum {t.name}"
        if t.children:
            base += f" : {_type_to_str(t.children[0], depth + 1)}"
    elif t.kind == TypeKind.RECORD:
        base = f"struct {t.name}"
    else:
        base = t.name or _KIND_SPELLING[t.kind]
    return f"{quals} {base}" if quals else base


# ═════════════════════════════════════════════════════════════════════════
#  PART 3 — TRAITS
# ═════════════════════════════════════════════════════════════════════════

def underlying_type(t: CType) -> CType:
    """Integral representation of *t*.

    Identity for non-enumerations; the declared underlying type of an
    enumeration, or ``int`` when none was declared.
    """
    if t.kind != TypeKind.ENUM:
        return t
    if t.children:
        return t.children[0]
    return CType.int_type()


def as_ctype(obj: Any) -> CType:
    """Coerce a type designator to a ``CType``.

    Accepts a ``CType``, a C type spelling (``"unsigned short"``,
    ``"const char*"``) or an ``enum.Enum`` subclass.
    """
    if isinstance(obj, CType):
        return obj
    if isinstance(obj, str):
        from better_casts.spelling import parse_type
        return parse_type(obj)
    if isinstance(obj, type) and issubclass(obj, _enum.Enum):
        return CType.enum_type(obj)
    raise TypeError(f"cannot interpret {obj!r} as a C type")


__all__ = [
    "TypeKind",
    "Qualifier",
    "DataModel",
    "LP64",
    "LLP64",
    "ILP32",
    "DATA_MODELS",
    "CType",
    "FLT_MAX",
    "underlying_type",
    "as_ctype",
]
