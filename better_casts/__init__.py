"""
better_casts — Explicit, checked conversions between C primitive types
======================================================================

Every conversion is an explicit call that names its destination and source
types, and belongs to exactly one category:

up_cast / void_cast
    Safe by construction (widening, derived-to-base, ``void*`` erasure).
narrow_cast
    Same-kind arithmetic conversion to a type of equal or smaller range.
sign_cast
    Integer conversion that changes signedness.
float_cast
    Floating point ↔ integer, with a selectable ``RoundingMode``.
enum_cast
    Enumeration ↔ integer.

Each validating category has ``*_checked`` and ``*_unchecked`` variants; the
plain name is bound to one of them by the build-wide ``CHECK_CASTS`` switch
(see ``better_casts.config``).

Quick start
-----------
>>> from better_casts import narrow_cast_checked, float_cast_checked, RoundingMode
>>> narrow_cast_checked("int8_t", "int32_t", 100)
100
>>> float_cast_checked("int", "double", 3.7, RoundingMode.CEILING)
4

Package layout
--------------
::

    better_casts/
    ├── __init__.py            ← this file
    ├── __main__.py            ← command line interface
    ├── type_model.py          ← CType, data models, underlying_type
    ├── spelling.py            ← C type spelling parser (parsimonious)
    ├── rounding.py
    ├── errors.py
    ├── config.py
    ├── predicates.py
    ├── outcome.py
    └── engine.py
"""

from __future__ import annotations

import importlib
import logging
import sys
from typing import TYPE_CHECKING, Dict, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.4.0"
__author__ = "better-casts contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated below

_log = logging.getLogger(__name__)
_log.addHandler(logging.NullHandler())

# ---------------------------------------------------------------------------
# Re-export registry: (module_name, list_of_names_to_import)
# ---------------------------------------------------------------------------

_CORE_MODULES: Dict[str, List[str]] = {
    "type_model": [
        "CType",
        "TypeKind",
        "Qualifier",
        "DataModel",
        "LP64",
        "LLP64",
        "ILP32",
        "underlying_type",
        "as_ctype",
    ],
    "spelling": [
        "parse_type",
        "TypeSpellingError",
    ],
    "rounding": [
        "RoundingMode",
        "round_integral",
    ],
    "errors": [
        "CastType",
        "CastViolation",
        "CastError",
        "NarrowCastError",
        "SignCastError",
        "FloatCastError",
        "EnumCastError",
        "CastDefinitionError",
    ],
    "config": [
        "CHECK_CASTS",
        "DEFAULT_ROUNDING",
    ],
    "predicates": [
        "is_up_castable",
        "is_void_castable",
        "is_narrow_castable",
        "is_sign_castable",
        "is_float_castable",
        "is_enum_castable",
        "castable_categories",
        "classify",
    ],
    "outcome": [
        "CastOutcome",
    ],
    "engine": [
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
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"better_casts: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        if not hasattr(mod, name):
            raise AttributeError(f"better_casts.{module_rel_name} does not export '{name}'")
        setattr(current_module, name, getattr(mod, name))
        __all__.append(name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names


def package_info() -> dict:
    """Metadata and effective configuration, for logging and bug reports."""
    from better_casts import config

    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "config": config.describe(),
    }


__all__ += ["package_info", "__version__"]

# ---------------------------------------------------------------------------
# TYPE_CHECKING block — gives IDEs full visibility without runtime cost
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .type_model import (
        CType as CType,
        TypeKind as TypeKind,
        Qualifier as Qualifier,
        DataModel as DataModel,
        LP64 as LP64,
        LLP64 as LLP64,
        ILP32 as ILP32,
        underlying_type as underlying_type,
        as_ctype as as_ctype,
    )
    from .spelling import (
        parse_type as parse_type,
        TypeSpellingError as TypeSpellingError,
    )
    from .rounding import (
        RoundingMode as RoundingMode,
        round_integral as round_integral,
    )
    from .errors import (
        CastType as CastType,
        CastViolation as CastViolation,
        CastError as CastError,
        NarrowCastError as NarrowCastError,
        SignCastError as SignCastError,
        FloatCastError as FloatCastError,
        EnumCastError as EnumCastError,
        CastDefinitionError as CastDefinitionError,
    )
    from .config import (
        CHECK_CASTS as CHECK_CASTS,
        DEFAULT_ROUNDING as DEFAULT_ROUNDING,
    )
    from .predicates import (
        is_up_castable as is_up_castable,
        is_void_castable as is_void_castable,
        is_narrow_castable as is_narrow_castable,
        is_sign_castable as is_sign_castable,
        is_float_castable as is_float_castable,
        is_enum_castable as is_enum_castable,
        castable_categories as castable_categories,
        classify as classify,
    )
    from .outcome import CastOutcome as CastOutcome
    from .engine import (
        up_cast as up_cast,
        void_cast as void_cast,
        narrow_cast as narrow_cast,
        narrow_cast_checked as narrow_cast_checked,
        narrow_cast_unchecked as narrow_cast_unchecked,
        sign_cast as sign_cast,
        sign_cast_checked as sign_cast_checked,
        sign_cast_unchecked as sign_cast_unchecked,
        float_cast as float_cast,
        float_cast_checked as float_cast_checked,
        float_cast_unchecked as float_cast_unchecked,
        enum_cast as enum_cast,
        enum_cast_checked as enum_cast_checked,
        enum_cast_unchecked as enum_cast_unchecked,
        cast as cast,
        cast_checked as cast_checked,
        cast_unchecked as cast_unchecked,
        try_cast as try_cast,
        Caster as Caster,
        make_caster as make_caster,
    )
