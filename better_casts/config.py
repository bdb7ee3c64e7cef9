"""
better_casts/config.py
══════════════════════

Build-wide settings, fixed once when the package is imported.

    BETTER_CASTS_CHECK        always | never        (unset → __debug__)
    BETTER_CASTS_ROUNDING     ceiling | floor | round | truncate
    BETTER_CASTS_DATA_MODEL   LP64 | LLP64 | ILP32

``CHECK_CASTS`` decides whether the unqualified ``narrow_cast`` /
``sign_cast`` / ``float_cast`` / ``enum_cast`` entry points resolve to the
checked or the unchecked variant.  Left unset it follows ``__debug__``, so
running Python with ``-O`` selects the unchecked fast path.

None of these are meant to change while the program runs; the engine binds
its entry points from them at import time.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

from better_casts.rounding import RoundingMode
from better_casts.type_model import DATA_MODELS, LP64, DataModel

_log = logging.getLogger(__name__)

ENV_CHECK = "BETTER_CASTS_CHECK"
ENV_ROUNDING = "BETTER_CASTS_ROUNDING"
ENV_DATA_MODEL = "BETTER_CASTS_DATA_MODEL"


def read_check_casts(environ: Mapping[str, str]) -> bool:
    raw = environ.get(ENV_CHECK, "").strip().lower()
    if not raw:
        return __debug__
    if raw in ("always", "1", "true", "yes", "on"):
        return True
    if raw in ("never", "0", "false", "no", "off"):
        return False
    _log.warning("ignoring %s=%r (expected 'always' or 'never')", ENV_CHECK, raw)
    return __debug__


def read_rounding(environ: Mapping[str, str]) -> RoundingMode:
    raw = environ.get(ENV_ROUNDING, "").strip()
    if not raw:
        return RoundingMode.TRUNCATE
    try:
        return RoundingMode.parse(raw)
    except ValueError:
        _log.warning("ignoring %s=%r; using truncate", ENV_ROUNDING, raw)
        return RoundingMode.TRUNCATE


def read_data_model(environ: Mapping[str, str]) -> DataModel:
    raw = environ.get(ENV_DATA_MODEL, "").strip().upper()
    if not raw:
        return LP64
    model: Optional[DataModel] = DATA_MODELS.get(raw)
    if model is None:
        _log.warning(
            "ignoring %s=%r (known models: %s)",
            ENV_DATA_MODEL, raw, ", ".join(sorted(DATA_MODELS)),
        )
        return LP64
    return model


CHECK_CASTS: bool = read_check_casts(os.environ)
DEFAULT_ROUNDING: RoundingMode = read_rounding(os.environ)
DATA_MODEL: DataModel = read_data_model(os.environ)


def describe() -> Dict[str, Any]:
    """Effective settings, for diagnostics."""
    return {
        "check_casts": CHECK_CASTS,
        "default_rounding": DEFAULT_ROUNDING.name.lower(),
        "data_model": DATA_MODEL.name,
        "debug": __debug__,
    }


__all__ = [
    "CHECK_CASTS",
    "DEFAULT_ROUNDING",
    "DATA_MODEL",
    "ENV_CHECK",
    "ENV_ROUNDING",
    "ENV_DATA_MODEL",
    "read_check_casts",
    "read_rounding",
    "read_data_model",
    "describe",
]
