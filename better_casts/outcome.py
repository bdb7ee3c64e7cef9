"""Result container for casts that report failure as a value."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from better_casts.errors import CastError

T = TypeVar("T")


@dataclass(frozen=True)
class CastOutcome(Generic[T]):
    """Either a converted ``value`` or the ``error`` that prevented it."""

    value: Optional[T] = None
    error: Optional[CastError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: Any) -> Any:
        return default if self.error is not None else self.value

    def __bool__(self) -> bool:
        return self.ok


__all__ = ["CastOutcome"]
