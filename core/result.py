# core/result.py

"""
Discriminated result returned by lifecycle operations.

Expected failures (validation, authorization, invalid transition) come back
as ``Err``; backend faults (``StoreError`` / ``NotFoundError``) are raised.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from core.errors import SocietyError, to_http_exception

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: SocietyError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def unwrap_or_raise(result: Result) -> Any:
    """
    Return the success value or raise the matching HTTPException.
    Used by routers; services never call this.
    """
    if isinstance(result, Err):
        raise to_http_exception(result.error)
    return result.value
