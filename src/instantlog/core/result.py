"""Structured results for backend calls.

Transport and payload failures are returned as values so callers can always
render something. Only programming errors raise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .enums import ApiErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ApiErrorKind
    msg: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "msg": self.msg, "kind": self.kind.value}


Result = Union[Ok[T], Err]
