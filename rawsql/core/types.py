"""Shared core type aliases used across contracts, builders, and ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

NamedParams = Dict[str, Any]
PositionalParams = List[Any]
QueryParams = Union[NamedParams, PositionalParams, None]

FieldMapping = Mapping[str, Any]
RowMapping = Mapping[str, Any]
Rows = List[RowMapping]
MaybeRow = Optional[RowMapping]


@dataclass(frozen=True)
class ExecuteResult:
    """Outcome of a write statement as reported by the DB-API cursor.

    Attributes:
        rowcount: Affected rows, or `-1` when the driver cannot tell.
        lastrowid: Last inserted row id when the driver exposes one.
    """

    rowcount: int = -1
    lastrowid: Optional[int] = None
