"""WHERE fragment compilation from field mappings, plus ordering primitives.

A field mapping such as `{"status": "open", "owner_id": 3}` compiles to
`status = :status AND owner_id = :owner_id`; the mapping itself is then
bound as the named parameters of the statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")

JOINERS = ("AND", "OR")
OPERATORS = ("=", "LIKE")


@dataclass(frozen=True)
class OrderBy:
    """Represents one ordering expression."""

    col: str
    desc: bool = False


def ensure_identifier(name: str) -> str:
    """Return `name` unchanged if it is a plain or dotted SQL identifier.

    Raises:
        ValueError: If `name` would break `:name` placeholders or inject SQL.
    """

    if not isinstance(name, str) or not _IDENT_RE.match(name):
        raise ValueError(f"Unsafe SQL identifier: {name!r}")
    return name


def placeholder_name(field: str) -> str:
    """Return the bind parameter name used for `field`."""

    return field.replace(".", "__")


class MappingWhereBuilder:
    """Default WHERE builder joining `field <op> :field` terms."""

    def compile(
        self,
        conditions: Mapping[str, Any],
        *,
        joiner: str = "AND",
        op: str = "=",
        extra_where: str = "",
    ) -> str:
        """Compile a field mapping into a WHERE body.

        Args:
            conditions: Snake-cased field mapping. Keys become placeholders.
            joiner: `AND` or `OR`.
            op: `=` or `LIKE`.
            extra_where: Raw SQL appended verbatim, without any separator.

        Returns:
            The WHERE body (without the `WHERE` keyword). An empty mapping and
            an empty `extra_where` give an empty string, meaning all rows.
        """

        if joiner not in JOINERS:
            raise ValueError(f"Unsupported joiner: {joiner}")
        if op not in OPERATORS:
            raise ValueError(f"Unsupported operator: {op}")

        terms = [
            f"{ensure_identifier(key)} {op} :{placeholder_name(key)}"
            for key in conditions
        ]
        return f" {joiner} ".join(terms) + (extra_where or "")


_default_builder = MappingWhereBuilder()


def where_and(conditions: Mapping[str, Any], extra_where: str = "") -> str:
    """Build `a = :a AND b = :b` followed by `extra_where`."""

    return _default_builder.compile(conditions, extra_where=extra_where)


def where_and_like(conditions: Mapping[str, Any], extra_where: str = "") -> str:
    """Build `a LIKE :a AND b LIKE :b` followed by `extra_where`."""

    return _default_builder.compile(conditions, op="LIKE", extra_where=extra_where)


def where_or(conditions: Mapping[str, Any], extra_where: str = "") -> str:
    """Build `a = :a OR b = :b` followed by `extra_where`."""

    return _default_builder.compile(conditions, joiner="OR", extra_where=extra_where)


def where_or_like(conditions: Mapping[str, Any], extra_where: str = "") -> str:
    """Build `a LIKE :a OR b LIKE :b` followed by `extra_where`."""

    return _default_builder.compile(
        conditions, joiner="OR", op="LIKE", extra_where=extra_where
    )


def bind_conditions(conditions: Mapping[str, Any]) -> dict[str, Any]:
    """Return the named parameters matching a compiled condition mapping.

    Raises:
        ValueError: If two fields share a placeholder, e.g. `u.id` and
            `u__id`.
    """

    params: dict[str, Any] = {}
    sources: dict[str, str] = {}
    for key, value in conditions.items():
        name = placeholder_name(key)
        if name in sources:
            raise ValueError(
                f"Fields {sources[name]!r} and {key!r} both bind as :{name}."
            )
        sources[name] = key
        params[name] = value
    return params


def where_in(
    column: str, values: Sequence[Any], *, prefix: str = "ids"
) -> tuple[str, dict[str, Any]]:
    """Build `column IN (:ids_0, :ids_1, ...)` and its named parameters.

    An empty `values` sequence compiles to `1=0`, which matches no rows.
    """

    ensure_identifier(column)
    items = list(values)
    if not items:
        return "1=0", {}
    keys = [f"{prefix}_{index}" for index in range(len(items))]
    placeholders = ", ".join(f":{key}" for key in keys)
    return f"{column} IN ({placeholders})", dict(zip(keys, items))
