"""Key case conversion between application camelCase and storage snake_case.

Rows coming out of the database use the table's snake_case column names
while application code works with camelCase field names. The helpers here
rewrite mapping keys in either direction, for one mapping or a sequence of
mappings, optionally descending into nested values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from pydantic.alias_generators import to_camel as _to_camel
from pydantic.alias_generators import to_snake as _to_snake

KeyFunc = Callable[[str], str]


def snake_key(key: str) -> str:
    """Convert one camelCase key to snake_case."""

    return _to_snake(key)


def camel_key(key: str) -> str:
    """Convert one snake_case key to camelCase.

    PascalCase keys without underscores, such as `FirstName`, only have
    their first letter lowered so the word boundaries survive.
    """

    if "_" not in key and key[:1].isupper() and not key.isupper():
        return key[0].lower() + key[1:]
    return _to_camel(key)


def to_snake(obj: Any, recursive: bool = False) -> Any:
    """Rewrite mapping keys from camelCase to snake_case.

    Args:
        obj: One mapping, or a list/tuple of mappings.
        recursive: Also convert keys of nested mappings and of mappings
            held inside nested lists/tuples.

    Returns:
        A new `dict`, or a `list` of new dicts for sequence input.

    Raises:
        TypeError: If `obj` is neither a mapping nor a list/tuple.
        ValueError: If two keys convert to the same snake_case key.
    """

    return _convert(obj, snake_key, recursive)


def to_camel(obj: Any, recursive: bool = False) -> Any:
    """Rewrite mapping keys from snake_case to camelCase.

    Mirrors `to_snake`; see it for arguments and errors.
    """

    return _convert(obj, camel_key, recursive)


def _convert(obj: Any, key_func: KeyFunc, recursive: bool) -> Any:
    if isinstance(obj, Mapping):
        return _convert_mapping(obj, key_func, recursive)
    if isinstance(obj, (list, tuple)):
        return [_convert_item(item, key_func, recursive) for item in obj]
    raise TypeError(
        f"Expected a mapping or a list/tuple of mappings, got {type(obj).__name__}."
    )


def _convert_item(item: Any, key_func: KeyFunc, recursive: bool) -> Any:
    if not isinstance(item, Mapping):
        raise TypeError(
            f"Sequence elements must be mappings, got {type(item).__name__}."
        )
    return _convert_mapping(item, key_func, recursive)


def _convert_mapping(
    data: Mapping[Any, Any], key_func: KeyFunc, recursive: bool
) -> dict[Any, Any]:
    converted: dict[Any, Any] = {}
    sources: dict[Any, Any] = {}
    for key, value in data.items():
        new_key = key_func(key) if isinstance(key, str) else key
        if new_key in sources:
            raise ValueError(
                f"Keys {sources[new_key]!r} and {key!r} both convert to {new_key!r}."
            )
        sources[new_key] = key
        converted[new_key] = _convert_nested(value, key_func) if recursive else value
    return converted


def _convert_nested(value: Any, key_func: KeyFunc) -> Any:
    if isinstance(value, Mapping):
        return _convert_mapping(value, key_func, True)
    if isinstance(value, (list, tuple)):
        return [_convert_nested(item, key_func) for item in value]
    return value
