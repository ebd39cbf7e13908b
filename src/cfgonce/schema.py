"""Conversion between configuration payloads and plain data.

Codecs only understand plain data (dicts, lists, strings, numbers, booleans).
Dataclass payloads are flattened with `to_plain` before writing and rebuilt
with `from_plain` after reading.
"""

import dataclasses
import typing
from typing import Any, TypeVar

T = TypeVar("T")


class SchemaMismatch(ValueError):
    """Plain data does not fit the requested dataclass."""


def to_plain(value: Any) -> Any:
    """Converts dataclasses and tuples into dicts and lists, recursively."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)
        }
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def from_plain(schema: type[T], data: Any) -> T:
    """Builds an instance of `schema` from plain data.

    Nested dataclass fields are rebuilt recursively. Values of other fields are
    passed through untouched.

    Args:
        schema (type[T]): The target type.
        data (Any): Decoded file contents.

    Returns:
        T: The rebuilt payload.

    Raises:
        SchemaMismatch: If `data` is not a mapping, has unknown keys, or
            misses required fields.
    """
    if isinstance(data, schema):
        return data
    if not dataclasses.is_dataclass(schema):
        try:
            return schema(data)  # type: ignore[call-arg]
        except (TypeError, ValueError) as e:
            raise SchemaMismatch(f"Cannot build {schema.__name__}: {e}") from e

    if not isinstance(data, dict):
        raise SchemaMismatch(
            f"Expected a table for {schema.__name__}, got {type(data).__name__}"
        )

    fields = {f.name: f for f in dataclasses.fields(schema) if f.init}
    unknown = set(data) - set(fields)
    if unknown:
        raise SchemaMismatch(
            f"Unknown keys for {schema.__name__}: "
            f"{', '.join(sorted(map(str, unknown)))}"
        )

    hints = typing.get_type_hints(schema)
    kwargs = {}
    for name, value in data.items():
        hint = hints.get(name)
        if isinstance(hint, type) and dataclasses.is_dataclass(hint):
            value = from_plain(hint, value)
        kwargs[name] = value

    try:
        return schema(**kwargs)
    except TypeError as e:
        raise SchemaMismatch(f"Cannot build {schema.__name__}: {e}") from e
