"""
Record codec (``inventory_kernel.domain.records``).

Responsibility
--------------
Converts between the frozen domain records and plain mappings of
JSON/YAML-compatible values.  Used by ``parse_command`` for
``{kind, payload}`` input, by ``to_snapshot`` for read-only projections, and
by the configuration loader for seed data.

Field values are coerced from the dataclass annotations: enums from their
``value``, ``Decimal`` from numbers or strings, ``date`` from ISO strings,
tuples from lists, and nested records (history events, purchase orders...)
recursively.

Failure modes
-------------
- Unknown field names raise ``ValueError``.
- Missing required fields raise ``TypeError`` from the dataclass constructor.
- Unparseable values raise ``ValueError``.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Iterable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, TypeVar

T = TypeVar("T")


@lru_cache(maxsize=None)
def _field_types(cls: type) -> dict[str, Any]:
    hints = typing.get_type_hints(cls)
    return {f.name: hints[f.name] for f in dataclasses.fields(cls)}


def field_names(cls: type) -> frozenset[str]:
    return frozenset(_field_types(cls))


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Cannot parse date from {value!r}")


def _parse_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse decimal from {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse decimal from {value!r}") from exc


def coerce_value(annotation: Any, value: Any) -> Any:
    """Coerce ``value`` to the type described by ``annotation``."""
    origin = typing.get_origin(annotation)

    if origin in (typing.Union, types.UnionType):
        if value is None:
            return None
        options = [a for a in typing.get_args(annotation) if a is not type(None)]
        return coerce_value(options[0], value)

    if origin is tuple:
        item_type = typing.get_args(annotation)[0]
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise ValueError(f"Expected a sequence, got {value!r}")
        return tuple(coerce_value(item_type, item) for item in value)

    if annotation is date:
        return _parse_date(value)

    if isinstance(annotation, type):
        if isinstance(value, annotation) and not (
            annotation is int and isinstance(value, bool)
        ):
            return value
        if issubclass(annotation, Enum):
            return annotation(value)
        if annotation is Decimal:
            return _parse_decimal(value)
        if annotation is bool:
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes")
            return bool(value)
        if annotation is int:
            return int(value)
        if annotation is str:
            # YAML hands back timestamps as datetime objects
            if isinstance(value, (date, datetime)):
                return value.isoformat()
            return str(value)
        if dataclasses.is_dataclass(annotation):
            if not isinstance(value, Mapping):
                raise ValueError(
                    f"Expected a mapping for {annotation.__name__}, got {value!r}"
                )
            return record_from_dict(annotation, value)

    return value


def coerce_fields(cls: type, data: Mapping[str, Any]) -> dict[str, Any]:
    """Coerce a (possibly partial) mapping of field values for ``cls``."""
    types_by_name = _field_types(cls)
    unknown = set(data) - set(types_by_name)
    if unknown:
        raise ValueError(
            f"Unknown field(s) for {cls.__name__}: {', '.join(sorted(unknown))}"
        )
    return {
        name: coerce_value(types_by_name[name], value)
        for name, value in data.items()
    }


def record_from_dict(cls: type[T], data: Mapping[str, Any]) -> T:
    """Build a ``cls`` record from a plain mapping."""
    return cls(**coerce_fields(cls, data))


def to_plain(value: Any) -> Any:
    """Render a record (or any nested value) as JSON-compatible data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_plain(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (tuple, list)):
        return [to_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    return value
