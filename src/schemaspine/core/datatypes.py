"""Named data-type registry backing the ``TypeName`` and ``OfType`` kinds.

Manifesto:
    The engine does not own a type system. Attribute types are names looked
    up here, each mapped to a predicate, so domain packages can register
    their own (``money``, ``ticker``, ...) without touching the kinds.

Tags:
    schema-spine, registry, types, lookup

Doc-Types:
    api-reference
"""

import uuid
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from schemaspine.core.logging import get_logger

logger = get_logger(__name__)

TypeChecker = Callable[[Any], bool]


def _is_uuid(value: Any) -> bool:
    if isinstance(value, uuid.UUID):
        return True
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def _is_utc_datetime(value: Any) -> bool:
    if not isinstance(value, datetime):
        return False
    offset = value.utcoffset()
    return offset is not None and offset.total_seconds() == 0


def _is_utc_datetime_seconds(value: Any) -> bool:
    return _is_utc_datetime(value) and value.microsecond == 0


BUILTIN_TYPES: dict[str, TypeChecker] = {
    "string": lambda v: isinstance(v, str),
    "integer": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "boolean": lambda v: isinstance(v, bool),
    "atom": lambda v: isinstance(v, str) and v.isidentifier(),
    "map": lambda v: isinstance(v, Mapping),
    "uuid": _is_uuid,
    "date": lambda v: isinstance(v, date) and not isinstance(v, datetime),
    "utc_datetime": _is_utc_datetime_seconds,
    "utc_datetime_usec": _is_utc_datetime,
    "term": lambda v: True,
}

# Global type registry
_registry: dict[str, TypeChecker] = dict(BUILTIN_TYPES)


def register_type(name: str, checker: TypeChecker, *, replace: bool = False) -> None:
    """Register a named data type."""
    if name in _registry and not replace:
        raise ValueError(f"Type '{name}' is already registered")
    _registry[name] = checker
    logger.debug("type_registered", name=name)


def get_type_checker(name: str) -> TypeChecker:
    """Get the predicate for a type name."""
    if name not in _registry:
        available = ", ".join(sorted(_registry))
        raise KeyError(f"Type '{name}' not found. Available: {available}")
    return _registry[name]


def is_registered_type(name: Any) -> bool:
    return isinstance(name, str) and name in _registry


def list_types() -> list[str]:
    """List all registered type names."""
    return sorted(_registry)


def clear_type_registry() -> None:
    """Drop custom types and restore the built-ins (for testing)."""
    _registry.clear()
    _registry.update(BUILTIN_TYPES)
