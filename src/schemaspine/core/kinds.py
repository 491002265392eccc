"""
Constraint kinds: the closed set of value shapes an option can declare.

Manifesto:
    An option's kind is data, not a callable. Kinds compare by value, print
    themselves for error messages, and are checked by one ``matches``
    function that dispatches over every variant, so adding a variant means
    touching exactly one ``match`` statement.

Architecture:
    ::

        ConstraintKind
        ├── Symbol              identifier string
        ├── Bool                True / False
        ├── Str                 any string
        ├── OrderedKV           mapping or sequence of (symbol, value) pairs
        ├── OneOf(allowed)      member of a non-empty symbol set
        ├── AnyOf(members)      matches any member kind, left to right
        ├── Deferred(arity)     callable with exactly 0 or 1 positional args
        ├── LiteralOrDeferred   any non-callable, or a Deferred(0|1) callable
        ├── TypeName            a name in the data-type registry
        └── OfType(type_name)   a value the named data type accepts

Examples:
    >>> matches(OneOf({"simple_equality"}), "simple_equality")
    True
    >>> matches(AnyOf([Bool(), OneOf({"simple_equality"})]), True)
    True
    >>> matches(Deferred(0), lambda record: record)
    False

Guardrails:
    ❌ DON'T: Raise from ``matches``; a kind check is a plain yes/no
    ✅ DO: Raise ``InvalidSchemaError`` from constructors for malformed kinds

Tags:
    constraint-kind, tagged-variant, validation, schema-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from schemaspine.core import datatypes
from schemaspine.core.errors import InvalidSchemaError


class ConstraintKind:
    """Base class for every constraint kind."""

    __slots__ = ()

    def matches(self, value: Any) -> bool:
        return matches(self, value)

    def describe(self) -> str:
        return describe(self)

    def __str__(self) -> str:
        return describe(self)


@dataclass(frozen=True, slots=True)
class Symbol(ConstraintKind):
    """An identifier-shaped string, e.g. ``"inserted_at"``."""


@dataclass(frozen=True, slots=True)
class Bool(ConstraintKind):
    pass


@dataclass(frozen=True, slots=True)
class Str(ConstraintKind):
    pass


@dataclass(frozen=True, slots=True)
class OrderedKV(ConstraintKind):
    """Ordered key-value list: a mapping, or a sequence of ``(symbol, value)`` pairs."""


@dataclass(frozen=True, slots=True)
class OneOf(ConstraintKind):
    """Value must be one of ``allowed``."""

    allowed: frozenset[str]

    def __init__(self, allowed: Iterable[str]):
        allowed = frozenset(allowed)
        if not allowed:
            raise InvalidSchemaError("OneOf requires at least one allowed value")
        if not all(isinstance(item, str) for item in allowed):
            raise InvalidSchemaError("OneOf allowed values must be symbols")
        object.__setattr__(self, "allowed", allowed)


@dataclass(frozen=True, slots=True)
class AnyOf(ConstraintKind):
    """Union of kinds: value matches if any member matches."""

    members: tuple[ConstraintKind, ...]

    def __init__(self, members: Iterable[ConstraintKind]):
        members = tuple(members)
        if not members:
            raise InvalidSchemaError("AnyOf requires at least one member kind")
        for member in members:
            if not isinstance(member, ConstraintKind):
                raise InvalidSchemaError(f"AnyOf member is not a constraint kind: {member!r}")
        object.__setattr__(self, "members", members)


@dataclass(frozen=True, slots=True)
class Deferred(ConstraintKind):
    """A computation invokable with exactly ``arity`` positional arguments."""

    arity: int

    def __post_init__(self) -> None:
        if isinstance(self.arity, bool) or self.arity not in (0, 1):
            raise InvalidSchemaError(f"Deferred arity must be 0 or 1, got {self.arity!r}")


@dataclass(frozen=True, slots=True)
class LiteralOrDeferred(ConstraintKind):
    """Any literal, or a zero/one-argument computation."""


@dataclass(frozen=True, slots=True)
class TypeName(ConstraintKind):
    """The name of a registered data type."""


@dataclass(frozen=True, slots=True)
class OfType(ConstraintKind):
    """A value accepted by the registered data type ``type_name``.

    ``entity_default`` lets the option carry a one-argument default
    computation. Supplied values are still checked against the data type.
    """

    type_name: str
    allow_none: bool = False
    entity_default: bool = False


# =============================================================================
# PREDICATES
# =============================================================================


def _binds(signature: inspect.Signature, count: int) -> bool:
    try:
        signature.bind(*([None] * count))
    except TypeError:
        return False
    return True


def accepts_arity(fn: Any, arity: int) -> bool:
    """True when ``fn`` takes exactly ``arity`` positional arguments.

    Exactly means no fewer and no more: ``def f(x=None)`` and ``def f(*args)``
    satisfy neither arity. Callables without an introspectable signature
    (some builtins and C types) are taken at their word.
    """
    if not callable(fn):
        return False
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True
    if not _binds(signature, arity) or _binds(signature, arity + 1):
        return False
    return arity == 0 or not _binds(signature, arity - 1)


def _is_symbol(value: Any) -> bool:
    return isinstance(value, str) and value.isidentifier()


def _is_ordered_kv(value: Any) -> bool:
    if isinstance(value, Mapping):
        return all(_is_symbol(key) for key in value)
    if isinstance(value, (list, tuple)):
        return all(
            isinstance(item, tuple) and len(item) == 2 and _is_symbol(item[0])
            for item in value
        )
    return False


def _type_accepts(type_name: str, value: Any) -> bool:
    if not datatypes.is_registered_type(type_name):
        return False
    try:
        return bool(datatypes.get_type_checker(type_name)(value))
    except Exception:
        return False


def matches(kind: ConstraintKind, value: Any) -> bool:
    """Check ``value`` against ``kind``. Pure and total."""
    match kind:
        case Symbol():
            return _is_symbol(value)
        case Bool():
            return isinstance(value, bool)
        case Str():
            return isinstance(value, str)
        case OrderedKV():
            return _is_ordered_kv(value)
        case OneOf(allowed=allowed):
            return isinstance(value, str) and value in allowed
        case AnyOf(members=members):
            return any(matches(member, value) for member in members)
        case Deferred(arity=arity):
            return accepts_arity(value, arity)
        case LiteralOrDeferred():
            if not callable(value):
                return True
            return accepts_arity(value, 0) or accepts_arity(value, 1)
        case TypeName():
            return datatypes.is_registered_type(value)
        case OfType(type_name=type_name, allow_none=allow_none):
            if value is None:
                return allow_none
            return _type_accepts(type_name, value)
    raise TypeError(f"Not a constraint kind: {kind!r}")


def describe(kind: ConstraintKind) -> str:
    """Human-readable kind name for docs and error messages."""
    match kind:
        case Symbol():
            return "atom"
        case Bool():
            return "boolean"
        case Str():
            return "string"
        case OrderedKV():
            return "keyword list"
        case OneOf(allowed=allowed):
            return f"one of {sorted(allowed)}"
        case AnyOf(members=members):
            return " | ".join(describe(member) for member in members)
        case Deferred(arity=arity):
            return f"function/{arity}"
        case LiteralOrDeferred():
            return "literal or function/0|1"
        case TypeName():
            return "type name"
        case OfType(type_name=type_name, allow_none=allow_none):
            return f"{type_name} or None" if allow_none else type_name
    raise TypeError(f"Not a constraint kind: {kind!r}")


__all__ = [
    "ConstraintKind",
    "Symbol",
    "Bool",
    "Str",
    "OrderedKV",
    "OneOf",
    "AnyOf",
    "Deferred",
    "LiteralOrDeferred",
    "TypeName",
    "OfType",
    "accepts_arity",
    "matches",
    "describe",
]
