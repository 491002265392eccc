"""
Option specs and default values.

An ``OptionSpec`` declares one named field: its kind, whether it is
required, its default, its documentation, and whether its deferred default
is shared with other options that opt in (``match_other_defaults``).

Defaults are a tagged variant, arity-tagged once at construction instead of
inspected every time a record is resolved:

    ┌──────────────────┬─────────────────────────────────────────────┐
    │ Literal(value)   │ used as-is (a function here is just a value) │
    │ Deferred0(fn)    │ fn() at resolution, shareable per call       │
    │ Deferred1(fn)    │ fn(entity) at resolution, never cached       │
    └──────────────────┴─────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Pass a bare function where a value is meant to be deferred
    ✅ DO: Wrap it in ``Deferred0`` / ``Deferred1``, or use ``as_default``

Tags:
    option-spec, defaults, deferred, schema-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from schemaspine.core.errors import InvalidSchemaError
from schemaspine.core.kinds import (
    AnyOf,
    ConstraintKind,
    Deferred,
    LiteralOrDeferred,
    OfType,
    accepts_arity,
    matches,
)


class DefaultValue:
    """Base class for default value variants."""

    __slots__ = ()

    @property
    def is_deferred(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Literal(DefaultValue):
    value: Any


@dataclass(frozen=True, slots=True)
class Deferred0(DefaultValue):
    """Zero-argument computation evaluated at resolution time."""

    computation: Callable[[], Any]

    def __post_init__(self) -> None:
        if not accepts_arity(self.computation, 0):
            raise InvalidSchemaError(
                f"Deferred0 needs a zero-argument callable, got {self.computation!r}"
            )

    @property
    def is_deferred(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Deferred1(DefaultValue):
    """Computation receiving the entity being materialized."""

    computation: Callable[[Any], Any]

    def __post_init__(self) -> None:
        if not accepts_arity(self.computation, 1):
            raise InvalidSchemaError(
                f"Deferred1 needs a one-argument callable, got {self.computation!r}"
            )

    @property
    def is_deferred(self) -> bool:
        return True


def as_default(value: Any) -> DefaultValue | None:
    """
    Build a default from a plain value, tagging callables by arity.

    ``None`` means no default. Callables become ``Deferred0`` or
    ``Deferred1``; anything else is a ``Literal``.

    Examples:
        >>> as_default(False)
        Literal(value=False)
        >>> as_default(utc_now)
        Deferred0(computation=<function utc_now ...>)

    Raises:
        InvalidSchemaError: callable that takes neither zero nor one argument
    """
    if value is None or isinstance(value, DefaultValue):
        return value
    if callable(value):
        if accepts_arity(value, 0):
            return Deferred0(value)
        if accepts_arity(value, 1):
            return Deferred1(value)
        raise InvalidSchemaError(f"Default computation must take 0 or 1 arguments: {value!r}")
    return Literal(value)


def literal_default(value: Any) -> DefaultValue | None:
    """Like ``as_default`` but never defers: callables stay literal values."""
    if value is None or isinstance(value, DefaultValue):
        return value
    return Literal(value)


def _admits_entity_computation(kind: ConstraintKind) -> bool:
    match kind:
        case LiteralOrDeferred():
            return True
        case Deferred(arity=1):
            return True
        case OfType(entity_default=True):
            return True
        case AnyOf(members=members):
            return any(_admits_entity_computation(member) for member in members)
    return False


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """
    One named option: kind, required-ness, default, documentation.

    Construction validates the spec against itself, so a malformed option
    never reaches the resolver:

    - ``name`` must be an identifier
    - a ``Literal`` default must satisfy ``kind``
    - a ``Deferred1`` default needs a kind that admits entity computations
      (``LiteralOrDeferred``, ``Deferred(1)`` or ``OfType(entity_default=True)``,
      directly or in an ``AnyOf``)

    Attributes:
        name: Option name, unique within a schema
        kind: Constraint kind supplied values must match
        required: Fail resolution when neither supplied nor defaulted
        default: ``Literal``, ``Deferred0``, ``Deferred1`` or None
        doc: Documentation text
        match_other_defaults: Share a zero-argument deferred default with
            every other opted-in option using the same computation
        links: Documentation references (guides, modules)
    """

    name: str
    kind: ConstraintKind
    required: bool = False
    default: DefaultValue | None = None
    doc: str = ""
    match_other_defaults: bool = False
    links: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise InvalidSchemaError(f"Option name must be an identifier: {self.name!r}")
        if not isinstance(self.kind, ConstraintKind):
            raise InvalidSchemaError(f"Option {self.name} has no constraint kind: {self.kind!r}")
        if self.default is not None and not isinstance(self.default, DefaultValue):
            raise InvalidSchemaError(
                f"Option {self.name} default must be Literal, Deferred0 or Deferred1"
            )
        if isinstance(self.default, Literal) and not matches(self.kind, self.default.value):
            raise InvalidSchemaError(
                f"Option {self.name} default {self.default.value!r} is not {self.kind}"
            )
        if isinstance(self.default, Deferred1) and not _admits_entity_computation(self.kind):
            raise InvalidSchemaError(
                f"Option {self.name} has an entity default but kind {self.kind}"
            )
        object.__setattr__(self, "links", tuple(self.links))

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def with_default(self, default: DefaultValue | None) -> OptionSpec:
        return replace(self, default=default)

    def with_kind(self, kind: ConstraintKind) -> OptionSpec:
        return replace(self, kind=kind)


__all__ = [
    "DefaultValue",
    "Literal",
    "Deferred0",
    "Deferred1",
    "as_default",
    "literal_default",
    "OptionSpec",
]
