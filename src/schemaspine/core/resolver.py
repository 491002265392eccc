"""
Resolver: turn a schema plus raw input into an ``AttributeRecord``.

Manifesto:
    Resolution is the moment an entity is materialized. Every option is
    either supplied and checked against its kind, or filled from its
    default, or reported missing. Deferred defaults are evaluated here, once
    per option, except that options opting into ``match_other_defaults``
    and naming the same zero-argument computation receive one shared
    evaluation, so an ``inserted_at`` / ``updated_at`` pair gets one instant
    instead of two clock reads.

Architecture:
    ::

        resolve(schema, data, entity)
          │
          ├─ 1. reject supplied keys the schema does not declare
          ├─ 2. for each option, in declaration order
          │      supplied  → matches(kind, value)      else TypeMismatch
          │      required, no default                  → MissingRequired
          │      Literal   → value
          │      Deferred0 → fn()  (shared slot when opted in)
          │      Deferred1 → fn(entity), never cached
          ├─ 3. invariant rules over the resolved record
          └─ 4. Ok(AttributeRecord)

    The ``ResolutionContext`` holds the shared slots for one call and is
    dropped when the call returns; nothing is cached across calls.

Guardrails:
    ❌ DON'T: Reuse a ResolutionContext for two entities
    ✅ DO: Call ``resolve`` once per entity write

    ❌ DON'T: Rely on two unflagged options sharing a generator
    ✅ DO: Set ``match_other_defaults`` on every option that must agree

Tags:
    resolver, defaults, sharing, validation, schema-spine

Doc-Types:
    - API Reference
    - Design Patterns Guide
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from schemaspine.core.errors import (
    DefaultComputationFailedError,
    MissingRequiredError,
    SchemaSpineError,
    TypeMismatchError,
    UnknownOptionError,
)
from schemaspine.core.invariants import InvariantRegistry, default_invariants
from schemaspine.core.kinds import matches
from schemaspine.core.logging import get_logger
from schemaspine.core.options import Deferred0, Deferred1, Literal, OptionSpec
from schemaspine.core.record import AttributeRecord, DefaultToken
from schemaspine.core.result import Err, Ok, Result, try_result_with
from schemaspine.core.schema import Schema
from schemaspine.core.settings import SchemaSpineSettings, get_settings

logger = get_logger(__name__)


def _computation_name(fn: Callable[..., Any]) -> str:
    module = getattr(fn, "__module__", None)
    name = getattr(fn, "__qualname__", None) or repr(fn)
    return f"{module}.{name}" if module else name


@dataclass
class ResolutionContext:
    """
    Per-call cache of shared deferred-default results.

    Shared slots are keyed by the identity of the zero-argument computation,
    never by hashing or equality: two distinct callables that compare equal
    are evaluated separately, and unhashable callables can still share. Each
    slot holds the computation itself so its id stays reserved for the call.
    Only options with ``match_other_defaults`` read or fill a slot; every
    other deferred default is evaluated fresh.
    """

    entity: Any = None
    _shared: dict[int, tuple[Callable[..., Any], tuple[Any, DefaultToken]]] = field(
        default_factory=dict, init=False
    )
    _evaluations: int = field(default=0, init=False)

    def _invoke(
        self,
        option: OptionSpec,
        thunk: Callable[[], Any],
        fn: Callable[..., Any],
        shared: bool,
    ) -> Result[tuple[Any, DefaultToken]]:
        result = try_result_with(
            thunk,
            lambda exc: DefaultComputationFailedError(option.name, exc),
        )
        if result.is_err():
            return result
        self._evaluations += 1
        token = DefaultToken(_computation_name(fn), self._evaluations, shared)
        return Ok((result.unwrap(), token))

    def evaluate(self, option: OptionSpec) -> Result[tuple[Any, DefaultToken | None]]:
        """Produce the default value for ``option`` and its token (None for literals)."""
        match option.default:
            case Literal(value=value):
                return Ok((value, None))
            case Deferred0(computation=fn):
                if not option.match_other_defaults:
                    return self._invoke(option, fn, fn, shared=False)
                key = id(fn)
                if key in self._shared:
                    return Ok(self._shared[key][1])
                result = self._invoke(option, fn, fn, shared=True)
                if result.is_ok():
                    self._shared[key] = (fn, result.unwrap())
                return result
            case Deferred1(computation=fn):
                return self._invoke(option, lambda: fn(self.entity), fn, shared=False)
        raise TypeError(f"Option {option.name} has no default")


def _fail(error: SchemaSpineError) -> Err:
    logger.debug("resolution_failed", error=error.to_dict())
    return Err(error.with_context(operation="resolve"))


def resolve(
    schema: Schema,
    data: Mapping[str, Any] | None = None,
    entity: Any = None,
    *,
    invariants: InvariantRegistry | None = None,
    settings: SchemaSpineSettings | None = None,
) -> Result[AttributeRecord]:
    """
    Resolve ``data`` against ``schema``.

    Args:
        schema: Schema declaring the legal options
        data: Supplied option values; missing options are defaulted
        entity: Entity in progress, passed to ``Deferred1`` computations
        invariants: Rule registry (defaults to the module-level registry)
        settings: Settings override (defaults to ``get_settings()``)

    Returns:
        Ok(AttributeRecord), or Err with the first failure in declaration
        order: UnknownOptionError, TypeMismatchError, MissingRequiredError,
        DefaultComputationFailedError or InvariantViolationError.
    """
    supplied = dict(data or {})
    settings = settings or get_settings()
    invariants = invariants or default_invariants

    for name in supplied:
        if name not in schema:
            return _fail(UnknownOptionError(name))

    context = ResolutionContext(entity=entity)
    values: dict[str, Any] = {}
    tokens: dict[str, DefaultToken] = {}
    defaulted: list[str] = []

    for option in schema:
        if option.name in supplied:
            value = supplied[option.name]
            if not matches(option.kind, value):
                return _fail(TypeMismatchError(option.name, option.kind, value))
            values[option.name] = value
            continue

        if option.default is None:
            if option.required:
                return _fail(MissingRequiredError(option.name))
            continue

        result = context.evaluate(option)
        if result.is_err():
            return _fail(result.error)
        value, token = result.unwrap()
        if (
            token is not None
            and settings.check_computed_defaults
            and not matches(option.kind, value)
        ):
            return _fail(TypeMismatchError(option.name, option.kind, value))

        values[option.name] = value
        defaulted.append(option.name)
        if token is not None:
            tokens[option.name] = token

    record = AttributeRecord(values, tokens, defaulted)
    checked = invariants.check(schema, record)
    if checked.is_err():
        return _fail(checked.error)
    return Ok(record)


__all__ = ["ResolutionContext", "resolve"]
