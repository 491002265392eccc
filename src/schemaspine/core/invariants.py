"""
Cross-field invariants checked after every option has resolved.

Manifesto:
    Single-option checks cannot see relationships between options. Rules
    here receive the fully resolved record and return ``Ok(None)`` or
    ``Err(InvariantViolationError)``. They are schema-independent: a rule
    that looks for ``primary_key`` simply passes on records without one.

Architecture:
    ::

        resolve() ──► per-option resolution ──► InvariantRegistry.check()
                                                   │
                          rule 1, rule 2, ... (registration order)
                                                   │
                          first violation by option declaration order

Extending:
    >>> @register_invariant
    ... def generated_not_writable(record):
    ...     if record.get("generated") and record.get("writable"):
    ...         return Err(InvariantViolationError("GeneratedNotWritable", "writable"))
    ...     return Ok(None)

Tags:
    invariants, cross-field-validation, registry, schema-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from schemaspine.core.errors import InvariantViolationError
from schemaspine.core.logging import get_logger
from schemaspine.core.record import AttributeRecord
from schemaspine.core.result import Err, Ok, Result
from schemaspine.core.schema import Schema

logger = get_logger(__name__)

InvariantRule = Callable[[AttributeRecord], Result[None]]

PRIMARY_KEY_NOT_NULLABLE = "PrimaryKeyNotNullable"


def primary_key_not_nullable(record: AttributeRecord) -> Result[None]:
    """A primary key attribute must not allow ``None``."""
    if record.get("primary_key") is True and record.get("allow_none") is True:
        return Err(
            InvariantViolationError(
                PRIMARY_KEY_NOT_NULLABLE,
                "allow_none",
                f"Primary key attribute {record.get('name', '<unnamed>')} must not allow None",
            ).with_context(attribute=record.get("name"))
        )
    return Ok(None)


class InvariantRegistry:
    """
    Ordered set of invariant rules.

    Registration replaces the rule tuple rather than mutating it, so a
    resolution already iterating the rules never sees a half-updated list.
    """

    def __init__(self, rules: Iterable[InvariantRule] = ()):
        self._rules: tuple[InvariantRule, ...] = tuple(rules)

    @property
    def rules(self) -> tuple[InvariantRule, ...]:
        return self._rules

    def register(self, rule: InvariantRule) -> InvariantRule:
        """Append a rule (usable as a decorator)."""
        if rule in self._rules:
            raise ValueError(f"Invariant '{rule.__name__}' is already registered")
        self._rules = self._rules + (rule,)
        logger.debug("invariant_registered", rule=getattr(rule, "__name__", repr(rule)))
        return rule

    def reset(self, rules: Iterable[InvariantRule] = ()) -> None:
        self._rules = tuple(rules)

    def check(self, schema: Schema, record: AttributeRecord) -> Result[None]:
        """Run every rule; report the violation earliest in declaration order."""
        violations: list[tuple[int, int, Err]] = []
        for position, rule in enumerate(self._rules):
            result = rule(record)
            if result.is_err():
                name = getattr(result.error, "name", None)
                order = schema.index(name) if name in schema else len(schema)
                violations.append((order, position, result))
        if not violations:
            return Ok(None)
        return min(violations, key=lambda item: item[:2])[2]


BUILTIN_INVARIANTS: tuple[InvariantRule, ...] = (primary_key_not_nullable,)

default_invariants = InvariantRegistry(BUILTIN_INVARIANTS)


def register_invariant(rule: InvariantRule) -> InvariantRule:
    """Register a rule with the default registry used by ``resolve``."""
    return default_invariants.register(rule)


def reset_invariants() -> None:
    """Restore the built-in rule set (for testing)."""
    default_invariants.reset(BUILTIN_INVARIANTS)


__all__ = [
    "InvariantRule",
    "InvariantRegistry",
    "PRIMARY_KEY_NOT_NULLABLE",
    "primary_key_not_nullable",
    "default_invariants",
    "register_invariant",
    "reset_invariants",
]
