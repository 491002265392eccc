"""
Schema derivation: specialized schemas as a base plus a list of overrides.

Manifesto:
    A timestamp attribute or a primary key attribute is the base attribute
    schema with a handful of defaults changed. Expressing them as overrides
    (instead of copied option lists) keeps every specialization in step with
    the base: add an option to the base and every derived schema has it.

Architecture:
    ::

        base ──► SetDefault("writable", False)
             ──► SetDefault("default", Literal(utc_now))
             ──► Delete("allow_none")
             ──► Ok(derived)          # base untouched

        Any op naming an absent option ──► Err(UnknownOptionError(name))
        Any op producing a malformed spec ──► Err(InvalidSchemaError(...))

Invariants:
    - ``derive(derive(s, a).unwrap(), b) == derive(s, a + b)``
    - later ``SetDefault`` on the same name wins
    - ``Delete`` removes the option entirely; the name stops being a legal key

Tags:
    derivation, schema, override, schema-spine

Doc-Types:
    - API Reference
    - Design Patterns Guide
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from schemaspine.core.errors import InvalidSchemaError, UnknownOptionError
from schemaspine.core.kinds import ConstraintKind
from schemaspine.core.logging import get_logger
from schemaspine.core.options import DefaultValue, OptionSpec, literal_default
from schemaspine.core.result import Err, Ok, Result
from schemaspine.core.schema import Schema

logger = get_logger(__name__)


class DerivationOp:
    """Base class for derivation operations."""

    __slots__ = ()
    name: str


@dataclass(frozen=True, slots=True)
class SetDefault(DerivationOp):
    """Replace an option's default. Plain values become ``Literal`` defaults."""

    name: str
    default: DefaultValue | None

    def __init__(self, name: str, default: Any):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "default", literal_default(default))


@dataclass(frozen=True, slots=True)
class SetKind(DerivationOp):
    name: str
    kind: ConstraintKind


@dataclass(frozen=True, slots=True)
class Delete(DerivationOp):
    """Remove an option; resolution treats it as never declared."""

    name: str


def _apply(options: list[OptionSpec], op: DerivationOp) -> None:
    position = next(
        (index for index, option in enumerate(options) if option.name == op.name),
        None,
    )
    if position is None:
        raise UnknownOptionError(op.name)

    match op:
        case SetDefault(default=default):
            options[position] = options[position].with_default(default)
        case SetKind(kind=kind):
            options[position] = options[position].with_kind(kind)
        case Delete():
            del options[position]
        case _:
            raise InvalidSchemaError(f"Unknown derivation operation: {op!r}")


def derive(base: Schema, ops: Iterable[DerivationOp]) -> Result[Schema]:
    """
    Apply ``ops`` in order to a working copy of ``base``.

    Returns:
        Ok(Schema) with the overrides applied, or Err carrying the first
        ``UnknownOptionError`` / ``InvalidSchemaError``.
    """
    ops = list(ops)
    options = list(base.options)
    for op in ops:
        try:
            _apply(options, op)
        except (UnknownOptionError, InvalidSchemaError) as error:
            logger.debug("schema_derivation_failed", op=repr(op), error=error.to_dict())
            return Err(error.with_context(operation="derive"))

    derived = Schema(options)
    logger.debug(
        "schema_derived",
        ops=len(ops),
        options=len(derived),
        removed=sorted(set(base.names()) - set(derived.names())),
    )
    return Ok(derived)


__all__ = [
    "DerivationOp",
    "SetDefault",
    "SetKind",
    "Delete",
    "derive",
]
