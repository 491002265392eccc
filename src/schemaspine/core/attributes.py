"""
Attribute definitions: the option catalog, its specializations, and records.

An attribute is one field of a resource (``id``, ``title``,
``inserted_at``). Declaring one means resolving its options against the
attribute option schema below; the result is an ``Attribute``. Writing an
entity means resolving field values against a ``record_schema`` built from
its attributes.

Manifesto:
    The base catalog is declared once. Timestamps and primary keys are
    derivations of it, so every option added to the catalog reaches them
    automatically.

Architecture:
    ::

        ATTRIBUTE_SCHEMA ──derive──► CREATE_TIMESTAMP_SCHEMA
                         ──derive──► UPDATE_TIMESTAMP_SCHEMA
                         ──derive──► UUID_PRIMARY_KEY_SCHEMA
                         ──derive──► INTEGER_PRIMARY_KEY_SCHEMA

        attribute("title", "string")   ──resolve──► Attribute
        [Attribute, ...] ──record_schema(action)──► Schema ──resolve──► record

Examples:
    >>> inserted_at, updated_at = timestamps().unwrap()
    >>> schema = record_schema([inserted_at, updated_at], action="create")
    >>> record = resolve(schema, {}).unwrap()
    >>> record["inserted_at"] == record["updated_at"]
    True

Tags:
    attributes, resource, timestamps, primary-key, schema-spine

Doc-Types:
    - API Reference
    - Resource Definition Guide
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from schemaspine.core.derivation import Delete, SetDefault, derive
from schemaspine.core.errors import InvalidSchemaError
from schemaspine.core.kinds import (
    AnyOf,
    Bool,
    Deferred,
    LiteralOrDeferred,
    OfType,
    OneOf,
    OrderedKV,
    Str,
    Symbol,
    TypeName,
)
from schemaspine.core.options import Deferred1, Literal, OptionSpec, as_default
from schemaspine.core.record import AttributeRecord
from schemaspine.core.resolver import resolve
from schemaspine.core.result import Result, collect_results
from schemaspine.core.schema import Schema
from schemaspine.core.timestamps import generate_uuid, utc_now


# =============================================================================
# OPTION CATALOG
# =============================================================================


ATTRIBUTE_SCHEMA = Schema(
    [
        OptionSpec(
            "name",
            Symbol(),
            required=True,
            doc="The name of the attribute.",
        ),
        OptionSpec(
            "type",
            TypeName(),
            required=True,
            doc="The type of the attribute, a registered data type name.",
            links=("module:schemaspine.core.datatypes",),
        ),
        OptionSpec(
            "constraints",
            OrderedKV(),
            doc="Constraints to provide to the type when casting the value.",
            links=("module:schemaspine.core.datatypes",),
        ),
        OptionSpec(
            "description",
            Str(),
            doc="An optional description for the attribute.",
        ),
        OptionSpec(
            "sensitive",
            Bool(),
            default=Literal(False),
            doc="Whether or not the attribute value contains sensitive information, like PII.",
            links=("guide:security",),
        ),
        OptionSpec(
            "source",
            Symbol(),
            doc="If the field should be mapped to a different name in the data layer.",
        ),
        OptionSpec(
            "always_select",
            Bool(),
            default=Literal(False),
            doc="Whether or not to ensure this attribute is always selected when reading from the database.",
        ),
        OptionSpec(
            "primary_key",
            Bool(),
            default=Literal(False),
            doc=(
                "Whether or not the attribute is part of the primary key (one or more fields "
                "that uniquely identify a resource). If primary_key is true, allow_none must be false."
            ),
        ),
        OptionSpec(
            "allow_none",
            Bool(),
            default=Literal(True),
            doc="Whether or not the attribute can be set to None.",
        ),
        OptionSpec(
            "generated",
            Bool(),
            default=Literal(False),
            doc="Whether or not the value may be generated by the data layer.",
            links=("guide:actions",),
        ),
        OptionSpec(
            "writable",
            Bool(),
            default=Literal(True),
            doc="Whether or not the value can be written to.",
        ),
        OptionSpec(
            "private",
            Bool(),
            default=Literal(False),
            doc=(
                "Whether or not the attribute can be provided as input, or will be shown "
                "when extensions work with the resource."
            ),
            links=("guide:security",),
        ),
        OptionSpec(
            "default",
            AnyOf([Deferred(0), LiteralOrDeferred()]),
            doc="A value to be set on all creates, unless a value is being provided already.",
            links=("guide:actions",),
        ),
        OptionSpec(
            "update_default",
            LiteralOrDeferred(),
            doc=(
                "A value to be set on all updates, unless a value is being provided already. "
                "A one-argument function receives the entity being updated."
            ),
            links=("guide:actions",),
        ),
        OptionSpec(
            "filterable",
            AnyOf([Bool(), OneOf({"simple_equality"})]),
            default=Literal(True),
            doc="Whether or not the attribute can be referenced in filters.",
        ),
        OptionSpec(
            "match_other_defaults",
            Bool(),
            default=Literal(False),
            doc=(
                "Ensures that other attributes that use the same lazy default (a zero-argument "
                "function) use the same default value. Create and update timestamps use this "
                "option with utc_now, so they get the same instant instead of slightly "
                "different timestamps."
            ),
            links=("guide:actions",),
        ),
    ]
)

_TIMESTAMP_OPS = [
    SetDefault("writable", False),
    SetDefault("private", True),
    SetDefault("default", Literal(utc_now)),
    SetDefault("match_other_defaults", True),
    SetDefault("type", "utc_datetime_usec"),
    SetDefault("allow_none", False),
]

CREATE_TIMESTAMP_SCHEMA = derive(ATTRIBUTE_SCHEMA, _TIMESTAMP_OPS).unwrap()

UPDATE_TIMESTAMP_SCHEMA = derive(
    ATTRIBUTE_SCHEMA,
    _TIMESTAMP_OPS + [SetDefault("update_default", Literal(utc_now))],
).unwrap()

UUID_PRIMARY_KEY_SCHEMA = derive(
    ATTRIBUTE_SCHEMA,
    [
        SetDefault("writable", False),
        SetDefault("default", Literal(generate_uuid)),
        SetDefault("primary_key", True),
        SetDefault("type", "uuid"),
        Delete("allow_none"),
    ],
).unwrap()

INTEGER_PRIMARY_KEY_SCHEMA = derive(
    ATTRIBUTE_SCHEMA,
    [
        SetDefault("writable", False),
        SetDefault("primary_key", True),
        SetDefault("generated", True),
        SetDefault("type", "integer"),
        Delete("allow_none"),
    ],
).unwrap()

BUILTIN_SCHEMAS: dict[str, Schema] = {
    "attribute": ATTRIBUTE_SCHEMA,
    "create_timestamp": CREATE_TIMESTAMP_SCHEMA,
    "update_timestamp": UPDATE_TIMESTAMP_SCHEMA,
    "uuid_primary_key": UUID_PRIMARY_KEY_SCHEMA,
    "integer_primary_key": INTEGER_PRIMARY_KEY_SCHEMA,
}


# =============================================================================
# ATTRIBUTE
# =============================================================================


@dataclass(frozen=True, slots=True)
class Attribute:
    """A resolved attribute declaration."""

    name: str
    type: str
    allow_none: bool = True
    generated: bool = False
    primary_key: bool = False
    private: bool = False
    writable: bool = True
    always_select: bool = False
    default: Any = None
    update_default: Any = None
    description: str | None = None
    source: str | None = None
    match_other_defaults: bool = False
    sensitive: bool = False
    filterable: bool | str = True
    constraints: tuple[tuple[str, Any], ...] = ()

    @classmethod
    def from_record(cls, record: AttributeRecord) -> Attribute:
        """Build from a record resolved against an attribute schema.

        A primary key never allows None, whether or not the schema it came
        from declares ``allow_none``.
        """
        known = {f.name for f in fields(cls)}
        values = {name: value for name, value in record.items() if name in known}
        if values.get("primary_key"):
            values["allow_none"] = False
        constraints = values.get("constraints", ())
        if isinstance(constraints, Mapping):
            constraints = constraints.items()
        values["constraints"] = tuple((key, value) for key, value in constraints)
        return cls(**values)

    @property
    def field_source(self) -> str:
        """Column/field name in the data layer."""
        return self.source or self.name


def build_attribute(
    schema: Schema, name: str, type: str | None = None, **options: Any
) -> Result[Attribute]:
    """Resolve an attribute declaration against ``schema``."""
    declaration = {"name": name, **options}
    if type is not None:
        declaration["type"] = type
    return resolve(schema, declaration).map(Attribute.from_record)


def attribute(name: str, type: str, **options: Any) -> Result[Attribute]:
    return build_attribute(ATTRIBUTE_SCHEMA, name, type, **options)


def create_timestamp(name: str, **options: Any) -> Result[Attribute]:
    """A UTC timestamp set once, on create."""
    return build_attribute(CREATE_TIMESTAMP_SCHEMA, name, **options)


def update_timestamp(name: str, **options: Any) -> Result[Attribute]:
    """A UTC timestamp set on create and refreshed on every update."""
    return build_attribute(UPDATE_TIMESTAMP_SCHEMA, name, **options)


def uuid_primary_key(name: str, **options: Any) -> Result[Attribute]:
    return build_attribute(UUID_PRIMARY_KEY_SCHEMA, name, **options)


def integer_primary_key(name: str, **options: Any) -> Result[Attribute]:
    """An integer primary key generated by the data layer."""
    return build_attribute(INTEGER_PRIMARY_KEY_SCHEMA, name, **options)


def timestamps(**options: Any) -> Result[tuple[Attribute, Attribute]]:
    """The ``inserted_at`` / ``updated_at`` pair."""
    return collect_results(
        [
            create_timestamp("inserted_at", **options),
            update_timestamp("updated_at", **options),
        ]
    ).map(tuple)


# =============================================================================
# RECORD SCHEMAS
# =============================================================================


ACTIONS = ("create", "update")


def _field_option(attr: Attribute, action: str) -> OptionSpec:
    if action == "create":
        default = as_default(attr.default)
        required = not attr.allow_none and default is None and not attr.generated
    else:
        default = as_default(attr.update_default)
        required = False
    kind = OfType(
        attr.type,
        allow_none=attr.allow_none,
        entity_default=isinstance(default, Deferred1),
    )
    return OptionSpec(
        attr.name,
        kind,
        required=required,
        default=default,
        doc=attr.description or "",
        match_other_defaults=attr.match_other_defaults,
    )


def record_schema(attributes: Iterable[Attribute], action: str = "create") -> Schema:
    """
    Build the schema for writing an entity with ``attributes``.

    On ``create`` every attribute takes its ``default``; attributes that
    cannot be None and have no default or data-layer generation are
    required. On ``update`` only ``update_default`` applies and nothing is
    required.

    Raises:
        InvalidSchemaError: unknown action, or a default computation whose
            arity is neither 0 nor 1
    """
    if action not in ACTIONS:
        raise InvalidSchemaError(f"Unknown action {action!r}, expected one of {ACTIONS}")
    return Schema(_field_option(attr, action) for attr in attributes)


__all__ = [
    "ATTRIBUTE_SCHEMA",
    "CREATE_TIMESTAMP_SCHEMA",
    "UPDATE_TIMESTAMP_SCHEMA",
    "UUID_PRIMARY_KEY_SCHEMA",
    "INTEGER_PRIMARY_KEY_SCHEMA",
    "BUILTIN_SCHEMAS",
    "Attribute",
    "build_attribute",
    "attribute",
    "create_timestamp",
    "update_timestamp",
    "uuid_primary_key",
    "integer_primary_key",
    "timestamps",
    "record_schema",
]
