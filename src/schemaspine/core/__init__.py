"""
schemaspine.core -- Declarative option schemas with shared deferred defaults.

Manifesto:
    A resource attribute (``inserted_at``, ``id``, ``title``) is declared by
    resolving a handful of options against a schema. Schemas are immutable
    values; specialized schemas are derived from a base by overrides; and
    resolution reports its one failure as a value instead of raising it.

Architecture
------------
::

    Layer 0 -- Primitives
        errors.py        SchemaSpineError hierarchy (kind tags, context)
        result.py        Ok / Err envelope returned by derive and resolve
        timestamps.py    utc_now / generate_uuid default generators

    Layer 1 -- Declarations
        datatypes.py     Named data-type registry (TypeName / OfType kinds)
        kinds.py         Constraint kinds and ``matches``
        options.py       OptionSpec, Literal / Deferred0 / Deferred1 defaults
        schema.py        Immutable ordered Schema, ``render_docs``
        derivation.py    SetDefault / SetKind / Delete and ``derive``

    Layer 2 -- Resolution
        record.py        AttributeRecord + DefaultToken
        invariants.py    Cross-field rules (primary key not nullable)
        resolver.py      ``resolve`` with the per-call shared-default cache

    Layer 3 -- Attributes
        attributes.py    Attribute option catalog, timestamps, primary keys,
                         per-action record schemas
        registry.py      Named schema registry and ``derive_from``

    Cross-Cutting
        logging.py       structlog configuration
        settings.py      pydantic-settings ``SchemaSpineSettings``

Examples:
    >>> from schemaspine.core import timestamps, record_schema, resolve
    >>> inserted_at, updated_at = timestamps().unwrap()
    >>> record = resolve(record_schema([inserted_at, updated_at]), {}).unwrap()
    >>> record["inserted_at"] == record["updated_at"]
    True

Tags:
    schema-spine, foundation, declarative-schema, deferred-defaults

Doc-Types:
    package-overview, architecture-map, module-index
"""

# Errors and results
from schemaspine.core.errors import (
    DefaultComputationFailedError,
    ErrorCategory,
    ErrorContext,
    InvalidSchemaError,
    InvariantViolationError,
    MissingRequiredError,
    OptionError,
    SchemaSpineError,
    TypeMismatchError,
    UnknownOptionError,
    UnknownSchemaError,
)
from schemaspine.core.result import Err, Ok, Result, collect_results, try_result_with

# Declarations
from schemaspine.core.datatypes import (
    get_type_checker,
    is_registered_type,
    list_types,
    register_type,
)
from schemaspine.core.kinds import (
    AnyOf,
    Bool,
    ConstraintKind,
    Deferred,
    LiteralOrDeferred,
    OfType,
    OneOf,
    OrderedKV,
    Str,
    Symbol,
    TypeName,
    describe,
    matches,
)
from schemaspine.core.options import (
    DefaultValue,
    Deferred0,
    Deferred1,
    Literal,
    OptionSpec,
    as_default,
)
from schemaspine.core.schema import Schema, render_docs
from schemaspine.core.derivation import Delete, DerivationOp, SetDefault, SetKind, derive

# Resolution
from schemaspine.core.record import AttributeRecord, DefaultToken
from schemaspine.core.invariants import (
    InvariantRegistry,
    default_invariants,
    primary_key_not_nullable,
    register_invariant,
)
from schemaspine.core.resolver import ResolutionContext, resolve

# Attributes
from schemaspine.core.attributes import (
    ATTRIBUTE_SCHEMA,
    CREATE_TIMESTAMP_SCHEMA,
    INTEGER_PRIMARY_KEY_SCHEMA,
    UPDATE_TIMESTAMP_SCHEMA,
    UUID_PRIMARY_KEY_SCHEMA,
    Attribute,
    attribute,
    build_attribute,
    create_timestamp,
    integer_primary_key,
    record_schema,
    timestamps,
    update_timestamp,
    uuid_primary_key,
)
from schemaspine.core.registry import (
    clear_registry,
    derive_from,
    get_schema,
    list_schemas,
    register_schema,
)

# Cross-cutting
from schemaspine.core.logging import configure_logging, get_logger
from schemaspine.core.settings import SchemaSpineSettings, get_settings
from schemaspine.core.timestamps import generate_uuid, utc_now

__all__ = [
    # errors
    "SchemaSpineError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidSchemaError",
    "UnknownSchemaError",
    "OptionError",
    "UnknownOptionError",
    "TypeMismatchError",
    "MissingRequiredError",
    "InvariantViolationError",
    "DefaultComputationFailedError",
    # result
    "Result",
    "Ok",
    "Err",
    "try_result_with",
    "collect_results",
    # datatypes
    "register_type",
    "get_type_checker",
    "is_registered_type",
    "list_types",
    # kinds
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
    "matches",
    "describe",
    # options
    "DefaultValue",
    "Literal",
    "Deferred0",
    "Deferred1",
    "as_default",
    "OptionSpec",
    # schema
    "Schema",
    "render_docs",
    # derivation
    "DerivationOp",
    "SetDefault",
    "SetKind",
    "Delete",
    "derive",
    # resolution
    "AttributeRecord",
    "DefaultToken",
    "InvariantRegistry",
    "default_invariants",
    "primary_key_not_nullable",
    "register_invariant",
    "ResolutionContext",
    "resolve",
    # attributes
    "ATTRIBUTE_SCHEMA",
    "CREATE_TIMESTAMP_SCHEMA",
    "UPDATE_TIMESTAMP_SCHEMA",
    "UUID_PRIMARY_KEY_SCHEMA",
    "INTEGER_PRIMARY_KEY_SCHEMA",
    "Attribute",
    "build_attribute",
    "attribute",
    "create_timestamp",
    "update_timestamp",
    "uuid_primary_key",
    "integer_primary_key",
    "timestamps",
    "record_schema",
    # registry
    "register_schema",
    "get_schema",
    "list_schemas",
    "derive_from",
    "clear_registry",
    # cross-cutting
    "configure_logging",
    "get_logger",
    "SchemaSpineSettings",
    "get_settings",
    "utc_now",
    "generate_uuid",
]
