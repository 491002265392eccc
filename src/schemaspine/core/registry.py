"""Schema registry for naming schemas and deriving from them by name.

Manifesto:
    Resource definitions refer to base schemas by name ("create_timestamp",
    "uuid_primary_key") rather than importing module constants, so domain
    packages can register their own bases and derive from any of them.

Tags:
    schema-spine, registry, schema-discovery, lookup

Doc-Types:
    api-reference
"""

from collections.abc import Iterable

from schemaspine.core.derivation import DerivationOp, derive
from schemaspine.core.errors import UnknownSchemaError
from schemaspine.core.logging import get_logger
from schemaspine.core.result import Err, Result
from schemaspine.core.schema import Schema

logger = get_logger(__name__)

# Global schema registry
_registry: dict[str, Schema] = {}
_loaded: bool = False


def register_schema(name: str, schema: Schema, *, replace: bool = False) -> Schema:
    """Register ``schema`` under ``name``."""
    _ensure_loaded()
    if name in _registry and not replace:
        raise ValueError(f"Schema '{name}' is already registered")
    _registry[name] = schema
    logger.debug("schema_registered", name=name, options=len(schema))
    return schema


def _ensure_loaded() -> None:
    """Ensure built-in schemas are loaded (lazy initialization)."""
    global _loaded
    if not _loaded:
        _loaded = True
        _load_builtin_schemas()


def get_schema(name: str) -> Schema:
    """Get a schema by name."""
    _ensure_loaded()
    if name not in _registry:
        raise UnknownSchemaError(name, sorted(_registry))
    return _registry[name]


def list_schemas() -> list[str]:
    """List all registered schema names."""
    _ensure_loaded()
    return sorted(_registry)


def derive_from(name: str, ops: Iterable[DerivationOp]) -> Result[Schema]:
    """Derive a new schema from the registered schema ``name``."""
    try:
        base = get_schema(name)
    except UnknownSchemaError as error:
        return Err(error.with_context(operation="derive"))
    return derive(base, ops).map_err(lambda error: error.with_context(schema=name))


def clear_registry() -> None:
    """Clear registry (for testing). Built-ins come back on next access."""
    global _loaded
    _registry.clear()
    _loaded = False


def _load_builtin_schemas() -> None:
    """
    Register the attribute catalog and its specializations.

    Imported here rather than at module level: the attribute catalog is
    built by deriving schemas, and derivation must not depend on the
    registry being importable.
    """
    from schemaspine.core.attributes import BUILTIN_SCHEMAS

    for name, schema in BUILTIN_SCHEMAS.items():
        _registry.setdefault(name, schema)
    logger.debug("schema_registry_loaded", registered=len(_registry))


__all__ = [
    "register_schema",
    "get_schema",
    "list_schemas",
    "derive_from",
    "clear_registry",
]
