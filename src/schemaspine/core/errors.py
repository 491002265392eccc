"""
Structured error types for schema-spine.

Every failure the engine can report is a typed error carrying the payload a
caller needs to act on it: the option name, the expected kind, the rule that
failed. Errors are raised from constructors (a malformed schema is a
programming mistake) and returned inside ``Err`` from ``derive`` and
``resolve`` (a bad input is data).

Manifesto:
    - **One error per failure kind:** callers dispatch on type or ``kind``
    - **Payload over prose:** the message is for humans, attributes are for code
    - **First failure only:** resolution stops at the first problem, in
      option declaration order
    - **Error chaining:** a failing default computation keeps its cause

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     SchemaSpineError                         │
        │               (category, context, cause)                     │
        ├─────────────────────────────────────────────────────────────┤
        │  InvalidSchemaError          UnknownSchemaError    (SCHEMA)  │
        │  UnknownOptionError          TypeMismatchError               │
        │  MissingRequiredError                          (VALIDATION)  │
        │  InvariantViolationError                        (INVARIANT)  │
        │  DefaultComputationFailedError                (COMPUTATION)  │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> error = UnknownOptionError("colour")
    >>> error.kind
    'UnknownOption'
    >>> error.to_dict()["option"]
    'colour'

Tags:
    error-handling, exception-hierarchy, error-context, schema-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification and routing.

    Attributes:
        SCHEMA: Malformed schema or unknown schema name
        VALIDATION: Input rejected against a schema
        INVARIANT: Cross-field rule failed after resolution
        COMPUTATION: A deferred default raised
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    SCHEMA = "SCHEMA"
    VALIDATION = "VALIDATION"
    INVARIANT = "INVARIANT"
    COMPUTATION = "COMPUTATION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error for logging.

    Examples:
        >>> ctx = ErrorContext(schema="create_timestamp", operation="derive")
        >>> ctx.to_dict()
        {'schema': 'create_timestamp', 'operation': 'derive'}

    Attributes:
        schema: Registered schema name, when known
        option: Option the error refers to
        operation: Engine operation that failed (derive, resolve, ...)
        metadata: Additional key-value pairs
    """

    schema: str | None = None
    option: str | None = None
    operation: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["schema", "option", "operation"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SchemaSpineError(Exception):
    """
    Base exception for all schema-spine errors.

    Subclasses set ``default_category`` and a ``kind`` tag naming the failure
    the way the resolution surface documents it (``"UnknownOption"``,
    ``"TypeMismatch"``, ...).

    Examples:
        >>> error = SchemaSpineError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(operation="resolve").context.operation
        'resolve'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    kind: str = "Internal"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SchemaSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            return Err(UnknownOptionError(name).with_context(operation="derive"))
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "kind": self.kind,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SCHEMA CONSTRUCTION ERRORS
# =============================================================================


class InvalidSchemaError(SchemaSpineError):
    """
    Malformed schema detected at construction time.

    Raised immediately by kind, option and schema constructors (empty enum,
    arity outside 0/1, duplicate option names, a literal default that fails
    its own kind). Never deferred to resolution.
    """

    default_category = ErrorCategory.SCHEMA
    kind = "InvalidSchema"

    def __init__(self, reason: str, **kwargs: Any):
        self.reason = reason
        super().__init__(f"Invalid schema: {reason}", **kwargs)


class UnknownSchemaError(SchemaSpineError):
    """Schema name not found in the registry."""

    default_category = ErrorCategory.SCHEMA
    kind = "UnknownSchema"

    def __init__(self, name: str, available: list[str] | None = None):
        self.schema_name = name
        self.available = available or []
        super().__init__(
            f"Schema '{name}' not found. Available: {', '.join(self.available)}"
        )


# =============================================================================
# RESOLUTION ERRORS
# =============================================================================


class OptionError(SchemaSpineError):
    """Error tied to a single named option."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, name: str, **kwargs: Any):
        self.name = name
        super().__init__(message, **kwargs)
        if self.context.option is None:
            self.context.option = name

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["option"] = self.name
        return result


class UnknownOptionError(OptionError):
    """A derivation or an input referenced a name absent from the schema."""

    kind = "UnknownOption"

    def __init__(self, name: str, **kwargs: Any):
        super().__init__(f"Unknown option: {name}", name=name, **kwargs)


class TypeMismatchError(OptionError):
    """A supplied value failed its constraint kind."""

    kind = "TypeMismatch"

    def __init__(self, name: str, expected: Any, actual: Any, **kwargs: Any):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Option {name} expected {expected}, got {actual!r}",
            name=name,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["expected"] = str(self.expected)
        result["actual"] = repr(self.actual)
        return result


class MissingRequiredError(OptionError):
    """Required option with no default and no supplied value."""

    kind = "MissingRequired"

    def __init__(self, name: str, **kwargs: Any):
        super().__init__(f"Missing required option: {name}", name=name, **kwargs)


class InvariantViolationError(OptionError):
    """A cross-field invariant failed after every option resolved."""

    default_category = ErrorCategory.INVARIANT
    kind = "InvariantViolation"

    def __init__(self, rule: str, name: str, message: str | None = None, **kwargs: Any):
        self.rule = rule
        super().__init__(
            message or f"Invariant {rule} violated by {name}",
            name=name,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["rule"] = self.rule
        return result


class DefaultComputationFailedError(OptionError):
    """A deferred default raised while being evaluated."""

    default_category = ErrorCategory.COMPUTATION
    kind = "DefaultComputationFailed"

    def __init__(self, name: str, cause: BaseException, **kwargs: Any):
        super().__init__(
            f"Default for {name} failed: {cause!r}",
            name=name,
            cause=cause,
            **kwargs,
        )


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SchemaSpineError",
    "InvalidSchemaError",
    "UnknownSchemaError",
    "OptionError",
    "UnknownOptionError",
    "TypeMismatchError",
    "MissingRequiredError",
    "InvariantViolationError",
    "DefaultComputationFailedError",
]
