"""
Result envelope for consistent success/failure handling.

``derive`` and ``resolve`` report exactly one failure as a value rather than
raising it. ``Ok[T]`` wraps the schema or record produced; ``Err[T]`` wraps
the first ``SchemaSpineError`` encountered.

Manifesto:
    - **Explicit over Implicit:** a bad input is data, not a control-flow jump
    - **Fail-fast:** the first error wins, later options are not inspected
    - **Escape hatch:** ``unwrap()`` re-raises, so setup code can fail loudly

Architecture:
    ::

        ┌─────────────────┬─────────────────┬─────────────────────────┐
        │     Ok[T]       │     Err[T]      │     Utilities           │
        ├─────────────────┼─────────────────┼─────────────────────────┤
        │ • value: T      │ • error: Exc    │ • try_result_with()     │
        │ • map()         │ • map_err()     │ • collect_results()     │
        │ • flat_map()    │ • unwrap_or()   │                         │
        └─────────────────┴─────────────────┴─────────────────────────┘

Examples:
    >>> from schemaspine.core.result import Ok, Err
    >>> match resolve(schema, {"b": True}):
    ...     case Ok(record):
    ...         print(record.to_dict())
    ...     case Err(error):
    ...         print(error.kind)

Tags:
    result-pattern, error-handling, schema-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from schemaspine.core.errors import SchemaSpineError


T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """
    Successful result containing a value.

    Examples:
        >>> Ok(10).map(lambda x: x * 2).unwrap()
        20
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain to another Result-returning function."""
        return f(self.value)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """No-op for Ok."""
        return self

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result containing the error.

    Examples:
        >>> Err(ValueError("oops")).map(lambda x: x * 2).unwrap_or(0)
        0
    """

    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def map_err(self, f: Callable[[Exception], Exception]) -> Result[T]:
        """Transform the error."""
        return Err(f(self.error))

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.error, SchemaSpineError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


# =============================================================================
# RESULT CONSTRUCTORS AND UTILITIES
# =============================================================================


def try_result_with(
    f: Callable[[], T],
    error_mapper: Callable[[Exception], Exception] | None = None,
) -> Result[T]:
    """
    Execute a zero-argument function and map exceptions to custom error types.

    The resolver uses this to turn a raising default computation into
    ``Err(DefaultComputationFailedError(...))``.

    Examples:
        >>> try_result_with(lambda: 1 / 0).error
        ZeroDivisionError('division by zero')

    Args:
        f: Zero-argument callable that may raise
        error_mapper: Optional function to transform exceptions

    Returns:
        Ok[T] if f() succeeds, Err with the (mapped) exception if f() raises
    """
    try:
        return Ok(f())
    except Exception as e:
        if error_mapper:
            return Err(error_mapper(e))
        return Err(e)


def collect_results(results: list[Result[T]]) -> Result[list[T]]:
    """
    Collect a list of Results into a Result of list (fail-fast).

    Returns the first Err encountered, otherwise Ok with every value in order.

    Examples:
        >>> collect_results([Ok(1), Ok(2)]).unwrap()
        [1, 2]
    """
    values: list[T] = []
    for result in results:
        match result:
            case Ok(value):
                values.append(value)
            case Err(error):
                return Err(error)
    return Ok(values)


__all__ = [
    "Result",
    "Ok",
    "Err",
    "try_result_with",
    "collect_results",
]
