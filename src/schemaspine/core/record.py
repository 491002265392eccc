"""Attribute records: the resolved, validated output of one ``resolve`` call.

An ``AttributeRecord`` is a read-only mapping from option name to final
value. Options that were neither supplied nor defaulted are absent, not
``None``. Every value that came from a deferred default carries a
``DefaultToken`` identifying the evaluation that produced it: options that
shared one evaluation hold equal tokens.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True)
class DefaultToken:
    """Identity of one deferred-default evaluation within a resolution call."""

    computation: str
    evaluation: int
    shared: bool = False


class AttributeRecord(Mapping[str, Any]):
    """Immutable mapping of resolved option values."""

    __slots__ = ("_values", "_tokens", "_defaulted")

    def __init__(
        self,
        values: Mapping[str, Any],
        tokens: Mapping[str, DefaultToken] | None = None,
        defaulted: Iterable[str] = (),
    ):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))
        object.__setattr__(self, "_tokens", MappingProxyType(dict(tokens or {})))
        object.__setattr__(self, "_defaulted", frozenset(defaulted))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("AttributeRecord is immutable")

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def shared_default_tokens(self) -> Mapping[str, DefaultToken]:
        """Token per option whose value came from a deferred default."""
        return self._tokens

    def shared_default_token(self, name: str) -> DefaultToken | None:
        return self._tokens.get(name)

    @property
    def defaulted(self) -> frozenset[str]:
        """Names filled in from a default rather than supplied."""
        return self._defaulted

    def to_dict(self) -> dict[str, Any]:
        return dict(self._values)

    def __repr__(self) -> str:
        return f"AttributeRecord({dict(self._values)!r})"


__all__ = ["AttributeRecord", "DefaultToken"]
