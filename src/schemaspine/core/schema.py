"""
Schema: an ordered, immutable set of option specs.

Manifesto:
    A schema is a value. Two schemas with the same options in the same
    order are equal, a schema is never edited in place, and the option
    names it holds are exactly the keys ``resolve`` accepts. Schemas are
    read concurrently by any number of resolutions without locking.

Examples:
    >>> schema = Schema.from_declarations([
    ...     ("a", {"kind": Symbol(), "default": "lit"}),
    ...     ("b", {"kind": Bool(), "required": True}),
    ... ])
    >>> schema.names()
    ('a', 'b')
    >>> print(render_docs(schema))
    * `a` (atom) - default: 'lit'
    * `b` (boolean, required)

Tags:
    schema, immutable, ordered-mapping, schema-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from schemaspine.core.errors import InvalidSchemaError
from schemaspine.core.options import (
    Deferred0,
    Deferred1,
    Literal,
    OptionSpec,
    literal_default,
)


# participates_in_sharing is accepted as another name for match_other_defaults
_SHARING_KEYS = ("match_other_defaults", "participates_in_sharing")

_DECLARATION_KEYS = frozenset(
    {"kind", "required", "default", "doc", "links", *_SHARING_KEYS}
)


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered sequence of option specs with unique names."""

    options: tuple[OptionSpec, ...]

    def __init__(self, options: Iterable[OptionSpec] = ()):
        options = tuple(options)
        seen: set[str] = set()
        for option in options:
            if not isinstance(option, OptionSpec):
                raise InvalidSchemaError(f"Not an option spec: {option!r}")
            if option.name in seen:
                raise InvalidSchemaError(f"Duplicate option name: {option.name}")
            seen.add(option.name)
        object.__setattr__(self, "options", options)

    @classmethod
    def from_declarations(
        cls, declarations: Iterable[tuple[str, Mapping[str, Any]]]
    ) -> Schema:
        """
        Build a schema from ``(name, declaration)`` pairs.

        A declaration may hold ``kind`` (required), ``required``, ``default``,
        ``doc``, ``match_other_defaults`` (or its alias
        ``participates_in_sharing``) and ``links``. A plain ``default`` is a
        literal; wrap computations in ``Deferred0`` / ``Deferred1``.
        """
        options = []
        for name, declaration in declarations:
            unknown = sorted(set(declaration) - _DECLARATION_KEYS)
            if unknown:
                raise InvalidSchemaError(f"Option {name} has unknown declaration keys: {unknown}")
            if "kind" not in declaration:
                raise InvalidSchemaError(f"Option {name} has no kind")
            sharing = [key for key in _SHARING_KEYS if key in declaration]
            if len(sharing) > 1:
                raise InvalidSchemaError(f"Option {name} declares both {sharing[0]} and {sharing[1]}")
            options.append(
                OptionSpec(
                    name=name,
                    kind=declaration["kind"],
                    required=declaration.get("required", False),
                    default=literal_default(declaration.get("default")),
                    doc=declaration.get("doc", ""),
                    match_other_defaults=declaration[sharing[0]] if sharing else False,
                    links=tuple(declaration.get("links", ())),
                )
            )
        return cls(options)

    def names(self) -> tuple[str, ...]:
        return tuple(option.name for option in self.options)

    def items(self) -> Iterator[tuple[str, OptionSpec]]:
        """``(name, spec)`` pairs in declaration order."""
        for option in self.options:
            yield option.name, option

    def get(self, name: str) -> OptionSpec | None:
        for option in self.options:
            if option.name == name:
                return option
        return None

    def index(self, name: str) -> int:
        """Declaration position of ``name``; raises KeyError when absent."""
        for position, option in enumerate(self.options):
            if option.name == name:
                return position
        raise KeyError(name)

    def __getitem__(self, name: str) -> OptionSpec:
        option = self.get(name)
        if option is None:
            raise KeyError(name)
        return option

    def __contains__(self, name: object) -> bool:
        return any(option.name == name for option in self.options)

    def __iter__(self) -> Iterator[OptionSpec]:
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)

    def __repr__(self) -> str:
        return f"Schema({list(self.names())!r})"


def _describe_default(option: OptionSpec) -> str | None:
    match option.default:
        case Literal(value=value):
            if callable(value):
                return getattr(value, "__qualname__", repr(value))
            return repr(value)
        case Deferred0(computation=fn) | Deferred1(computation=fn):
            name = getattr(fn, "__qualname__", repr(fn))
            return f"computed by {name}"
    return None


def render_docs(schema: Schema) -> str:
    """Render option documentation as a markdown bullet list."""
    lines = []
    for option in schema:
        flags = [str(option.kind)]
        if option.required:
            flags.append("required")
        line = f"* `{option.name}` ({', '.join(flags)})"
        default = _describe_default(option)
        if default is not None:
            line += f" - default: {default}"
        if option.doc:
            line += f"\n  {option.doc.strip()}"
        if option.links:
            line += f"\n  See: {', '.join(option.links)}"
        lines.append(line)
    return "\n".join(lines)


__all__ = ["Schema", "render_docs"]
