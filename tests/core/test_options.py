"""Tests for schemaspine.core.options module."""

import pytest

from schemaspine.core.errors import InvalidSchemaError
from schemaspine.core.kinds import AnyOf, Bool, Deferred, LiteralOrDeferred, OfType, Symbol
from schemaspine.core.options import (
    Deferred0,
    Deferred1,
    Literal,
    OptionSpec,
    as_default,
    literal_default,
)
from schemaspine.core.timestamps import utc_now


class TestDefaultValues:
    """Test Literal, Deferred0 and Deferred1."""

    def test_literal_is_not_deferred(self):
        """Literal values are used as-is."""
        assert Literal(3).is_deferred is False
        assert Deferred0(utc_now).is_deferred is True

    def test_deferred0_requires_zero_arity(self):
        """A one-argument function is not a Deferred0."""
        with pytest.raises(InvalidSchemaError):
            Deferred0(lambda entity: entity)

    def test_deferred1_requires_one_arity(self):
        """A zero-argument function is not a Deferred1."""
        with pytest.raises(InvalidSchemaError):
            Deferred1(lambda: 1)


class TestAsDefault:
    """Test building defaults from plain values."""

    def test_none_is_no_default(self):
        assert as_default(None) is None

    def test_plain_value_is_literal(self):
        """Non-callables become Literal."""
        assert as_default(False) == Literal(False)

    def test_callables_tagged_by_arity(self):
        """Callables become Deferred0 or Deferred1."""
        assert as_default(utc_now) == Deferred0(utc_now)
        fn = lambda entity: entity  # noqa: E731
        assert as_default(fn) == Deferred1(fn)

    def test_wide_callable_rejected(self):
        """Two-argument callables cannot be defaults."""
        with pytest.raises(InvalidSchemaError):
            as_default(lambda a, b: a)

    def test_existing_default_passes_through(self):
        """Already-tagged defaults are returned unchanged."""
        default = Deferred0(utc_now)
        assert as_default(default) is default

    def test_literal_default_never_defers(self):
        """literal_default keeps a function as a plain value."""
        assert literal_default(utc_now) == Literal(utc_now)


class TestOptionSpec:
    """Test OptionSpec construction checks."""

    def test_defaults(self):
        """Optional, no default, not shared."""
        spec = OptionSpec("source", Symbol())
        assert spec.required is False
        assert spec.default is None
        assert spec.has_default is False
        assert spec.match_other_defaults is False

    def test_name_must_be_identifier(self):
        with pytest.raises(InvalidSchemaError):
            OptionSpec("not valid", Bool())

    def test_kind_required(self):
        """A spec without a constraint kind is malformed."""
        with pytest.raises(InvalidSchemaError):
            OptionSpec("flag", bool)

    def test_default_must_be_tagged(self):
        """Plain values are not accepted as defaults directly."""
        with pytest.raises(InvalidSchemaError):
            OptionSpec("flag", Bool(), default=False)

    def test_literal_default_checked_against_kind(self):
        """A literal default that fails its own kind is malformed."""
        with pytest.raises(InvalidSchemaError):
            OptionSpec("flag", Bool(), default=Literal("yes"))

    def test_entity_default_needs_admitting_kind(self):
        """Deferred1 defaults need LiteralOrDeferred or Deferred(1)."""
        fn = lambda entity: entity  # noqa: E731
        with pytest.raises(InvalidSchemaError):
            OptionSpec("flag", Bool(), default=Deferred1(fn))
        assert OptionSpec("value", LiteralOrDeferred(), default=Deferred1(fn))
        assert OptionSpec("value", AnyOf([Bool(), Deferred(1)]), default=Deferred1(fn))

    def test_entity_default_on_typed_option(self):
        """OfType admits a Deferred1 default only when flagged for it."""
        fn = lambda entity: entity  # noqa: E731
        with pytest.raises(InvalidSchemaError):
            OptionSpec("version", OfType("integer"), default=Deferred1(fn))
        spec = OptionSpec("version", OfType("integer", entity_default=True), default=Deferred1(fn))
        assert spec.default == Deferred1(fn)

    def test_links_normalized_to_tuple(self):
        spec = OptionSpec("flag", Bool(), links=["guide:actions"])
        assert spec.links == ("guide:actions",)

    def test_with_default_returns_copy(self):
        """with_default leaves the source spec untouched."""
        spec = OptionSpec("flag", Bool(), default=Literal(True))
        changed = spec.with_default(Literal(False))
        assert changed.default == Literal(False)
        assert spec.default == Literal(True)

    def test_spec_is_frozen(self):
        spec = OptionSpec("flag", Bool())
        with pytest.raises(AttributeError):
            spec.required = True
