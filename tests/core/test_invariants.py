"""Tests for schemaspine.core.invariants module."""

import pytest

from schemaspine.core.attributes import ATTRIBUTE_SCHEMA
from schemaspine.core.errors import InvariantViolationError
from schemaspine.core.invariants import (
    PRIMARY_KEY_NOT_NULLABLE,
    InvariantRegistry,
    default_invariants,
    primary_key_not_nullable,
    register_invariant,
    reset_invariants,
)
from schemaspine.core.kinds import Bool
from schemaspine.core.options import Literal, OptionSpec
from schemaspine.core.record import AttributeRecord
from schemaspine.core.resolver import resolve
from schemaspine.core.result import Err, Ok
from schemaspine.core.schema import Schema


def generated_not_writable(record):
    if record.get("generated") and record.get("writable"):
        return Err(InvariantViolationError("GeneratedNotWritable", "writable"))
    return Ok(None)


class TestPrimaryKeyNotNullable:
    """Test the built-in primary key rule."""

    def test_rule_directly(self):
        record = AttributeRecord({"name": "id", "primary_key": True, "allow_none": True})
        result = primary_key_not_nullable(record)
        assert isinstance(result.error, InvariantViolationError)
        assert result.error.rule == PRIMARY_KEY_NOT_NULLABLE
        assert result.error.name == "allow_none"
        assert result.error.context.metadata["attribute"] == "id"

    @pytest.mark.parametrize(
        "values",
        [
            {"primary_key": True, "allow_none": False},
            {"primary_key": False, "allow_none": True},
            {"primary_key": True},
            {},
        ],
    )
    def test_rule_passes(self, values):
        """Records without both flags set pass."""
        assert primary_key_not_nullable(AttributeRecord(values)).is_ok()

    def test_resolution_reports_violation(self):
        """Declaring a nullable primary key fails resolution."""
        result = resolve(
            ATTRIBUTE_SCHEMA,
            {"name": "id", "type": "uuid", "primary_key": True, "allow_none": True},
        )
        assert isinstance(result.error, InvariantViolationError)
        assert result.error.kind == "InvariantViolation"

    def test_default_allow_none_also_violates(self):
        """allow_none defaults to True, so primary_key alone is enough."""
        result = resolve(ATTRIBUTE_SCHEMA, {"name": "id", "type": "uuid", "primary_key": True})
        assert isinstance(result.error, InvariantViolationError)

    def test_not_nullable_primary_key_resolves(self):
        record = resolve(
            ATTRIBUTE_SCHEMA,
            {"name": "id", "type": "uuid", "primary_key": True, "allow_none": False},
        ).unwrap()
        assert record["primary_key"] is True


class TestInvariantRegistry:
    """Test registering and ordering rules."""

    def test_register_and_check(self):
        registry = InvariantRegistry()
        registry.register(generated_not_writable)
        schema = Schema(
            [
                OptionSpec("generated", Bool(), default=Literal(True)),
                OptionSpec("writable", Bool(), default=Literal(True)),
            ]
        )
        result = resolve(schema, invariants=registry)
        assert result.error.rule == "GeneratedNotWritable"

    def test_duplicate_registration(self):
        registry = InvariantRegistry([generated_not_writable])
        with pytest.raises(ValueError, match="already registered"):
            registry.register(generated_not_writable)

    def test_violation_order_follows_declaration(self):
        """When two rules fail, the one naming the earlier option wins."""

        def late(record):
            return Err(InvariantViolationError("Late", "second"))

        def early(record):
            return Err(InvariantViolationError("Early", "first"))

        schema = Schema(
            [
                OptionSpec("first", Bool(), default=Literal(True)),
                OptionSpec("second", Bool(), default=Literal(True)),
            ]
        )
        registry = InvariantRegistry([late, early])
        result = registry.check(schema, resolve(schema, invariants=InvariantRegistry()).unwrap())
        assert result.error.rule == "Early"

    def test_register_invariant_decorator(self):
        """The module-level registry is used by resolve."""
        register_invariant(generated_not_writable)
        result = resolve(
            ATTRIBUTE_SCHEMA,
            {"name": "id", "type": "integer", "generated": True},
        )
        assert result.error.rule == "GeneratedNotWritable"

    def test_reset_restores_builtins(self):
        register_invariant(generated_not_writable)
        reset_invariants()
        assert default_invariants.rules == (primary_key_not_nullable,)
