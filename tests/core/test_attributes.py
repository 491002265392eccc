"""Tests for schemaspine.core.attributes module."""

from datetime import UTC, datetime
from uuid import UUID

import pytest

from schemaspine.core.attributes import (
    ATTRIBUTE_SCHEMA,
    CREATE_TIMESTAMP_SCHEMA,
    INTEGER_PRIMARY_KEY_SCHEMA,
    UPDATE_TIMESTAMP_SCHEMA,
    UUID_PRIMARY_KEY_SCHEMA,
    Attribute,
    attribute,
    create_timestamp,
    integer_primary_key,
    record_schema,
    timestamps,
    update_timestamp,
    uuid_primary_key,
)
from schemaspine.core.errors import (
    InvalidSchemaError,
    InvariantViolationError,
    MissingRequiredError,
    TypeMismatchError,
    UnknownOptionError,
)
from schemaspine.core.kinds import OfType
from schemaspine.core.options import Deferred0, Literal
from schemaspine.core.resolver import resolve
from schemaspine.core.timestamps import generate_uuid, utc_now


class TestAttributeCatalog:
    """Test the base attribute option schema."""

    def test_option_order(self):
        assert ATTRIBUTE_SCHEMA.names()[:2] == ("name", "type")
        assert "match_other_defaults" in ATTRIBUTE_SCHEMA

    def test_every_option_documented(self):
        assert all(option.doc for option in ATTRIBUTE_SCHEMA)

    def test_defaults(self):
        record = resolve(ATTRIBUTE_SCHEMA, {"name": "title", "type": "string"}).unwrap()
        assert record["allow_none"] is True
        assert record["writable"] is True
        assert record["filterable"] is True
        assert "default" not in record

    def test_filterable_accepts_simple_equality(self):
        record = resolve(
            ATTRIBUTE_SCHEMA,
            {"name": "title", "type": "string", "filterable": "simple_equality"},
        ).unwrap()
        assert record["filterable"] == "simple_equality"

    def test_unknown_type_name(self):
        result = resolve(ATTRIBUTE_SCHEMA, {"name": "title", "type": "nonexistent"})
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.name == "type"

    def test_missing_name(self):
        result = resolve(ATTRIBUTE_SCHEMA, {"type": "string"})
        assert isinstance(result.error, MissingRequiredError)
        assert result.error.name == "name"


class TestDerivedSchemas:
    """Test the timestamp and primary key specializations."""

    def test_create_timestamp_schema(self):
        assert CREATE_TIMESTAMP_SCHEMA["writable"].default == Literal(False)
        assert CREATE_TIMESTAMP_SCHEMA["private"].default == Literal(True)
        assert CREATE_TIMESTAMP_SCHEMA["default"].default == Literal(utc_now)
        assert CREATE_TIMESTAMP_SCHEMA["match_other_defaults"].default == Literal(True)
        assert CREATE_TIMESTAMP_SCHEMA["type"].default == Literal("utc_datetime_usec")
        assert CREATE_TIMESTAMP_SCHEMA["allow_none"].default == Literal(False)
        assert CREATE_TIMESTAMP_SCHEMA["update_default"].default is None

    def test_update_timestamp_schema(self):
        assert UPDATE_TIMESTAMP_SCHEMA["update_default"].default == Literal(utc_now)
        assert UPDATE_TIMESTAMP_SCHEMA["default"].default == Literal(utc_now)

    def test_primary_key_schemas_drop_allow_none(self):
        for schema in (UUID_PRIMARY_KEY_SCHEMA, INTEGER_PRIMARY_KEY_SCHEMA):
            assert "allow_none" not in schema
            assert schema["primary_key"].default == Literal(True)
        assert UUID_PRIMARY_KEY_SCHEMA["default"].default == Literal(generate_uuid)
        assert INTEGER_PRIMARY_KEY_SCHEMA["generated"].default == Literal(True)

    def test_base_catalog_unchanged(self):
        """Deriving never edits the base."""
        assert "allow_none" in ATTRIBUTE_SCHEMA
        assert ATTRIBUTE_SCHEMA["writable"].default == Literal(True)

    def test_primary_key_rejects_allow_none(self):
        result = uuid_primary_key("id", allow_none=True)
        assert isinstance(result.error, UnknownOptionError)
        assert result.error.name == "allow_none"


class TestBuilders:
    """Test attribute builder functions."""

    def test_attribute(self):
        title = attribute("title", "string", description="Post title").unwrap()
        assert title == Attribute(name="title", type="string", description="Post title")
        assert title.field_source == "title"

    def test_attribute_source(self):
        title = attribute("title", "string", source="post_title").unwrap()
        assert title.field_source == "post_title"

    def test_attribute_constraints_normalized(self):
        title = attribute("title", "string", constraints={"max_length": 10}).unwrap()
        assert title.constraints == (("max_length", 10),)

    def test_attribute_nullable_primary_key(self):
        result = attribute("id", "integer", primary_key=True)
        assert isinstance(result.error, InvariantViolationError)

    def test_create_timestamp(self):
        inserted_at = create_timestamp("inserted_at").unwrap()
        assert inserted_at.type == "utc_datetime_usec"
        assert inserted_at.default is utc_now
        assert inserted_at.update_default is None
        assert inserted_at.writable is False
        assert inserted_at.private is True
        assert inserted_at.allow_none is False
        assert inserted_at.match_other_defaults is True

    def test_update_timestamp(self):
        updated_at = update_timestamp("updated_at").unwrap()
        assert updated_at.update_default is utc_now

    def test_timestamp_overrides(self):
        inserted_at = create_timestamp("inserted_at", private=False, type="utc_datetime").unwrap()
        assert inserted_at.private is False
        assert inserted_at.type == "utc_datetime"

    def test_uuid_primary_key(self):
        id_attr = uuid_primary_key("id").unwrap()
        assert id_attr.primary_key is True
        assert id_attr.allow_none is False
        assert id_attr.type == "uuid"
        assert id_attr.default is generate_uuid

    def test_integer_primary_key(self):
        id_attr = integer_primary_key("id").unwrap()
        assert id_attr.generated is True
        assert id_attr.allow_none is False
        assert id_attr.default is None

    def test_timestamps_pair(self):
        inserted_at, updated_at = timestamps().unwrap()
        assert (inserted_at.name, updated_at.name) == ("inserted_at", "updated_at")

    def test_timestamps_propagates_error(self):
        result = timestamps(type="nonexistent")
        assert isinstance(result.error, TypeMismatchError)


class TestRecordSchema:
    """Test per-action record schemas."""

    def test_create_shares_timestamp(self):
        """Both timestamps get the exact same instant on create."""
        record = resolve(record_schema(timestamps().unwrap(), "create")).unwrap()
        assert record["inserted_at"] == record["updated_at"]
        assert record["inserted_at"].tzinfo is UTC
        assert record.shared_default_token("inserted_at") == record.shared_default_token("updated_at")

    def test_update_only_refreshes_update_timestamp(self):
        record = resolve(record_schema(timestamps().unwrap(), "update")).unwrap()
        assert "inserted_at" not in record
        assert isinstance(record["updated_at"], datetime)

    def test_uuid_primary_key_generated(self):
        id_attr = uuid_primary_key("id").unwrap()
        record = resolve(record_schema([id_attr])).unwrap()
        assert UUID(record["id"])

    def test_required_when_not_nullable_without_default(self):
        title = attribute("title", "string", allow_none=False).unwrap()
        result = resolve(record_schema([title]), {})
        assert isinstance(result.error, MissingRequiredError)
        assert result.error.name == "title"

    def test_generated_primary_key_not_required(self):
        id_attr = integer_primary_key("id").unwrap()
        record = resolve(record_schema([id_attr]), {}).unwrap()
        assert "id" not in record

    def test_values_checked_against_type(self):
        title = attribute("title", "string").unwrap()
        schema = record_schema([title])
        assert resolve(schema, {"title": None}).unwrap()["title"] is None
        assert isinstance(resolve(schema, {"title": 5}).error, TypeMismatchError)

    def test_entity_update_default(self):
        """A one-argument update default receives the entity."""
        version = attribute(
            "version", "integer", update_default=lambda entity: entity["version"] + 1
        ).unwrap()
        schema = record_schema([version], "update")
        record = resolve(schema, entity={"version": 3}).unwrap()
        assert record["version"] == 4

    def test_entity_default_keeps_supplied_value_checked(self):
        """A field with a one-argument default still rejects a supplied function."""
        version = attribute(
            "version", "integer", update_default=lambda entity: entity["version"] + 1
        ).unwrap()
        schema = record_schema([version], "update")
        assert schema["version"].kind == OfType("integer", allow_none=True, entity_default=True)
        result = resolve(schema, {"version": lambda entity: "not an int"}, entity={"version": 3})
        assert isinstance(result.error, TypeMismatchError)
        assert result.error.name == "version"

    def test_zero_arity_default_deferred(self):
        title = attribute("title", "string", default=lambda: "untitled").unwrap()
        option = record_schema([title])["title"]
        assert isinstance(option.default, Deferred0)

    def test_unknown_action(self):
        with pytest.raises(InvalidSchemaError):
            record_schema([], "destroy")
