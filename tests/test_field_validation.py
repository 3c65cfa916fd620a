# tests/test_field_validation.py
import dataclasses

import pytest

from fluent_sqlite import (
    DuplicateFieldError,
    DuplicatePrimaryKeyError,
    FieldContext,
    FieldType,
    FluentSQLiteError,
    InvalidAutoIncrementError,
    create_database,
)


@pytest.fixture
def table():
    return create_database().add_table("Table1")


def test_auto_inc_should_be_the_only_primary_key_added_before_other_fields(table):
    table.add_field("PrimaryKey", FieldType.AUTO_INCREMENT, True, True)
    with pytest.raises(DuplicatePrimaryKeyError):
        table.add_field("SomeData", FieldType.STRING, False, True)


def test_auto_inc_should_be_the_only_primary_key_added_after_other_fields(table):
    table.add_field("SomeData", FieldType.STRING, False, True)
    with pytest.raises(DuplicatePrimaryKeyError):
        table.add_field("PrimaryKey", FieldType.AUTO_INCREMENT, True, True)


def test_auto_inc_must_be_primary_key(table):
    with pytest.raises(InvalidAutoIncrementError):
        table.add_field("PrimaryKey", FieldType.AUTO_INCREMENT, required=True)


def test_second_auto_inc_is_rejected(table):
    table.add_field("Id", FieldType.AUTO_INCREMENT, primary_key=True)
    with pytest.raises(DuplicatePrimaryKeyError):
        table.add_field("Other", FieldType.AUTO_INCREMENT, primary_key=True)


def test_two_regular_key_fields_then_auto_inc(table):
    table.add_field("A", FieldType.STRING, primary_key=True)
    table.add_field("B", FieldType.INTEGER, primary_key=True)
    with pytest.raises(DuplicatePrimaryKeyError):
        table.add_field("Id", FieldType.AUTO_INCREMENT, primary_key=True)


def test_non_key_fields_allowed_after_auto_inc(table):
    table.add_field("Id", FieldType.AUTO_INCREMENT, primary_key=True)
    table.add_field("Name", FieldType.STRING, required=True)
    assert [f.field_name for f in table.fields] == ["Id", "Name"]


def test_rejected_field_leaves_table_unchanged(table):
    table.add_field("SomeData", FieldType.STRING, primary_key=True)
    with pytest.raises(DuplicatePrimaryKeyError):
        table.add_field("PrimaryKey", FieldType.AUTO_INCREMENT, primary_key=True)

    # the failed AutoIncrement declaration must not block further key fields
    table.add_field("MoreKey", FieldType.INTEGER, primary_key=True)
    assert [f.field_name for f in table.fields] == ["SomeData", "MoreKey"]


def test_validation_errors_share_base_class():
    assert issubclass(DuplicatePrimaryKeyError, FluentSQLiteError)
    assert issubclass(InvalidAutoIncrementError, FluentSQLiteError)


def test_primary_key_forces_required(table):
    table.add_field("Code", FieldType.STRING, required=False, primary_key=True)
    field = table.fields[0]
    assert field.is_in_primary_key
    assert field.is_required


def test_field_defaults_and_immutability():
    field = FieldContext("Name", FieldType.STRING)
    assert not field.is_required
    assert not field.is_in_primary_key
    with pytest.raises(dataclasses.FrozenInstanceError):
        field.field_name = "Other"


@pytest.mark.parametrize("bad_name", ["", "line\nbreak"])
def test_invalid_field_name_rejected(table, bad_name):
    with pytest.raises(ValueError):
        table.add_field(bad_name, FieldType.STRING)
    assert table.fields == []


def test_non_string_field_name_rejected(table):
    with pytest.raises(TypeError):
        table.add_field(42, FieldType.STRING)


def test_duplicate_field_name_rejected(table):
    table.add_field("Name", FieldType.STRING)
    with pytest.raises(DuplicateFieldError):
        table.add_field("NAME", FieldType.INTEGER)
    assert [f.field_name for f in table.fields] == ["Name"]


def test_fields_sharing_parameter_token_rejected(table):
    table.add_field("Some Data", FieldType.STRING)
    with pytest.raises(DuplicateFieldError) as ei:
        table.add_field("Some_Data", FieldType.STRING)
    assert "@Some_Data" in str(ei.value)
    assert issubclass(DuplicateFieldError, FluentSQLiteError)
