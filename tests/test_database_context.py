# tests/test_database_context.py
import pytest

from fluent_sqlite import (
    DuplicateTableError,
    FieldType,
    FluentSQLiteError,
    SQLiteConnection,
    create_database,
)


def test_adding_same_table_twice_should_fail():
    db = (
        create_database()
        .add_table("Table1")
        .add_field("PrimaryKey", FieldType.AUTO_INCREMENT, True, True)
        .add_field("SomeData", FieldType.STRING)
        .commit_structure()
    )
    with pytest.raises(DuplicateTableError):
        db.add_table("Table1")


def test_table_names_are_case_insensitive():
    db = create_database()
    foo = db.add_table("Foo")

    with pytest.raises(DuplicateTableError):
        db.add_table("foo")
    assert db.select_table("foo") is foo
    assert db.select_table("FOO").table_name == "Foo"
    assert "fOo" in db


def test_select_table_creates_missing_table():
    db = create_database()
    table = db.select_table("Existing")
    assert table.table_name == "Existing"
    assert table.fields == []
    assert db.data_tables == [table]


def test_data_tables_in_registration_order():
    db = create_database()
    db.add_table("B")
    db.add_table("A")
    assert [t.table_name for t in db.data_tables] == ["B", "A"]


def test_connection_opened_on_construction(recording_connection):
    db = create_database(recording_connection)
    assert db.connection is recording_connection
    assert recording_connection.open_calls == 1


def test_already_open_connection_is_not_reopened(recording_connection):
    recording_connection.open()
    create_database(recording_connection)
    assert recording_connection.open_calls == 1


def test_each_call_returns_a_fresh_database(recording_connection):
    assert create_database(recording_connection) is not create_database(recording_connection)


def test_detach_closes_connection(recording_connection):
    db = create_database(recording_connection)
    db.detach_database()

    assert recording_connection.closed
    assert db.connection is None


def test_detached_database_rejects_commits(recording_connection):
    db = create_database(recording_connection)
    table = db.add_table("T").add_field("a", FieldType.INTEGER)
    db.detach_database()

    with pytest.raises(FluentSQLiteError):
        table.commit_structure()


def test_detach_in_memory_discards_data():
    db = create_database()
    connection = db.connection
    assert isinstance(connection, SQLiteConnection)
    db.add_table("T").add_field("a", FieldType.INTEGER).commit_structure()
    db.detach_database()

    assert not connection.is_open
    # a new in-memory database starts empty, so the same table can be created again
    create_database().add_table("T").add_field("a", FieldType.INTEGER).commit_structure()


def test_empty_table_name_rejected():
    with pytest.raises(ValueError):
        create_database().add_table("")


def test_table_names_fold_ascii_only():
    db = create_database()
    strasse = db.add_table("Straße")
    upper = db.add_table("STRASSE")

    assert strasse is not upper
    assert db.select_table("straße") is strasse
    assert db.select_table("strasse") is upper
