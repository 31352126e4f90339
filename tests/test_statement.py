import pytest

from tdquery.query import insert_command_statement

CMD = "INSERT INTO t"

statements = [
    # marker line is replaced
    ("-- DIGDAG_INSERT_LINE\nSELECT 1", "INSERT INTO t\nSELECT 1"),
    (
        "-- head\n-- DIGDAG_INSERT_LINE\nSELECT 1",
        "-- head\nINSERT INTO t\nSELECT 1",
    ),
    (
        "SELECT 1\n--   DIGDAG_INSERT_LINE trailing text\nFROM x",
        "SELECT 1\nINSERT INTO t\nFROM x",
    ),
    ("a\r\n-- DIGDAG_INSERT_LINE\r\nb", "a\r\nINSERT INTO t\r\nb"),
    (
        "-- DIGDAG_INSERT_LINE\nSELECT 1\n-- DIGDAG_INSERT_LINE\n",
        "INSERT INTO t\nSELECT 1\n-- DIGDAG_INSERT_LINE\n",
    ),
    # after header comments
    ("-- comment\nSELECT 1", "-- comment\nINSERT INTO t\nSELECT 1"),
    (
        "-- c1\n-- c2\nSELECT 1\n-- c3\nSELECT 2",
        "-- c1\n-- c2\nINSERT INTO t\nSELECT 1\n-- c3\nSELECT 2",
    ),
    ("\n-- c\nSELECT 1", "\n-- c\nINSERT INTO t\nSELECT 1"),
    ("-- c", "-- c\nINSERT INTO t\n"),
    (
        "-- digdag_insert_line\nSELECT 1",
        "-- digdag_insert_line\nINSERT INTO t\nSELECT 1",
    ),
    # at the head
    ("SELECT 1", "INSERT INTO t\nSELECT 1"),
    ("SELECT 1\n-- c", "INSERT INTO t\nSELECT 1\n-- c"),
    ("SELECT '-- DIGDAG_INSERT_LINE'", "INSERT INTO t\nSELECT '-- DIGDAG_INSERT_LINE'"),
]


@pytest.mark.parametrize("original,expected", statements)
def test_insert_command_statement(original, expected):
    assert insert_command_statement(CMD, original) == expected


def test_create_table_command_in_front():
    cmd = "DROP TABLE IF EXISTS d.t;\nCREATE TABLE d.t AS"
    assert (
        insert_command_statement(cmd, "SELECT 1")
        == "DROP TABLE IF EXISTS d.t;\nCREATE TABLE d.t AS\nSELECT 1"
    )


def test_command_is_inserted_literally():
    cmd = 'INSERT INTO "a\\1$b"'
    assert (
        insert_command_statement(cmd, "-- DIGDAG_INSERT_LINE\nSELECT 1")
        == 'INSERT INTO "a\\1$b"\nSELECT 1'
    )
