# tests/test_resolver.py

import pytest

from gradebot.core.resolver import RecordResolver
from gradebot.errors import ErrorKind, SchemaPreconditionError


def test_key_column(make_gateway, roster_table):
    resolver = RecordResolver(make_gateway(roster_table))

    assert resolver.key_column(roster_table) == 0


def test_key_column_custom_header(make_gateway):
    table = [["name", "login"], ["Alice", "alice"]]
    resolver = RecordResolver(make_gateway(table), key_header="login")

    assert resolver.key_column(table) == 1


def test_missing_key_header_is_precondition_failure(make_gateway):
    table = [["name", "task01"], ["alice", "1"]]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    with pytest.raises(SchemaPreconditionError) as excinfo:
        resolver.key_column(table)

    assert excinfo.value.kind is ErrorKind.SCHEMA_PRECONDITION
    assert gateway.writes == []


def test_empty_sheet_has_no_key_column(make_gateway):
    resolver = RecordResolver(make_gateway([]))

    with pytest.raises(SchemaPreconditionError):
        resolver.key_column([])


def test_existing_student_is_not_rewritten(make_gateway, roster_table):
    gateway = make_gateway(roster_table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_student_row(roster_table, 0, "carol") == 2
    assert gateway.writes == []


def test_new_student_goes_into_first_blank_row(make_gateway):
    table = [
        ["github_id", "task01"],
        ["alice", "1"],
        ["carol", "0"],
        ["dave", "1"],
        ["", ""],
        ["erin", "1"],
    ]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    row = resolver.resolve_student_row(table, 0, "bob")

    assert row == 4
    assert gateway.writes == [(4, 0, "bob")]
    assert gateway.table[:4] == table[:4]


def test_new_student_appended_after_last_row(make_gateway, roster_table):
    gateway = make_gateway(roster_table)
    resolver = RecordResolver(gateway)

    row = resolver.resolve_student_row(roster_table, 0, "bob")

    assert row == 4
    assert gateway.writes == [(4, 0, "bob")]


def test_header_text_is_not_a_student(make_gateway, roster_table):
    gateway = make_gateway(roster_table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_student_row(roster_table, 0, "github_id") == 4


def test_candidate_key_columns(make_gateway):
    table = [["github_id", "alias"], ["alice", "al"], ["bob", "bobby"]]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_student_row(table, [0, 1], "bobby") == 2
    assert resolver.resolve_student_row(table, [0, 1], "zed") == 3
    assert gateway.writes == [(3, 0, "zed")]


def test_existing_assignment_column(make_gateway, roster_table):
    gateway = make_gateway(roster_table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_assignment_column(roster_table, "task02") == 2
    assert gateway.writes == []


def test_new_assignment_on_header_only_sheet(make_gateway):
    table = [["github_id"]]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_assignment_column(table, "task03") == 1
    assert gateway.writes == [(0, 1, "task03")]


def test_new_assignment_fills_blank_column(make_gateway):
    table = [["github_id", "", "task02"], ["alice", "", "1"]]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    assert resolver.resolve_assignment_column(table, "task03") == 1
    assert gateway.writes == [(0, 1, "task03")]


def test_write_failure_propagates(roster_table):
    class FailingGateway:
        def write_cell(self, row, col, value, raw=False):
            raise RuntimeError("write rejected")

    resolver = RecordResolver(FailingGateway())

    with pytest.raises(RuntimeError):
        resolver.resolve_student_row(roster_table, 0, "bob")


def test_created_ids_and_headers_are_written_raw(make_gateway):
    table = [["github_id"], ["x"]]
    gateway = make_gateway(table)
    resolver = RecordResolver(gateway)

    resolver.resolve_student_row(table, 0, "007")
    resolver.resolve_assignment_column(table, "1.10")

    assert gateway.writes == [(2, 0, "007"), (0, 1, "1.10")]
    assert gateway.raw_flags == [True, True]
