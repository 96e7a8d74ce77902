# tests/conftest.py

import base64
import json

import pytest


class FakeGateway:
    """In-memory stand-in for SheetsClient that applies writes to a table."""

    def __init__(self, table):
        self.table = [list(row) for row in table]
        self.writes = []
        self.reads = []
        self.raw_flags = []

    def read_range(self, range_name):
        self.reads.append(range_name)
        return [list(row) for row in self.table]

    def write_cell(self, row, col, value, raw=False):
        self.writes.append((row, col, value))
        self.raw_flags.append(raw)
        while len(self.table) <= row:
            self.table.append([])
        cells = self.table[row]
        while len(cells) <= col:
            cells.append("")
        cells[col] = str(value)


@pytest.fixture
def sample_table():
    return [
        ["github_id", "task01"],
        ["alice", "1"],
        ["", "  "],
    ]


@pytest.fixture
def roster_table():
    return [
        ["github_id", "task01", "task02"],
        ["alice", "1", "0"],
        ["carol", "1", ""],
        ["dave", "", "1"],
    ]


@pytest.fixture
def make_gateway():
    return FakeGateway


def encode_report(report):
    return base64.b64encode(json.dumps(report).encode("utf-8")).decode("ascii")


@pytest.fixture
def sample_report():
    return {
        "version": 1,
        "status": "fail",
        "max_score": 3,
        "tests": [
            {"name": "compiles", "status": "pass", "score": 1},
            {"name": "unit tests", "status": "pass", "score": 1, "duration": 120},
            {"name": "style", "status": "fail", "score": 0, "line_no": 12},
        ],
    }


@pytest.fixture
def encoded_report(sample_report):
    return encode_report(sample_report)
