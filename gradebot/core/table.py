"""
Table scanning over a fetched sheet snapshot.

A table is a list of rows, each a list of cell strings. Rows may be ragged
and row 0 is the header row. Nothing here performs I/O.
"""
from typing import Any, Dict, Iterable, List, Optional

Table = List[List[str]]


def parse_sheet_data(data: Dict[str, Any]) -> Table:
    """
    Build a table from a Sheets API ``values`` response.

    Args:
        data: Response body of a values read, e.g. ``{"values": [["a", "b"]]}``

    Returns:
        Table of strings; an absent ``values`` key yields an empty table
    """
    table: Table = []
    for row in data.get("values") or []:
        if not isinstance(row, list):
            table.append([])
            continue
        table.append(["" if cell is None else str(cell) for cell in row])
    return table


def _is_blank(cell: Optional[str]) -> bool:
    return cell is None or not cell.strip()


def _cell(row: List[str], col: int) -> Optional[str]:
    if 0 <= col < len(row):
        return row[col]
    return None


def find_row_by_value(table: Table, column_index: int, value: str, start: int = 0) -> Optional[int]:
    """
    Return the first row at or after ``start`` whose cell in ``column_index``
    equals ``value`` exactly, or None.
    """
    for row_idx in range(max(start, 0), len(table)):
        if _cell(table[row_idx], column_index) == value:
            return row_idx
    return None


def find_row_by_values(
    table: Table,
    column_indexes: Iterable[int],
    value: str,
    start: int = 0
) -> Optional[int]:
    """Like find_row_by_value, matching ``value`` in any of several key columns."""
    columns = list(column_indexes)
    for row_idx in range(max(start, 0), len(table)):
        row = table[row_idx]
        if any(_cell(row, col) == value for col in columns):
            return row_idx
    return None


def find_column_by_header(table: Table, header: str) -> Optional[int]:
    """Index of the first header cell equal to ``header``, or None."""
    if not table:
        return None
    for col_idx, cell in enumerate(table[0]):
        if cell == header:
            return col_idx
    return None


def find_first_empty_row(table: Table) -> int:
    """First row made only of blank cells; len(table) when there is none."""
    for row_idx, row in enumerate(table):
        if all(_is_blank(cell) for cell in row):
            return row_idx
    return len(table)


def find_first_empty_column(table: Table) -> int:
    """First column blank in every row (missing cells count as blank)."""
    max_columns = max((len(row) for row in table), default=0)

    for col_idx in range(max_columns):
        if all(_is_blank(_cell(row, col_idx)) for row in table):
            return col_idx
    return max_columns
