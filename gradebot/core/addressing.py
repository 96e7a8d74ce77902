"""
A1 notation helpers.

Columns use bijective base-26 letters (A..Z, AA..ZZ, AAA..), rows are
rendered one-based. All indexes handled here are zero-based.
"""
import re
from typing import Tuple

_CELL_RE = re.compile(r"^([A-Za-z]+)([1-9][0-9]*)$")


def column_index_to_letters(col: int) -> str:
    """
    Convert a zero-based column index to its letter form.

    >>> column_index_to_letters(0), column_index_to_letters(26)
    ('A', 'AA')
    """
    if col < 0:
        raise ValueError(f"Column index must be non-negative, got {col}")

    letters = []
    n = col + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord('A') + rem))
    return ''.join(reversed(letters))


def letters_to_column_index(letters: str) -> int:
    """Inverse of column_index_to_letters (case-insensitive)."""
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"Invalid column letters: {letters!r}")

    n = 0
    for ch in letters.upper():
        n = n * 26 + (ord(ch) - ord('A') + 1)
    return n - 1


def to_cell_address(row: int, col: int) -> str:
    """(0, 0) -> 'A1', (4, 26) -> 'AA5'."""
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    return f"{column_index_to_letters(col)}{row + 1}"


def parse_cell_address(address: str) -> Tuple[int, int]:
    """Split 'B7' into zero-based (row, col), i.e. (6, 1)."""
    match = _CELL_RE.match(address.strip())
    if not match:
        raise ValueError(f"Invalid cell address: {address!r}")
    letters, digits = match.groups()
    return int(digits) - 1, letters_to_column_index(letters)


def qualify_range(sheet_name: str, range_name: str) -> str:
    """Prefix a range with its sheet title, quoted the way the Sheets API expects."""
    if not sheet_name:
        return range_name
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{range_name}"
