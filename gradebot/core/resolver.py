"""
Record Resolver

Finds a student's row and an assignment's column in a snapshot, creating
them through the gateway when they are missing.

The snapshot is read before any write, so two invocations creating the same
new student (or the same new assignment) at the same time can both pick the
same blank row/column. Callers running updates concurrently must serialize
first-time creation themselves.
"""
import logging
from typing import Any, Optional, Protocol, Sequence, Union

from ..errors import SchemaPreconditionError
from .addressing import column_index_to_letters, to_cell_address
from .table import (
    Table,
    find_column_by_header,
    find_first_empty_column,
    find_first_empty_row,
    find_row_by_values,
)

logger = logging.getLogger(__name__)

DEFAULT_KEY_HEADER = "github_id"


class CellWriter(Protocol):
    def write_cell(self, row: int, col: int, value: Any, raw: bool = False) -> None:
        ...


class RecordResolver:
    """Get-or-create lookups for student rows and assignment columns."""

    def __init__(self, gateway: CellWriter, key_header: str = DEFAULT_KEY_HEADER):
        self.gateway = gateway
        self.key_header = key_header

    def key_column(self, table: Table) -> int:
        """
        Locate the key column by its header.

        Raises:
            SchemaPreconditionError: If the header row lacks the key header
        """
        col = find_column_by_header(table, self.key_header)
        if col is None:
            raise SchemaPreconditionError(
                f"Column '{self.key_header}' not found in the header row"
            )
        return col

    def find_student_row(
        self,
        table: Table,
        key_column: Union[int, Sequence[int]],
        github_id: str
    ) -> Optional[int]:
        columns = [key_column] if isinstance(key_column, int) else list(key_column)
        # Row 0 holds headers
        return find_row_by_values(table, columns, github_id, start=1)

    def resolve_student_row(
        self,
        table: Table,
        key_column: Union[int, Sequence[int]],
        github_id: str
    ) -> int:
        """
        Return the row holding ``github_id``, writing the id into the first
        blank row when the student is not in the table yet.

        Args:
            table: Snapshot of the sheet
            key_column: Key column index, or candidate key columns; new ids
                are written into the first one
            github_id: Student identifier

        Returns:
            Zero-based row index
        """
        row = self.find_student_row(table, key_column, github_id)
        if row is not None:
            logger.info(f"Found student '{github_id}' at row {row + 1}")
            return row

        write_col = key_column if isinstance(key_column, int) else key_column[0]
        new_row = find_first_empty_row(table)
        logger.info(
            f"Student '{github_id}' not found, creating at {to_cell_address(new_row, write_col)}"
        )
        self.gateway.write_cell(new_row, write_col, github_id, raw=True)
        return new_row

    def resolve_assignment_column(self, table: Table, assignment_name: str) -> int:
        """
        Return the column headed ``assignment_name``, appending the header in
        the first blank column when it does not exist.
        """
        col = find_column_by_header(table, assignment_name)
        if col is not None:
            logger.info(f"Found assignment '{assignment_name}' in column {column_index_to_letters(col)}")
            return col

        new_col = find_first_empty_column(table)
        logger.info(
            f"Assignment '{assignment_name}' not found, creating header at {to_cell_address(0, new_col)}"
        )
        self.gateway.write_cell(0, new_col, assignment_name, raw=True)
        return new_col
