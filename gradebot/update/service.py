"""
Result Update Service

Writes one student's result for one assignment:

1. fetch a snapshot of the sheet
2. find or create the student's row
3. find or create the assignment's column
4. write the value at their intersection

Each step waits for the previous one. The first failure aborts the update;
writes already applied are left in place.
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

import backoff

from ..config_manager import DEFAULT_READ_RANGE
from ..core.addressing import column_index_to_letters, parse_cell_address, to_cell_address
from ..core.resolver import DEFAULT_KEY_HEADER, RecordResolver
from ..core.table import Table, find_column_by_header
from ..errors import GatewayError, SchemaPreconditionError

logger = logging.getLogger(__name__)


def range_end(range_name: str) -> Optional[Tuple[int, int]]:
    """Zero-based (row, col) of the last cell of a bounded A1 range, else None."""
    end = range_name.rsplit(":", 1)[-1]
    try:
        return parse_cell_address(end)
    except ValueError:
        return None


class TableGateway(Protocol):
    def read_range(self, range_name: str) -> Table:
        ...

    def write_cell(self, row: int, col: int, value: Any, raw: bool = False) -> None:
        ...


@dataclass
class UpdateResult:
    """Where and what an update wrote."""
    github_id: str
    assignment_name: str
    row: int
    column: int
    value: Any
    student_created: bool
    assignment_created: bool

    @property
    def cell_address(self) -> str:
        return to_cell_address(self.row, self.column)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["cell_address"] = self.cell_address
        return data


class ResultUpdater:
    """Update an assignment result for a student in the gradebook sheet."""

    def __init__(
        self,
        gateway: TableGateway,
        key_header: str = DEFAULT_KEY_HEADER,
        read_range: str = DEFAULT_READ_RANGE
    ):
        self.gateway = gateway
        self.read_range = read_range
        self.resolver = RecordResolver(gateway, key_header=key_header)

    def fetch_table(self) -> Table:
        table = self.gateway.read_range(self.read_range)
        logger.info(f"Fetched snapshot with {len(table)} rows")
        return table

    def update_result(self, github_id: str, assignment_name: str, value: Any) -> UpdateResult:
        """
        Write ``value`` for ``github_id`` under ``assignment_name``.

        Raises:
            SchemaPreconditionError: If the sheet has no key header, or the
                assignment name is the key header itself
            GatewayError: If any read or write is rejected
        """
        logger.info(f"Updating '{assignment_name}' for student '{github_id}'")
        table = self.fetch_table()

        key_column = self.resolver.key_column(table)
        if assignment_name == self.resolver.key_header:
            raise SchemaPreconditionError(
                f"Assignment name '{assignment_name}' is the key column header"
            )

        student_created = self.resolver.find_student_row(table, key_column, github_id) is None
        row = self.resolver.resolve_student_row(table, key_column, github_id)

        # The header row is reused from the snapshot
        assignment_created = find_column_by_header(table, assignment_name) is None
        column = self.resolver.resolve_assignment_column(table, assignment_name)
        self.warn_outside_snapshot(row if student_created else None, column if assignment_created else None)

        self.gateway.write_cell(row, column, value)
        result = UpdateResult(
            github_id=github_id,
            assignment_name=assignment_name,
            row=row,
            column=column,
            value=value,
            student_created=student_created,
            assignment_created=assignment_created,
        )
        logger.info(f"Wrote {value!r} to {result.cell_address}")
        return result

    def warn_outside_snapshot(self, new_row: Optional[int], new_column: Optional[int]) -> None:
        """
        Warn when a created row or column lies past the snapshot range; cells
        there were never read and may hold data.
        """
        end = range_end(self.read_range)
        if end is None:
            return
        last_row, last_col = end
        if new_row is not None and new_row > last_row:
            logger.warning(
                f"New student row {new_row + 1} is outside read range {self.read_range}; "
                f"widen GRADEBOT_READ_RANGE if the sheet holds more rows"
            )
        if new_column is not None and new_column > last_col:
            logger.warning(
                f"New assignment column {column_index_to_letters(new_column)} is outside read range "
                f"{self.read_range}; widen GRADEBOT_READ_RANGE if the sheet holds more columns"
            )

    def update_result_with_retries(
        self,
        github_id: str,
        assignment_name: str,
        value: Any,
        max_tries: int = 1
    ) -> UpdateResult:
        """
        Run update_result, rerunning the whole sequence on a fresh snapshot
        when the API reports a retryable status (429/5xx).
        """
        retrying = backoff.on_exception(
            backoff.expo,
            GatewayError,
            max_tries=max_tries,
            giveup=lambda e: not e.retryable,
            logger=logger
        )(self.update_result)
        return retrying(github_id, assignment_name, value)
