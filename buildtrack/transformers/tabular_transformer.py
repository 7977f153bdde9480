"""
Column heuristics for spreadsheet and CSV schedules.

Two column-role strategies are tried in order:

1. match_columns_by_name: case-insensitive substring match of the header
   names against a fixed vocabulary per role. Vocabulary order decides,
   not column order, and a column claimed by one role is not reused.
2. infer_columns_by_position: first column is the task, the first two
   later columns whose sample value looks like a date are start and end.

Rows missing any of the three cells, or holding an unreadable date, are
dropped without error.
"""
import numbers
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence

from buildtrack.extractors.base_extractor import RawRow, RawTable
from buildtrack.importer.errors import MissingColumnsError
from buildtrack.transformers.base_transformer import BaseTransformer, Clock, TaskWindow
from buildtrack.utils.dates import to_utc_datetime
from buildtrack.utils.helpers import is_blank
from schemas.schedule import ParsedCandidate

TASK_KEYWORDS = ('task', 'activity', 'description', 'work item', 'milestone')
START_KEYWORDS = ('start', 'begin', 'from')
END_KEYWORDS = ('end', 'finish', 'to', 'complete')


@dataclass(frozen=True)
class ColumnRoles:
    """Which column holds the task name, start date and end date."""
    task: str
    start: str
    end: str
    method: str


def find_column(
    columns: Sequence[str],
    keywords: Iterable[str],
    taken: Iterable[str] = (),
) -> Optional[str]:
    """First column containing the earliest matching keyword."""
    taken = set(taken)
    for keyword in keywords:
        for column in columns:
            if column in taken:
                continue
            if keyword in column.lower():
                return column
    return None


def match_columns_by_name(table: RawTable) -> Optional[ColumnRoles]:
    """Resolve all three roles from header names, or None."""
    task = find_column(table.columns, TASK_KEYWORDS)
    if task is None:
        return None
    start = find_column(table.columns, START_KEYWORDS, taken=[task])
    if start is None:
        return None
    end = find_column(table.columns, END_KEYWORDS, taken=[task, start])
    if end is None:
        return None
    return ColumnRoles(task, start, end, 'name')


def sample_value(rows: List[RawRow], column: str) -> Any:
    """First non-empty value of a column."""
    for row in rows:
        value = row.get(column)
        if not is_blank(value):
            return value
    return None


def is_date_like(value: Any) -> bool:
    """Numbers (serial dates), datetimes and date-parseable strings."""
    if is_blank(value) or isinstance(value, bool):
        return False
    if isinstance(value, (datetime, date, numbers.Real)):
        return True
    return isinstance(value, str) and to_utc_datetime(value) is not None


def infer_columns_by_position(table: RawTable) -> Optional[ColumnRoles]:
    """Task from the first column, dates from the first two date-like columns."""
    if not table.columns:
        return None
    task = table.columns[0]
    date_columns = [
        column for column in table.columns[1:]
        if is_date_like(sample_value(table.rows, column))
    ]
    if len(date_columns) < 2:
        return None
    return ColumnRoles(task, date_columns[0], date_columns[1], 'position')


COLUMN_STRATEGIES = (
    match_columns_by_name,
    infer_columns_by_position,
)


def task_label(value: Any) -> str:
    """Display text of a task cell; whole-number floats lose their '.0'."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def rows_to_windows(rows: List[RawRow], roles: ColumnRoles) -> List[TaskWindow]:
    """Map complete rows with readable dates to task windows."""
    windows = []
    for row in rows:
        task = row.get(roles.task)
        start_value = row.get(roles.start)
        end_value = row.get(roles.end)
        if is_blank(task) or is_blank(start_value) or is_blank(end_value):
            continue
        start = to_utc_datetime(start_value)
        end = to_utc_datetime(end_value)
        if start is None or end is None:
            continue
        name = task_label(task)
        if not name:
            continue
        windows.append(TaskWindow(name, start, end))
    return windows


class TabularTransformer(BaseTransformer):
    """Turn a spreadsheet/CSV RawTable into schedule candidates."""

    def __init__(self, project_id: str, clock: Optional[Clock] = None):
        super().__init__('tabular', project_id, clock)
        self.roles: Optional[ColumnRoles] = None

    def resolve_columns(self, table: RawTable) -> ColumnRoles:
        """
        Run the column strategies in order.

        Raises:
            MissingColumnsError: If no strategy identifies the columns
        """
        for strategy in COLUMN_STRATEGIES:
            roles = strategy(table)
            if roles is not None:
                self.strategy_used = strategy.__name__
                self.logger.info(
                    f'Columns resolved by {roles.method}: task={roles.task!r}, '
                    f'start={roles.start!r}, end={roles.end!r}'
                )
                return roles

        raise MissingColumnsError(
            "Couldn't identify task, start date, or end date columns. "
            f'Found columns: {", ".join(table.columns) or "(none)"}',
            columns=table.columns,
        )

    def transform(self, data: RawTable) -> List[ParsedCandidate]:
        """
        Extract candidates from a table.

        Raises:
            MissingColumnsError: If the columns cannot be identified
        """
        self.roles = self.resolve_columns(data)
        windows = rows_to_windows(data.rows, self.roles)
        dropped = len(data.rows) - len(windows)
        if dropped:
            self.logger.debug(f'Dropped {dropped} incomplete or undated rows')
        return self.to_candidates(windows)
