"""
Task heuristics for schedules extracted from PDF text.

Strategies run in order and the first one with results wins:

1. extract_labelled_lines: "Task: X  Start: <date>  End: <date>" on one line
2. extract_two_date_lines: any line carrying two dates is one task
3. extract_header_table: rows under a task/start/end header, cells split
   on runs of two or more spaces or tabs

When all three come back empty the text is scanned for construction
phase keywords, and failing that three default phases are returned.
"""
import re
from datetime import datetime
from typing import List, Optional

from buildtrack.transformers.base_transformer import BaseTransformer, Clock, TaskWindow
from buildtrack.transformers.phases import default_phases, keyword_phases
from buildtrack.utils.dates import find_dates, parse_date_string
from buildtrack.utils.helpers import strip_edge_punctuation
from schemas.schedule import ParsedCandidate

_DATE = r'(?:\d{4}-\d{1,2}-\d{1,2}|\d{1,2}[-/.]\d{1,2}[-/.](?:\d{4}|\d{2}))'

LABELLED_LINE_PATTERN = re.compile(
    r'\b(?:task|activity|item)\b\s*[:#\-]?\s*(?P<task>.+?)\s*[,;|]?\s*'
    r'\b(?:start|begin)\w*(?:\s+date)?\s*[:\-]?\s*(?P<start>' + _DATE + r')'
    r'.*?\b(?:end|finish|complete)\w*(?:\s+date)?\s*[:\-]?\s*(?P<end>' + _DATE + r')',
    re.IGNORECASE,
)

HEADER_PATTERN = re.compile(
    r'\b(?:task|activity|description|title)\b.*?'
    r'\b(?:start|begin)\w*.*?'
    r'\b(?:end|finish|complete)\w*',
    re.IGNORECASE,
)

CELL_SPLIT_PATTERN = re.compile(r'\s{2,}|\t')
WRITTEN_YEAR_PATTERN = re.compile(r'\b\d{4}\b')

MIN_LABEL_LENGTH = 3
HEADER_SCAN_LINES = 20


def _first_date(text: str) -> Optional[datetime]:
    found = find_dates(text)
    return found[0][1] if found else None


def extract_labelled_lines(lines: List[str]) -> List[TaskWindow]:
    """Lines that label the task, start and end explicitly."""
    windows = []
    for line in lines:
        match = LABELLED_LINE_PATTERN.search(line)
        if not match:
            continue
        task = strip_edge_punctuation(match.group('task'))
        start = _first_date(match.group('start'))
        end = _first_date(match.group('end'))
        if task and start and end:
            windows.append(TaskWindow(task, start, end))
    return windows


def extract_two_date_lines(lines: List[str]) -> List[TaskWindow]:
    """Any line with at least two dates; the label comes from around them."""
    windows = []
    for line_number, line in enumerate(lines, 1):
        found = find_dates(line)
        if len(found) < 2:
            continue
        (first_match, start), (second_match, end) = found[0], found[1]

        label = strip_edge_punctuation(line[:first_match.start()])
        if len(label) < MIN_LABEL_LENGTH:
            label = strip_edge_punctuation(line[first_match.end():second_match.start()])
        if len(label) < MIN_LABEL_LENGTH:
            label = f'Task from PDF line {line_number}'

        windows.append(TaskWindow(label, start, end))
    return windows


def _cell_date(cell: str) -> Optional[datetime]:
    """A date token in the cell, or a written-out date with a 4-digit year."""
    token_date = _first_date(cell)
    if token_date is not None:
        return token_date
    if WRITTEN_YEAR_PATTERN.search(cell) and re.search(r'[A-Za-z]', cell):
        return parse_date_string(cell)
    return None


def extract_header_table(lines: List[str]) -> List[TaskWindow]:
    """Rows in the lines following a task/start/end header."""
    header_index = None
    for index, line in enumerate(lines):
        if HEADER_PATTERN.search(line):
            header_index = index
            break
    if header_index is None:
        return []

    windows = []
    for line in lines[header_index + 1:header_index + 1 + HEADER_SCAN_LINES]:
        cells = [cell.strip() for cell in CELL_SPLIT_PATTERN.split(line) if cell.strip()]
        if len(cells) < 3:
            continue

        task = strip_edge_punctuation(cells[0])
        dates = []
        for cell in cells[1:]:
            parsed = _cell_date(cell)
            if parsed is not None:
                dates.append(parsed)
                if len(dates) == 2:
                    break

        if task and len(dates) == 2:
            windows.append(TaskWindow(task, dates[0], dates[1]))
    return windows


TEXT_STRATEGIES = (
    extract_labelled_lines,
    extract_two_date_lines,
    extract_header_table,
)


class TextTransformer(BaseTransformer):
    """Turn document text lines into schedule candidates."""

    def __init__(
        self,
        project_id: str,
        clock: Optional[Clock] = None,
        synthesize_fallback: bool = True,
    ):
        """
        Initialize text transformer.

        Args:
            project_id: Project the candidates belong to
            clock: Returns "today" for synthesized phases
            synthesize_fallback: Produce keyword/default phases when no
                strategy finds anything; otherwise return an empty list
        """
        super().__init__('text', project_id, clock)
        self.synthesize_fallback = synthesize_fallback

    def find_windows(self, lines: List[str]) -> List[TaskWindow]:
        """Run the text strategies, then the phase fallback."""
        for strategy in TEXT_STRATEGIES:
            windows = strategy(lines)
            if windows:
                self.strategy_used = strategy.__name__
                self.logger.info(f'{strategy.__name__} found {len(windows)} tasks')
                return windows

        if not self.synthesize_fallback:
            self.logger.info('No tasks found in document text')
            return []

        today = self.clock()
        windows = keyword_phases('\n'.join(lines), today)
        if windows:
            self.strategy_used = 'keyword_phases'
        else:
            self.strategy_used = 'default_phases'
            windows = default_phases(today)
        self.used_fallback = True
        self.logger.warning(
            f'No dated tasks found in document text, synthesized '
            f'{len(windows)} phases ({self.strategy_used})'
        )
        return windows

    def transform(self, data: List[str]) -> List[ParsedCandidate]:
        """Extract candidates from text lines."""
        return self.to_candidates(self.find_windows(data))
