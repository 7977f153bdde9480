"""
Synthetic construction phases used when a file yields no tasks.

Every window here is anchored to "today" so callers must pass the clock
value in; nothing reads the system time directly.
"""
import re
from datetime import datetime, timedelta
from typing import List

from buildtrack.transformers.base_transformer import TaskWindow

# Scanned in this order; the order also fixes the chaining order
PHASE_KEYWORDS = (
    'Site Preparation',
    'Demolition',
    'Excavation',
    'Foundation',
    'Framing',
    'Roofing',
    'Plumbing',
    'Electrical',
    'HVAC',
    'Insulation',
    'Drywall',
    'Flooring',
    'Painting',
    'Fixtures',
    'Landscaping',
    'Inspection',
)

KEYWORD_PHASE_DAYS = 14

# (name, start offset, end offset) in days from today
DEFAULT_PHASES = (
    ('Site Preparation', 0, 14),
    ('Foundation Work', 15, 35),
    ('Structural Assembly', 36, 66),
)

PLACEHOLDER_PHASES = (
    ('Site Preparation', 0, 10),
    ('Demolition', 11, 20),
)


def _windows(phases, today: datetime, suffix: str = '') -> List[TaskWindow]:
    return [
        TaskWindow(
            f'{name}{suffix}',
            today + timedelta(days=start),
            today + timedelta(days=end),
        )
        for name, start, end in phases
    ]


def keyword_phases(text: str, today: datetime) -> List[TaskWindow]:
    """
    One 14-day window per phase keyword found in text, chained end-to-end.

    Returns:
        Windows in PHASE_KEYWORDS order, empty if no keyword occurs
    """
    windows = []
    start = today
    for keyword in PHASE_KEYWORDS:
        if re.search(rf'\b{re.escape(keyword)}\b', text, re.IGNORECASE):
            end = start + timedelta(days=KEYWORD_PHASE_DAYS)
            windows.append(TaskWindow(keyword, start, end))
            start = end
    return windows


def default_phases(today: datetime) -> List[TaskWindow]:
    """The three fixed phases, each starting after the previous one ends."""
    return _windows(DEFAULT_PHASES, today)


def placeholder_phases(today: datetime, suffix: str = '') -> List[TaskWindow]:
    """Placeholder items offered when a tabular file yields nothing."""
    return _windows(PLACEHOLDER_PHASES, today, suffix)
