"""
Schedule data schemas.

Pydantic models for schedule items as they cross the API boundary
(camelCase) and the schedule_items table (snake_case).

Usage:
    from schemas import ParsedCandidate, ScheduleItem

    candidate = ParsedCandidate(projectId='p1', task='Framing',
                                plannedStart='2024-01-01', plannedEnd='2024-01-10')
    item = ScheduleItem.from_row(row)
"""

from .schedule import (
    ImportResult,
    ParsedCandidate,
    ParseRequest,
    ScheduleItem,
)

__all__ = [
    'ImportResult',
    'ParsedCandidate',
    'ParseRequest',
    'ScheduleItem',
]
