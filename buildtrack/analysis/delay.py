"""
Planned-vs-actual delay for schedule items.

    delay_days = max(0, actual_end - planned_end)    (calendar days)

Delay is only meaningful once work is finished, so a missing date gives 0
rather than an error. Early or on-time completion is also 0.
"""
from typing import Any, Dict, List

from buildtrack.utils.dates import calendar_days_between, format_display_date
from buildtrack.utils.helpers import is_blank
from schemas.schedule import ParsedCandidate, ScheduleItem


def compute_delay(planned_end: Any, actual_end: Any) -> int:
    """
    Days the actual end trails the planned end, never negative.

    Args:
        planned_end: Planned end (ISO string, date or datetime)
        actual_end: Actual end (ISO string, date or datetime)

    Returns:
        Non-negative whole days; 0 if either date is absent
    """
    if is_blank(planned_end) or is_blank(actual_end):
        return 0
    return max(0, calendar_days_between(planned_end, actual_end))


def derive_delay(item: ParsedCandidate) -> int:
    """Delay for an item; 0 unless all four window dates are present."""
    dates = (item.planned_start, item.planned_end, item.actual_start, item.actual_end)
    if any(is_blank(value) for value in dates):
        return 0
    return compute_delay(item.planned_end, item.actual_end)


def with_derived_delay(item: ParsedCandidate) -> ScheduleItem:
    """Copy of the item as a ScheduleItem carrying its recomputed delay."""
    data = item.model_dump(by_alias=False)
    data['delay_days'] = derive_delay(item)
    return ScheduleItem.model_validate(data)


def schedule_comparison(items: List[ParsedCandidate]) -> List[Dict[str, Any]]:
    """
    Planned and actual durations per task, for a planned-vs-actual chart.

    Actual duration is 0 until both actual dates exist.
    """
    rows = []
    for item in items:
        has_actual = not is_blank(item.actual_start) and not is_blank(item.actual_end)
        rows.append({
            'task': item.task,
            'planned_days': calendar_days_between(item.planned_start, item.planned_end),
            'actual_days': (
                calendar_days_between(item.actual_start, item.actual_end)
                if has_actual else 0
            ),
            'delay_days': derive_delay(item),
            'planned_window': (
                f'{format_display_date(item.planned_start)} - '
                f'{format_display_date(item.planned_end)}'
            ),
            'actual_window': (
                f'{format_display_date(item.actual_start)} - '
                f'{format_display_date(item.actual_end)}'
            ),
        })
    return rows


def delay_summary(items: List[ParsedCandidate]) -> Dict[str, Any]:
    """Counts of delayed tasks and the total and worst delay in days."""
    delays = [derive_delay(item) for item in items]
    delayed = [delay for delay in delays if delay > 0]
    return {
        'task_count': len(items),
        'delayed_count': len(delayed),
        'total_delay_days': sum(delayed),
        'max_delay_days': max(delayed) if delayed else 0,
    }
