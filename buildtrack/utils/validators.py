"""Data validation utilities."""
from typing import Any, List, Dict
import logging

from buildtrack.utils.dates import to_utc_datetime
from buildtrack.utils.helpers import is_blank

logger = logging.getLogger(__name__)


def validate_required_fields(
    data: List[Dict[str, Any]],
    required_fields: set[str],
) -> tuple[bool, List[str]]:
    """
    Validate that all records contain non-empty required fields.

    Args:
        data: List of dictionaries to validate
        required_fields: Set of required field names

    Returns:
        Tuple of (is_valid, list_of_invalid_records)
    """
    invalid_records = []

    for idx, record in enumerate(data):
        missing_fields = {
            field for field in required_fields
            if is_blank(record.get(field))
        }
        if missing_fields:
            invalid_records.append(
                f'Record {idx}: Missing fields {sorted(missing_fields)}'
            )

    return len(invalid_records) == 0, invalid_records


def validate_date_fields(
    data: List[Dict[str, Any]],
    date_fields: set[str],
) -> tuple[bool, List[str]]:
    """
    Validate that populated date fields can be read as dates.

    Args:
        data: List of dictionaries to validate
        date_fields: Field names holding dates (blank values are allowed)

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    for idx, record in enumerate(data):
        for field in sorted(date_fields):
            value = record.get(field)
            if is_blank(value):
                continue
            if to_utc_datetime(value) is None:
                errors.append(
                    f'Record {idx}, field "{field}": '
                    f'{value!r} is not a valid date'
                )

    return len(errors) == 0, errors
