"""General utility helper functions."""
from typing import Any, List
import logging
import math
import re

import pandas as pd

logger = logging.getLogger(__name__)

_EDGE_PUNCTUATION = re.compile(r'^[\W_]+|[\W_]+$')


def is_blank(value: Any) -> bool:
    """
    Check whether a raw cell value is empty.

    None, NaN/NaT and whitespace-only strings count as empty.
    """
    if value is None or value is pd.NaT:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def get_file_extension(file_name: str) -> str:
    """
    Lower-cased extension without the dot.

    Args:
        file_name: File name or path

    Returns:
        Extension (e.g. 'xlsx'), or '' when there is none
    """
    base = file_name.replace('\\', '/').rsplit('/', 1)[-1]
    if '.' not in base:
        return ''
    return base.rsplit('.', 1)[-1].strip().lower()


def strip_edge_punctuation(text: str) -> str:
    """Remove leading/trailing punctuation and whitespace from a label."""
    return _EDGE_PUNCTUATION.sub('', text.strip())


def chunk_list(lst: List[Any], chunk_size: int) -> List[List[Any]]:
    """
    Split a list into chunks.

    Args:
        lst: List to chunk
        chunk_size: Size of each chunk

    Returns:
        List of chunks
    """
    return [lst[i:i + chunk_size] for i in range(0, len(lst), chunk_size)]
