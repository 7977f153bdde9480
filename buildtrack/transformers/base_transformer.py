"""Base transformer class turning raw records into schedule candidates."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, List, NamedTuple, Optional
import logging

from buildtrack.utils.dates import to_iso_string, utc_today
from buildtrack.utils.validators import validate_date_fields, validate_required_fields
from schemas.schedule import ParsedCandidate

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

CANDIDATE_REQUIRED_FIELDS = {'projectId', 'task', 'plannedStart', 'plannedEnd'}
CANDIDATE_DATE_FIELDS = {'plannedStart', 'plannedEnd'}


class TaskWindow(NamedTuple):
    """A task name with its planned window, before it becomes a candidate."""
    task: str
    start: datetime
    end: datetime


class BaseTransformer(ABC):
    """
    Abstract base class for all heuristic transformers.
    Defines the interface that all transformers must implement.
    """

    def __init__(self, name: str, project_id: str, clock: Optional[Clock] = None):
        """
        Initialize the transformer.

        Args:
            name: Name of the transformer (for logging)
            project_id: Project the candidates belong to
            clock: Returns "today" for synthesized windows (UTC midnight)
        """
        self.name = name
        self.project_id = project_id
        self.clock = clock or utc_today
        self.logger = logging.getLogger(f'{__name__}.{name}')
        self.strategy_used: Optional[str] = None
        self.used_fallback = False

    @abstractmethod
    def transform(self, data: Any) -> List[ParsedCandidate]:
        """
        Transform reader output into candidates.

        Args:
            data: RawTable or text lines

        Returns:
            Candidate schedule items (may be empty)
        """
        pass

    def to_candidates(self, windows: List[TaskWindow]) -> List[ParsedCandidate]:
        """Wrap task windows as candidates for this project."""
        return [
            ParsedCandidate(
                project_id=self.project_id,
                task=window.task,
                planned_start=to_iso_string(window.start),
                planned_end=to_iso_string(window.end),
            )
            for window in windows
        ]

    def validate_transformation(self, data: List[ParsedCandidate]) -> bool:
        """
        Validate the transformed candidates.

        Args:
            data: Candidates to validate

        Returns:
            True if validation passes, False otherwise
        """
        records = [candidate.to_api_dict() for candidate in data]
        fields_ok, missing = validate_required_fields(records, CANDIDATE_REQUIRED_FIELDS)
        dates_ok, bad_dates = validate_date_fields(records, CANDIDATE_DATE_FIELDS)
        for problem in missing + bad_dates:
            self.logger.warning(problem)
        return fields_ok and dates_ok
