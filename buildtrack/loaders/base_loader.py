"""Base loader class for writing schedule items to destinations."""
from abc import ABC, abstractmethod
from typing import Any, List, Dict
import logging

from schemas.schedule import ParsedCandidate

logger = logging.getLogger(__name__)


class BaseLoader(ABC):
    """
    Abstract base class for all loaders.
    Defines the interface for loading accepted candidates to a destination.
    """

    def __init__(self, name: str):
        """
        Initialize the loader.

        Args:
            name: Name of the loader (for logging)
        """
        self.name = name
        self.logger = logging.getLogger(f'{__name__}.{name}')
        self.loaded_count = 0

    @abstractmethod
    def load(self, data: List[ParsedCandidate], **kwargs) -> bool:
        """
        Load candidates to the destination.

        Args:
            data: Candidates (or schedule items) to load
            **kwargs: Destination-specific parameters

        Returns:
            True if load successful, False otherwise
        """
        pass

    def validate_load(self, record_count: int) -> bool:
        """
        Validate that data was loaded successfully.

        Args:
            record_count: Number of records that should have been loaded

        Returns:
            True if loaded record count matches
        """
        return self.loaded_count == record_count

    def get_load_stats(self) -> Dict[str, Any]:
        """Get statistics about the load operation."""
        return {
            'loader': self.name,
            'loaded_count': self.loaded_count,
        }
