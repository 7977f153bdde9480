"""Base connector class for the managed backend services."""
from abc import ABC, abstractmethod
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class BaseConnector(ABC):
    """
    Abstract base class for connectors to the storage and table services.
    Defines the interface that all connectors must implement.
    """

    def __init__(self, name: str, timeout: Optional[float] = None):
        """
        Initialize the connector.

        Args:
            name: Name of the connector (for logging)
            timeout: Request timeout in seconds (None = client default)
        """
        self.name = name
        self.timeout = timeout
        self.logger = logging.getLogger(f'{__name__}.{name}')

    @abstractmethod
    def authenticate(self) -> bool:
        """
        Authenticate with the external system.

        Returns:
            True if authentication successful, False otherwise
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection to the external system."""
        pass

    def __enter__(self):
        """Context manager entry."""
        self.authenticate()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
