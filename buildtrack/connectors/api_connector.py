"""API connector for the managed backend's HTTP endpoints."""
import requests
from typing import Any, Dict, Optional
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import logging

from .base_connector import BaseConnector

logger = logging.getLogger(__name__)


class APIConnector(BaseConnector):
    """
    Connector for the backend REST APIs.
    Handles key authentication, the retry policy and request plumbing.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: int = 0,
        retry_delay: float = 0.5,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize API connector.

        Args:
            name: Name of the API service
            base_url: Base URL for the API
            api_key: Optional API key, sent as 'apikey' and as a Bearer token
            timeout: Request timeout in seconds (None = client default)
            retry_attempts: Number of retry attempts (0 = single round trip)
            retry_delay: Backoff factor between retries in seconds
            session: Pre-built session (tests inject a mock here)
        """
        super().__init__(name, timeout)
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.session = session if session is not None else requests.Session()
        if session is None:
            self._setup_retry_strategy()
        self._authenticated = False

    def _setup_retry_strategy(self) -> None:
        """Configure retry strategy for the session."""
        retry_strategy = Retry(
            total=self.retry_attempts,
            backoff_factor=self.retry_delay,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=['GET', 'POST', 'PATCH', 'DELETE'],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)

    def authenticate(self) -> bool:
        """
        Authenticate with the API.
        For API key auth, this just sets headers.
        """
        if self._authenticated:
            return True
        if self.api_key:
            self.session.headers.update({
                'apikey': self.api_key,
                'Authorization': f'Bearer {self.api_key}',
            })
        self._authenticated = True
        self.logger.debug(f'Authenticated with {self.name}')
        return True

    def url_for(self, endpoint: str) -> str:
        """Absolute URL for an endpoint relative to base_url."""
        return f'{self.base_url}/{endpoint.lstrip("/")}'

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Make a request and raise for HTTP error statuses.

        Args:
            method: HTTP method
            endpoint: API endpoint (relative to base_url)
            params: Query parameters
            json: JSON body
            data: Raw body (bytes or form data)
            headers: Additional headers

        Returns:
            The response

        Raises:
            requests.RequestException: If request fails
        """
        self.authenticate()
        url = self.url_for(endpoint)
        merged_headers = {**self.session.headers}
        if headers:
            merged_headers.update(headers)

        response = self.session.request(
            method,
            url,
            params=params,
            json=json,
            data=data,
            headers=merged_headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def fetch_bytes(self, url: str) -> bytes:
        """
        Download an absolute URL.

        Args:
            url: Absolute URL (e.g. a public object URL)

        Returns:
            Response body
        """
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def close(self) -> None:
        """Close the session."""
        self.session.close()
        self._authenticated = False
        self.logger.debug(f'Closed connection to {self.name}')
