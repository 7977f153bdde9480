"""Connector for the managed REST table API."""
from typing import Any, Dict, List, Optional
import logging

import requests

from buildtrack.config.settings import settings
from buildtrack.connectors.api_connector import APIConnector
from buildtrack.importer.errors import PersistenceError

logger = logging.getLogger(__name__)


def eq_filters(filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
    """Turn {'column': value} into REST query filters ('column=eq.value')."""
    return {column: f'eq.{value}' for column, value in (filters or {}).items()}


class TableConnector(APIConnector):
    """
    Row-level access to tables exposed over REST.
    Every call is a single round trip; failures raise PersistenceError.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None, **kwargs):
        """
        Initialize table connector.

        Args:
            base_url: REST API base URL (.../rest/v1)
            api_key: Service API key
            **kwargs: Passed to APIConnector (timeout, retry_attempts, session)
        """
        super().__init__('tables', base_url, api_key=api_key, **kwargs)

    @classmethod
    def from_settings(cls) -> 'TableConnector':
        """Build a connector from environment settings."""
        return cls(
            base_url=settings.get_rest_url(),
            api_key=settings.SUPABASE_KEY,
            timeout=settings.SUPABASE_TIMEOUT,
            retry_attempts=settings.SUPABASE_RETRY_ATTEMPTS,
        )

    def _call(self, method: str, table: str, **kwargs) -> List[Dict[str, Any]]:
        try:
            response = self.request(method, table, **kwargs)
        except requests.RequestException as e:
            self.logger.error(f'{method} {table} failed: {str(e)}')
            raise PersistenceError(f'{method} {table} failed: {str(e)}') from e
        if not response.content:
            return []
        body = response.json()
        return body if isinstance(body, list) else [body]

    def insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows and return them as stored (ids assigned)."""
        return self._call(
            'POST',
            table,
            json=rows,
            headers={'Prefer': 'return=representation'},
        )

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Select rows matching equality filters.

        Args:
            table: Table name
            filters: Column/value pairs that must all match
            order: Ordering clause (e.g. 'planned_start.asc')
        """
        params = {'select': '*', **eq_filters(filters)}
        if order:
            params['order'] = order
        return self._call('GET', table, params=params)

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Dict[str, Any],
    ) -> List[Dict[str, Any]]:
        """Update rows matching filters and return the updated rows."""
        return self._call(
            'PATCH',
            table,
            params=eq_filters(filters),
            json=values,
            headers={'Prefer': 'return=representation'},
        )

    def delete(self, table: str, filters: Dict[str, Any]) -> int:
        """Delete rows matching filters and return how many were removed."""
        deleted = self._call(
            'DELETE',
            table,
            params=eq_filters(filters),
            headers={'Prefer': 'return=representation'},
        )
        return len(deleted)
