"""Loader for the schedule_items table behind the managed REST API."""
from typing import Any, Dict, List, Optional
import logging

from buildtrack.analysis.delay import with_derived_delay
from buildtrack.config.settings import settings
from buildtrack.connectors.table_connector import TableConnector
from buildtrack.importer.errors import PersistenceError
from buildtrack.loaders.base_loader import BaseLoader
from buildtrack.utils.helpers import chunk_list
from buildtrack.utils.validators import validate_date_fields, validate_required_fields
from schemas.schedule import ParsedCandidate, ScheduleItem

logger = logging.getLogger(__name__)

REQUIRED_ROW_FIELDS = {'project_id', 'task', 'planned_start', 'planned_end'}
DATE_ROW_FIELDS = {'planned_start', 'planned_end', 'actual_start', 'actual_end'}


class DatabaseLoader(BaseLoader):
    """
    Persist schedule items and keep delay_days derived.

    Every write recomputes delay_days from the item's own dates, so the
    stored value can never drift from the planned and actual windows.
    """

    def __init__(
        self,
        connector: TableConnector,
        table_name: Optional[str] = None,
        batch_size: int = 500,
    ):
        """
        Initialize database loader.

        Args:
            connector: REST table connector
            table_name: Target table (defaults to SCHEDULE_TABLE)
            batch_size: Rows per insert request
        """
        super().__init__('database')
        self.connector = connector
        self.table_name = table_name or settings.SCHEDULE_TABLE
        self.batch_size = batch_size

    @classmethod
    def from_settings(cls) -> 'DatabaseLoader':
        """Build a loader from environment settings."""
        return cls(TableConnector.from_settings())

    def _prepare_row(self, item: ParsedCandidate) -> Dict[str, Any]:
        row = with_derived_delay(item).to_row()
        rows = [row]
        fields_ok, missing = validate_required_fields(rows, REQUIRED_ROW_FIELDS)
        dates_ok, bad_dates = validate_date_fields(rows, DATE_ROW_FIELDS)
        if not (fields_ok and dates_ok):
            raise ValueError('; '.join(missing + bad_dates))
        return row

    def load(self, data: List[ParsedCandidate], **kwargs) -> bool:
        """
        Insert accepted candidates as schedule items.

        Args:
            data: Candidates accepted for the project

        Returns:
            True if load successful
        """
        if not data:
            self.logger.warning('No data to load')
            return False

        try:
            rows = [self._prepare_row(item) for item in data]
            inserted = 0
            for batch in chunk_list(rows, self.batch_size):
                inserted += len(self.connector.insert(self.table_name, batch))
            self.loaded_count = inserted
            self.logger.info(
                f'Successfully loaded {self.loaded_count} records into {self.table_name}'
            )
            return True
        except (PersistenceError, ValueError) as e:
            self.logger.error(f'Load failed: {str(e)}')
            return False

    def create_item(self, item: ParsedCandidate) -> ScheduleItem:
        """
        Insert one item and return it as stored.

        Raises:
            PersistenceError: If the table API fails
            ValueError: If required fields or dates are invalid
        """
        stored = self.connector.insert(self.table_name, [self._prepare_row(item)])
        if not stored:
            raise PersistenceError('Insert returned no rows')
        created = ScheduleItem.from_row(stored[0])
        self.logger.info(f'Created schedule item {created.id} ("{created.task}")')
        return created

    def update_item(self, item_id: str, item: ParsedCandidate) -> ScheduleItem:
        """
        Replace an item's fields, recomputing its delay.

        Raises:
            PersistenceError: If the item does not exist or the API fails
        """
        updated = self.connector.update(
            self.table_name,
            self._prepare_row(item),
            filters={'id': item_id},
        )
        if not updated:
            raise PersistenceError(f'Schedule item {item_id} not found')
        self.logger.info(f'Updated schedule item {item_id}')
        return ScheduleItem.from_row(updated[0])

    def delete_item(self, item_id: str) -> bool:
        """Delete an item; False if nothing matched."""
        removed = self.connector.delete(self.table_name, filters={'id': item_id})
        self.logger.info(f'Deleted {removed} schedule item(s) with id {item_id}')
        return removed > 0

    def get_item(self, item_id: str) -> Optional[ScheduleItem]:
        """Fetch one item by id."""
        rows = self.connector.select(self.table_name, filters={'id': item_id})
        return ScheduleItem.from_row(rows[0]) if rows else None

    def fetch_items(self, project_id: str) -> List[ScheduleItem]:
        """All items of a project ordered by planned start."""
        rows = self.connector.select(
            self.table_name,
            filters={'project_id': project_id},
            order='planned_start.asc',
        )
        return [ScheduleItem.from_row(row) for row in rows]
