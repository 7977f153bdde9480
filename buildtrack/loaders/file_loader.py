"""Loader for file-based exports of parsed candidates (CSV, JSON)."""
from typing import Any, List, Dict, Optional
import json
from pathlib import Path
import pandas as pd

from buildtrack.loaders.base_loader import BaseLoader
from schemas.schedule import ParsedCandidate


class FileLoader(BaseLoader):
    """Write candidates to CSV or JSON for offline review."""

    def __init__(self):
        """Initialize file loader."""
        super().__init__('file')
        self.file_path = None

    def load(
        self,
        data: List[ParsedCandidate],
        file_path: Optional[str] = None,
        format: str = 'json',
        **kwargs,
    ) -> bool:
        """
        Load candidates to a file.

        Args:
            data: Candidates to write
            file_path: Output file path
            format: File format ('csv', 'json')
            **kwargs: Additional parameters passed to writer

        Returns:
            True if load successful
        """
        if not data:
            self.logger.warning('No data to load')
            return False

        try:
            if not file_path:
                raise ValueError('file_path is required')

            path = Path(file_path)
            path.parent.mkdir(parents=True, exist_ok=True)

            loaders = {
                'csv': self._load_csv,
                'json': self._load_json,
            }

            if format not in loaders:
                raise ValueError(f'Unsupported format: {format}')

            records = [item.to_api_dict() for item in data]
            loaders[format](records, path, **kwargs)
            self.loaded_count = len(records)
            self.file_path = str(path)

            self.logger.info(
                f'Successfully loaded {self.loaded_count} records to {path}'
            )
            return True

        except (OSError, ValueError) as e:
            self.logger.error(f'Load failed: {str(e)}')
            return False

    def _load_csv(
        self,
        data: List[Dict[str, Any]],
        file_path: Path,
        **kwargs,
    ) -> None:
        """Load data as CSV."""
        df = pd.DataFrame(data)
        df.to_csv(file_path, index=False, **kwargs)

    def _load_json(
        self,
        data: List[Dict[str, Any]],
        file_path: Path,
        **kwargs,
    ) -> None:
        """Load data as JSON."""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2, default=str)

    def get_load_stats(self) -> Dict[str, Any]:
        """Get load statistics."""
        stats = super().get_load_stats()
        stats['file_path'] = self.file_path
        return stats
