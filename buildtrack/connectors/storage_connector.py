"""Connector for the managed blob storage service."""
from typing import Optional
from urllib.parse import quote
import logging

import requests

from buildtrack.config.settings import settings
from buildtrack.connectors.api_connector import APIConnector
from buildtrack.importer.errors import UploadError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'xls': 'application/vnd.ms-excel',
    'pdf': 'application/pdf',
}


class StorageConnector(APIConnector):
    """
    Upload and download objects in one storage bucket.

    Objects are addressed by a path inside the bucket; uploads return the
    object's public URL.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        bucket: str = 'project_files',
        **kwargs,
    ):
        """
        Initialize storage connector.

        Args:
            base_url: Storage API base URL (.../storage/v1)
            api_key: Service API key
            bucket: Bucket that holds the objects
            **kwargs: Passed to APIConnector (timeout, retry_attempts, session)
        """
        super().__init__('storage', base_url, api_key=api_key, **kwargs)
        self.bucket = bucket

    @classmethod
    def from_settings(cls) -> 'StorageConnector':
        """Build a connector from environment settings."""
        return cls(
            base_url=settings.get_storage_url(),
            api_key=settings.SUPABASE_KEY,
            bucket=settings.SCHEDULE_BUCKET,
            timeout=settings.SUPABASE_TIMEOUT,
            retry_attempts=settings.SUPABASE_RETRY_ATTEMPTS,
        )

    def public_url(self, path: str) -> str:
        """Public URL of an object path."""
        return self.url_for(f'object/public/{self.bucket}/{quote(path)}')

    def upload(
        self,
        path: str,
        content: bytes,
        content_type: Optional[str] = None,
        upsert: bool = True,
    ) -> str:
        """
        Store bytes at path and return the public URL.

        Args:
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type (guessed from the extension if omitted)
            upsert: Overwrite an existing object at the same path

        Returns:
            Public URL of the stored object

        Raises:
            UploadError: If the storage service is unreachable or rejects the file
        """
        if content_type is None:
            extension = path.rsplit('.', 1)[-1].lower() if '.' in path else ''
            content_type = CONTENT_TYPES.get(extension, 'application/octet-stream')

        headers = {
            'Content-Type': content_type,
            'x-upsert': 'true' if upsert else 'false',
        }
        try:
            self.request(
                'POST',
                f'object/{self.bucket}/{quote(path)}',
                data=content,
                headers=headers,
            )
        except requests.RequestException as e:
            self.logger.error(f'Upload of {path} failed: {str(e)}')
            raise UploadError(f'Could not upload schedule file: {str(e)}') from e

        url = self.public_url(path)
        self.logger.info(f'Uploaded {len(content)} bytes to {self.bucket}/{path}')
        return url

    def download(self, url: str) -> bytes:
        """
        Fetch an object by its public URL.

        Raises:
            UploadError: If the object cannot be retrieved
        """
        try:
            return self.fetch_bytes(url)
        except requests.RequestException as e:
            self.logger.error(f'Download of {url} failed: {str(e)}')
            raise UploadError(f'Could not retrieve uploaded file: {str(e)}') from e
