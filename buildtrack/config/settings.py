"""
Configuration settings for the schedule import pipeline.
Load configuration from environment variables or a .env file.
"""
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


def _get_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _get_optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return None
    return float(value)


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', '')

    # ============================================================================
    # Managed backend (storage + REST tables)
    # ============================================================================
    SUPABASE_URL = os.getenv('SUPABASE_URL', '')
    SUPABASE_KEY = os.getenv('SUPABASE_KEY', '')
    # None leaves the requests default in place
    SUPABASE_TIMEOUT = _get_optional_float('SUPABASE_TIMEOUT')
    SUPABASE_RETRY_ATTEMPTS = int(os.getenv('SUPABASE_RETRY_ATTEMPTS', '0'))

    # ============================================================================
    # Schedule import
    # ============================================================================
    SCHEDULE_BUCKET = os.getenv('SCHEDULE_BUCKET', 'project_files')
    SCHEDULE_TABLE = os.getenv('SCHEDULE_TABLE', 'schedule_items')
    SCHEDULE_FALLBACK_ENABLED = _get_bool('SCHEDULE_FALLBACK_ENABLED', True)

    @classmethod
    def get_storage_url(cls) -> str:
        """Base URL of the storage API."""
        return f'{cls.SUPABASE_URL.rstrip("/")}/storage/v1'

    @classmethod
    def get_rest_url(cls) -> str:
        """Base URL of the REST table API."""
        return f'{cls.SUPABASE_URL.rstrip("/")}/rest/v1'

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that all required settings are configured.
        Returns list of missing required settings.
        """
        missing = []

        if not cls.SUPABASE_URL:
            missing.append('SUPABASE_URL')
        if not cls.SUPABASE_KEY:
            missing.append('SUPABASE_KEY')

        return missing


# Create settings instance
settings = Settings()
