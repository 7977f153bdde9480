"""Tests for settings helpers and logging setup."""
import logging

from buildtrack.config import settings as settings_module
from buildtrack.config.settings import Settings
from buildtrack.utils.logger import configure_logging


class TestSettings:
    """Settings"""

    def test_service_urls(self, monkeypatch):
        monkeypatch.setattr(Settings, 'SUPABASE_URL', 'https://demo.backend.test/')
        assert Settings.get_storage_url() == 'https://demo.backend.test/storage/v1'
        assert Settings.get_rest_url() == 'https://demo.backend.test/rest/v1'

    def test_missing_required_settings(self, monkeypatch):
        monkeypatch.setattr(Settings, 'SUPABASE_URL', '')
        monkeypatch.setattr(Settings, 'SUPABASE_KEY', '')
        assert Settings.validate_required_settings() == ['SUPABASE_URL', 'SUPABASE_KEY']

    def test_required_settings_present(self, monkeypatch):
        monkeypatch.setattr(Settings, 'SUPABASE_URL', 'https://demo.backend.test')
        monkeypatch.setattr(Settings, 'SUPABASE_KEY', 'key')
        assert Settings.validate_required_settings() == []

    def test_bool_parsing(self, monkeypatch):
        monkeypatch.setenv('SCHEDULE_FALLBACK_ENABLED', 'false')
        assert settings_module._get_bool('SCHEDULE_FALLBACK_ENABLED', True) is False
        monkeypatch.setenv('SCHEDULE_FALLBACK_ENABLED', '')
        assert settings_module._get_bool('SCHEDULE_FALLBACK_ENABLED', True) is True

    def test_optional_float(self, monkeypatch):
        monkeypatch.delenv('SUPABASE_TIMEOUT', raising=False)
        assert settings_module._get_optional_float('SUPABASE_TIMEOUT') is None
        monkeypatch.setenv('SUPABASE_TIMEOUT', '2.5')
        assert settings_module._get_optional_float('SUPABASE_TIMEOUT') == 2.5


class TestConfigureLogging:
    """configure_logging"""

    def test_handlers_added_once(self):
        logger = configure_logging('buildtrack.tests.once')
        handler_count = len(logger.handlers)
        assert handler_count >= 1
        assert configure_logging('buildtrack.tests.once').handlers == logger.handlers

    def test_file_handler_when_log_dir_set(self, monkeypatch, tmp_path):
        monkeypatch.setattr(settings_module.settings, 'LOG_DIR', str(tmp_path))
        logger = configure_logging('buildtrack.tests.file')
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
