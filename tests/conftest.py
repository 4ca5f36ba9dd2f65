"""Shared pytest configuration and fixtures for the test suite."""

import atexit
import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest
import yaml

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="in-tests-"))
os.environ["IN_DATA_PATH"] = str(_TEST_DATA_DIR)
_TEST_CONFIG_FILE = _TEST_DATA_DIR / "config.yaml"

_TEST_CONFIG_FILE.write_text(
    yaml.safe_dump(
        {
            "log_level": "DEBUG",
            "manifest_base_url": "http://library.upenn.edu/iiif",
            "fetch": {"timeout": 2, "max_concurrency": 4},
        },
        sort_keys=False,
    ),
    encoding="utf-8",
)

from src.config import settings as settings_module  # noqa: E402
from src.config.database import NotificationsDB  # noqa: E402
from src.web.services.manifest_service import ManifestService  # noqa: E402
from src.web.services.notification_service import NotificationService  # noqa: E402

settings_module.get_config.cache_clear()

BASE_URL = "http://library.upenn.edu/iiif"


@pytest.fixture
def db(tmp_path: Path) -> Iterator[NotificationsDB]:
    """Provide a freshly migrated database in a per-test directory."""
    database = NotificationsDB(tmp_path / "data")
    try:
        yield database
    finally:
        database.dispose()


@pytest.fixture
def manifests(db: NotificationsDB) -> ManifestService:
    """Manifest store bound to the per-test database."""
    return ManifestService(db, BASE_URL)


@pytest.fixture
def notifications(db: NotificationsDB) -> NotificationService:
    """Notification store bound to the per-test database."""
    return NotificationService(db)


@atexit.register
def _cleanup_test_data_dir() -> None:
    """Remove the temporary test data directory after the test session."""
    shutil.rmtree(_TEST_DATA_DIR, ignore_errors=True)
