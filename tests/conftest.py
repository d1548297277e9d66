"""
Register pytest plugins, fixtures, and hooks to be used during test execution.

The environment is set here, before any `app.*` import, because
`app.config.settings` is read once at import time.
"""

import os
import sys
import tempfile
from pathlib import Path

THIS_DIR = Path(__file__).parent
TESTS_DIR_PARENT = (THIS_DIR / "..").resolve()

# add the parent directory of tests/ to PYTHONPATH
sys.path.insert(0, str(TESTS_DIR_PARENT))

os.environ.update(
    {
        "DB_HOST": "localhost",
        "DB_PORT": "5432",
        "DB_NAME": "service_requests_test",
        "DB_USER": "test",
        "DB_PASSWORD": "test",
        "DB_URL": "sqlite://",
        "DEBUG": "true",
        "ENVIRONMENT": "test",
        "JWT_SECRET": "test-secret",
        "SOCKETIO_ASYNC_MODE": "threading",
        "ENABLED_FEATURES": "requests,notifications",
        "FOLDERS_BASE_PATH": tempfile.mkdtemp(prefix="service-requests-folders-"),
        "LOG_LEVEL": "WARNING",
    }
)

pytest_plugins = [
    # Banco SQLite em memória + dados base
    "tests.fixtures.db_fixtures",
    # Notificadores falsos
    "tests.fixtures.notification_fixtures",
    # Flask app + tokens
    "tests.fixtures.app_fixtures",
]
