"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or open the admin gate by accident
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("ADMIN_API_KEYS", '["test-admin-key"]')
os.environ.setdefault("LOG_FORMAT", "text")
