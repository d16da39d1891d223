"""Root conftest — shared test configuration."""

import os

# Settings are cached on first import: pin test values before anything loads them
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-key-for-canvasdesk-tests")
os.environ.setdefault("AUTH_JWT_ALGORITHMS", '["HS256"]')
os.environ.setdefault("MAX_ASSETS_PER_FILE", "50")
