"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or payment rail
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("PAYMENT_RAIL_URL", "")
os.environ.setdefault("LOG_FORMAT", "text")
