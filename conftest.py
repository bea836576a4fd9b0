"""Global pytest configuration."""

import os

# Settings read the environment; pin it before any imports
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.pop("PORT", None)
os.environ.pop("REDIS_URL", None)
