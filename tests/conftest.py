"""Shared fixtures: a throwaway SQLite database and helpers for async scenarios."""

from __future__ import annotations

import asyncio
import os
import sys
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# The engine is built at import time, so point it at SQLite before anything
# from groundops is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="groundops-tests-"))
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'groundops.db'}"
os.environ["LOG_FILE"] = str(_TMP_DIR / "app.log")
os.environ["DB_SERVERLESS"] = "true"

from groundops.database import drop_models, init_models, session_scope  # noqa: E402
from groundops.infrastructure.persistence import SQLAlchemyRegistry  # noqa: E402


class FakeClock:
    """Manually advanced clock for the crisis engine."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float) -> None:
        self.now += timedelta(minutes=minutes)


async def _reset_database() -> None:
    await drop_models()
    await init_models()


@pytest.fixture
def fresh_db() -> None:
    """Drop and recreate every table."""

    asyncio.run(_reset_database())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 14, 9, 0, 0))


@pytest.fixture
def run_with_registry(fresh_db):
    """Run ``scenario(registry)`` on a fresh database and return its result."""

    def runner(scenario):
        async def _run():
            async with session_scope() as session:
                return await scenario(SQLAlchemyRegistry(session))

        return asyncio.run(_run())

    return runner
