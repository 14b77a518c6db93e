"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from cherry.common.filelog import MemoryLogger, RotatingFileLogger
from cherry.common.settings import Settings

TEST_SECRET = "test_secret"


class FakeClock:
    """Settable clock for driving date rollover."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment out of the tests."""
    for name in (
        "PORT",
        "TODOIST_CLIENT_SECRET",
        "CHERRY_TODOIST_CLIENT_SECRET",
        "CHERRY_LOG_PATH",
        "CHERRY_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Directory for daily log files."""
    return tmp_path / "logs"


@pytest.fixture
def settings(log_dir: Path) -> Settings:
    """Create test settings with verification enabled."""
    return Settings(
        todoist_client_secret=TEST_SECRET,
        log_path=str(log_dir),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 14, 23, 59, 58))


@pytest.fixture
def memory_logger() -> MemoryLogger:
    return MemoryLogger()


@pytest.fixture
def file_logger(log_dir: Path, clock: FakeClock):
    """File logger writing under ``log_dir`` with a fake clock."""
    logger = RotatingFileLogger(log_dir, clock=clock)
    yield logger
    logger.close()
