"""Shared fixtures: in-memory sinks, a controllable clock, and a Flask test app."""

from datetime import datetime, timedelta
from typing import List, Optional

import pytest

from packet_logger import ExclusionStore, LogSession, SinkError


class MemorySink:
    """SinkPort fake that keeps every write in memory."""

    def __init__(self, path: Optional[str] = "memory://log", fail_writes: bool = False):
        self.path = path
        self.chunks: List[str] = []
        self.close_calls = 0
        self.flush_calls = 0
        self._flushed_chunks = 0
        self.fail_writes = fail_writes

    @property
    def text(self) -> str:
        return "".join(self.chunks)

    def write(self, text: str) -> None:
        if self.fail_writes:
            raise SinkError("disk full")
        self.chunks.append(text)

    @property
    def flushed_text(self) -> str:
        """Text that had been flushed at the last flush() call."""
        return "".join(self.chunks[: self._flushed_chunks])

    def flush(self) -> None:
        self.flush_calls += 1
        self._flushed_chunks = len(self.chunks)

    def close(self) -> None:
        self.close_calls += 1


class MemorySinkFactory:
    """SinkFactoryPort fake; records every sink it opens."""

    def __init__(self, fail_open: bool = False):
        self.fail_open = fail_open
        self.sinks: List[MemorySink] = []

    def open(self) -> MemorySink:
        if self.fail_open:
            raise SinkError("permission denied")
        sink = MemorySink(path=f"memory://log{len(self.sinks)}")
        self.sinks.append(sink)
        return sink

    @property
    def last(self) -> MemorySink:
        return self.sinks[-1]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 12, 30, 5))


@pytest.fixture
def sink_factory():
    return MemorySinkFactory()


@pytest.fixture
def store():
    return ExclusionStore()


@pytest.fixture
def session(sink_factory, store, clock):
    return LogSession(sink_factory=sink_factory, exclusions=store, clock=clock)


@pytest.fixture
def app_config(tmp_path):
    """Config class pointing every folder into tmp_path."""
    from plogapp.config import Config

    return type(
        "TestConfig",
        (Config,),
        {
            "TESTING": True,
            "UPLOAD_FOLDER": str(tmp_path / "uploads"),
            "LOG_FOLDER": str(tmp_path / "logs"),
            "PACKET_LOG_FOLDER": str(tmp_path / "logs" / "packets"),
            "LOG_FILE": str(tmp_path / "logs" / "app.log"),
            "LOG_LEVEL": "DEBUG",
            "DEFAULT_EXCLUSIONS": "",
            "SEED_EXCLUSIONS_FROM_CATALOG": False,
        },
    )


@pytest.fixture
def app(app_config):
    from plogapp import create_app

    app = create_app(app_config)
    yield app
    app.extensions["log_session"].stop()


@pytest.fixture
def client(app):
    return app.test_client()
