"""Pytest configuration and shared fixtures."""

import random
from datetime import datetime, timedelta, timezone

import pytest

from dropshare.storage.file_store import FileRecordStore
from dropshare.storage.share_registry import ShareLinkRegistry
from dropshare.upload.compression import CompressionPipeline
from dropshare.upload.handlers.image_handler import ImageEncoder
from dropshare.upload.orchestrator import UploadOrchestrator
from dropshare.upload.simulator import UploadSimulator

T0 = datetime(2025, 1, 14, 10, 30, tzinfo=timezone.utc)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class ScriptedRandom(random.Random):
    """Random source whose random() draws come from a fixed script.

    Once the script runs out, ``default`` is returned. Other methods
    (choice, getrandbits) come from a seeded generator.
    """

    def __init__(self, draws=(), default: float = 0.99, seed: int = 1234):
        super().__init__(seed)
        self.draws = list(draws)
        self.default = default

    def random(self) -> float:
        if self.draws:
            return self.draws.pop(0)
        return self.default

    def getrandbits(self, k: int) -> int:
        # Defined here so choice() keeps using bits rather than the script
        return super().getrandbits(k)


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def never_fail_rng():
    return ScriptedRandom(default=0.99)


@pytest.fixture
def file_store(clock):
    return FileRecordStore(clock=clock)


@pytest.fixture
def share_registry(clock):
    return ShareLinkRegistry("https://files.example.com/shared/", clock=clock, rng=random.Random(42))


@pytest.fixture
def compressor(clock):
    return CompressionPipeline(ImageEncoder(max_dimension=1920, max_size_bytes=1024 * 1024), clock=clock)


def make_simulator(rng: random.Random) -> UploadSimulator:
    return UploadSimulator(
        "https://cdn.example.com/uploads",
        chunk_count=10,
        chunk_delay=0.2,
        failure_rate=0.1,
        rng=rng,
        sleep=no_sleep,
    )


@pytest.fixture
def make_orchestrator(compressor, file_store):
    """Factory building an orchestrator around a given random source."""

    def _make(rng: random.Random | None = None, **kwargs) -> UploadOrchestrator:
        rng = rng or ScriptedRandom(default=0.99)
        kwargs.setdefault("accepted_types", ["image/*", "application/pdf"])
        kwargs.setdefault("max_size", 10 * 1024 * 1024)
        return UploadOrchestrator(
            compressor,
            make_simulator(rng),
            record_store=file_store,
            rng=rng,
            **kwargs,
        )

    return _make


@pytest.fixture
def client(clock):
    """Test client over an app with deterministic, non-failing services."""
    from fastapi.testclient import TestClient

    from dropshare.main import create_app
    from dropshare.services import build_services

    services = build_services(clock=clock, rng=ScriptedRandom(default=0.99), sleep=no_sleep)
    return TestClient(create_app(services))
