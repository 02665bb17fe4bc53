"""Tests for the simulated chunked upload."""

import pytest

from dropshare.core.exceptions import UploadError
from dropshare.files.payload import RawFile
from dropshare.upload.simulator import UploadSimulator

from conftest import ScriptedRandom, make_simulator


@pytest.fixture
def image_file():
    return RawFile(name="holiday photo.png", size=2 * 1024 * 1024, mime_type="image/png")


@pytest.mark.asyncio
async def test_successful_upload_reports_eleven_steps(image_file):
    simulator = make_simulator(ScriptedRandom(default=0.99))
    progress = []

    result = await simulator.upload(image_file, progress.append)

    assert progress == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
    assert result.url.startswith("https://cdn.example.com/uploads/")
    assert result.url.endswith("/holiday%20photo.png")
    assert result.thumbnail_url is not None
    assert "/thumbnails/" in result.thumbnail_url


@pytest.mark.asyncio
async def test_non_image_has_no_thumbnail():
    simulator = make_simulator(ScriptedRandom(default=0.99))
    file = RawFile(name="report.pdf", size=1000, mime_type="application/pdf")

    result = await simulator.upload(file, lambda p: None)

    assert result.thumbnail_url is None


@pytest.mark.asyncio
async def test_failure_stops_progress(image_file):
    # Draws for steps 0, 1, 2: the third one triggers the failure
    simulator = make_simulator(ScriptedRandom(draws=[0.5, 0.5, 0.05]))
    progress = []

    with pytest.raises(UploadError):
        await simulator.upload(image_file, progress.append)

    assert progress == [0, 10, 20]


@pytest.mark.asyncio
async def test_no_failure_draw_on_final_step(image_file):
    draws = [0.99] * 10
    rng = ScriptedRandom(draws=draws, default=0.0)
    simulator = make_simulator(rng)
    progress = []

    await simulator.upload(image_file, progress.append)

    assert progress[-1] == 100
    assert rng.draws == []


@pytest.mark.asyncio
async def test_sleeps_once_per_step(image_file):
    delays = []

    async def record_sleep(seconds):
        delays.append(seconds)

    simulator = UploadSimulator(
        "https://cdn.example.com/uploads",
        chunk_count=4,
        chunk_delay=0.05,
        failure_rate=0.0,
        rng=ScriptedRandom(),
        sleep=record_sleep,
    )
    progress = []

    await simulator.upload(image_file, progress.append)

    assert delays == [0.05] * 5
    assert progress == [0, 25, 50, 75, 100]


def test_invalid_configuration():
    with pytest.raises(ValueError):
        UploadSimulator("https://x", chunk_count=0)
    with pytest.raises(ValueError):
        UploadSimulator("https://x", failure_rate=1.5)
