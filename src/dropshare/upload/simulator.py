"""Simulated chunked upload transfer."""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable
from urllib.parse import quote

from dropshare.core.exceptions import UploadError
from dropshare.core.runtime import default_random
from dropshare.files.classifier import is_image
from dropshare.files.payload import RawFile

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class UploadResult:
    """Locators for an uploaded payload."""

    url: str
    thumbnail_url: str | None = None


class UploadSimulator:
    """Emulates a chunked network transfer with progress and random failure.

    No bytes are sent anywhere. Each of ``chunk_count + 1`` steps waits
    ``chunk_delay`` seconds and reports progress; every step before the
    last may fail with probability ``failure_rate``.
    """

    def __init__(
        self,
        base_url: str,
        chunk_count: int = 10,
        chunk_delay: float = 0.2,
        failure_rate: float = 0.1,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if chunk_count < 1:
            raise ValueError("chunk_count must be at least 1")
        if not 0 <= failure_rate <= 1:
            raise ValueError("failure_rate must be between 0 and 1")

        self.base_url = base_url.rstrip("/")
        self.chunk_count = chunk_count
        self.chunk_delay = chunk_delay
        self.failure_rate = failure_rate
        self.rng = rng or default_random()
        self.sleep = sleep

    async def upload(self, file: RawFile, on_progress: ProgressCallback) -> UploadResult:
        """Run the simulated transfer for one file.

        Args:
            file: File being uploaded
            on_progress: Called with each progress percentage (0..100)

        Returns:
            UploadResult with an access URL and, for images, a thumbnail URL

        Raises:
            UploadError: If a simulated transient failure occurs
        """
        for i in range(self.chunk_count + 1):
            await self.sleep(self.chunk_delay)
            on_progress(round(i / self.chunk_count * 100))

            if i < self.chunk_count and self.rng.random() < self.failure_rate:
                logger.warning(
                    f"Simulated upload failure for {file.name}",
                    extra={"chunk": i, "chunk_count": self.chunk_count},
                )
                raise UploadError("Upload failed")

        upload_id = uuid.UUID(int=self.rng.getrandbits(128), version=4).hex
        name = quote(file.name)
        url = f"{self.base_url}/{upload_id}/{name}"
        thumbnail_url = f"{self.base_url}/thumbnails/{upload_id}/{name}" if is_image(file.mime_type) else None

        return UploadResult(url=url, thumbnail_url=thumbnail_url)
