"""Construction of the service objects used by the application."""

import asyncio
import random
from dataclasses import dataclass

from dropshare.core.config import Settings, settings as default_settings
from dropshare.core.runtime import Clock, SystemClock, default_random
from dropshare.storage.factory import create_backend
from dropshare.storage.file_store import FileRecordStore
from dropshare.storage.share_registry import ShareLinkRegistry
from dropshare.upload.compression import CompressionPipeline
from dropshare.upload.handlers.image_handler import ImageEncoder
from dropshare.upload.orchestrator import UploadOrchestrator
from dropshare.upload.simulator import Sleep, UploadSimulator


@dataclass
class Services:
    """Per-session service objects."""

    orchestrator: UploadOrchestrator
    file_store: FileRecordStore
    share_registry: ShareLinkRegistry


def build_services(
    config: Settings | None = None,
    clock: Clock | None = None,
    rng: random.Random | None = None,
    sleep: Sleep = asyncio.sleep,
) -> Services:
    """Wire up stores, registry and orchestrator from settings.

    Args:
        config: Settings to use; defaults to the module settings
        clock: Time source shared by every service
        rng: Random source shared by every service
        sleep: Async sleep used by the upload simulator
    """
    config = config or default_settings
    clock = clock or SystemClock()
    rng = rng or default_random()

    file_store = FileRecordStore(create_backend("files", config), clock=clock)
    share_registry = ShareLinkRegistry(
        config.share_url_prefix,
        backend=create_backend("share_links", config),
        clock=clock,
        rng=rng,
    )
    compressor = CompressionPipeline(
        ImageEncoder(config.IMAGE_MAX_DIMENSION, config.image_max_size_bytes),
        clock=clock,
    )
    simulator = UploadSimulator(
        config.UPLOAD_BASE_URL,
        chunk_count=config.UPLOAD_CHUNK_COUNT,
        chunk_delay=config.upload_chunk_delay_seconds,
        failure_rate=config.UPLOAD_FAILURE_RATE,
        rng=rng,
        sleep=sleep,
    )
    orchestrator = UploadOrchestrator(
        compressor,
        simulator,
        record_store=file_store,
        rng=rng,
        accepted_types=config.accepted_upload_types,
        max_size=config.max_upload_bytes,
        default_quality=config.DEFAULT_COMPRESSION_QUALITY,
    )
    return Services(orchestrator=orchestrator, file_store=file_store, share_registry=share_registry)
