"""
Upload pipeline

Compression, the simulated chunked transfer and the orchestrator that
drives session entries through the upload lifecycle.
"""

from dropshare.upload.compression import CompressionPipeline, CompressionSavings, describe_savings
from dropshare.upload.orchestrator import EntryStatus, FileEntry, UploadOrchestrator
from dropshare.upload.simulator import UploadResult, UploadSimulator

__all__ = [
    "CompressionPipeline",
    "CompressionSavings",
    "describe_savings",
    "EntryStatus",
    "FileEntry",
    "UploadOrchestrator",
    "UploadResult",
    "UploadSimulator",
]
