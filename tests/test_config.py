"""Tests for application settings."""

from dropshare.core.config import Settings


def test_defaults():
    config = Settings(_env_file=None)

    assert config.MAX_UPLOAD_MB == 10
    assert config.max_upload_bytes == 10 * 1024 * 1024
    assert config.UPLOAD_CHUNK_COUNT == 10
    assert config.upload_chunk_delay_seconds == 0.2
    assert config.UPLOAD_FAILURE_RATE == 0.1
    assert config.DEFAULT_SHARE_EXPIRY_DAYS == 7
    assert "image/*" in config.accepted_upload_types
    assert "application/pdf" in config.accepted_upload_types


def test_accepted_types_parsing():
    config = Settings(_env_file=None, ACCEPTED_UPLOAD_TYPES=" image/* , text/plain,, ")
    assert config.accepted_upload_types == ["image/*", "text/plain"]

    assert Settings(_env_file=None, ACCEPTED_UPLOAD_TYPES="").accepted_upload_types == []


def test_share_url_prefix_normalises_slashes():
    config = Settings(_env_file=None, SHARE_BASE_URL="https://example.com/", SHARE_PATH_PREFIX="shared")
    assert config.share_url_prefix == "https://example.com/shared/"


def test_image_limits():
    config = Settings(_env_file=None, IMAGE_MAX_SIZE_MB=0.5)
    assert config.image_max_size_bytes == 512 * 1024


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("UPLOAD_FAILURE_RATE", "0")
    monkeypatch.setenv("STORAGE_BACKEND", "json")

    config = Settings(_env_file=None)

    assert config.UPLOAD_FAILURE_RATE == 0
    assert config.STORAGE_BACKEND == "json"
