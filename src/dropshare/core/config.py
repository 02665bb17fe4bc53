"""Configuration management for DropShare."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ACCEPTED_TYPES = ",".join(
    [
        "image/*",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ]
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    ENV: str = "local"
    SERVICE_NAME: str = "dropshare"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Upload Constraints
    MAX_UPLOAD_MB: int = 10
    ACCEPTED_UPLOAD_TYPES: str = DEFAULT_ACCEPTED_TYPES  # Comma-separated, empty = allow all

    # Simulated Transfer
    UPLOAD_CHUNK_COUNT: int = 10
    UPLOAD_CHUNK_DELAY_MS: int = 200
    UPLOAD_FAILURE_RATE: float = 0.1
    UPLOAD_BASE_URL: str = "http://localhost:8000/uploads"

    # Share Links
    SHARE_BASE_URL: str = "http://localhost:8000"
    SHARE_PATH_PREFIX: str = "/shared/"
    DEFAULT_SHARE_EXPIRY_DAYS: float | None = 7

    # Compression
    DEFAULT_COMPRESSION_QUALITY: float = 0.8
    IMAGE_MAX_DIMENSION: int = 1920
    IMAGE_MAX_SIZE_MB: float = 1.0

    # Storage Configuration
    STORAGE_BACKEND: str = "memory"  # "memory" or "json"
    DATA_DIR: str = "./data"

    @property
    def accepted_upload_types(self) -> list[str]:
        """Parse ACCEPTED_UPLOAD_TYPES into a list."""
        if not self.ACCEPTED_UPLOAD_TYPES:
            return []
        return [t.strip() for t in self.ACCEPTED_UPLOAD_TYPES.split(",") if t.strip()]

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024

    @property
    def image_max_size_bytes(self) -> int:
        """Convert IMAGE_MAX_SIZE_MB to bytes."""
        return int(self.IMAGE_MAX_SIZE_MB * 1024 * 1024)

    @property
    def upload_chunk_delay_seconds(self) -> float:
        return self.UPLOAD_CHUNK_DELAY_MS / 1000

    @property
    def share_url_prefix(self) -> str:
        """Full prefix that a share token is appended to."""
        return self.SHARE_BASE_URL.rstrip("/") + "/" + self.SHARE_PATH_PREFIX.strip("/") + "/"


# Singleton settings instance
settings = Settings()
