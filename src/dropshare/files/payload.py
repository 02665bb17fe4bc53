"""Raw file payloads handed to the upload pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class RawFile:
    """A user-selected file: metadata plus its bytes.

    ``size`` is the declared size in bytes. It normally equals
    ``len(data)`` but callers may describe a file without loading it.
    """

    name: str
    size: int
    mime_type: str
    data: bytes = b""
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError(f"File size cannot be negative: {self.size}")

    @classmethod
    def from_bytes(cls, name: str, mime_type: str, data: bytes) -> "RawFile":
        return cls(name=name, size=len(data), mime_type=mime_type, data=data)
