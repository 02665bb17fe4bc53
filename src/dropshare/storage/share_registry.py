"""Share link registry.

Issues, validates, revokes and purges time-limited share tokens bound to
file records. Links reference records weakly: deleting a record leaves
its links in place.
"""

import logging
import random
import string
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from dropshare.core.exceptions import ExpiredError, NotFoundError
from dropshare.core.runtime import Clock, SystemClock, default_random
from dropshare.storage.base import RecordBackend
from dropshare.storage.memory import MemoryBackend

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
TOKEN_LENGTH = 32


class ShareLink(BaseModel):
    """A revocable, optionally expiring access token for a file record."""

    id: int
    file_record_id: int
    file_name: str
    token: str
    url: str
    created_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool = True
    access_count: int = Field(0, ge=0)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now


@dataclass(frozen=True)
class LinkValidation:
    """Result of validating a share token."""

    valid: bool
    link: Optional[ShareLink] = None
    reason: Optional[Literal["not_found", "expired"]] = None


class ShareLinkRegistry:
    """Registry of share links over a record backend."""

    def __init__(
        self,
        url_prefix: str,
        backend: RecordBackend | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ):
        self.url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"
        self.backend = backend or MemoryBackend()
        self.clock = clock or SystemClock()
        self.rng = rng or default_random()

    def generate_token(self) -> str:
        # No collision check against existing tokens
        return "".join(self.rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))

    def generate_link(self, file_record_id: int, file_name: str, expiry_days: float | None = None) -> ShareLink:
        """Issue a new active link.

        Args:
            file_record_id: Record the link points at
            file_name: Display name stored with the link
            expiry_days: Lifetime in days, or None for a link that never expires

        Returns:
            The stored ShareLink, including its URL
        """
        token = self.generate_token()
        now = self.clock.now()
        expires_at = now + timedelta(days=expiry_days) if expiry_days is not None else None

        row = {
            "file_record_id": file_record_id,
            "file_name": file_name,
            "token": token,
            "url": f"{self.url_prefix}{token}",
            "created_at": now.isoformat(),
            "expires_at": expires_at.isoformat() if expires_at else None,
            "is_active": True,
            "access_count": 0,
        }
        link = ShareLink.model_validate(self.backend.insert_row(row))

        logger.info(
            f"Share link generated: id={link.id}, file_record_id={file_record_id}",
            extra={"expires_at": link.expires_at},
        )
        return link

    def get_by_token(self, token: str) -> ShareLink:
        """Resolve an active link and count the access.

        An expired link is reported but left active; only
        ``cleanup_expired`` removes it.

        Raises:
            NotFoundError: If no active link has this token
            ExpiredError: If the link is past its expiry
        """
        link = next((link for link in self._all() if link.token == token and link.is_active), None)
        if link is None:
            raise NotFoundError("Share link not found")

        if link.is_expired(self.clock.now()):
            logger.warning(f"Expired share link accessed: id={link.id}")
            raise ExpiredError("Share link has expired")

        link.access_count += 1
        self.backend.update_row(link.id, link.model_dump(mode="json"))
        return link

    def validate_link(self, token: str) -> LinkValidation:
        """Validate a token without raising."""
        try:
            return LinkValidation(valid=True, link=self.get_by_token(token))
        except NotFoundError:
            return LinkValidation(valid=False, reason="not_found")
        except ExpiredError:
            return LinkValidation(valid=False, reason="expired")

    def revoke_link(self, url_or_token: str) -> ShareLink:
        """Deactivate a link given its URL or bare token.

        Raises:
            NotFoundError: If no link has the extracted token
        """
        token = url_or_token.rstrip("/").split("/")[-1]
        link = next((link for link in self._all() if link.token == token), None)
        if link is None:
            raise NotFoundError("Share link not found")

        link.is_active = False
        self.backend.update_row(link.id, link.model_dump(mode="json"))
        logger.info(f"Share link revoked: id={link.id}")
        return link

    def list_active(self) -> List[ShareLink]:
        return [link for link in self._all() if link.is_active]

    def list_active_for_record(self, file_record_id: int) -> List[ShareLink]:
        return [link for link in self._all() if link.is_active and link.file_record_id == file_record_id]

    def delete_link(self, link_id: int) -> None:
        if not self.backend.delete_row(link_id):
            raise NotFoundError(f"Share link {link_id} not found")
        logger.info(f"Share link deleted: id={link_id}")

    def cleanup_expired(self) -> int:
        """Hard-delete every link whose expiry is strictly before now.

        Inactive links are included; links without an expiry are kept.

        Returns:
            Number of links removed
        """
        now = self.clock.now()
        removed = 0
        for link in self._all():
            if link.is_expired(now) and self.backend.delete_row(link.id):
                removed += 1

        logger.info(f"Expired share link cleanup removed {removed} links")
        return removed

    def _all(self) -> List[ShareLink]:
        return [ShareLink.model_validate(row) for row in self.backend.list_rows()]
