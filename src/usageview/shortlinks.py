"""Persistence helpers for shared dashboard short links."""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError

from .core.errors import ShortLinkNotFoundError, ValidationError
from .core.logging import get_logger
from .core.settings import get_settings
from .database import session_scope, short_links

logger = get_logger(__name__)

SHORT_ID_ALPHABET = string.ascii_letters + string.digits + "_-"

_MAX_ID_ATTEMPTS = 5

DATA_REQUIRED_MESSAGE = "data is required"


@dataclass(frozen=True)
class ShortLinkRecord:
    """Stored share token and the identifier it is reachable under."""

    id: str
    data: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: dict[str, object]) -> "ShortLinkRecord":
        return cls(
            id=str(row["id"]),
            data=str(row["data"]),
            created_at=datetime.fromisoformat(str(row["created_at"])),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "data": self.data,
            "created_at": self.created_at.isoformat(),
        }


def generate_short_id(length: int | None = None) -> str:
    size = length if length is not None else get_settings().short_id_length
    return "".join(secrets.choice(SHORT_ID_ALPHABET) for _ in range(size))


def create_short_link(data: str) -> ShortLinkRecord:
    """Store ``data`` under a fresh random identifier."""

    if not isinstance(data, str) or not data:
        raise ValidationError(DATA_REQUIRED_MESSAGE, details={"field": "data"})

    created_at = datetime.now(tz=timezone.utc)
    for attempt in range(1, _MAX_ID_ATTEMPTS + 1):
        short_id = generate_short_id()
        try:
            with session_scope() as session:
                session.execute(
                    insert(short_links).values(
                        id=short_id, data=data, created_at=created_at.isoformat()
                    )
                )
        except IntegrityError:
            logger.warning("Short link id collision", attempt=attempt)
            continue
        logger.info("Short link created", short_id=short_id, size=len(data))
        return ShortLinkRecord(id=short_id, data=data, created_at=created_at)

    raise RuntimeError("Could not allocate a unique short link id")


def get_short_link(short_id: str) -> ShortLinkRecord:
    """Return the record for ``short_id`` or raise :class:`ShortLinkNotFoundError`."""

    with session_scope() as session:
        row = session.execute(
            select(short_links).where(short_links.c.id == short_id)
        ).mappings().first()

    if row is None:
        raise ShortLinkNotFoundError("Not found", details={"id": short_id})
    return ShortLinkRecord.from_row(dict(row))


__all__ = [
    "DATA_REQUIRED_MESSAGE",
    "SHORT_ID_ALPHABET",
    "ShortLinkRecord",
    "create_short_link",
    "generate_short_id",
    "get_short_link",
]
