"""Pydantic schemas exposed by the short-link service."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    ok: bool = Field(default=True)


class ShortLinkCreateRequest(BaseModel):
    """Payload for storing a share token."""

    data: str = Field(min_length=1, description="Encoded '#data=' token to store")


class ShortLinkResponse(BaseModel):
    id: str = Field(description="Short identifier resolvable under /s/{id}")


__all__ = ["HealthResponse", "ShortLinkCreateRequest", "ShortLinkResponse"]
