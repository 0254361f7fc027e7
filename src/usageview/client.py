"""HTTP client for the short-link service."""

from __future__ import annotations

from typing import Any

import httpx

from .core.errors import ShortLinkError
from .core.settings import get_settings


class ShortLinkClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else get_settings().request_timeout
        self._client = httpx.Client(transport=transport, timeout=self.timeout)

    def create(self, data: str) -> str:
        """Store ``data`` and return the new short identifier."""

        try:
            response = self._client.post(f"{self.base_url}/api/s", json={"data": data})
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPStatusError as exc:
            raise ShortLinkError(
                f"Short link request failed with HTTP {exc.response.status_code}",
                details={"status_code": exc.response.status_code, "body": exc.response.text},
            ) from exc
        except httpx.HTTPError as exc:
            raise ShortLinkError(f"Short link request failed: {exc}") from exc
        except ValueError as exc:
            raise ShortLinkError("Short link service returned invalid JSON") from exc

        short_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(short_id, str) or not short_id:
            raise ShortLinkError("Short link service response is missing 'id'")
        return short_id

    def short_url(self, short_id: str) -> str:
        return f"{self.base_url}/s/{short_id}"

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ShortLinkClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["ShortLinkClient"]
