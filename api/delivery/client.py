"""
HTTP client for the quote API, used as the feed's `QuoteProvider`.

Used endpoints:
- POST   /auth/login            -> {"user": {...}, "access_token": "..."}
- GET    /quotes/ids            -> {"ids": [...], "total": n}
- POST   /quotes/batch          -> {"quotes": [...]}
- POST   /quotes                -> quote
- POST   /favorites             -> {"quote_id": "...", "is_favorited": true}
- DELETE /favorites/{quote_id}  -> {"ok": true}
- GET    /preferences           -> preferences
"""

from __future__ import annotations

from typing import Any

import httpx

from quotes.schemas import MAX_BATCH_IDS

from .records import QuoteRecord
from .shuffle import next_batch


# API failures are explicit and separable from other runtime errors.
class QuoteApiError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise QuoteApiError("Quote API base URL is empty.")
    return base_url.rstrip("/")


class QuoteApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout_s: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=_normalize_base_url(base_url),
            timeout=timeout_s,
        )
        self._token = token

    async def __aenter__(self) -> QuoteApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @property
    def token(self) -> str | None:
        return self._token

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            raise QuoteApiError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code >= 400:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:500]
            raise QuoteApiError(
                f"{method} {path} failed: {resp.status_code} {body}",
                status_code=resp.status_code,
            )
        return resp.json()

    async def login(self, email: str, password: str) -> dict:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        token = data.get("access_token") if isinstance(data, dict) else None
        if not isinstance(token, str) or not token:
            raise QuoteApiError("Login response carried no access token.")
        self._token = token
        return data

    async def list_ids(self, *, source: str = "BOTH", category: str | None = None) -> list[str]:
        params = {"source": source}
        if category:
            params["category"] = category
        data = await self._request("GET", "/quotes/ids", params=params)
        ids = data.get("ids") if isinstance(data, dict) else None
        if not isinstance(ids, list):
            raise QuoteApiError("Quote id response is malformed.")
        return [str(i) for i in ids]

    async def fetch_batch(self, ids: list[str]) -> list[QuoteRecord]:
        records: list[QuoteRecord] = []
        for start in range(0, len(ids), MAX_BATCH_IDS):
            chunk = next_batch(ids, start, MAX_BATCH_IDS)
            data = await self._request("POST", "/quotes/batch", json={"ids": chunk})
            quotes = data.get("quotes") if isinstance(data, dict) else None
            if not isinstance(quotes, list):
                raise QuoteApiError("Quote batch response is malformed.")
            records.extend(QuoteRecord.model_validate(item) for item in quotes)
        return records

    async def add_favorite(self, quote_id: str) -> None:
        await self._request("POST", "/favorites", json={"quote_id": quote_id})

    async def remove_favorite(self, quote_id: str) -> None:
        await self._request("DELETE", f"/favorites/{quote_id}")

    async def create_quote(
        self,
        *,
        text: str,
        author: str,
        category: str | None = None,
        source: str | None = None,
    ) -> QuoteRecord:
        payload: dict[str, Any] = {"text": text, "author": author}
        if category:
            payload["category"] = category
        if source:
            payload["source"] = source
        data = await self._request("POST", "/quotes", json=payload)
        return QuoteRecord.model_validate(data)

    async def get_preferences(self) -> dict:
        return await self._request("GET", "/preferences")
