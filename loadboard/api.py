"""
Client side of the Load API contract.

    GET    /api/loads          -> JSON array of loads (null means none)
    POST   /api/loads          -> 2xx on success, body ignored
    DELETE /api/loads?id=<id>  -> body ignored
"""

import logging
from typing import List, Optional, Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from .models import Load, LoadPayload

logger = logging.getLogger(__name__)

LOADS_PATH = "/api/loads"

_loads_adapter = TypeAdapter(Optional[List[Load]])


class LoadApiError(Exception):
    """Base class for anything that goes wrong talking to the Load API."""


class LoadApiUnavailable(LoadApiError):
    # connection refused, DNS, timeouts, bad content encoding...
    pass


class LoadApiStatusError(LoadApiError):
    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Load API returned {status_code}: {detail}".rstrip(": "))


class LoadApiDecodeError(LoadApiError):
    pass


class LoadApi(Protocol):
    async def list_loads(self) -> List[Load]: ...

    async def create_load(self, payload: LoadPayload) -> None: ...

    async def delete_load(self, load_id: str) -> int: ...


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def parse_loads(body: bytes) -> List[Load]:
    """Decode a list response. An empty body or JSON null is an empty list."""
    if not body.strip():
        return []
    try:
        loads = _loads_adapter.validate_json(body)
    except ValidationError as exc:
        raise LoadApiDecodeError(f"unexpected loads payload: {exc.error_count()} error(s)") from exc
    return loads or []


class HttpLoadApi:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        # created lazily so it binds to the loop that first uses it
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def _request(self, method: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, LOADS_PATH, **kwargs)
        except httpx.RequestError as exc:
            # transport failures, undecodable bodies, redirect loops
            raise LoadApiUnavailable(f"{method} {LOADS_PATH} failed: {exc!r}") from exc

    async def list_loads(self) -> List[Load]:
        resp = await self._request("GET")
        if not _is_success(resp.status_code):
            raise LoadApiStatusError(resp.status_code, resp.text.strip())
        loads = parse_loads(resp.content)
        logger.debug("fetched %d loads", len(loads))
        return loads

    async def create_load(self, payload: LoadPayload) -> None:
        resp = await self._request("POST", json=payload.model_dump())
        if not _is_success(resp.status_code):
            raise LoadApiStatusError(resp.status_code, resp.text.strip())

    async def delete_load(self, load_id: str) -> int:
        resp = await self._request("DELETE", params={"id": load_id})
        return resp.status_code

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
