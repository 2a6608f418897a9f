"""
Remote Data Gateway client for the Mahasiswa collection.

Thin async wrapper over the students REST API. Every call returns a
GatewayResponse holding either ``data`` or ``error``; transport and HTTP
failures never raise out of the gateway.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from mahasiswa.core.config import settings

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


@dataclass(frozen=True)
class GatewayError:
    message: str
    code: Optional[str] = None
    status_code: Optional[int] = None
    details: Any = None


@dataclass(frozen=True)
class GatewayResponse:
    data: Any = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def error_from_payload(payload: Any, status_code: Optional[int] = None) -> GatewayError:
    """
    Build a GatewayError from an error response body.

    Understands the service envelope ``{"error": {"code", "message"}}``,
    a bare ``{"message": ...}`` and FastAPI's ``{"detail": ...}``;
    anything else gets the generic message.
    """
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return GatewayError(
                message=str(error["message"]),
                code=error.get("code"),
                status_code=status_code,
                details=error.get("details"),
            )
        if isinstance(payload.get("message"), str) and payload["message"]:
            return GatewayError(message=payload["message"], status_code=status_code)
        if isinstance(payload.get("detail"), str) and payload["detail"]:
            return GatewayError(message=payload["detail"], status_code=status_code)
    return GatewayError(message=UNKNOWN_ERROR_MESSAGE, status_code=status_code)


class StudentGateway:
    """
    Query/insert/update/delete over the students collection.

    ``client`` is an ``httpx.AsyncClient`` whose base URL points at the
    collection (``.../api/v1/students``). Use ``StudentGateway.connect`` to
    build one from settings.
    """

    def __init__(self, client: httpx.AsyncClient, collection: str = None):
        self.client = client
        self.collection = collection or settings.STUDENT_COLLECTION

    @classmethod
    def connect(cls, app=None, base_url: str = None, timeout: float = None) -> "StudentGateway":
        """
        With ``base_url`` (or settings.GATEWAY_BASE_URL) talk over the network,
        otherwise talk to ``app`` in-process through ASGITransport.
        """
        timeout = settings.GATEWAY_TIMEOUT if timeout is None else timeout
        if base_url or settings.GATEWAY_BASE_URL:
            url = base_url.rstrip("/") + "/students" if base_url else settings.get_gateway_url()
            client = httpx.AsyncClient(base_url=url, timeout=timeout)
        else:
            if app is None:
                raise ValueError("An ASGI app is required when no gateway URL is configured")
            client = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app),
                base_url=settings.get_gateway_url(),
                timeout=timeout,
            )
        return cls(client)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> GatewayResponse:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{self.collection}: {method} {url} failed: {e}")
            return GatewayResponse(error=GatewayError(message=str(e) or UNKNOWN_ERROR_MESSAGE))

        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            error = error_from_payload(payload, response.status_code)
            logger.warning(
                f"{self.collection}: {method} {url} -> {response.status_code} {error.message}"
            )
            return GatewayResponse(error=error)

        if response.status_code == 204 or not response.content:
            return GatewayResponse(data=None)
        return GatewayResponse(data=response.json())

    # =========================================================
    # Collection operations
    # =========================================================

    async def select(self, order_by: str = "Name", ascending: bool = True) -> GatewayResponse:
        """All rows, ordered. ``data`` is a list of wire dicts."""
        result = await self._request(
            "GET", "/", params={"order": order_by, "ascending": str(ascending).lower()}
        )
        if result.ok and result.data is None:
            return GatewayResponse(data=[])
        return result

    async def insert(self, rows: List[Dict[str, Any]]) -> GatewayResponse:
        return await self._request("POST", "/", json=rows)

    async def update(self, values: Dict[str, Any], key: str, value: str) -> GatewayResponse:
        """Update the row whose ``key`` column equals ``value``. Only the NIM key is served."""
        if key != "Nim":
            return GatewayResponse(error=GatewayError(message=f"Cannot update by '{key}'"))
        return await self._request("PUT", f"/{quote(value, safe='')}", json=values)

    async def delete(self, key: str, value: str) -> GatewayResponse:
        if key != "Nim":
            return GatewayResponse(error=GatewayError(message=f"Cannot delete by '{key}'"))
        return await self._request("DELETE", f"/{quote(value, safe='')}")
