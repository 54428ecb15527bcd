"""Default transport executor built on httpx."""

from typing import Any

import httpx
from fastapi import HTTPException

from restproxy.config.settings import get_settings
from restproxy.proxy.context import ProxyRequestContext
from restproxy.transport.base import TransportExecutor, TransportResponse


class HttpxTransportExecutor(TransportExecutor):
    """Executes proxy requests with a shared httpx.AsyncClient."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(
                    settings.upstream_timeout, connect=settings.upstream_connect_timeout
                )
            )
        return self._client

    def _build_auth(self, context: ProxyRequestContext) -> httpx.BasicAuth | None:
        if context.username is None or context.password is None:
            return None
        return httpx.BasicAuth(context.username.encode("utf-8"), context.password)

    async def execute(self, context: ProxyRequestContext) -> TransportResponse:
        client = await self._get_client()
        try:
            response = await client.request(
                context.http_method.value,
                context.uri,
                headers=dict(context.headers),
                auth=self._build_auth(context),
            )
        except httpx.ConnectError:
            raise HTTPException(status_code=502, detail="Cannot reach upstream resource")
        except httpx.TimeoutException:
            raise HTTPException(status_code=504, detail="Upstream resource timed out")
        except httpx.HTTPError as e:
            raise HTTPException(status_code=502, detail=f"Upstream error: {e}")

        media_type = response.headers.get("content-type")
        return TransportResponse(
            status_code=response.status_code,
            body=self._decode_body(response, media_type),
            media_type=media_type,
        )

    def _decode_body(self, response: httpx.Response, media_type: str | None) -> Any | None:
        if not response.content:
            return None
        if media_type and "json" in media_type:
            try:
                return response.json()
            except ValueError:
                # Mislabelled body, hand it on as text
                return response.text
        return response.text

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
