"""REST Proxy: FastAPI application entry point.

Forwards requests under /{routing_prefix}/{resource_key}/... to the
upstream resource configured for that key, adding credentials and
templated headers.
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from restproxy.config.settings import get_settings
from restproxy.exceptions import UnsupportedMethodError
from restproxy.logging.audit import (
    RequestTimer,
    bind_request_context,
    get_audit_logger,
    setup_logging,
)
from restproxy.proxy.context import HttpMethod
from restproxy.proxy.placeholders import RequestAttributes
from restproxy.proxy.service import InboundRequest, ProxyService
from restproxy.resources.factory import get_resource_store
from restproxy.transport.base import TransportResponse
from restproxy.transport.registry import close_all_executors, get_executor

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_audit_logger().info("Proxy started")
    yield
    await close_all_executors()
    get_audit_logger().info("Proxy stopped")


def create_app() -> FastAPI:
    """Create the FastAPI application with routes bound to current settings."""
    settings = get_settings()
    prefix = "/" + settings.routing_prefix.strip("/")
    methods = [m.value for m in HttpMethod]

    app = FastAPI(
        title="REST Proxy",
        description="Forwards requests to configured upstream REST resources",
        version=VERSION,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    @app.api_route(prefix + "/{resource_key}", methods=methods)
    async def proxy_root(resource_key: str, request: Request):
        return await _proxy(resource_key, "", request)

    @app.api_route(prefix + "/{resource_key}/{sub_path:path}", methods=methods)
    async def proxy_path(resource_key: str, sub_path: str, request: Request):
        return await _proxy(resource_key, sub_path, request)

    return app


async def _proxy(resource_key: str, sub_path: str, request: Request) -> Response:
    logger = get_audit_logger()
    rid = bind_request_context(resource_key)

    service = ProxyService(get_resource_store(), get_executor())
    inbound = InboundRequest(
        method=request.method,
        sub_path=sub_path,
        attributes=_snapshot_attributes(request),
    )

    try:
        context = service.prepare(resource_key, inbound)
    except UnsupportedMethodError as e:
        logger.warning(
            "Unsupported method",
            extra={"audit_data": {"method": e.method}},
        )
        return JSONResponse(
            status_code=405,
            content={"error": str(e)},
            headers={"X-Request-Id": rid},
        )

    if context is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Unknown resource '{resource_key}'"},
            headers={"X-Request-Id": rid},
        )

    with RequestTimer() as timer:
        result = await service.dispatch(context)

    if result.status_code >= 400:
        logger.warning(
            "Upstream returned an error",
            extra={"audit_data": {"uri": context.uri, "upstream_status": result.status_code}},
        )

    logger.info(
        "Request proxied",
        extra={"audit_data": {
            "method": context.http_method.value,
            "uri": context.uri,
            "proxy_headers": list(context.headers),
            "upstream_status": result.status_code,
            "latency_ms": timer.elapsed_ms,
        }},
    )
    return _to_response(result, rid)


def _snapshot_attributes(request: Request) -> RequestAttributes:
    """Collect request attributes: query params, mapped headers, then request.state.

    Later sources win on name clashes.
    """
    attributes: dict[str, Any] = dict(request.query_params)
    for name in get_settings().attribute_headers_list:
        value = request.headers.get(name)
        if value is not None:
            attributes[name] = value
    attributes.update(request.scope.get("state", {}))
    return RequestAttributes.snapshot(attributes)


def _to_response(result: TransportResponse, rid: str) -> Response:
    """Relay the upstream status, body and media type."""
    headers = {"X-Request-Id": rid}
    if result.body is None:
        return Response(status_code=result.status_code, headers=headers)
    if isinstance(result.body, str):
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.media_type or "text/plain",
            headers=headers,
        )
    return JSONResponse(content=result.body, status_code=result.status_code, headers=headers)


app = create_app()
