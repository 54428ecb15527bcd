"""Proxy pipeline: resource lookup, URI, headers, context, executor.

Pipeline: Resolve config -> Compose URI -> Resolve headers -> Build context -> Dispatch

An unknown resource ends the pipeline with None before any URI or header
work. An unsupported method raises UnsupportedMethodError when the context
is built. Header configuration problems only log warnings.
"""

from dataclasses import dataclass
from restproxy.logging.audit import get_audit_logger
from restproxy.proxy.context import ProxyRequestContext, build_context
from restproxy.proxy.placeholders import RequestAttributes, resolve_headers
from restproxy.proxy.uri import compose_uri
from restproxy.resources.store import ResourceStore
from restproxy.transport.base import TransportExecutor, TransportResponse


@dataclass(frozen=True)
class InboundRequest:
    method: str
    sub_path: str | None
    attributes: RequestAttributes


class ProxyService:
    """Translate inbound requests into ProxyRequestContexts and dispatch them."""

    def __init__(self, store: ResourceStore, executor: TransportExecutor) -> None:
        self._store = store
        self._executor = executor

    def prepare(self, resource_key: str, request: InboundRequest) -> ProxyRequestContext | None:
        """Build the outbound context, or None when the resource is unknown."""
        config = self._store.lookup(resource_key)
        if config is None:
            get_audit_logger().info(
                "unknown resource key",
                extra={"audit_data": {"resource_key": resource_key}},
            )
            return None

        uri = compose_uri(config.root_uri, request.sub_path)
        headers = resolve_headers(config.proxy_headers, request.attributes)

        return build_context(
            resource_key=resource_key,
            method_token=request.method,
            uri=uri,
            username=config.username,
            password=config.password,
            headers=headers,
        )

    async def proxy_request(self, resource_key: str, request: InboundRequest) -> TransportResponse | None:
        """Run the full pipeline and return the upstream response.

        Returns None for an unknown resource without contacting the executor.
        """
        context = self.prepare(resource_key, request)
        if context is None:
            return None
        return await self.dispatch(context)

    async def dispatch(self, context: ProxyRequestContext) -> TransportResponse:
        """Hand a built context to the transport executor."""
        get_audit_logger().debug(
            "proxying request",
            extra={"audit_data": {"context": repr(context)}},
        )
        return await self._executor.execute(context)
