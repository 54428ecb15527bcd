"""Abstract base for transport executors."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from restproxy.proxy.context import ProxyRequestContext


@dataclass
class TransportResponse:
    status_code: int
    body: Any | None         # parsed JSON, text, or None for an empty body
    media_type: str | None = None


class TransportExecutor(ABC):
    """Performs the outbound HTTP call described by a ProxyRequestContext."""

    @abstractmethod
    async def execute(self, context: ProxyRequestContext) -> TransportResponse:
        """Send the request and return the upstream response.

        Credential encoding, timeouts and connection handling are the
        executor's concern; the context only carries raw values. Upstream
        error statuses are returned, not raised.
        """
        ...

    async def close(self) -> None:
        """Cleanup resources. Override if the executor holds connections."""
        pass
