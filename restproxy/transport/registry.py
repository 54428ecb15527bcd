"""Transport executor registry, selected by the TRANSPORT_EXECUTOR setting."""

from collections.abc import Callable

from restproxy.config.settings import get_settings
from restproxy.transport.base import TransportExecutor
from restproxy.transport.httpx_executor import HttpxTransportExecutor

EXECUTOR_FACTORIES: dict[str, Callable[[], TransportExecutor]] = {
    "httpx": HttpxTransportExecutor,
}

_executors: dict[str, TransportExecutor] = {}


def get_executor(name: str | None = None) -> TransportExecutor:
    """Return the shared executor for name, or for the configured default."""
    name = name or get_settings().transport_executor
    executor = _executors.get(name)
    if executor is None:
        factory = EXECUTOR_FACTORIES.get(name)
        if factory is None:
            raise ValueError(f"Unknown transport executor: {name}")
        executor = _executors[name] = factory()
    return executor


async def close_all_executors() -> None:
    """Close every executor created so far and forget them."""
    executors = list(_executors.values())
    _executors.clear()
    for executor in executors:
        await executor.close()
