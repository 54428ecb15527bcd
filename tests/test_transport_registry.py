"""Tests for restproxy/transport/registry.py: executor singleton registry."""

from unittest.mock import AsyncMock

import pytest

import restproxy.transport.registry as registry_mod
from restproxy.transport.httpx_executor import HttpxTransportExecutor


@pytest.fixture(autouse=True)
def reset_registry(monkeypatch):
    """Clear the executor registry between tests."""
    monkeypatch.setattr(registry_mod, "_executors", {})
    yield
    monkeypatch.setattr(registry_mod, "_executors", {})


class TestGetExecutor:

    def test_creates_httpx_executor_by_default(self, override_settings):
        override_settings()
        executor = registry_mod.get_executor()
        assert isinstance(executor, HttpxTransportExecutor)
        assert registry_mod._executors == {"httpx": executor}

    def test_default_follows_settings(self, override_settings):
        override_settings(TRANSPORT_EXECUTOR="carrier-pigeon")
        with pytest.raises(ValueError, match="carrier-pigeon"):
            registry_mod.get_executor()

    def test_registered_factory_is_used(self, override_settings, monkeypatch):
        override_settings(TRANSPORT_EXECUTOR="stub")
        stub = AsyncMock()
        monkeypatch.setitem(registry_mod.EXECUTOR_FACTORIES, "stub", lambda: stub)
        assert registry_mod.get_executor() is stub

    def test_singleton_behavior(self):
        assert registry_mod.get_executor("httpx") is registry_mod.get_executor("httpx")

    def test_unknown_executor_raises(self):
        with pytest.raises(ValueError, match="Unknown transport executor"):
            registry_mod.get_executor("carrier-pigeon")


class TestCloseAllExecutors:

    async def test_close_all(self):
        executor = registry_mod.get_executor("httpx")
        executor.close = AsyncMock()
        await registry_mod.close_all_executors()
        executor.close.assert_called_once()
        assert registry_mod._executors == {}
