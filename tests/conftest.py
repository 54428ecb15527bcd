"""Shared fixtures for the REST proxy test suite."""

import json
import logging

import pytest

from restproxy.config.settings import get_settings
from restproxy.logging.audit import get_audit_logger
from restproxy.proxy.placeholders import RequestAttributes
from restproxy.proxy.service import InboundRequest


@pytest.fixture
def acct_properties() -> dict:
    """Flat properties for a typical upstream resource."""
    return {
        "acct.uri": "http://api.internal/v1",
        "acct.username": "svc",
        "acct.password": "secret",
        "acct.proxyHeaders": "X-User:{userId}",
    }


@pytest.fixture
def resources_json_file(tmp_path, acct_properties):
    """Create a temp resources.json file and return its path."""
    data = {
        **acct_properties,
        "public.uri": "https://public.example.com/",
        "public.proxyHeaders": "X-Source:proxy, X-Tenant:{tenant}",
        "broken.username": "nobody",
    }
    path = tmp_path / "resources.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


@pytest.fixture
def acct_request() -> InboundRequest:
    """GET /users/42 with a userId attribute."""
    return InboundRequest(
        method="GET",
        sub_path="/users/42",
        attributes=RequestAttributes.snapshot({"userId": "42"}),
    )


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(RESOURCE_STORE_BACKEND="env", LOG_LEVEL="DEBUG")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()


@pytest.fixture
def audit_log(caplog):
    """Capture records on the audit logger, even when propagation is off."""
    logger = get_audit_logger()
    logger.addHandler(caplog.handler)
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    yield caplog
    logger.setLevel(previous)
    logger.removeHandler(caplog.handler)
