"""Factory for resource store backends."""

import os

from restproxy.config.settings import get_settings
from restproxy.resources.store import (
    JSONResourceStore,
    PropertiesResourceStore,
    ResourceStore,
    properties_from_environ,
)

_store: ResourceStore | None = None


def get_resource_store() -> ResourceStore:
    """Get the resource store singleton, building it from settings on first use."""
    global _store
    if _store is not None:
        return _store

    settings = get_settings()
    backend = settings.resource_store_backend

    if backend == "json":
        _store = JSONResourceStore(settings.resource_config_path)
    elif backend == "env":
        _store = PropertiesResourceStore(properties_from_environ(os.environ))
    else:
        raise ValueError(f"Unknown resource store backend: {backend}")

    return _store


def reset_resource_store() -> None:
    """Drop the singleton so the next call rebuilds it from settings."""
    global _store
    _store = None
