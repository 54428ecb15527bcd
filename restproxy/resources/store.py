"""Resource store abstraction + properties, environment and JSON file implementations.

Resources are configured as flat properties keyed by resource key and suffix:

    acct.uri=http://api.internal/v1
    acct.username=svc
    acct.password=secret
    acct.proxyHeaders=X-User:{userId},X-Source:proxy

Each store keeps an immutable snapshot of parsed ResourceConfig objects and
replaces it with a single assignment on reload, so readers never observe a
half-applied update.
"""

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType

from restproxy.exceptions import ConfigurationError
from restproxy.logging.audit import get_audit_logger
from restproxy.resources.models import ResourceConfig

URI_SUFFIX = ".uri"
USERNAME_SUFFIX = ".username"
PASSWORD_SUFFIX = ".password"
PROXY_HEADERS_SUFFIX = ".proxyHeaders"

SUFFIXES = (URI_SUFFIX, USERNAME_SUFFIX, PASSWORD_SUFFIX, PROXY_HEADERS_SUFFIX)

ENV_PREFIX = "RESTPROXY_"
_ENV_SUFFIXES = {
    "_URI": URI_SUFFIX,
    "_USERNAME": USERNAME_SUFFIX,
    "_PASSWORD": PASSWORD_SUFFIX,
    "_PROXYHEADERS": PROXY_HEADERS_SUFFIX,
}


class ResourceStore(ABC):
    """Abstract base for resource config lookups."""

    @abstractmethod
    def lookup(self, resource_key: str) -> ResourceConfig | None:
        """Look up a resource by key. Returns None if no root URI is configured."""
        ...


def parse_proxy_headers(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated proxyHeaders value into raw entries."""
    if not value:
        return ()
    return tuple(entry.strip() for entry in value.split(",") if entry.strip())


def parse_properties(properties: Mapping[str, str]) -> dict[str, ResourceConfig]:
    """Group flat suffix-keyed properties into ResourceConfig objects.

    Keys without a non-blank ".uri" are not resources and are dropped.
    """
    grouped: dict[str, dict[str, str]] = {}
    for key, value in properties.items():
        for suffix in SUFFIXES:
            if key.endswith(suffix) and len(key) > len(suffix):
                resource_key = key[: -len(suffix)]
                grouped.setdefault(resource_key, {})[suffix] = value
                break

    resources: dict[str, ResourceConfig] = {}
    for resource_key, values in grouped.items():
        root_uri = values.get(URI_SUFFIX)
        if root_uri is None or not root_uri.strip():
            continue
        resources[resource_key] = ResourceConfig(
            resource_key=resource_key,
            root_uri=root_uri,
            username=values.get(USERNAME_SUFFIX),
            password=values.get(PASSWORD_SUFFIX),
            proxy_headers=parse_proxy_headers(values.get(PROXY_HEADERS_SUFFIX)),
        )
    return resources


def properties_from_environ(environ: Mapping[str, str], prefix: str = ENV_PREFIX) -> dict[str, str]:
    """Translate RESTPROXY_<KEY>_<SUFFIX> variables into flat properties.

    RESTPROXY_ACCT_URI becomes acct.uri, RESTPROXY_ACCT_PROXYHEADERS
    becomes acct.proxyHeaders. Resource keys are lower-cased.
    """
    properties: dict[str, str] = {}
    for name, value in environ.items():
        upper = name.upper()
        if not upper.startswith(prefix):
            continue
        rest = upper[len(prefix):]
        for env_suffix, suffix in _ENV_SUFFIXES.items():
            if rest.endswith(env_suffix) and len(rest) > len(env_suffix):
                properties[rest[: -len(env_suffix)].lower() + suffix] = value
                break
    return properties


class PropertiesResourceStore(ResourceStore):
    """In-memory store built from a flat properties mapping."""

    def __init__(self, properties: Mapping[str, str] | None = None):
        self._snapshot: Mapping[str, ResourceConfig] = MappingProxyType({})
        self.replace(properties or {})

    def replace(self, properties: Mapping[str, str]) -> None:
        """Parse a new set of properties and swap it in atomically."""
        self._snapshot = MappingProxyType(parse_properties(properties))

    def lookup(self, resource_key: str) -> ResourceConfig | None:
        return self._snapshot.get(resource_key)


class JSONResourceStore(PropertiesResourceStore):
    """File-backed store of flat properties. Reloads on mtime change.

    A reload that fails to parse keeps the previous snapshot; a failure on
    first load raises ConfigurationError.
    """

    def __init__(self, path: str):
        self._path = path
        self._last_mtime: float = 0.0
        super().__init__()
        self._load(initial=True)

    def _load(self, initial: bool = False) -> None:
        try:
            mtime = os.path.getmtime(self._path)
        except OSError:
            self.replace({})
            self._last_mtime = 0.0
            return

        if mtime == self._last_mtime:
            return

        try:
            properties = self._read()
        except ConfigurationError:
            if initial:
                raise
            get_audit_logger().exception(
                "configuration error: resource file reload failed, keeping previous snapshot",
                extra={"audit_data": {"path": self._path}},
            )
            return

        self.replace(properties)
        self._last_mtime = mtime
        get_audit_logger().info(
            "resource configuration loaded",
            extra={"audit_data": {"path": self._path, "resource_keys": sorted(self._snapshot)}},
        )

    def _read(self) -> dict[str, str]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read resource file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Resource file {self._path} must contain a JSON object")

        return {str(k): str(v) for k, v in data.items() if v is not None}

    def lookup(self, resource_key: str) -> ResourceConfig | None:
        self._load()  # reload if file changed
        return super().lookup(resource_key)
