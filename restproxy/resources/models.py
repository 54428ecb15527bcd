"""Upstream resource configuration model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResourceConfig:
    resource_key: str
    root_uri: str
    username: str | None = None
    password: str | None = None
    proxy_headers: tuple[str, ...] = ()  # raw "name:valueTemplate" entries, config order

    def __repr__(self) -> str:
        masked = "****" if self.password is not None else None
        return (
            f"ResourceConfig(resource_key={self.resource_key!r}, root_uri={self.root_uri!r}, "
            f"username={self.username!r}, password={masked!r}, proxy_headers={self.proxy_headers!r})"
        )
