"""Outbound request descriptor handed to the transport executor."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from restproxy.exceptions import UnsupportedMethodError


class HttpMethod(Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, token: str) -> "HttpMethod":
        """Match an exact, upper-case verb token."""
        try:
            return cls[token]
        except KeyError:
            raise UnsupportedMethodError(token) from None


@dataclass(frozen=True)
class ProxyRequestContext:
    resource_key: str
    http_method: HttpMethod
    uri: str
    username: str | None = None
    password: bytes | None = None
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __repr__(self) -> str:
        masked = "****" if self.password is not None else None
        return (
            f"ProxyRequestContext(resource_key={self.resource_key!r}, "
            f"http_method={self.http_method.value}, uri={self.uri!r}, "
            f"username={self.username!r}, password={masked!r}, headers={dict(self.headers)!r})"
        )


def build_context(
    resource_key: str,
    method_token: str,
    uri: str,
    username: str | None,
    password: str | None,
    headers: Mapping[str, str],
) -> ProxyRequestContext:
    """Assemble an immutable ProxyRequestContext.

    Raises:
        UnsupportedMethodError: method_token is not a known HTTP verb.
    """
    return ProxyRequestContext(
        resource_key=resource_key,
        http_method=HttpMethod.parse(method_token),
        uri=uri,
        username=username,
        password=password.encode("utf-8") if password is not None else None,
        headers=MappingProxyType(dict(headers)),
    )
