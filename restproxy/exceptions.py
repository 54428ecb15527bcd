"""Exception hierarchy for the REST proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when the resource configuration cannot be read."""


class UnsupportedMethodError(ProxyError):
    """Raised when the inbound method token is not a known HTTP verb.

    Attributes:
        method: The rejected method token, as received.
    """

    def __init__(self, method: str) -> None:
        super().__init__(f"Unsupported HTTP method: {method!r}")
        self.method = method

