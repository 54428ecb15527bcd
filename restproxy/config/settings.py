"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Resource configuration
    resource_store_backend: str = "json"  # "json" | "env"
    resource_config_path: str = "resources.json"  # flat key/value JSON object

    # Inbound routing
    routing_prefix: str = "proxy"
    # Comma-separated inbound headers copied into request attributes
    attribute_headers: str = ""

    # Outbound transport
    transport_executor: str = "httpx"
    upstream_timeout: float = 30.0
    upstream_connect_timeout: float = 10.0

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def attribute_headers_list(self) -> list[str]:
        """Parse comma-separated header names, lower-cased for lookup."""
        return [h.strip().lower() for h in self.attribute_headers.split(",") if h.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
