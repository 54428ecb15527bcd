"""Tests for restproxy/config/settings.py: Settings and attribute_headers_list."""

from restproxy.config.settings import get_settings


class TestSettings:

    def test_defaults(self, override_settings):
        override_settings()
        s = get_settings()
        assert s.resource_store_backend == "json"
        assert s.resource_config_path == "resources.json"
        assert s.routing_prefix == "proxy"
        assert s.upstream_timeout == 30.0
        assert s.log_level == "INFO"

    def test_attribute_headers_empty(self, override_settings):
        override_settings(ATTRIBUTE_HEADERS="")
        s = get_settings()
        assert s.attribute_headers_list == []

    def test_attribute_headers_lowercased_and_stripped(self, override_settings):
        override_settings(ATTRIBUTE_HEADERS="X-User-Id, Remote-User ,,")
        s = get_settings()
        assert s.attribute_headers_list == ["x-user-id", "remote-user"]

    def test_env_override(self, override_settings):
        override_settings(
            RESOURCE_STORE_BACKEND="env",
            ROUTING_PREFIX="api",
            UPSTREAM_TIMEOUT="5",
        )
        s = get_settings()
        assert s.resource_store_backend == "env"
        assert s.routing_prefix == "api"
        assert s.upstream_timeout == 5.0
