"""
Tests for the compose document loader.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from panelforge.core.errors import (
    ComposeFetchError,
    ComposeNotFoundError,
    ComposeParseError,
    ComposeReadError,
    EmptyComposeError,
)
from panelforge.services.docker_compose.loader import FETCH_TIMEOUT, ComposeLoader


@pytest.fixture
def loader():
    """Create loader instance."""
    return ComposeLoader()


class TestLocalFiles:
    """Loading compose files from disk."""

    def test_load_services_in_document_order(self, loader, write_compose, postgres_api_compose):
        document = loader.load(write_compose(postgres_api_compose))

        assert list(document.services) == ["db", "api", "worker"]
        assert document.raw["volumes"] == {"pgdata": None}

    def test_service_fields(self, loader, write_compose, postgres_api_compose):
        document = loader.load(write_compose(postgres_api_compose))

        api = document.services["api"]
        assert api.image == "example/api:1.0"
        assert api.ports == ["3000:3000"]
        assert api.depends_on == ["db"]

        worker = document.services["worker"]
        assert worker.image is None
        assert worker.command == ["python", "worker.py"]
        assert worker.environment == {}

    def test_long_depends_on_and_numeric_ports(self, loader):
        document = loader.parse("""
services:
  app:
    image: app
    ports:
      - 8080
    depends_on:
      db:
        condition: service_healthy
  db:
    image: postgres
""")
        app = document.services["app"]
        assert app.ports == ["8080"]
        assert app.depends_on == ["db"]

    def test_scalar_depends_on(self, loader):
        document = loader.parse("services:\n  app:\n    image: app\n    depends_on: db\n")
        assert document.services["app"].depends_on == ["db"]

    def test_empty_service_definition(self, loader):
        document = loader.parse("services:\n  placeholder:\n")
        assert document.services["placeholder"].image is None

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(ComposeNotFoundError):
            loader.load(str(tmp_path / "nope.yml"))

    def test_directory_is_read_error(self, loader, tmp_path):
        with pytest.raises(ComposeReadError):
            loader.load(str(tmp_path))


class TestParsing:
    """Structural validation of compose text."""

    def test_malformed_yaml_has_position(self, loader):
        with pytest.raises(ComposeParseError) as exc_info:
            loader.parse("services:\n  web:\n    image: [unclosed\n")

        assert exc_info.value.line is not None
        assert exc_info.value.column is not None

    def test_custom_tags_are_rejected(self, loader):
        with pytest.raises(ComposeParseError):
            loader.parse("services: !custom\n  web:\n    image: nginx\n")

    @pytest.mark.parametrize("text", [
        "",
        "version: '3'\n",
        "services:\n",
        "services: {}\n",
    ])
    def test_no_services(self, loader, text):
        with pytest.raises(EmptyComposeError):
            loader.parse(text)

    def test_services_must_be_mapping(self, loader):
        with pytest.raises(ComposeParseError):
            loader.parse("services:\n  - web\n")

    def test_top_level_must_be_mapping(self, loader):
        with pytest.raises(ComposeParseError):
            loader.parse("- services\n")


class TestRemoteFetch:
    """Fetching compose files over HTTP."""

    URL = "https://example.com/docker-compose.yml"

    def test_fetch_success(self, loader, web_compose):
        response = Mock(content=web_compose.encode("utf-8"))
        response.raise_for_status.return_value = None

        with patch("panelforge.services.docker_compose.loader.requests.get",
                   return_value=response) as mock_get:
            document = loader.load(self.URL)

        assert list(document.services) == ["web"]
        assert document.source == self.URL
        _, kwargs = mock_get.call_args
        assert kwargs["timeout"] == FETCH_TIMEOUT
        assert "User-Agent" in kwargs["headers"]

    def test_timeout(self, loader):
        with patch("panelforge.services.docker_compose.loader.requests.get",
                   side_effect=requests.Timeout("slow")):
            with pytest.raises(ComposeFetchError) as exc_info:
                loader.load(self.URL)

        assert "Timed out" in str(exc_info.value)

    def test_http_error_status(self, loader):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")

        with patch("panelforge.services.docker_compose.loader.requests.get",
                   return_value=response):
            with pytest.raises(ComposeFetchError):
                loader.load(self.URL)

    def test_connection_failure(self, loader):
        with patch("panelforge.services.docker_compose.loader.requests.get",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ComposeFetchError):
                loader.load(self.URL)

    def test_body_decoded_as_utf8(self, loader):
        """Bodies are UTF-8 regardless of the charset the server declares."""
        body = "services:\n  web:\n    image: nginx\n    environment:\n      GREETING: héllo\n"
        response = Mock(content=body.encode("utf-8"), text=body.encode("utf-8").decode("latin-1"))
        response.raise_for_status.return_value = None

        with patch("panelforge.services.docker_compose.loader.requests.get",
                   return_value=response):
            document = loader.load(self.URL)

        assert document.services["web"].environment == {"GREETING": "héllo"}

    def test_undecodable_body(self, loader):
        response = Mock(content=b"services:\n  web:\n    image: \xff\xfe\n")
        response.raise_for_status.return_value = None

        with patch("panelforge.services.docker_compose.loader.requests.get",
                   return_value=response):
            with pytest.raises(ComposeFetchError):
                loader.load(self.URL)


class TestScalarTyping:
    """Plain scalars keep the meaning they have for Compose."""

    def test_unquoted_port_mapping_stays_text(self, loader):
        document = loader.parse("services:\n  git:\n    image: gitea/gitea\n    ports:\n      - 2222:22\n")

        assert document.services["git"].ports == ["2222:22"]

    @pytest.mark.parametrize("literal", ["yes", "no", "on", "off", "y", "Yes", "0755", "0x1F", "1_000"])
    def test_yaml11_only_scalars_are_strings(self, loader, literal):
        document = loader.parse(f"services:\n  app:\n    image: app\n    environment:\n      VALUE: {literal}\n")

        assert document.services["app"].environment["VALUE"] == literal

    def test_core_scalars_still_typed(self, loader):
        document = loader.parse(
            "services:\n  app:\n    image: app\n    environment:\n"
            "      ENABLED: true\n      COUNT: 3\n      RATIO: 0.5\n      EMPTY: null\n"
        )

        assert document.services["app"].environment == {
            "ENABLED": True, "COUNT": 3, "RATIO": 0.5, "EMPTY": None,
        }

    def test_equals_sign_value(self, loader):
        document = loader.parse("services:\n  app:\n    image: app\n    environment:\n      SEP: =\n")

        assert document.services["app"].environment["SEP"] == "="
