"""
Docker Compose document loader.

Reads a compose file from a local path or a remote URL and parses it into
immutable service specifications. Only the `services` block is interpreted;
top-level `volumes` and `networks` are kept in the raw tree untouched.
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml

from panelforge.core.errors import (
    ComposeFetchError,
    ComposeNotFoundError,
    ComposeParseError,
    ComposeReadError,
    EmptyComposeError,
)
from panelforge.core.logger import get_logger

logger = get_logger(__name__)

URL_SCHEMES = ("http://", "https://")
FETCH_TIMEOUT = 30  # seconds
USER_AGENT = "panelforge-compose-converter/1.0"

# Resolvers that only exist in YAML 1.1: yes/no/on/off booleans, base-60 and
# leading-zero octal ints, and the "=" value tag.
_YAML11_TAGS = {
    "tag:yaml.org,2002:bool",
    "tag:yaml.org,2002:int",
    "tag:yaml.org,2002:value",
}


class ComposeSafeLoader(yaml.SafeLoader):
    """SafeLoader that types plain scalars the way Compose (YAML 1.2) does.

    `2222:22` and `0755` stay strings, `yes` and `on` are not booleans.
    """


ComposeSafeLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _YAML11_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ComposeSafeLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
ComposeSafeLoader.add_implicit_resolver(
    "tag:yaml.org,2002:int",
    re.compile(r"^[-+]?(?:0|[1-9][0-9]*)$"),
    list("-+0123456789"),
)


@dataclass(frozen=True)
class ServiceSpec:
    """A single service definition from a compose file."""
    name: str
    image: Optional[str] = None
    build: Any = None
    command: Any = None  # str or list of str
    environment: Any = field(default_factory=dict)  # mapping or "KEY=VALUE" list
    ports: List[str] = field(default_factory=list)
    volumes: List[Any] = field(default_factory=list)
    depends_on: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, service: Optional[dict]) -> "ServiceSpec":
        """Build a spec from a parsed compose service mapping."""
        service = service or {}

        image = service.get("image")
        depends_on = service.get("depends_on") or []
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        elif isinstance(depends_on, dict):
            # Long syntax: {db: {condition: service_healthy}}
            depends_on = list(depends_on.keys())

        return cls(
            name=name,
            image=str(image) if image is not None else None,
            build=service.get("build"),
            command=service.get("command"),
            environment=service.get("environment") or {},
            ports=[str(port) for port in service.get("ports") or []],
            volumes=list(service.get("volumes") or []),
            depends_on=[str(dep) for dep in depends_on],
        )


@dataclass(frozen=True)
class ComposeDocument:
    """A parsed compose document."""
    source: str  # Path or URL it was loaded from
    raw: Dict[str, Any]  # Full parsed tree
    services: Dict[str, ServiceSpec]  # Document order


class ComposeLoader:
    """
    Loads compose documents from files or URLs.

    Example:
        loader = ComposeLoader()
        document = loader.load("https://example.com/docker-compose.yml")
        for name, service in document.services.items():
            ...
    """

    def __init__(self, timeout: float = FETCH_TIMEOUT):
        self.timeout = timeout

    def load(self, source: str) -> ComposeDocument:
        """
        Load and parse a compose document.

        Args:
            source: File path or http(s) URL

        Returns:
            ComposeDocument with services in document order

        Raises:
            ComposeFetchError, ComposeNotFoundError, ComposeReadError,
            ComposeParseError, EmptyComposeError
        """
        text = self._read(source)
        return self.parse(text, source)

    def parse(self, text: str, source: str = "<string>") -> ComposeDocument:
        """Parse compose text that has already been read."""
        try:
            raw = yaml.load(text, Loader=ComposeSafeLoader)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            problem = getattr(e, "problem", None) or str(e)
            if mark is not None:
                raise ComposeParseError(
                    f"Invalid YAML in {source}: {problem}",
                    line=mark.line + 1,
                    column=mark.column + 1,
                ) from e
            raise ComposeParseError(f"Invalid YAML in {source}: {problem}") from e

        if raw is None:
            raise EmptyComposeError(f"No services found in {source}")
        if not isinstance(raw, dict):
            raise ComposeParseError(f"Expected a mapping at the top level of {source}")

        services_block = raw.get("services")
        if not services_block:
            raise EmptyComposeError(f"No services found in {source}")
        if not isinstance(services_block, dict):
            raise ComposeParseError(f"'services' in {source} must be a mapping")

        services: Dict[str, ServiceSpec] = {}
        for name, service in services_block.items():
            if service is not None and not isinstance(service, dict):
                raise ComposeParseError(f"Service '{name}' in {source} must be a mapping")
            services[str(name)] = ServiceSpec.from_dict(str(name), service)

        logger.debug(f"Parsed {len(services)} service(s) from {source}")

        return ComposeDocument(source=source, raw=raw, services=services)

    def _read(self, source: str) -> str:
        """Load compose content from file or URL."""
        if source.startswith(URL_SCHEMES):
            return self._download(source)
        return self._read_file(source)

    def _download(self, url: str) -> str:
        """Download compose file from URL."""
        logger.info(f"Fetching compose from URL: {url}")

        try:
            response = requests.get(
                url,
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise ComposeFetchError(f"Timed out after {self.timeout}s fetching {url}") from e
        except requests.RequestException as e:
            raise ComposeFetchError(f"Failed to fetch from URL {url}: {e}") from e

        try:
            return response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ComposeFetchError(f"Response from {url} is not valid UTF-8: {e}") from e

    def _read_file(self, path: str) -> str:
        """Read compose file from local path."""
        compose_path = Path(path).expanduser()
        logger.info(f"Reading: {compose_path}")

        if not compose_path.exists():
            raise ComposeNotFoundError(f"Compose file not found: {path}")

        try:
            return compose_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ComposeReadError(f"Failed to read compose file {path}: {e}") from e
