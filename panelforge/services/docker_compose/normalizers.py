"""
Normalizers for heterogeneous compose field encodings.

Compose allows the same information in several shapes:
- environment as a mapping or as a list of "KEY=VALUE" strings
- volumes as "source:target[:mode]" strings or long-syntax mappings
- ports as "host:container" strings or bare numbers

These helpers are tolerant: anything they cannot understand is returned as
None (or an empty value) and reported back to the caller instead of raising.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

BIND_PREFIXES = ("/", "./", "../")
MIN_PORT = 1
MAX_PORT = 65535


class MountMechanism(str, Enum):
    """How a compose volume entry is backed."""
    VOLUME = "volume"
    BIND = "bind"


@dataclass(frozen=True)
class VolumeBinding:
    """A normalized volume entry."""
    mechanism: MountMechanism
    name: str  # Named volume or host path (e.g., "pgdata", "./nginx.conf")
    container_path: str  # Path inside the container
    raw: str  # Original token, kept for review markers

    @property
    def is_bind(self) -> bool:
        return self.mechanism is MountMechanism.BIND


@dataclass(frozen=True)
class PortBinding:
    """A normalized port mapping."""
    host_port: Optional[int]
    container_port: int


def stringify_env_value(value: Any) -> str:
    """Render a YAML scalar the way it reads in the compose file."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_environment(raw: Any, issues: Optional[List[str]] = None) -> Dict[str, str]:
    """
    Normalize a compose environment block into an ordered mapping.

    Args:
        raw: Mapping form ({KEY: value}) or list form (["KEY=value", ...])
        issues: Optional list collecting notes about malformed tokens

    Returns:
        Ordered mapping of variable name to string value
    """
    env: Dict[str, str] = {}

    if isinstance(raw, dict):
        for key, value in raw.items():
            env[str(key)] = stringify_env_value(value)

    elif isinstance(raw, list):
        for token in raw:
            token = stringify_env_value(token)
            if "=" not in token:
                # Tolerated: "KEY" alone becomes an empty value
                if issues is not None:
                    issues.append(f"Environment entry '{token}' has no '=', using an empty value")
                env[token] = ""
                continue
            key, value = token.split("=", 1)
            env[key] = value

    return env


def parse_volume(token: Any) -> Optional[VolumeBinding]:
    """
    Parse a volume declaration.

    Short syntax: "source:target" or "source:target:mode". A source that starts
    with "/", "./" or "../" is a bind mount, anything else a named volume.

    Long syntax: {type: bind|volume, source: ..., target: ...}.

    Returns:
        VolumeBinding, or None when the entry is not recognized
    """
    if isinstance(token, dict):
        return _parse_long_volume(token)

    if not isinstance(token, str):
        return None

    parts = token.split(":")
    if len(parts) < 2:
        return None

    source, target = parts[0], parts[1]
    mechanism = MountMechanism.BIND if source.startswith(BIND_PREFIXES) else MountMechanism.VOLUME

    return VolumeBinding(mechanism=mechanism, name=source, container_path=target, raw=token)


def _parse_long_volume(volume: dict) -> Optional[VolumeBinding]:
    """Parse long-format volume: {type: bind, source: /host, target: /container}."""
    volume_type = volume.get("type")
    source = volume.get("source")
    target = volume.get("target")
    raw = ", ".join(f"{key}={value}" for key, value in volume.items())

    if not source or not target:
        return None

    if volume_type == "bind":
        return VolumeBinding(MountMechanism.BIND, str(source), str(target), raw)
    if volume_type == "volume":
        return VolumeBinding(MountMechanism.VOLUME, str(source), str(target), raw)

    return None


def parse_port(token: Any) -> Optional[PortBinding]:
    """
    Parse a port declaration.

    "8080:80" maps host 8080 to container 80; "80" uses 80 for both.
    Anything else (IP prefixes, ranges, protocols, numbers outside
    1..65535) yields None.
    """
    parts = str(token).split(":")
    if len(parts) not in (1, 2):
        return None

    numbers = [_port_number(part) for part in parts]
    if None in numbers:
        return None

    return PortBinding(host_port=numbers[0], container_port=numbers[-1])


def _port_number(text: str) -> Optional[int]:
    """Digits only, within 1..65535."""
    if not (text.isascii() and text.isdigit()):
        return None
    number = int(text)
    return number if MIN_PORT <= number <= MAX_PORT else None
