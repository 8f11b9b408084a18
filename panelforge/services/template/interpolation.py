"""
Value interpolation for generated template source.

Rewrites literal compose hostnames into symbolic references against the
platform's naming, and escapes values for embedding in template literals.

Known limitations (review expected downstream):
- Matching is a literal, case-sensitive substring search on database
  service names. "DB" does not match service "db" (under-match), while
  service "db" also matches inside "mydbuser" (over-match).
- Only services that got a generated password are rewritten.
"""
import json
import re
from dataclasses import dataclass
from typing import Dict, Iterable

from panelforge.services.template.schema import service_name_field

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
PROJECT_NAME_TOKEN = "$(PROJECT_NAME)"


@dataclass(frozen=True)
class SecretBinding:
    """Generated password variable for one database service."""
    service: str
    variable: str  # e.g. "dbPassword"


def to_identifier(name: str) -> str:
    """Turn a service name into a valid variable name ("my-db" -> "my_db")."""
    identifier = re.sub(r"[^A-Za-z0-9_$]", "_", name)
    if not identifier or identifier[0].isdigit():
        identifier = f"_{identifier}"
    return identifier


def build_secret_bindings(databases: Iterable[str]) -> Dict[str, SecretBinding]:
    """Create one password binding per database service, in order."""
    bindings: Dict[str, SecretBinding] = {}
    taken = set()

    for service in databases:
        base = f"{to_identifier(service)}Password"
        variable = base
        suffix = 2
        while variable in taken:
            variable = f"{base}{suffix}"
            suffix += 1
        taken.add(variable)
        bindings[service] = SecretBinding(service=service, variable=variable)

    return bindings


def input_reference(field_name: str) -> str:
    """Property access on the generator's `input` argument."""
    if IDENTIFIER_RE.match(field_name):
        return f"input.{field_name}"
    return f"input[{json.dumps(field_name)}]"


def symbolic_reference(service: str) -> str:
    """Runtime hostname of a service: project name plus its service-name field."""
    return f"{PROJECT_NAME_TOKEN}_${{{input_reference(service_name_field(service))}}}"


def escape_template_literal(text: str) -> str:
    """Escape backticks and interpolation sigils; nothing else is touched."""
    return text.replace("`", "\\`").replace("$", "\\$")


class EnvInterpolator:
    """
    Rewrites environment values that mention database services.

    Example:
        interpolator = EnvInterpolator(build_secret_bindings(["db"]))
        interpolator.rewrite("postgres://u:p@db:5432/app")
        # -> postgres://u:p@$(PROJECT_NAME)_${input.dbServiceName}:5432/app
    """

    def __init__(self, bindings: Dict[str, SecretBinding]):
        self.bindings = bindings
        self._references = {service: symbolic_reference(service) for service in bindings if service}
        # Longest name first so "db-replica" wins over "db" at the same position
        names = sorted(self._references, key=len, reverse=True)
        self._pattern = re.compile("|".join(re.escape(name) for name in names)) if names else None

    def rewrite(self, value: str) -> str:
        """Rewrite service references and escape the rest of the value."""
        if self._pattern is None:
            return escape_template_literal(value)

        parts = []
        position = 0
        for match in self._pattern.finditer(value):
            parts.append(escape_template_literal(value[position:match.start()]))
            parts.append(self._references[match.group(0)])
            position = match.end()
        parts.append(escape_template_literal(value[position:]))

        return "".join(parts)
