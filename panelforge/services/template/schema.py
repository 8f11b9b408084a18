"""Input schema synthesis for generated templates."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from panelforge.services.docker_compose.analyzer import ComposeAnalysis

PROJECT_NAME_FIELD = "projectName"


def service_name_field(service: str) -> str:
    return f"{service}ServiceName"


def service_image_field(service: str) -> str:
    return f"{service}ServiceImage"


def env_field(service: str, key: str) -> str:
    return f"{service}_{key}"


@dataclass(frozen=True)
class SchemaField:
    """A single user-fillable field."""
    title: str
    type: str = "string"
    default: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "title": self.title}
        if self.default is not None:
            data["default"] = self.default
        return data


@dataclass
class SchemaDescription:
    """
    Append-only ordered collection of schema fields.

    Once a field name is present it is never replaced or retyped; later
    additions under the same name are ignored (first writer wins).
    """
    required: List[str] = field(default_factory=list)
    properties: Dict[str, SchemaField] = field(default_factory=dict)

    def add_field(self, name: str, schema_field: SchemaField, required: bool = False) -> bool:
        """Add a field unless the name is taken. Returns True if it was added."""
        if name in self.properties:
            return False
        self.properties[name] = schema_field
        if required:
            self.required.append(name)
        return True

    def __contains__(self, name: str) -> bool:
        return name in self.properties

    def to_dict(self) -> Dict[str, Any]:
        """JSON-schema shaped mapping for meta.yaml."""
        return {
            "type": "object",
            "required": list(self.required),
            "properties": {name: f.to_dict() for name, f in self.properties.items()},
        }


class SchemaSynthesizer:
    """Builds the template input schema from classified compose services."""

    def build(self, analysis: ComposeAnalysis) -> SchemaDescription:
        """
        Synthesize the schema.

        Fields, in order:
        - projectName (required)
        - per service: <name>ServiceName, <name>ServiceImage if an image is set
        - per environment entry: optional <name>_<KEY> defaulting to its value

        Services are visited databases first, then applications, then others.
        """
        schema = SchemaDescription()
        schema.add_field(PROJECT_NAME_FIELD, SchemaField(title="Project Name"), required=True)

        for name in analysis.ordered_services():
            service = analysis.services[name]

            schema.add_field(
                service_name_field(name),
                SchemaField(title=f"{name} Service Name", default=name),
                required=True,
            )

            if service.image:
                schema.add_field(
                    service_image_field(name),
                    SchemaField(title=f"{name} Docker Image", default=service.image),
                    required=True,
                )

            for key, value in analysis.environment(name).items():
                schema.add_field(
                    env_field(name, key),
                    SchemaField(title=f"{name}: {key}", default=value),
                )

        return schema
