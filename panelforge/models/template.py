"""Template metadata models (meta.yaml)."""
import re
from datetime import date
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONVERTER_CONTRIBUTOR = {"name": "Converted with Easypanel Tools", "url": "https://easypanel.io"}
CONVERTED_INSTRUCTIONS = (
    "This template was auto-generated from a docker-compose file. Please review and customize."
)


class ChangeLogEntry(BaseModel):
    """One release note."""

    model_config = ConfigDict(extra='forbid')

    date: str = Field(..., description="ISO date (YYYY-MM-DD)")
    description: str

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        """Validate the date is ISO formatted."""
        if not re.match(r'^\d{4}-\d{2}-\d{2}$', v):
            raise ValueError(f"Change log date must be YYYY-MM-DD. Got: {v}")
        return v


class Link(BaseModel):
    model_config = ConfigDict(extra='forbid')

    label: str
    url: str


class Contributor(BaseModel):
    model_config = ConfigDict(extra='forbid')

    name: str
    url: str


class TemplateMeta(BaseModel):
    """Metadata document of a template.

    Carries the descriptive fields shown in the template catalogue plus the
    input schema the generator function is called with.
    """

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    name: str = Field(..., description="Display name")
    description: str = Field(..., description="Short description")
    instructions: str = ""
    change_log: List[ChangeLogEntry] = Field(default_factory=list, alias="changeLog")
    links: List[Link] = Field(default_factory=list)
    contributors: List[Contributor] = Field(default_factory=list)
    input_schema: Dict[str, Any] = Field(default_factory=dict, alias="schema")

    @classmethod
    def for_conversion(cls, slug: str, service_count: int, schema: Dict[str, Any],
                       today: date = None) -> "TemplateMeta":
        """Metadata for a template converted from a compose file."""
        today = today or date.today()
        return cls(
            name=slug[:1].upper() + slug[1:],
            description=f"Converted from docker-compose.yml with {service_count} service(s)",
            instructions=CONVERTED_INSTRUCTIONS,
            change_log=[ChangeLogEntry(date=today.isoformat(),
                                       description="Initial conversion from docker-compose")],
            links=[],
            contributors=[Contributor(**CONVERTER_CONTRIBUTOR)],
            input_schema=schema,
        )

    def to_yaml(self) -> str:
        """Render meta.yaml, keeping field order."""
        return yaml.safe_dump(
            self.model_dump(by_alias=True),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
