"""Conversion notes: what the converter found and what needs a human look."""
import yaml
from jinja2 import BaseLoader, Environment

from panelforge.services.docker_compose.analyzer import ComposeAnalysis

EXCERPT_LIMIT = 1000

REVIEW_CATEGORIES = [
    ("Environment Variables", "Check that all env vars are correctly mapped"),
    ("Volumes", "Verify volume mounts are correct"),
    ("Build Contexts", "Services with 'build' need manual configuration"),
    ("Networks", "Docker Compose networks are not directly supported"),
    ("Dependencies", "Service dependencies may need adjustment"),
    ("Secrets", "Ensure sensitive values use randomPassword() or user input"),
    ("Ports", "Verify port mappings match your application"),
]

NOTES_TEMPLATE = """\
# {{ slug }} - Conversion Notes

This template was automatically converted from a docker-compose.yml file.

## Services Detected

### Databases ({{ databases | length }})
{% for name in databases %}
- {{ name }}
{% endfor %}

### Applications ({{ applications | length }})
{% for name in applications %}
- {{ name }}
{% endfor %}

### Other Services ({{ others | length }})
{% for name in others %}
- {{ name }}
{% endfor %}
{% if dependencies %}

## Dependencies

{% for name, deps in dependencies %}
- {{ name }} depends on: {{ deps | join(", ") }}
{% endfor %}
{% endif %}
{% if issues %}

## Conversion Warnings

{% for issue in issues %}
- {{ issue }}
{% endfor %}
{% endif %}

## Manual Review Required

Please review the following:

{% for title, hint in categories %}
{{ loop.index }}. **{{ title }}**: {{ hint }}
{% endfor %}

## Original docker-compose.yml Summary

```yaml
{{ excerpt }}
...
```
"""


class ReviewNotesEmitter:
    """Renders CONVERSION_NOTES.md for a converted template."""

    def __init__(self):
        self.jinja_env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.template = self.jinja_env.from_string(NOTES_TEMPLATE)

    def render(self, slug: str, analysis: ComposeAnalysis) -> str:
        """Render the notes; purely informational, never fails on content."""
        dependencies = [
            (name, analysis.services[name].depends_on)
            for name in analysis.services
            if analysis.services[name].depends_on
        ]

        return self.template.render(
            slug=slug,
            databases=analysis.databases,
            applications=analysis.applications,
            others=analysis.others,
            dependencies=dependencies,
            issues=analysis.issues,
            categories=REVIEW_CATEGORIES,
            excerpt=self._excerpt(analysis.document.raw),
        )

    @staticmethod
    def _excerpt(raw: dict) -> str:
        """First part of the original document, re-dumped as YAML."""
        dumped = yaml.safe_dump(raw, sort_keys=False, indent=2, default_flow_style=False)
        return dumped[:EXCERPT_LIMIT]
