"""
Docker Compose to platform template converter.

Converts Docker Compose files into templates automatically:
- meta.yaml with a typed input schema (service names, images, env vars)
- index.ts generator emitting one service declaration per compose service
- CONVERSION_NOTES.md listing everything that needs manual review
- placeholder assets for the logo and screenshot

The result is a best-effort starting point. Nothing generated here is
executed or validated.
"""

import re
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from panelforge.core.errors import InvalidSlugError, TemplateExistsError
from panelforge.core.logger import get_logger
from panelforge.models.template import TemplateMeta
from panelforge.scaffold.core import TemplateScaffolder
from panelforge.services.docker_compose.analyzer import ComposeAnalysis, ComposeAnalyzer
from panelforge.services.docker_compose.loader import ComposeLoader
from panelforge.services.template.emitter import GeneratorEmitter
from panelforge.services.template.interpolation import SecretBinding, build_secret_bindings
from panelforge.services.template.review_notes import ReviewNotesEmitter
from panelforge.services.template.schema import SchemaDescription, SchemaSynthesizer

logger = get_logger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
DEFAULT_TEMPLATES_DIR = Path("templates")


def validate_slug(slug: str) -> str:
    """Return the slug if it only has lowercase letters, digits and hyphens."""
    if not SLUG_PATTERN.match(slug):
        raise InvalidSlugError(
            f"Template slug '{slug}' must contain only lowercase letters, numbers, and hyphens"
        )
    return slug


@dataclass
class ConversionResult:
    """Result of converting a compose file to a template."""
    slug: str
    source: str  # Path/URL of the compose file
    analysis: ComposeAnalysis
    schema: SchemaDescription
    secrets: Dict[str, SecretBinding]
    meta_yaml: str
    generator_source: str
    review_notes: str
    template_path: Optional[Path] = None  # Set once written


class ComposeConverter:
    """
    Converts Docker Compose files into platform templates.

    Example:
        converter = ComposeConverter(templates_dir=Path("templates"))
        result = converter.convert("./docker-compose.yml", "myapp")
        print(result.template_path)
    """

    def __init__(self, templates_dir: Optional[Path] = None, loader: Optional[ComposeLoader] = None):
        self.templates_dir = Path(templates_dir) if templates_dir else DEFAULT_TEMPLATES_DIR
        self.loader = loader or ComposeLoader()
        self.analyzer = ComposeAnalyzer()
        self.schema_synthesizer = SchemaSynthesizer()
        self.emitter = GeneratorEmitter()
        self.notes_emitter = ReviewNotesEmitter()
        self.scaffolder = TemplateScaffolder(self.templates_dir)

    def convert(self, source: str, slug: str, today: Optional[date] = None) -> ConversionResult:
        """
        Convert a compose file and write the template to disk.

        Args:
            source: Path or URL to docker-compose.yml
            slug: Template slug (lowercase letters, numbers, hyphens)
            today: Change log date (defaults to today)

        Returns:
            ConversionResult with template_path set

        Raises:
            ConversionError subclasses; nothing is written when one is raised
            before the write phase
        """
        result = self.render(source, slug, today=today)
        result.template_path = self.scaffolder.write(result)

        logger.info(f"✓ Template created: {result.template_path}")

        return result

    def render(self, source: str, slug: str, today: Optional[date] = None) -> ConversionResult:
        """
        Convert a compose file without writing anything.

        The destination is still checked so a later convert() would not
        overwrite an existing template.
        """
        validate_slug(slug)

        if self.scaffolder.exists(slug):
            raise TemplateExistsError(f'Template "{slug}" already exists!')

        document = self.loader.load(source)
        logger.info(f"Found {len(document.services)} services")

        analysis = self.analyzer.analyze(document)
        schema = self.schema_synthesizer.build(analysis)

        # Passwords exist before any value is interpolated
        secrets = build_secret_bindings(analysis.databases)
        generator_source = self.emitter.render(analysis, secrets)

        meta = TemplateMeta.for_conversion(
            slug,
            service_count=len(analysis.ordered_services()),
            schema=schema.to_dict(),
            today=today,
        )
        review_notes = self.notes_emitter.render(slug, analysis)

        if analysis.issues:
            logger.warning(f"{len(analysis.issues)} item(s) flagged for manual review")

        return ConversionResult(
            slug=slug,
            source=source,
            analysis=analysis,
            schema=schema,
            secrets=secrets,
            meta_yaml=meta.to_yaml(),
            generator_source=generator_source,
            review_notes=review_notes,
        )
