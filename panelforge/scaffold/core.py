"""Writes converted templates to the templates directory."""

from pathlib import Path
from typing import TYPE_CHECKING

from panelforge.core.logger import get_logger

if TYPE_CHECKING:
    from panelforge.services.compose_converter import ConversionResult

logger = get_logger(__name__)

LOGO_PLACEHOLDER = "Add logo.png or logo.svg here (512x512px recommended)"
SCREENSHOT_PLACEHOLDER = "Add screenshot.png here (1200x630px recommended)"


class TemplateScaffolder:
    """Creates the on-disk layout of a template.

    Layout:
        <slug>/meta.yaml
        <slug>/index.ts
        <slug>/CONVERSION_NOTES.md
        <slug>/assets/logo.png.placeholder
        <slug>/assets/screenshot.png.placeholder

    Writes are not transactional: a failure part way leaves the files
    written so far on disk.
    """

    def __init__(self, templates_dir: Path):
        self.templates_dir = Path(templates_dir)

    def template_path(self, slug: str) -> Path:
        return self.templates_dir / slug

    def exists(self, slug: str) -> bool:
        return self.template_path(slug).exists()

    def write(self, result: "ConversionResult") -> Path:
        """Write all artifacts of a conversion.

        Returns:
            Path to the created template directory
        """
        template_path = self.template_path(result.slug)

        self._create_directory_structure(template_path)

        (template_path / "meta.yaml").write_text(result.meta_yaml, encoding="utf-8")
        (template_path / "index.ts").write_text(result.generator_source, encoding="utf-8")
        self._create_placeholders(template_path)
        (template_path / "CONVERSION_NOTES.md").write_text(result.review_notes, encoding="utf-8")

        logger.info(f"📁 Wrote template files to {template_path}")

        return template_path

    def _create_directory_structure(self, template_path: Path) -> None:
        """Create the template and assets directories."""
        (template_path / "assets").mkdir(parents=True, exist_ok=True)

    def _create_placeholders(self, template_path: Path) -> None:
        """Create marker files standing in for the logo and screenshot."""
        assets = template_path / "assets"
        (assets / "logo.png.placeholder").write_text(LOGO_PLACEHOLDER)
        (assets / "screenshot.png.placeholder").write_text(SCREENSHOT_PLACEHOLDER)
