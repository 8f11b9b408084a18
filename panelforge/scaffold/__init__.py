"""Template directory scaffolding."""

from .core import TemplateScaffolder

__all__ = [
    "TemplateScaffolder",
]
