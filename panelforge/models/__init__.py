"""Data models for panelforge."""

from .template import ChangeLogEntry, Contributor, Link, TemplateMeta

__all__ = ["ChangeLogEntry", "Contributor", "Link", "TemplateMeta"]
