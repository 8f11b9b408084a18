"""panelforge - Docker Compose to platform template converter."""

__version__ = "0.1.0"
