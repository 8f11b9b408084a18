"""
Docker Compose integration services.

Provides tools for loading Docker Compose files, normalizing their fields and
classifying their services.
"""

from .analyzer import ComposeAnalysis, ComposeAnalyzer, ServiceClass, classify_service
from .loader import ComposeDocument, ComposeLoader, ServiceSpec
from .normalizers import MountMechanism, PortBinding, VolumeBinding

__all__ = [
    "ComposeAnalysis",
    "ComposeAnalyzer",
    "ServiceClass",
    "classify_service",
    "ComposeDocument",
    "ComposeLoader",
    "ServiceSpec",
    "MountMechanism",
    "PortBinding",
    "VolumeBinding",
]
