"""
Docker Compose service analyzer.

Classifies every declared service as a database, an application or "other",
and collects the review items the heuristics could not settle:
- environment entries without a value separator
- volume entries that are not recognized
- ports that cannot be parsed
- services that only carry a build context
- dependencies on services that are not declared
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from panelforge.core.logger import get_logger
from panelforge.services.docker_compose.loader import ComposeDocument, ServiceSpec
from panelforge.services.docker_compose.normalizers import (
    PortBinding,
    VolumeBinding,
    normalize_environment,
    parse_port,
    parse_volume,
)

logger = get_logger(__name__)

# Substrings of image or service name that mark a database service
DATABASE_KEYWORDS = ("postgres", "mysql", "mariadb", "mongo", "redis", "elasticsearch")

# Engines the platform offers as managed services, in detection order
DATABASE_ENGINES = ("postgres", "mysql", "mariadb", "mongo", "redis")


class ServiceClass(str, Enum):
    """Category a compose service is translated into."""
    DATABASE = "database"
    APPLICATION = "application"
    OTHER = "other"


def classify_service(service: ServiceSpec) -> ServiceClass:
    """Classify a service from its image reference and declared name."""
    haystack = f"{service.image or ''} {service.name}".lower()

    if any(keyword in haystack for keyword in DATABASE_KEYWORDS):
        return ServiceClass.DATABASE
    if service.image or service.build:
        return ServiceClass.APPLICATION
    return ServiceClass.OTHER


def detect_database_engine(service: ServiceSpec) -> Optional[str]:
    """Return the managed engine for a database service, image first, then name."""
    for candidate in (service.image or "", service.name):
        lower = candidate.lower()
        for engine in DATABASE_ENGINES:
            if engine in lower:
                return engine
    return None


@dataclass
class ComposeAnalysis:
    """Classified services of a compose document."""
    document: ComposeDocument
    databases: List[str] = field(default_factory=list)
    applications: List[str] = field(default_factory=list)
    others: List[str] = field(default_factory=list)
    issues: List[str] = field(default_factory=list)

    @property
    def services(self) -> Dict[str, ServiceSpec]:
        return self.document.services

    def ordered_services(self) -> List[str]:
        """Databases, then applications, then others; document order within each."""
        return [*self.databases, *self.applications, *self.others]

    def class_of(self, name: str) -> ServiceClass:
        """Return the class a service was assigned."""
        if name in self.databases:
            return ServiceClass.DATABASE
        if name in self.applications:
            return ServiceClass.APPLICATION
        if name in self.others:
            return ServiceClass.OTHER
        raise KeyError(name)

    def environment(self, name: str) -> Dict[str, str]:
        """Normalized environment of a service (recomputed on each call)."""
        return normalize_environment(self.services[name].environment)

    def volumes(self, name: str) -> List[Optional[VolumeBinding]]:
        """Parsed volumes of a service; None marks an unrecognized entry."""
        return [parse_volume(volume) for volume in self.services[name].volumes]

    def ports(self, name: str) -> List[PortBinding]:
        """Parsed port bindings of a service; unparsable entries are skipped."""
        bindings = []
        for port in self.services[name].ports:
            binding = parse_port(port)
            if binding is not None:
                bindings.append(binding)
        return bindings


class ComposeAnalyzer:
    """
    Partitions compose services into databases, applications and others.

    Classification is a pure function of each ServiceSpec, so repeated runs
    over the same document always give the same partition.
    """

    def analyze(self, document: ComposeDocument) -> ComposeAnalysis:
        """
        Analyze a compose document.

        Args:
            document: Parsed compose document

        Returns:
            ComposeAnalysis where every service appears in exactly one group
        """
        analysis = ComposeAnalysis(document=document)
        groups = {
            ServiceClass.DATABASE: analysis.databases,
            ServiceClass.APPLICATION: analysis.applications,
            ServiceClass.OTHER: analysis.others,
        }

        for name, service in document.services.items():
            groups[classify_service(service)].append(name)
            self._collect_issues(service, document, analysis.issues)

        logger.info(
            f"Analysis: {len(analysis.databases)} database(s), "
            f"{len(analysis.applications)} application(s), "
            f"{len(analysis.others)} other service(s)"
        )

        return analysis

    def _collect_issues(self, service: ServiceSpec, document: ComposeDocument,
                        issues: List[str]):
        """Record everything about a service that needs a human look."""
        env_issues: List[str] = []
        normalize_environment(service.environment, env_issues)
        issues.extend(f"{service.name}: {issue}" for issue in env_issues)

        for volume in service.volumes:
            if parse_volume(volume) is None:
                issues.append(f"{service.name}: Unrecognized volume '{volume}' needs manual handling")

        for port in service.ports:
            if parse_port(port) is None:
                issues.append(f"{service.name}: Port '{port}' could not be parsed and was skipped")

        if service.build and not service.image:
            issues.append(f"{service.name}: Uses a build context, replace REPLACE_WITH_IMAGE with a real image")

        for dependency in service.depends_on:
            if dependency not in document.services:
                issues.append(f"{service.name}: Depends on undeclared service '{dependency}'")
