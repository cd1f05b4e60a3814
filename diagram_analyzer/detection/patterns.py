"""Architectural patterns used to infer services missing from a diagram."""

from dataclasses import dataclass
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class ArchitecturalPattern:
    """A named set of services that typically appear together."""

    name: str
    services: Tuple[str, ...]
    confidence: float
    description: str = ""

    def matching(self, detected_ids: Iterable[str]) -> List[str]:
        detected = set(detected_ids)
        return [s for s in self.services if s in detected]

    def missing(self, detected_ids: Iterable[str]) -> List[str]:
        detected = set(detected_ids)
        return [s for s in self.services if s not in detected]


DEFAULT_ARCHITECTURAL_PATTERNS: Tuple[ArchitecturalPattern, ...] = (
    ArchitecturalPattern(
        name="Three-tier Architecture",
        services=("app-service", "sql-database", "storage-account"),
        confidence=0.95,
        description="Web front end with relational data and blob storage",
    ),
    ArchitecturalPattern(
        name="Microservices with Kubernetes",
        services=("kubernetes-service", "container-registry", "application-insights"),
        confidence=0.9,
        description="Containerized services on AKS with an image registry",
    ),
    ArchitecturalPattern(
        name="Serverless Architecture",
        services=("azure-functions", "cosmos-db", "application-insights"),
        confidence=0.92,
        description="Event-driven functions backed by a document store",
    ),
    ArchitecturalPattern(
        name="Traditional VM-based",
        services=("virtual-machines", "virtual-network", "load-balancer"),
        confidence=0.88,
        description="Load-balanced virtual machines in a virtual network",
    ),
    ArchitecturalPattern(
        name="Secure Web Application",
        services=("app-service", "key-vault", "application-insights", "storage-account"),
        confidence=0.9,
        description="Web app with managed secrets and telemetry",
    ),
)
