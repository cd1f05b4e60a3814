"""
Turns ranked detections into a diagram analysis.

The analysis holds synthesized resource property bags (the shape the policy
engine evaluates), dependencies between the detected services and a short
architecture summary.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .models import AccuracyMetrics, ContentValidation, DetectionResult

DEFAULT_LOCATION = "East US"
DEFAULT_TIER = "Standard"
DETECTED_BY = "enhanced-pattern-recognition"


@dataclass
class ResourceDependency:
    source: str
    target: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target, "type": self.type}


@dataclass
class ArchitectureSummary:
    pattern: str = "Custom Architecture"
    components: List[str] = field(default_factory=list)
    scalability: str = "medium"
    complexity: str = "simple"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "components": list(self.components),
            "scalability": self.scalability,
            "complexity": self.complexity,
        }


@dataclass
class DiagramAnalysis:
    resources: List[Dict[str, Any]] = field(default_factory=list)
    dependencies: List[ResourceDependency] = field(default_factory=list)
    architecture: ArchitectureSummary = field(default_factory=ArchitectureSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": self.resources,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "architecture": self.architecture.to_dict(),
        }


# (required services, pattern name, complexity, scalability), first match wins
_ARCHITECTURE_RULES = (
    (
        ("app-service", "sql-database", "storage-account"),
        "Three-tier web application",
        "moderate",
        "medium",
    ),
    (
        ("kubernetes-service", "container-registry"),
        "Microservices with Kubernetes",
        "complex",
        "high",
    ),
    (("azure-functions", "cosmos-db"), "Serverless architecture", "moderate", "high"),
    (
        ("virtual-machines", "virtual-network"),
        "Infrastructure as a Service",
        "moderate",
        "medium",
    ),
)


def resource_name(display_name: str, index: int) -> str:
    """Slug a display name and suffix it with a 1-based index."""
    return re.sub(r"\s+", "-", display_name.lower()) + f"-{index + 1}"


def build_analysis(results: Sequence[DetectionResult]) -> DiagramAnalysis:
    """Synthesize resources, dependencies and an architecture summary."""
    resources = []
    for index, result in enumerate(results):
        service = result.service
        resources.append(
            {
                "type": service.resource_type,
                "name": resource_name(service.display_name, index),
                "properties": {
                    "tier": service.properties.tier[0]
                    if service.properties.tier
                    else DEFAULT_TIER,
                    "confidence": result.confidence,
                    "detectionEvidence": "; ".join(e.details for e in result.evidence),
                },
                "location": service.properties.default_location or DEFAULT_LOCATION,
                "tags": {
                    "environment": "production",
                    "detectedBy": DETECTED_BY,
                    "confidence": str(result.confidence),
                },
            }
        )

    dependencies: List[ResourceDependency] = []
    for i, current in enumerate(results):
        deps = current.service.dependencies
        for j, target in enumerate(results):
            if i == j:
                continue
            if target.service_id in deps.commonly_used_with:
                dependencies.append(
                    ResourceDependency(
                        resources[i]["name"], resources[j]["name"], "connects_to"
                    )
                )
            if target.service_id in deps.required_with:
                dependencies.append(
                    ResourceDependency(
                        resources[i]["name"], resources[j]["name"], "depends_on"
                    )
                )

    architecture = _summarize_architecture(results)
    return DiagramAnalysis(
        resources=resources, dependencies=dependencies, architecture=architecture
    )


def _summarize_architecture(results: Sequence[DetectionResult]) -> ArchitectureSummary:
    service_ids = {r.service_id for r in results}
    summary = ArchitectureSummary(components=[r.service.display_name for r in results])
    for required, pattern, complexity, scalability in _ARCHITECTURE_RULES:
        if service_ids.issuperset(required):
            summary.pattern = pattern
            summary.complexity = complexity
            summary.scalability = scalability
            break

    if len(results) > 8:
        summary.complexity = "complex"
    elif len(results) < 3:
        summary.complexity = "simple"
    return summary


def should_trust_detection(
    results: Sequence[DetectionResult], metrics: AccuracyMetrics, gate: float = 0.8
) -> bool:
    """True when detections exist and their accuracy score clears the gate."""
    return bool(results) and metrics.accuracy_score > gate


def rejection_reason(validation: ContentValidation) -> Optional[str]:
    """Human-readable reason a diagram is not treated as Azure, or None."""
    if validation.is_azure:
        return None
    if validation.non_azure_indicators:
        return (
            f"This diagram appears to be for {validation.non_azure_indicators[0].upper()} "
            "or other non-Azure platforms. Only Azure architecture diagrams are analyzed."
        )
    return (
        "This diagram does not appear to contain Azure services or resources. "
        "Include services such as App Service, SQL Database, Storage Account or "
        "Virtual Machines."
    )
