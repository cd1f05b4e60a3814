"""
Detection result models.

Results and evidence are frozen dataclasses; merging two results for the
same service builds a new DetectionResult rather than mutating either one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from ..catalog.models import ServiceDefinition


class MatchType(str, Enum):
    """How a detection was made."""

    EXACT = "exact"
    PATTERN = "pattern"
    KEYWORD = "keyword"
    VISUAL = "visual"
    CONTEXTUAL = "contextual"


class EvidenceType(str, Enum):
    """Kind of evidence backing a detection."""

    TEXT = "text"
    VISUAL = "visual"
    STRUCTURAL = "structural"
    CONTEXTUAL = "contextual"


@dataclass(frozen=True)
class Evidence:
    """One justification for a detection."""

    type: EvidenceType
    source: str
    confidence: float
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "source": self.source,
            "confidence": self.confidence,
            "details": self.details,
        }


@dataclass(frozen=True)
class BoundingBox:
    """Position of a structural element on the diagram canvas."""

    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @classmethod
    def from_geometry(cls, geometry: Any) -> Optional["BoundingBox"]:
        """Build from a Draw.io style geometry mapping; values may be strings."""
        if not isinstance(geometry, dict):
            return None

        def _coord(key: str) -> float:
            try:
                return float(geometry.get(key) or 0)
            except (TypeError, ValueError):
                return 0.0

        return cls(
            x=_coord("x"), y=_coord("y"), width=_coord("width"), height=_coord("height")
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class DetectionResult:
    """A service found in the input, with its confidence and evidence."""

    service: ServiceDefinition
    confidence: float
    match_type: MatchType
    evidence: Tuple[Evidence, ...] = ()
    matched_text: Optional[str] = None
    position: Optional[BoundingBox] = None

    @property
    def service_id(self) -> str:
        return self.service.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_id": self.service.id,
            "display_name": self.service.display_name,
            "resource_type": self.service.resource_type,
            "category": self.service.category,
            "confidence": self.confidence,
            "match_type": self.match_type.value,
            "matched_text": self.matched_text,
            "evidence": [e.to_dict() for e in self.evidence],
            "position": self.position.to_dict() if self.position else None,
        }


@dataclass(frozen=True)
class ContextCheck:
    """Outcome of a context validation."""

    is_valid: bool
    confidence_multiplier: float


@dataclass(frozen=True)
class AccuracyMetrics:
    """Confidence distribution summary for a result list."""

    overall_confidence: float = 0.0
    high_confidence_count: int = 0
    medium_confidence_count: int = 0
    low_confidence_count: int = 0
    accuracy_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_confidence": self.overall_confidence,
            "high_confidence_count": self.high_confidence_count,
            "medium_confidence_count": self.medium_confidence_count,
            "low_confidence_count": self.low_confidence_count,
            "accuracy_score": self.accuracy_score,
        }


@dataclass(frozen=True)
class ContentValidation:
    """Whether a text blob looks like an Azure architecture description."""

    is_azure: bool
    confidence: float
    detected_services: Tuple[str, ...] = field(default_factory=tuple)
    non_azure_indicators: Tuple[str, ...] = field(default_factory=tuple)
