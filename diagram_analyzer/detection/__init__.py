"""
Detection Engine Module

Public API:
    ServiceDetector: Primary text detector over the service catalog
    ContextValidator: Context checks applied to raw matches
    MultiStrategyAggregator: Text, structural, visual and contextual passes
    ProcessedFileBundle: Normalized extractor output
    build_analysis: Detections to resources, dependencies and architecture
"""

from .aggregator import MultiStrategyAggregator, calculate_accuracy_metrics, merge_results
from .analysis_builder import (
    ArchitectureSummary,
    DiagramAnalysis,
    ResourceDependency,
    build_analysis,
    rejection_reason,
    should_trust_detection,
)
from .bundle import FileFormat, FileMetadata, ProcessedFileBundle
from .context_validator import (
    GENERIC_TERMS,
    NEGATION_TERMS,
    NON_AZURE_INDICATORS,
    STRONG_CONTEXT_MARKERS,
    VENDOR_MARKERS,
    ContextValidator,
    find_non_azure_indicators,
)
from .models import (
    AccuracyMetrics,
    BoundingBox,
    ContentValidation,
    ContextCheck,
    DetectionResult,
    Evidence,
    EvidenceType,
    MatchType,
)
from .patterns import DEFAULT_ARCHITECTURAL_PATTERNS, ArchitecturalPattern
from .service_detector import ServiceDetector

__all__ = [
    "DEFAULT_ARCHITECTURAL_PATTERNS",
    "GENERIC_TERMS",
    "NEGATION_TERMS",
    "NON_AZURE_INDICATORS",
    "STRONG_CONTEXT_MARKERS",
    "VENDOR_MARKERS",
    "AccuracyMetrics",
    "ArchitecturalPattern",
    "ArchitectureSummary",
    "BoundingBox",
    "ContentValidation",
    "ContextCheck",
    "ContextValidator",
    "DetectionResult",
    "DiagramAnalysis",
    "Evidence",
    "EvidenceType",
    "FileFormat",
    "FileMetadata",
    "MatchType",
    "MultiStrategyAggregator",
    "ProcessedFileBundle",
    "ResourceDependency",
    "ServiceDetector",
    "build_analysis",
    "calculate_accuracy_metrics",
    "find_non_azure_indicators",
    "merge_results",
    "rejection_reason",
    "should_trust_detection",
]
