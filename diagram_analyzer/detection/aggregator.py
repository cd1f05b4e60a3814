"""
Multi-strategy detection aggregator.

Runs four independent evidence passes over a processed file bundle (text,
structural, visual, contextual), merges the per-service results and applies
the precision floor.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import structlog

from ..catalog import ServiceCatalog, default_catalog
from .bundle import ProcessedFileBundle, element_text
from .models import (
    AccuracyMetrics,
    BoundingBox,
    DetectionResult,
    Evidence,
    EvidenceType,
    MatchType,
)
from .patterns import DEFAULT_ARCHITECTURAL_PATTERNS, ArchitecturalPattern
from .service_detector import ServiceDetector

logger = structlog.get_logger(__name__)

CONFIDENCE_FLOOR = 0.5
MERGE_WEIGHT = 0.5
PATTERN_MATCH_SHARE = 0.6
INFERRED_CONFIDENCE_FACTOR = 0.7

HIGH_CONFIDENCE = 0.9
MEDIUM_CONFIDENCE = 0.7
MEDIUM_WEIGHT = 0.8
LOW_WEIGHT = 0.5


class MultiStrategyAggregator:
    """Combines text, structural, visual and contextual detection passes."""

    def __init__(
        self,
        detector: Optional[ServiceDetector] = None,
        catalog: Optional[ServiceCatalog] = None,
        patterns: Optional[Sequence[ArchitecturalPattern]] = None,
    ):
        if detector is None:
            detector = ServiceDetector(catalog if catalog is not None else default_catalog())
        self.detector = detector
        self.catalog = catalog if catalog is not None else detector.catalog
        self.patterns = tuple(
            patterns if patterns is not None else DEFAULT_ARCHITECTURAL_PATTERNS
        )

    def analyze(
        self, bundle: Union[ProcessedFileBundle, Mapping[str, Any]]
    ) -> List[DetectionResult]:
        """Detect services in a bundle, returning merged results above the floor."""
        if not isinstance(bundle, ProcessedFileBundle):
            bundle = ProcessedFileBundle.from_dict(bundle)

        partial: List[DetectionResult] = []
        partial.extend(self.text_pass(bundle))
        partial.extend(self.structural_pass(bundle))
        partial.extend(self.visual_pass(bundle))
        partial.extend(self.contextual_pass(partial))

        results = merge_results(partial)
        logger.info(
            "Aggregated detection results",
            file=bundle.original_name,
            format=bundle.format.value,
            candidates=len(partial),
            services=[r.service_id for r in results],
        )
        return results

    def text_pass(self, bundle: ProcessedFileBundle) -> List[DetectionResult]:
        text = f"{bundle.extract_text()} {bundle.original_name}"
        return [
            dataclasses.replace(
                result,
                evidence=result.evidence
                + (
                    Evidence(
                        type=EvidenceType.TEXT,
                        source=result.matched_text or "",
                        confidence=result.confidence,
                        details=f"Matched {result.match_type.value}: {result.matched_text}",
                    ),
                ),
            )
            for result in self.detector.detect(text)
        ]

    def structural_pass(self, bundle: ProcessedFileBundle) -> List[DetectionResult]:
        """Run each diagram element through the detector on its own."""
        results: List[DetectionResult] = []
        sources = [("drawio_element", e) for e in bundle.elements] + [
            ("visio_shape", s) for s in bundle.shapes
        ]
        for source, element in sources:
            text = element_text(element)
            if not text:
                continue
            hits = self.detector.detect(text)
            if not hits:
                continue
            top = hits[0]
            label = element.get("label") or element.get("value") or element.get("text") or text
            results.append(
                dataclasses.replace(
                    top,
                    evidence=top.evidence
                    + (
                        Evidence(
                            type=EvidenceType.STRUCTURAL,
                            source=source,
                            confidence=top.confidence,
                            details=f"Draw.io element: {label}"
                            if source == "drawio_element"
                            else f"Visio shape: {label}",
                        ),
                    ),
                    position=BoundingBox.from_geometry(element.get("geometry")),
                )
            )
        return results

    def visual_pass(self, bundle: ProcessedFileBundle) -> List[DetectionResult]:
        # Icon recognition hook; no vision model is wired in.
        return []

    def contextual_pass(
        self, detected: Iterable[DetectionResult]
    ) -> List[DetectionResult]:
        """Infer missing members of architectural patterns that are mostly present."""
        detected_ids = [r.service_id for r in detected]
        inferred: List[DetectionResult] = []
        for pattern in self.patterns:
            matching = pattern.matching(detected_ids)
            if len(matching) < len(pattern.services) * PATTERN_MATCH_SHARE:
                continue
            for service_id in pattern.missing(detected_ids):
                service = self.catalog.get_by_id(service_id)
                if service is None:
                    logger.debug(
                        "Pattern references unknown service",
                        pattern=pattern.name,
                        service_id=service_id,
                    )
                    continue
                confidence = pattern.confidence * INFERRED_CONFIDENCE_FACTOR
                inferred.append(
                    DetectionResult(
                        service=service,
                        confidence=confidence,
                        match_type=MatchType.CONTEXTUAL,
                        evidence=(
                            Evidence(
                                type=EvidenceType.CONTEXTUAL,
                                source="architectural_pattern",
                                confidence=confidence,
                                details=f"Inferred from {pattern.name} pattern",
                            ),
                        ),
                    )
                )
        return inferred


def merge_results(results: Iterable[DetectionResult]) -> List[DetectionResult]:
    """
    Merge results for the same service and drop anything at or below the floor.

    A repeated service adds half of the candidate's confidence to the existing
    one, capped at 1.0, and accumulates evidence. Results seen once pass
    through untouched.
    """
    merged: Dict[str, DetectionResult] = {}
    for candidate in results:
        existing = merged.get(candidate.service_id)
        if existing is None:
            merged[candidate.service_id] = candidate
            continue
        merged[candidate.service_id] = dataclasses.replace(
            existing,
            confidence=min(existing.confidence + candidate.confidence * MERGE_WEIGHT, 1.0),
            evidence=existing.evidence + candidate.evidence,
            position=existing.position or candidate.position,
        )

    ranked = sorted(merged.values(), key=lambda r: r.confidence, reverse=True)
    return [r for r in ranked if r.confidence > CONFIDENCE_FLOOR]


def calculate_accuracy_metrics(results: Sequence[DetectionResult]) -> AccuracyMetrics:
    """Summarize the confidence distribution of a result list."""
    if not results:
        return AccuracyMetrics()

    total = len(results)
    high = sum(1 for r in results if r.confidence >= HIGH_CONFIDENCE)
    medium = sum(1 for r in results if MEDIUM_CONFIDENCE <= r.confidence < HIGH_CONFIDENCE)
    low = sum(1 for r in results if r.confidence < MEDIUM_CONFIDENCE)

    return AccuracyMetrics(
        overall_confidence=sum(r.confidence for r in results) / total,
        high_confidence_count=high,
        medium_confidence_count=medium,
        low_confidence_count=low,
        accuracy_score=(high * 1.0 + medium * MEDIUM_WEIGHT + low * LOW_WEIGHT) / total,
    )
