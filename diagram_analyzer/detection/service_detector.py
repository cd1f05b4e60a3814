"""
Primary service detector.

Scans free text against the service catalog, one service at a time, trying
exact resource types, then regex patterns, then keywords, then aliases. The
first tier that produces a validated match wins for that service.
"""

from __future__ import annotations

from statistics import fmean
from typing import Any, List, Optional

import structlog

from ..catalog import ServiceCatalog, ServiceDefinition, default_catalog
from ..exceptions import InvalidDetectionInputError
from .context_validator import (
    ContextValidator,
    contains_term,
    find_non_azure_indicators,
)
from .models import ContentValidation, DetectionResult, MatchType

logger = structlog.get_logger(__name__)

ALIAS_CONFIDENCE_FACTOR = 0.9
AZURE_CONTENT_THRESHOLD = 0.7


class ServiceDetector:
    """Detects catalog services mentioned in a block of text."""

    def __init__(
        self,
        catalog: Optional[ServiceCatalog] = None,
        validator: Optional[ContextValidator] = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.validator = validator if validator is not None else ContextValidator()

    def detect(self, text: Any) -> List[DetectionResult]:
        """
        Detect services in ``text``.

        Returns results sorted by confidence, at most one per service id.
        Any non-Azure indicator in the text rejects the whole input.

        Raises:
            InvalidDetectionInputError: If ``text`` is not a string
        """
        if not isinstance(text, str):
            raise InvalidDetectionInputError(
                "Detector input must be a string",
                received_type=type(text).__name__,
            )

        indicators = find_non_azure_indicators(text)
        if indicators:
            logger.debug("Rejected text with non-Azure indicators", indicators=indicators)
            return []

        lowered = text.lower()
        results: List[DetectionResult] = []
        for service in self.catalog:
            result = (
                self._match_exact(service, lowered)
                or self._match_pattern(service, text)
                or self._match_keyword(service, text, lowered)
                or self._match_alias(service, text, lowered)
            )
            if result is not None:
                results.append(result)

        return deduplicate(results)

    def find_non_azure_indicators(self, text: str) -> List[str]:
        return find_non_azure_indicators(text)

    def validate_content(self, text: str) -> ContentValidation:
        """Summarize whether ``text`` reads as an Azure architecture description."""
        results = self.detect(text)
        indicators = tuple(find_non_azure_indicators(text))
        if not results:
            return ContentValidation(
                is_azure=False, confidence=0.0, non_azure_indicators=indicators
            )

        mean_confidence = fmean(r.confidence for r in results)
        return ContentValidation(
            is_azure=mean_confidence > AZURE_CONTENT_THRESHOLD,
            confidence=min(mean_confidence, 1.0),
            detected_services=tuple(r.service.display_name for r in results),
            non_azure_indicators=indicators,
        )

    def _match_exact(
        self, service: ServiceDefinition, lowered: str
    ) -> Optional[DetectionResult]:
        for resource_type in service.all_resource_types:
            if resource_type.lower() in lowered:
                return DetectionResult(
                    service=service,
                    confidence=service.confidence.exact,
                    match_type=MatchType.EXACT,
                    matched_text=service.resource_type,
                )
        return None

    def _match_pattern(
        self, service: ServiceDefinition, text: str
    ) -> Optional[DetectionResult]:
        for pattern in service.text_patterns:
            match = pattern.search(text)
            if match is None:
                continue
            check = self.validator.validate_pattern(match.group(0), text, service)
            if check.is_valid:
                return DetectionResult(
                    service=service,
                    confidence=service.confidence.pattern * check.confidence_multiplier,
                    match_type=MatchType.PATTERN,
                    matched_text=match.group(0),
                )
        return None

    def _match_keyword(
        self, service: ServiceDefinition, text: str, lowered: str
    ) -> Optional[DetectionResult]:
        for keyword in service.keywords:
            if not contains_term(lowered, keyword):
                continue
            check = self.validator.validate_keyword(keyword, text, service)
            if check.is_valid:
                return DetectionResult(
                    service=service,
                    confidence=service.confidence.keyword * check.confidence_multiplier,
                    match_type=MatchType.KEYWORD,
                    matched_text=keyword,
                )
        return None

    def _match_alias(
        self, service: ServiceDefinition, text: str, lowered: str
    ) -> Optional[DetectionResult]:
        for alias in service.alias_candidates:
            if not contains_term(lowered, alias):
                continue
            check = self.validator.validate_alias(alias, text, service)
            if check.is_valid:
                return DetectionResult(
                    service=service,
                    confidence=(
                        service.confidence.keyword
                        * ALIAS_CONFIDENCE_FACTOR
                        * check.confidence_multiplier
                    ),
                    match_type=MatchType.KEYWORD,
                    matched_text=alias,
                )
        return None


def deduplicate(results: List[DetectionResult]) -> List[DetectionResult]:
    """Sort by confidence descending and keep the first result per service id."""
    seen = set()
    unique: List[DetectionResult] = []
    for result in sorted(results, key=lambda r: r.confidence, reverse=True):
        if result.service_id in seen:
            continue
        seen.add(result.service_id)
        unique.append(result)
    return unique
