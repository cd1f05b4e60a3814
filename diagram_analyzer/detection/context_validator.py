"""
Context validation for raw service matches.

Abbreviations and generic nouns are the main source of false positives, so
each match tier asks for corroborating context in proportion to how
ambiguous the matched term is. Every check returns a ContextCheck carrying
the multiplier applied to the tier's base confidence.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from ..catalog.models import ServiceDefinition
from .models import ContextCheck

# Shared vocabularies. The blocklist and the context markers are the single
# source for every call site.
NON_AZURE_INDICATORS: Tuple[str, ...] = (
    "aws",
    "amazon",
    "ec2",
    "s3",
    "lambda",
    "rds",
    "dynamodb",
    "cloudformation",
    "gcp",
    "google cloud",
    "compute engine",
    "cloud storage",
    "bigquery",
    "cloud functions",
    "firestore",
    "pub/sub",
    "kubernetes engine",
    "gke",
    "on-premise",
    "on-premises",
    "vmware",
    "openstack",
    "alibaba cloud",
    "oracle cloud",
)

VENDOR_MARKERS: Tuple[str, ...] = ("azure", "microsoft")

STRONG_CONTEXT_MARKERS: Tuple[str, ...] = (
    "azure",
    "microsoft",
    "cloud",
    "bicep",
    "arm template",
)

GENERIC_TERMS: Tuple[str, ...] = (
    "database",
    "storage",
    "server",
    "application",
    "network",
    "web application",
    "file storage",
)

NEGATION_TERMS: Tuple[str, ...] = (
    "not",
    "without",
    "instead of",
    "rather than",
    "except",
)

NEGATION_WINDOW = 50

MULTIPLIER_CONFIRMED = 1.0
MULTIPLIER_CORROBORATED = 0.8
MULTIPLIER_UNCORROBORATED_PATTERN = 0.3
MULTIPLIER_GENERIC_TERM = 0.2
MULTIPLIER_NEGATED = 0.1
MULTIPLIER_AMBIGUOUS_ABBREVIATION = 0.5


@lru_cache(maxsize=1024)
def _term_regex(term: str) -> Pattern[str]:
    # Whole-word match on alphanumerics so "as" does not fire inside "has".
    return re.compile(
        r"(?<![a-z0-9])" + re.escape(term.lower()) + r"(?![a-z0-9])", re.IGNORECASE
    )


def find_term(text: str, term: str) -> Optional[re.Match[str]]:
    """Locate ``term`` in ``text`` as a whole word or phrase, ignoring case."""
    if not term:
        return None
    return _term_regex(term).search(text)


def contains_term(text: str, term: str) -> bool:
    return find_term(text, term) is not None


def find_non_azure_indicators(text: str) -> List[str]:
    """
    Blocklist terms present anywhere in ``text``, in blocklist order.

    Plain substring test: "AWSLambda" or "s3bucket" still count.
    """
    lowered = text.lower()
    return [term for term in NON_AZURE_INDICATORS if term in lowered]


class ContextValidator:
    """Decides whether a raw match is contextually legitimate."""

    def has_strong_context(self, text: str, service: ServiceDefinition) -> bool:
        """
        True when the text carries a vendor or IaC marker, the service's
        canonical resource type, or the service's display name.
        """
        lowered = text.lower()
        if any(marker in lowered for marker in STRONG_CONTEXT_MARKERS):
            return True
        if service.resource_type.lower() in lowered:
            return True
        return contains_term(lowered, service.display_name)

    def has_vendor_context(self, text: str, service: ServiceDefinition) -> bool:
        """True when the text names the vendor or the service's canonical resource type."""
        lowered = text.lower()
        if any(marker in lowered for marker in VENDOR_MARKERS):
            return True
        return service.resource_type.lower() in lowered

    def validate_pattern(
        self, matched: str, text: str, service: ServiceDefinition
    ) -> ContextCheck:
        """Validate a regex hit, looking for corroboration outside the hit itself."""
        if self.has_strong_context(text, service):
            return ContextCheck(True, MULTIPLIER_CONFIRMED)

        lowered_match = matched.lower()
        remainder = text.lower().replace(lowered_match, " ") if lowered_match else text.lower()
        corroborated = any(
            contains_term(remainder, keyword)
            for keyword in service.keywords
            if keyword.lower() != lowered_match
        )
        if corroborated:
            return ContextCheck(True, MULTIPLIER_CORROBORATED)

        return ContextCheck(False, MULTIPLIER_UNCORROBORATED_PATTERN)

    def validate_keyword(
        self, keyword: str, text: str, service: ServiceDefinition
    ) -> ContextCheck:
        """
        Validate a keyword hit against generic-term and negation rules.

        Generic nouns are only unlocked by the vendor name or the canonical
        resource type; "cloud" or the display name are not enough.
        """
        lowered_keyword = keyword.lower()
        if lowered_keyword in GENERIC_TERMS and not self.has_vendor_context(
            text, service
        ):
            return ContextCheck(False, MULTIPLIER_GENERIC_TERM)

        if self._is_negated(lowered_keyword, text.lower()):
            return ContextCheck(False, MULTIPLIER_NEGATED)

        return ContextCheck(True, MULTIPLIER_CONFIRMED)

    def validate_alias(
        self, alias: str, text: str, service: ServiceDefinition
    ) -> ContextCheck:
        """Abbreviations need strong context; other aliases are accepted."""
        if service.is_abbreviation(alias) and not self.has_strong_context(
            text, service
        ):
            return ContextCheck(False, MULTIPLIER_AMBIGUOUS_ABBREVIATION)
        return ContextCheck(True, MULTIPLIER_CONFIRMED)

    def _is_negated(self, keyword: str, lowered_text: str) -> bool:
        occurrence = find_term(lowered_text, keyword)
        if occurrence is None:
            return False
        start = max(0, occurrence.start() - NEGATION_WINDOW)
        end = occurrence.end() + NEGATION_WINDOW
        window = lowered_text[start:end]
        return any(contains_term(window, negation) for negation in NEGATION_TERMS)
