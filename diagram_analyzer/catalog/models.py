"""
Service catalog models.

A ServiceDefinition describes one Azure managed service and every name
variant the detector may encounter for it. Definitions are frozen: the
catalog is built once and shared read-only by every detection request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Pattern, Tuple


@dataclass(frozen=True)
class ConfidenceWeights:
    """Base confidence awarded per match tier."""

    exact: float = 1.0
    keyword: float = 0.95
    pattern: float = 0.9

    def __post_init__(self) -> None:
        for name in ("exact", "keyword", "pattern"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"Confidence weight '{name}' must be in (0, 1]")


@dataclass(frozen=True)
class ServiceDependencies:
    """Service ids this service is typically deployed with."""

    commonly_used_with: Tuple[str, ...] = ()
    required_with: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PropertyHints:
    """Informational tier/sku/pricing hints used when synthesizing resources."""

    tier: Tuple[str, ...] = ()
    sku: Tuple[str, ...] = ()
    default_location: Optional[str] = None
    pricing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ServiceDefinition:
    """
    Immutable catalog entry for one Azure service.

    Name lists are matched case-insensitively and iterated in declaration
    order; ``text_patterns`` order is match precedence.
    """

    id: str
    display_name: str
    category: str
    resource_type: str
    alternative_resource_types: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()
    common_names: Tuple[str, ...] = ()
    abbreviations: Tuple[str, ...] = ()
    icon_patterns: Tuple[str, ...] = ()
    text_patterns: Tuple[Pattern[str], ...] = ()
    properties: PropertyHints = field(default_factory=PropertyHints)
    dependencies: ServiceDependencies = field(default_factory=ServiceDependencies)
    confidence: ConfidenceWeights = field(default_factory=ConfidenceWeights)

    @property
    def all_resource_types(self) -> Tuple[str, ...]:
        """Canonical resource type followed by the alternates."""
        return (self.resource_type,) + tuple(self.alternative_resource_types)

    @property
    def alias_candidates(self) -> Tuple[str, ...]:
        """Aliases, common names and abbreviations in matching order."""
        return (
            tuple(self.aliases) + tuple(self.common_names) + tuple(self.abbreviations)
        )

    def is_abbreviation(self, term: str) -> bool:
        lowered = term.lower()
        return any(abbr.lower() == lowered for abbr in self.abbreviations)


def compile_patterns(*patterns: str) -> Tuple[Pattern[str], ...]:
    """Compile case-insensitive text patterns, preserving order."""
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)
