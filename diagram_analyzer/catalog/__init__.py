"""
Service Catalog Module

Public API:
    ServiceCatalog: Read-only registry of service definitions
    ServiceDefinition: Immutable catalog entry
    default_catalog: Catalog of the built-in Azure services
"""

from .models import (
    ConfidenceWeights,
    PropertyHints,
    ServiceDefinition,
    ServiceDependencies,
    compile_patterns,
)
from .registry import ServiceCatalog, default_catalog
from .services import AZURE_SERVICES

__all__ = [
    "AZURE_SERVICES",
    "ConfidenceWeights",
    "PropertyHints",
    "ServiceCatalog",
    "ServiceDefinition",
    "ServiceDependencies",
    "compile_patterns",
    "default_catalog",
]
