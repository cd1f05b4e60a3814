"""
Service catalog registry.

The catalog is constructed explicitly and handed to the detector, the
aggregator and the analysis builder; nothing reaches for a module-level
singleton. Lookups never raise for a missing id or category.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from ..exceptions import DuplicateServiceError
from .models import ServiceDefinition
from .services import AZURE_SERVICES


class ServiceCatalog:
    """Read-only registry of service definitions, in declaration order."""

    def __init__(self, services: Iterable[ServiceDefinition]):
        self._services: List[ServiceDefinition] = []
        self._by_id: Dict[str, ServiceDefinition] = {}
        for service in services:
            if service.id in self._by_id:
                raise DuplicateServiceError(
                    f"Service id '{service.id}' is defined more than once",
                    service_id=service.id,
                )
            self._by_id[service.id] = service
            self._services.append(service)

    def get_all(self) -> List[ServiceDefinition]:
        return list(self._services)

    def get_by_id(self, service_id: str) -> Optional[ServiceDefinition]:
        return self._by_id.get(service_id)

    def get_by_category(self, category: str) -> List[ServiceDefinition]:
        return [s for s in self._services if s.category == category]

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        seen: List[str] = []
        for service in self._services:
            if service.category not in seen:
                seen.append(service.category)
        return seen

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[ServiceDefinition]:
        return iter(self._services)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._by_id


def default_catalog() -> ServiceCatalog:
    """Build a catalog holding the built-in Azure service definitions."""
    return ServiceCatalog(AZURE_SERVICES)
