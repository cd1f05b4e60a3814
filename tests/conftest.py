import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from diagram_analyzer.catalog import ServiceCatalog, default_catalog
from diagram_analyzer.detection import (
    ContextValidator,
    MultiStrategyAggregator,
    ProcessedFileBundle,
    ServiceDetector,
)
from diagram_analyzer.policies import ManualPolicy, PolicyRuleEngine

# ============================================================================
# Detection Fixtures
# ============================================================================


@pytest.fixture
def catalog() -> ServiceCatalog:
    """Provide the built-in service catalog."""
    return default_catalog()


@pytest.fixture
def validator() -> ContextValidator:
    return ContextValidator()


@pytest.fixture
def detector(catalog: ServiceCatalog) -> ServiceDetector:
    """Provide a detector over the built-in catalog."""
    return ServiceDetector(catalog)


@pytest.fixture
def aggregator(detector: ServiceDetector) -> MultiStrategyAggregator:
    """Provide an aggregator with the default architectural patterns."""
    return MultiStrategyAggregator(detector=detector)


@pytest.fixture
def pdf_bundle() -> ProcessedFileBundle:
    """Provide a PDF bundle describing a secure web application."""
    return ProcessedFileBundle.from_dict(
        {
            "format": "pdf",
            "metadata": {"originalName": "diagram.pdf", "size": 2048, "pages": 1},
            "extractedData": {
                "text": "Azure App Service with Key Vault secrets and Application Insights"
            },
        }
    )


@pytest.fixture
def drawio_bundle() -> ProcessedFileBundle:
    """Provide a Draw.io bundle with positioned elements."""
    return ProcessedFileBundle.from_dict(
        {
            "format": "drawio",
            "metadata": {"originalName": "architecture.drawio"},
            "extractedData": {
                "elements": [
                    {
                        "id": "2",
                        "value": "Azure SQL Database",
                        "geometry": {"x": "40", "y": "120", "width": "80", "height": "60"},
                    },
                    {
                        "id": "3",
                        "label": "Azure Kubernetes Service",
                        "geometry": {"x": 200, "y": 120, "width": 80, "height": 60},
                    },
                    {"id": "4", "value": ""},
                ]
            },
        }
    )


# ============================================================================
# Policy Fixtures
# ============================================================================


@pytest.fixture
def engine() -> PolicyRuleEngine:
    return PolicyRuleEngine()


@pytest.fixture
def web_app_resource() -> Dict[str, Any]:
    """Provide a web app resource missing several hardening settings."""
    return {
        "type": "Microsoft.Web/sites",
        "name": "app-service-1",
        "location": "East US",
        "properties": {
            "httpsOnly": False,
            "siteConfig": {"minTlsVersion": "1.0", "alwaysOn": True},
            "instanceCount": 2,
        },
        "tags": {"environment": "production"},
    }


@pytest.fixture
def storage_resource() -> Dict[str, Any]:
    return {
        "type": "Microsoft.Storage/storageAccounts",
        "name": "storage-account-2",
        "location": "North Europe",
        "properties": {"minimumTlsVersion": "TLS1_0"},
        "tags": {"environment": "production", "cost-center": "1234"},
    }


@pytest.fixture
def make_policy() -> Callable[..., ManualPolicy]:
    """Factory for policies with sensible defaults."""

    def _make(
        operator: str = "equals",
        value: Any = True,
        prop: str = "properties.httpsOnly",
        **overrides: Any,
    ) -> ManualPolicy:
        data: Dict[str, Any] = {
            "id": "sec-001",
            "name": "App Service HTTPS Only",
            "category": "security",
            "description": "Web apps must reject plain HTTP traffic",
            "severity": "high",
            "resourceTypes": ["Microsoft.Web/sites"],
            "conditions": {"property": prop, "operator": operator, "value": value},
            "fix": {"action": "set", "property": prop, "value": value},
            "enabled": True,
        }
        data.update(overrides)
        return ManualPolicy.model_validate(data)

    return _make


@pytest.fixture
def policies_dir(tmp_path: Path) -> Path:
    """Provide a policy tree with valid and invalid definitions."""
    security = tmp_path / "security"
    cost = tmp_path / "cost"
    security.mkdir()
    cost.mkdir()

    (security / "https.json").write_text(
        json.dumps(
            {
                "id": "sec-001",
                "name": "App Service HTTPS Only",
                "category": "cost",
                "description": "Web apps must reject plain HTTP traffic",
                "severity": "high",
                "resourceTypes": ["Microsoft.Web/sites"],
                "conditions": {
                    "property": "properties.httpsOnly",
                    "operator": "equals",
                    "value": True,
                },
                "fix": {"action": "set", "property": "properties.httpsOnly", "value": True},
                "enabled": True,
            }
        )
    )
    (security / "tls.yaml").write_text(
        "id: sec-002\n"
        "name: Storage Minimum TLS\n"
        "description: Storage must require TLS 1.2\n"
        "severity: critical\n"
        "resourceTypes:\n"
        "  - Microsoft.Storage\n"
        "conditions:\n"
        "  property: properties.minimumTlsVersion\n"
        "  operator: equals\n"
        "  value: TLS1_2\n"
        "fix:\n"
        "  action: set\n"
        "  property: properties.minimumTlsVersion\n"
        "  value: TLS1_2\n"
    )
    (security / "bad-severity.json").write_text(
        json.dumps(
            {
                "id": "sec-bad",
                "name": "Broken",
                "severity": "urgent",
                "resourceTypes": ["*"],
                "conditions": {"property": "location", "operator": "exists"},
                "fix": {"action": "set", "property": "location", "value": "East US"},
            }
        )
    )
    (security / "not-json.json").write_text("{ this is not json")
    (security / "notes.txt").write_text("ignored")
    (cost / "tags.json").write_text(
        json.dumps(
            {
                "id": "cost-001",
                "name": "Cost Center Tag",
                "description": "Resources need a cost-center tag",
                "severity": "medium",
                "resourceTypes": ["*"],
                "conditions": {"property": "tags.cost-center", "operator": "exists"},
                "fix": {
                    "action": "add",
                    "property": "tags",
                    "value": {"cost-center": "unassigned"},
                },
                "enabled": True,
            }
        )
    )
    (cost / "missing-fix.json").write_text(
        json.dumps(
            {
                "id": "cost-bad",
                "name": "No Fix",
                "severity": "low",
                "resourceTypes": ["*"],
                "conditions": {"property": "location", "operator": "exists"},
            }
        )
    )
    return tmp_path


class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resources(web_app_resource, storage_resource) -> List[Dict[str, Any]]:
    return [web_app_resource, storage_resource]
