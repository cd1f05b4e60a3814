"""
Manual policy models.

Policy definitions are validated with pydantic when loaded; a definition that
fails validation is dropped by the loader. Evaluation outputs are plain
dataclasses produced per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PolicyCategory(str, Enum):
    """Policy categories; each maps to a directory under the policies root."""

    SECURITY = "security"
    COST = "cost"
    PERFORMANCE = "performance"
    COMPLIANCE = "compliance"
    CUSTOM = "custom"


class PolicySeverity(str, Enum):
    """Violation severity, most severe first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    EXISTS = "exists"
    NOT_EXISTS = "notExists"


class FixAction(str, Enum):
    SET = "set"
    ADD = "add"
    REMOVE = "remove"


def _require_path(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Property path must be a non-empty dot path")
    if any(not part for part in value.split(".")):
        raise ValueError(f"Property path '{value}' has an empty segment")
    return value


class PolicyCondition(BaseModel):
    """
    Condition checked against a resource.

    ``operator`` is kept as a plain string: an operator the engine does not
    know evaluates to "no violation" rather than rejecting the policy.
    """

    property: str
    operator: str = Field(min_length=1)
    value: Any = None

    model_config = ConfigDict(frozen=True)

    @field_validator("property")
    @classmethod
    def validate_property(cls, v: str) -> str:
        return _require_path(v)


class PolicyFix(BaseModel):
    """Correction applied to a violating resource."""

    action: str = Field(min_length=1)
    property: str
    value: Any = None

    model_config = ConfigDict(frozen=True)

    @field_validator("property")
    @classmethod
    def validate_property(cls, v: str) -> str:
        return _require_path(v)


class BicepModification(BaseModel):
    """Template snippet describing the same fix for Bicep output."""

    template: str = ""
    parameters: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ManualPolicy(BaseModel):
    """A declarative policy authored as JSON or YAML."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    category: PolicyCategory
    description: str = ""
    severity: PolicySeverity
    resource_types: List[str] = Field(alias="resourceTypes", min_length=1)
    conditions: PolicyCondition
    fix: PolicyFix
    bicep_modification: Optional[BicepModification] = Field(
        default=None, alias="bicepModification"
    )
    enabled: bool = True
    tags: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("resource_types")
    @classmethod
    def validate_resource_types(cls, v: List[str]) -> List[str]:
        """Reject blank resource type entries."""
        if any(not isinstance(t, str) or not t.strip() for t in v):
            raise ValueError("resourceTypes entries must be non-empty strings")
        return v

    def applies_to(self, resource_type: str) -> bool:
        """Wildcard, exact or prefix match on the resource type."""
        return any(
            t == "*" or t == resource_type or resource_type.startswith(t)
            for t in self.resource_types
        )


@dataclass
class PolicyViolation:
    policy_id: str
    policy_name: str
    resource: str
    resource_type: str
    severity: PolicySeverity
    description: str
    current_value: Any
    expected_value: Any
    fix: PolicyFix
    bicep_modification: Optional[BicepModification] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "policy_id": self.policy_id,
            "policy_name": self.policy_name,
            "resource": self.resource,
            "resource_type": self.resource_type,
            "severity": self.severity.value,
            "description": self.description,
            "current_value": self.current_value,
            "expected_value": self.expected_value,
            "fix": self.fix.model_dump(),
            "bicep_modification": self.bicep_modification.model_dump()
            if self.bicep_modification
            else None,
        }


@dataclass
class AppliedFix:
    """Record of a fix applied to a resource."""

    resource_name: str
    resource_type: str
    policy_id: str
    policy_name: str
    severity: PolicySeverity
    description: str
    fix: PolicyFix
    original_config: str
    new_config: str
    fixed_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource_name": self.resource_name,
            "resource_type": self.resource_type,
            "policy_id": self.policy_id,
            "policy_name": self.policy_name,
            "severity": self.severity.value,
            "description": self.description,
            "fix": self.fix.model_dump(),
            "original_config": self.original_config,
            "new_config": self.new_config,
            "fixed_at": self.fixed_at,
        }


def empty_severity_summary() -> Dict[str, int]:
    return {severity.value: 0 for severity in PolicySeverity}


@dataclass
class ManualPolicyResult:
    """Outcome of evaluating resources against the manual policy set."""

    compliant: bool = True
    total_policies: int = 0
    violations_count: int = 0
    violations: List[PolicyViolation] = field(default_factory=list)
    applied_fixes: List[AppliedFix] = field(default_factory=list)
    bicep_modifications: List[BicepModification] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=empty_severity_summary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compliant": self.compliant,
            "total_policies": self.total_policies,
            "violations_count": self.violations_count,
            "violations": [v.to_dict() for v in self.violations],
            "applied_fixes": [f.to_dict() for f in self.applied_fixes],
            "bicep_modifications": [b.model_dump() for b in self.bicep_modifications],
            "summary": dict(self.summary),
        }
