"""
Policy Engine Module

Public API:
    ManualPolicyLoader: Loads policy definitions with a TTL cache
    PolicyRuleEngine: Evaluates conditions and applies fixes
    ManualPolicy: Validated policy definition
"""

from .engine import PolicyRuleEngine
from .loader import ManualPolicyLoader, PolicyCache, check_policy, parse_policy_file
from .models import (
    AppliedFix,
    BicepModification,
    ConditionOperator,
    FixAction,
    ManualPolicy,
    ManualPolicyResult,
    PolicyCategory,
    PolicyCondition,
    PolicyFix,
    PolicySeverity,
    PolicyViolation,
)
from .property_path import add_property, get_property, remove_property, set_property

__all__ = [
    "AppliedFix",
    "BicepModification",
    "ConditionOperator",
    "FixAction",
    "ManualPolicy",
    "ManualPolicyLoader",
    "ManualPolicyResult",
    "PolicyCache",
    "PolicyCategory",
    "PolicyCondition",
    "PolicyFix",
    "PolicyRuleEngine",
    "PolicySeverity",
    "PolicyViolation",
    "add_property",
    "check_policy",
    "get_property",
    "parse_policy_file",
    "remove_property",
    "set_property",
]
