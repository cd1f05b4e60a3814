"""
Policy rule engine.

Evaluates manual policies against resource property bags and applies their
fixes. Data-shape problems never raise out of evaluation: a missing property
resolves to None and an unknown operator reports no violation.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Sequence

import structlog

from ..exceptions import PolicyFixError
from .loader import ManualPolicyLoader
from .models import (
    AppliedFix,
    ConditionOperator,
    FixAction,
    ManualPolicy,
    ManualPolicyResult,
    PolicyFix,
    PolicyViolation,
    empty_severity_summary,
)
from .property_path import add_property, get_property, remove_property, set_property

logger = structlog.get_logger(__name__)


def _to_number(value: Any) -> float:
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            return float(stripped)
        except ValueError:
            return math.nan
    return math.nan


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _same_value(left: Any, right: Any) -> bool:
    """Equality that keeps booleans apart from numbers, so True does not equal 1."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _same_value(left[key], right[key]) for key in left
        )
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _same_value(a, b) for a, b in zip(left, right)
        )
    return left == right


def _contains(actual: Any, expected: Any) -> bool:
    if isinstance(expected, list):
        return any(_same_value(actual, item) for item in expected)
    return _to_text(expected) in _to_text(actual)


def _serialize(resource: Any) -> str:
    return json.dumps(resource, default=str)


class PolicyRuleEngine:
    """Evaluates policy conditions and applies policy fixes."""

    def evaluate(self, resource: Mapping[str, Any], policy: ManualPolicy) -> bool:
        """Return True when ``resource`` violates ``policy``."""
        condition = policy.conditions
        actual = get_property(resource, condition.property)
        expected = condition.value

        try:
            operator = ConditionOperator(condition.operator)
        except ValueError:
            logger.debug(
                "Unknown policy operator, no violation reported",
                policy_id=policy.id,
                operator=condition.operator,
            )
            return False

        if operator is ConditionOperator.EQUALS:
            return not _same_value(actual, expected)
        if operator is ConditionOperator.NOT_EQUALS:
            return _same_value(actual, expected)
        if operator is ConditionOperator.CONTAINS:
            return not _contains(actual, expected)
        if operator is ConditionOperator.NOT_CONTAINS:
            return _contains(actual, expected)
        if operator is ConditionOperator.GREATER_THAN:
            return _to_number(actual) <= _to_number(expected)
        if operator is ConditionOperator.LESS_THAN:
            return _to_number(actual) >= _to_number(expected)
        if operator is ConditionOperator.EXISTS:
            return actual is None
        if operator is ConditionOperator.NOT_EXISTS:
            return actual is not None
        return False

    def evaluate_resources(
        self,
        resources: Sequence[Mapping[str, Any]],
        policies: Sequence[ManualPolicy],
    ) -> ManualPolicyResult:
        """Evaluate every resource against the enabled policies that apply to it."""
        if not policies:
            logger.info("No manual policies found")
            return ManualPolicyResult()

        violations: List[PolicyViolation] = []
        for resource in resources:
            resource_type = str(resource.get("type", ""))
            for policy in policies:
                if not policy.enabled or not policy.applies_to(resource_type):
                    continue
                if not self.evaluate(resource, policy):
                    continue
                violations.append(
                    PolicyViolation(
                        policy_id=policy.id,
                        policy_name=policy.name,
                        resource=str(resource.get("name", "")),
                        resource_type=resource_type,
                        severity=policy.severity,
                        description=policy.description,
                        current_value=get_property(resource, policy.conditions.property),
                        expected_value=policy.conditions.value,
                        fix=policy.fix,
                        bicep_modification=policy.bicep_modification,
                    )
                )

        summary = empty_severity_summary()
        for violation in violations:
            summary[violation.severity.value] += 1

        result = ManualPolicyResult(
            compliant=not violations,
            total_policies=len(policies),
            violations_count=len(violations),
            violations=violations,
            bicep_modifications=[
                v.bicep_modification for v in violations if v.bicep_modification
            ],
            summary=summary,
        )
        logger.info(
            "Manual policy evaluation completed",
            total_policies=result.total_policies,
            violations=result.violations_count,
            compliant=result.compliant,
            summary=summary,
        )
        return result

    async def evaluate_manual_policies(
        self, resources: Sequence[Mapping[str, Any]], loader: ManualPolicyLoader
    ) -> ManualPolicyResult:
        logger.info("Starting manual policy evaluation", resource_count=len(resources))
        policies = await loader.load_policies()
        return self.evaluate_resources(resources, policies)

    def apply_fix(self, resource: MutableMapping[str, Any], fix: PolicyFix) -> None:
        """
        Apply ``fix`` to ``resource`` in place.

        Raises:
            PolicyFixError: If the fix action is not supported
        """
        try:
            action = FixAction(fix.action)
        except ValueError as e:
            raise PolicyFixError(
                f"Unsupported fix action '{fix.action}'",
                action=fix.action,
                property_path=fix.property,
                cause=e,
            ) from e

        if action is FixAction.SET:
            set_property(resource, fix.property, fix.value)
        elif action is FixAction.ADD:
            add_property(resource, fix.property, fix.value)
        else:
            remove_property(resource, fix.property)

    def auto_fix(
        self,
        resources: Iterable[MutableMapping[str, Any]],
        violations: Iterable[PolicyViolation],
    ) -> List[AppliedFix]:
        """
        Apply the fix of each violation to the resource it names.

        Resources are modified in place. A fix that cannot be applied is
        logged and skipped.
        """
        by_name: Dict[str, MutableMapping[str, Any]] = {}
        for resource in resources:
            by_name.setdefault(str(resource.get("name", "")), resource)

        applied: List[AppliedFix] = []
        for violation in violations:
            resource = by_name.get(violation.resource)
            if resource is None:
                continue

            original_config = _serialize(resource)
            try:
                self.apply_fix(resource, violation.fix)
            except PolicyFixError as e:
                logger.error(
                    "Failed to apply manual policy fix",
                    policy_id=violation.policy_id,
                    resource=violation.resource,
                    error=str(e),
                )
                continue

            applied.append(
                AppliedFix(
                    resource_name=violation.resource,
                    resource_type=violation.resource_type,
                    policy_id=violation.policy_id,
                    policy_name=violation.policy_name,
                    severity=violation.severity,
                    description=violation.description,
                    fix=violation.fix,
                    original_config=original_config,
                    new_config=_serialize(resource),
                    fixed_at=datetime.now(timezone.utc).isoformat(),
                )
            )

        logger.info("Applied manual policy fixes", fixes=len(applied))
        return applied
