"""
Tests for the policy rule engine.

Fixtures are defined in tests/conftest.py and automatically discovered by pytest.
"""

import copy
import json
from datetime import datetime

import pytest

from diagram_analyzer.exceptions import PolicyFixError
from diagram_analyzer.policies import (
    ManualPolicyLoader,
    PolicyFix,
    PolicySeverity,
)


class TestOperators:
    """Test condition operator semantics (True means violation)."""

    def test_equals(self, engine, make_policy, web_app_resource):
        assert engine.evaluate(web_app_resource, make_policy("equals", True)) is True
        assert engine.evaluate(web_app_resource, make_policy("equals", False)) is False

    def test_not_equals(self, engine, make_policy, web_app_resource):
        assert engine.evaluate(web_app_resource, make_policy("notEquals", False)) is True
        assert engine.evaluate(web_app_resource, make_policy("notEquals", True)) is False

    def test_booleans_never_equal_numbers(self, engine, make_policy, web_app_resource):
        """Test True and 1 are different values for equality and membership."""
        web_app_resource["properties"]["httpsOnly"] = 1

        assert engine.evaluate(web_app_resource, make_policy("equals", True)) is True
        assert engine.evaluate(web_app_resource, make_policy("notEquals", True)) is False
        assert engine.evaluate(web_app_resource, make_policy("contains", [True])) is True
        assert engine.evaluate(web_app_resource, make_policy("notContains", [True])) is False

    def test_numbers_compare_across_int_and_float(self, engine, make_policy, web_app_resource):
        prop = "properties.instanceCount"

        assert engine.evaluate(web_app_resource, make_policy("equals", 2.0, prop=prop)) is False
        assert engine.evaluate(web_app_resource, make_policy("contains", [1, 2], prop=prop)) is False

    def test_contains_list_membership(self, engine, make_policy, web_app_resource, storage_resource):
        """Test a list value means the actual value must be one of its members."""
        policy = make_policy("contains", ["East US", "West Europe"], prop="location")

        assert engine.evaluate(web_app_resource, policy) is False
        assert engine.evaluate(storage_resource, policy) is True

    def test_contains_substring(self, engine, make_policy, web_app_resource):
        prop = "properties.siteConfig.minTlsVersion"

        assert engine.evaluate(web_app_resource, make_policy("contains", "1.", prop=prop)) is False
        assert engine.evaluate(web_app_resource, make_policy("contains", "1.2", prop=prop)) is True

    def test_contains_boolean_string_form(self, engine, make_policy, web_app_resource):
        policy = make_policy("contains", "false", prop="properties.httpsOnly")

        assert engine.evaluate(web_app_resource, policy) is False

    def test_not_contains(self, engine, make_policy, web_app_resource):
        prop = "properties.siteConfig.minTlsVersion"

        assert engine.evaluate(web_app_resource, make_policy("notContains", "1.0", prop=prop)) is True
        assert (
            engine.evaluate(web_app_resource, make_policy("notContains", ["1.0", "1.1"], prop=prop))
            is True
        )
        assert engine.evaluate(web_app_resource, make_policy("notContains", "1.2", prop=prop)) is False

    def test_greater_than(self, engine, make_policy, web_app_resource):
        prop = "properties.instanceCount"

        assert engine.evaluate(web_app_resource, make_policy("greaterThan", 1, prop=prop)) is False
        assert engine.evaluate(web_app_resource, make_policy("greaterThan", 2, prop=prop)) is True
        assert engine.evaluate(web_app_resource, make_policy("greaterThan", "3", prop=prop)) is True

    def test_less_than(self, engine, make_policy, web_app_resource):
        prop = "properties.instanceCount"

        assert engine.evaluate(web_app_resource, make_policy("lessThan", 5, prop=prop)) is False
        assert engine.evaluate(web_app_resource, make_policy("lessThan", 2, prop=prop)) is True

    def test_numeric_comparison_with_non_numeric_value(self, engine, make_policy, web_app_resource):
        """Test an unparseable number never compares, so reports no violation."""
        policy = make_policy("greaterThan", 1, prop="location")

        assert engine.evaluate(web_app_resource, policy) is False

    def test_exists(self, engine, make_policy, web_app_resource):
        assert engine.evaluate(web_app_resource, make_policy("exists", None, prop="tags.owner")) is True
        assert (
            engine.evaluate(web_app_resource, make_policy("exists", None, prop="properties.httpsOnly"))
            is False
        )

    def test_not_exists(self, engine, make_policy, web_app_resource):
        assert engine.evaluate(web_app_resource, make_policy("notExists", None, prop="tags.env")) is False
        assert (
            engine.evaluate(web_app_resource, make_policy("notExists", None, prop="tags.environment"))
            is True
        )

    def test_missing_path_resolves_to_none(self, engine, make_policy, web_app_resource):
        policy = make_policy("equals", None, prop="properties.network.rules")

        assert engine.evaluate(web_app_resource, policy) is False

    def test_unknown_operator_is_not_a_violation(self, engine, make_policy, web_app_resource):
        """Test an operator the engine does not know fails safe."""
        policy = make_policy("matchesRegex", ".*")

        assert engine.evaluate(web_app_resource, policy) is False


@pytest.fixture
def policy_set(make_policy):
    return [
        make_policy(
            "equals",
            True,
            bicepModification={"template": "httpsOnly: true", "parameters": []},
        ),
        make_policy(
            "equals",
            "TLS1_2",
            prop="properties.minimumTlsVersion",
            id="sec-002",
            name="Storage Minimum TLS",
            severity="critical",
            resourceTypes=["Microsoft.Storage"],
        ),
        make_policy(
            "exists",
            None,
            prop="tags.cost-center",
            id="cost-001",
            name="Cost Center Tag",
            category="cost",
            severity="medium",
            resourceTypes=["*"],
            fix={"action": "add", "property": "tags", "value": {"cost-center": "unassigned"}},
        ),
        make_policy(
            "exists",
            None,
            prop="tags.owner",
            id="disabled-001",
            resourceTypes=["*"],
            enabled=False,
        ),
    ]


class TestEvaluateResources:
    """Test evaluation of resource sets."""

    def test_violations_and_summary(self, engine, resources, policy_set):
        result = engine.evaluate_resources(resources, policy_set)

        assert result.compliant is False
        assert result.total_policies == 4
        assert result.violations_count == 3
        assert [(v.policy_id, v.resource) for v in result.violations] == [
            ("sec-001", "app-service-1"),
            ("cost-001", "app-service-1"),
            ("sec-002", "storage-account-2"),
        ]
        assert result.summary == {"critical": 1, "high": 1, "medium": 1, "low": 0}

    def test_violation_details(self, engine, resources, policy_set):
        violation = engine.evaluate_resources(resources, policy_set).violations[0]

        assert violation.resource_type == "Microsoft.Web/sites"
        assert violation.severity is PolicySeverity.HIGH
        assert violation.current_value is False
        assert violation.expected_value is True
        assert violation.fix.action == "set"

    def test_bicep_modifications_collected(self, engine, resources, policy_set):
        result = engine.evaluate_resources(resources, policy_set)

        assert [b.template for b in result.bicep_modifications] == ["httpsOnly: true"]

    def test_disabled_policy_skipped(self, engine, resources, policy_set):
        result = engine.evaluate_resources(resources, policy_set)

        assert "disabled-001" not in {v.policy_id for v in result.violations}

    def test_no_policies(self, engine, resources):
        result = engine.evaluate_resources(resources, [])

        assert result.compliant is True
        assert result.total_policies == 0
        assert result.summary == {"critical": 0, "high": 0, "medium": 0, "low": 0}

    def test_to_dict_is_json_serializable(self, engine, resources, policy_set):
        data = engine.evaluate_resources(resources, policy_set).to_dict()

        assert json.loads(json.dumps(data))["violations"][0]["severity"] == "high"


class TestFixes:
    """Test fix application."""

    def test_apply_fix_actions(self, engine, web_app_resource):
        engine.apply_fix(web_app_resource, PolicyFix(action="set", property="properties.httpsOnly", value=True))
        engine.apply_fix(web_app_resource, PolicyFix(action="add", property="tags", value={"owner": "ops"}))
        engine.apply_fix(web_app_resource, PolicyFix(action="remove", property="properties.instanceCount"))

        assert web_app_resource["properties"]["httpsOnly"] is True
        assert web_app_resource["tags"] == {"environment": "production", "owner": "ops"}
        assert "instanceCount" not in web_app_resource["properties"]

    def test_apply_fix_unknown_action(self, engine, web_app_resource):
        with pytest.raises(PolicyFixError) as exc_info:
            engine.apply_fix(web_app_resource, PolicyFix(action="rename", property="name"))

        assert exc_info.value.context["action"] == "rename"

    def test_auto_fix_resolves_violations(self, engine, resources, policy_set):
        """Test auto-fixed resources pass a second evaluation."""
        violations = engine.evaluate_resources(resources, policy_set).violations

        applied = engine.auto_fix(resources, violations)

        assert len(applied) == 3
        assert engine.evaluate_resources(resources, policy_set).compliant is True
        assert resources[0]["tags"] == {"environment": "production", "cost-center": "unassigned"}

    def test_applied_fix_record(self, engine, resources, policy_set):
        violations = engine.evaluate_resources(resources, policy_set).violations

        record = engine.auto_fix(resources, violations)[0]

        assert record.resource_name == "app-service-1"
        assert record.policy_id == "sec-001"
        assert json.loads(record.original_config)["properties"]["httpsOnly"] is False
        assert json.loads(record.new_config)["properties"]["httpsOnly"] is True
        assert datetime.fromisoformat(record.fixed_at).tzinfo is not None

    def test_auto_fix_idempotent(self, engine, resources, policy_set):
        """Test applying the same fixes twice leaves the state of one pass."""
        violations = engine.evaluate_resources(resources, policy_set).violations

        engine.auto_fix(resources, violations)
        once = copy.deepcopy(resources)
        engine.auto_fix(resources, violations)

        assert resources == once

    def test_auto_fix_skips_failures(self, engine, make_policy, web_app_resource):
        """Test a failing fix is skipped rather than raised."""
        policy = make_policy("equals", True, fix={"action": "rename", "property": "name"})
        violations = engine.evaluate_resources([web_app_resource], [policy]).violations

        assert engine.auto_fix([web_app_resource], violations) == []

    def test_auto_fix_unknown_resource(self, engine, resources, policy_set, storage_resource):
        violations = engine.evaluate_resources(resources, policy_set).violations

        applied = engine.auto_fix([storage_resource], violations)

        assert [a.policy_id for a in applied] == ["sec-002"]


class TestEvaluateManualPolicies:
    """Test evaluation against loaded policies."""

    @pytest.mark.asyncio
    async def test_with_loader(self, engine, resources, policies_dir):
        loader = ManualPolicyLoader(policies_dir)

        result = await engine.evaluate_manual_policies(resources, loader)

        assert result.total_policies == 3
        assert {v.policy_id for v in result.violations} == {"sec-001", "sec-002", "cost-001"}
