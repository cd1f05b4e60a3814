"""Manual policy compliance command.

This module provides the 'check-policies' command, which evaluates resource
definitions against the manual policy set and optionally applies fixes.
"""

import json
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.table import Table

from diagram_analyzer.commands.base import (
    async_command,
    load_command_config,
    load_json_file,
)
from diagram_analyzer.policies import (
    ManualPolicyLoader,
    PolicyCache,
    PolicyRuleEngine,
)


def extract_resources(raw: Any) -> Optional[List[Dict[str, Any]]]:
    """Accept a resource list, ``{"resources": [...]}`` or detect --json output."""
    if isinstance(raw, dict):
        if "resources" in raw:
            raw = raw["resources"]
        elif isinstance(raw.get("analysis"), dict):
            raw = raw["analysis"].get("resources")
    if not isinstance(raw, list):
        return None
    return [r for r in raw if isinstance(r, dict)]


@click.command("check-policies")
@click.argument("resources_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--policies-dir",
    type=click.Path(file_okay=False),
    help="Policy directory (default: DIAGRAM_ANALYZER_POLICIES_DIR or ./policies)",
)
@click.option("--fix", "apply_fixes", is_flag=True, help="Apply policy fixes")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
@async_command
async def check_policies(
    ctx: click.Context,
    resources_file: str,
    policies_dir: Optional[str],
    apply_fixes: bool,
    as_json: bool,
) -> None:
    """Check resources against manual policies.

    RESOURCES_FILE holds a JSON list of resources shaped
    {type, name, properties, tags}, or the JSON output of 'detect'.

    Examples:
        diagram-analyzer check-policies resources.json
        diagram-analyzer check-policies resources.json --fix --policies-dir ./policies
    """
    console = Console()
    config = load_command_config(ctx, policies_dir=policies_dir)

    resources = extract_resources(load_json_file(resources_file, console))
    if resources is None:
        console.print("[red]❌ No resource list found in input[/red]")
        ctx.exit(1)
        return

    loader = ManualPolicyLoader(
        config.policies.policies_dir,
        cache=PolicyCache(ttl_seconds=config.policies.cache_ttl_seconds),
    )
    engine = PolicyRuleEngine()
    result = await engine.evaluate_manual_policies(resources, loader)

    if apply_fixes and result.violations:
        result.applied_fixes = engine.auto_fix(resources, result.violations)

    if as_json:
        payload = result.to_dict()
        if apply_fixes:
            payload["fixed_resources"] = resources
        click.echo(json.dumps(payload, indent=2, default=str))
        return

    if result.compliant:
        console.print(
            f"[bold green]✅ Compliant with {result.total_policies} policies[/bold green]"
        )
        return

    table = Table(title="Policy Violations", show_header=True)
    table.add_column("Policy", style="cyan")
    table.add_column("Severity", style="red")
    table.add_column("Resource", style="white")
    table.add_column("Current", style="yellow")
    table.add_column("Expected", style="green")
    for violation in result.violations:
        table.add_row(
            violation.policy_name,
            violation.severity.value.upper(),
            f"{violation.resource} ({violation.resource_type})",
            json.dumps(violation.current_value, default=str),
            json.dumps(violation.expected_value, default=str),
        )
    console.print(table)

    summary = ", ".join(f"{k}: {v}" for k, v in result.summary.items())
    console.print(
        f"\n[bold red]❌ {result.violations_count} violation(s)[/bold red] ({summary})"
    )

    if apply_fixes:
        console.print(f"\n[bold]🔧 Applied {len(result.applied_fixes)} fix(es)[/bold]")
        for fix in result.applied_fixes:
            console.print(
                f"  • {fix.resource_name}: {fix.fix.action} {fix.fix.property}"
            )


__all__ = ["check_policies", "extract_resources"]
