"""Service detection command.

This module provides the 'detect' command, which runs the multi-strategy
aggregator over a processed file bundle (or the primary detector over
literal text) and reports the detected Azure services.
"""

import json
from typing import Any, Dict, List, Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from diagram_analyzer.commands.base import load_command_config, load_json_file
from diagram_analyzer.detection import (
    DetectionResult,
    MultiStrategyAggregator,
    ProcessedFileBundle,
    ServiceDetector,
    build_analysis,
    calculate_accuracy_metrics,
    rejection_reason,
    should_trust_detection,
)


@click.command("detect")
@click.argument(
    "bundle_file", required=False, type=click.Path(exists=True, dir_okay=False)
)
@click.option("--text", "text", help="Detect services in literal text instead")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def detect(
    ctx: click.Context,
    bundle_file: Optional[str],
    text: Optional[str],
    as_json: bool,
) -> None:
    """Detect Azure services in a processed diagram bundle.

    BUNDLE_FILE is the JSON output of a diagram extractor: format, metadata
    and extracted data (Draw.io elements, Visio shapes, SVG text nodes or
    PDF text).

    Examples:
        # Analyze an extracted Draw.io diagram
        diagram-analyzer detect bundle.json

        # Run the primary detector on a sentence
        diagram-analyzer detect --text "Azure App Service with Key Vault"
    """
    if (bundle_file is None) == (text is None):
        raise click.UsageError("Provide either BUNDLE_FILE or --text")

    console = Console()
    config = load_command_config(ctx)
    detector = ServiceDetector()

    if text is not None:
        results = detector.detect(text)
        validation = detector.validate_content(text)
        source = "text"
    else:
        raw = load_json_file(bundle_file, console)  # type: ignore[arg-type]
        if not isinstance(raw, dict):
            console.print("[red]❌ Bundle file must contain a JSON object[/red]")
            ctx.exit(1)
        bundle = ProcessedFileBundle.from_dict(raw)
        results = MultiStrategyAggregator(detector=detector).analyze(bundle)
        validation = detector.validate_content(
            f"{bundle.extract_text()} {bundle.original_name}"
        )
        source = bundle.original_name or str(bundle_file)

    metrics = calculate_accuracy_metrics(results)
    trusted = should_trust_detection(results, metrics, config.detection.accuracy_gate)
    rejection = rejection_reason(validation)

    if as_json:
        payload: Dict[str, Any] = {
            "source": source,
            "services": [r.to_dict() for r in results],
            "metrics": metrics.to_dict(),
            "trusted": trusted,
            "rejection": rejection,
            "analysis": build_analysis(results).to_dict(),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console.print(
        Panel.fit(
            "[bold blue]🔍 Azure Service Detection[/bold blue]\n" f"Source: {source}",
            border_style="blue",
        )
    )
    if not results:
        console.print("\n[yellow]No Azure services detected.[/yellow]")
    else:
        console.print(_results_table(results))

    stats_table = Table(title="Accuracy Metrics", show_header=True)
    stats_table.add_column("Metric", style="cyan")
    stats_table.add_column("Value", style="magenta")
    stats_table.add_row("Overall Confidence", f"{metrics.overall_confidence:.2f}")
    stats_table.add_row("High Confidence", str(metrics.high_confidence_count))
    stats_table.add_row("Medium Confidence", str(metrics.medium_confidence_count))
    stats_table.add_row("Low Confidence", str(metrics.low_confidence_count))
    stats_table.add_row("Accuracy Score", f"{metrics.accuracy_score:.2f}")
    console.print(stats_table)

    if rejection:
        console.print(f"\n[yellow]⚠️  {rejection}[/yellow]")
    elif trusted:
        console.print("\n[bold green]✅ Detection results are trusted[/bold green]")
    else:
        console.print(
            f"\n[yellow]⚠️  Accuracy score below {config.detection.accuracy_gate}; "
            "review results manually[/yellow]"
        )


def _results_table(results: List[DetectionResult]) -> Table:
    table = Table(title="Detected Services", show_header=True)
    table.add_column("Service", style="cyan")
    table.add_column("Resource Type", style="white")
    table.add_column("Confidence", style="green", justify="right")
    table.add_column("Match", style="yellow")
    table.add_column("Evidence", style="magenta")
    for result in results:
        table.add_row(
            result.service.display_name,
            result.service.resource_type,
            f"{result.confidence:.2f}",
            result.match_type.value,
            "; ".join(e.details for e in result.evidence) or (result.matched_text or ""),
        )
    return table


__all__ = ["detect"]
