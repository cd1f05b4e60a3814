"""Command line entry point for the Azure diagram analyzer."""

import click

from diagram_analyzer.commands import check_policies, detect


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    help="Logging level (DEBUG, INFO, WARNING, ERROR)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Azure Diagram Analyzer - detect Azure services in architecture diagrams."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper()


cli.add_command(detect)
cli.add_command(check_policies)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
