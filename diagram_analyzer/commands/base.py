"""Base command infrastructure and shared utilities.

This module provides common utilities used across command modules:
- async_command for running coroutine commands under click
- Configuration and logging setup from the click context
- JSON input loading with consistent error reporting
"""

import asyncio
import functools
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Coroutine, Optional

import click
from rich.console import Console

from diagram_analyzer.config_manager import (
    DiagramAnalyzerConfig,
    create_config_from_env,
    setup_logging,
)
from diagram_analyzer.exceptions import ConfigurationError
from diagram_analyzer.logging_config import configure_logging


def async_command(f: Callable[..., Coroutine[Any, Any, Any]]) -> Callable[..., Any]:
    """Decorator to make Click commands async-compatible.

    Handles both running inside and outside of existing event loops.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            # Already in an event loop (e.g., pytest-asyncio, Jupyter)
            import nest_asyncio  # type: ignore[import-untyped]

            nest_asyncio.apply()
            task = loop.create_task(f(*args, **kwargs))
            return loop.run_until_complete(task)
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def load_command_config(
    ctx: click.Context, policies_dir: Optional[str] = None
) -> DiagramAnalyzerConfig:
    """Build configuration for a command and set up logging from it."""
    log_level = (ctx.obj or {}).get("log_level", "INFO")
    try:
        config = create_config_from_env(policies_dir=policies_dir, log_level=log_level)
    except ConfigurationError as e:
        click.echo(f"❌ Invalid configuration: {e}", err=True)
        sys.exit(1)

    configure_logging(level=config.logging.get_log_level(), json_output=False)
    setup_logging(config.logging)
    return config


def load_json_file(path: str, console: Console) -> Any:
    """Read a JSON input file, exiting with a message when it is unusable."""
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logging.getLogger(__name__).debug(f"Failed to read {path}: {e}")
        console.print(str(f"[red]❌ Could not read JSON from {path}: {e}[/red]"))
        sys.exit(1)
