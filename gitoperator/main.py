"""
Git operator hook — CLI entrypoint.

Invoked by the host operator:

    gitoperator-hook --config     print the watch subscription (JSON) and exit
    gitoperator-hook              process the batch at $BINDING_CONTEXT_PATH

Usage:
    python -m gitoperator.main --help
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click

from gitoperator import __version__
from gitoperator.core.observability.logging_config import resolve_level, setup_logging

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="gitoperator-hook")
@click.option("--config", "print_config", is_flag=True, help="Print the hook subscription and exit.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="YAML settings file (default: $GITOP_CONFIG_FILE).",
)
def cli(
    print_config: bool,
    verbose: bool,
    quiet: bool,
    debug: bool,
    settings_path: str | None,
) -> None:
    """Reconcile GitContent resources into GitHub pull requests."""
    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug, verbose=verbose, quiet=quiet,
            env_level=os.environ.get("GITOP_LOG_LEVEL"),
        ),
        log_file=os.environ.get("GITOP_LOG_FILE"),
        log_file_level=os.environ.get("GITOP_LOG_FILE_LEVEL"),
    )

    from gitoperator.core.config.loader import ConfigError, load_config
    from gitoperator.core.config.subscription import hook_config
    from gitoperator.core.use_cases.hook import run_hook

    try:
        config = load_config(
            os.environ,
            config_file=Path(settings_path) if settings_path else None,
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if print_config:
        click.echo(json.dumps(hook_config(), indent=2))
        return

    try:
        result = run_hook(config)
    except Exception:
        logger.exception("Hook run failed")
        sys.exit(1)

    logger.info(
        "Processed %d events (%d reconciled, %d ignored)",
        result.events, result.reconciled, result.ignored,
    )


if __name__ == "__main__":
    cli()
