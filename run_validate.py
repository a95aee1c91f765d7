#!/usr/bin/env python3
"""
run_validate.py - CLI entrypoint for registry validation.

Usage:
    python run_validate.py --root path/to/registry
    python run_validate.py --root . --log-format json --report report.json

ENV VARIABLES (also read from .env):
    REGISTRY_ROOT  - Registry root (same as --root)
    LOG_LEVEL      - DEBUG, INFO, WARNING, ERROR
    LOG_FORMAT     - text or json

EXIT CODES:
    0 = PASS (possibly with warnings)
    1 = FAIL (validation errors)
    2 = FATAL (schema load failure, limit exceeded, unexpected error)
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from config import load_validation_config
from core.constants import ExitCode, Verdict
from core.exceptions import FatalError
from core.logging import get_logger, set_global_context, setup_logging
from registry.orchestrator import validate_registry

load_dotenv()

__version__ = "1.0.0"

logger = get_logger("registry.cli")


@click.command()
@click.option(
    "--root",
    "-r",
    default=".",
    envvar="REGISTRY_ROOT",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Registry root containing tokens/ and contracts/",
)
@click.option(
    "--schemas-dir",
    "-s",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory with token.schema.json and contract.schema.json (default: bundled)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Validation limits YAML (default: config/validation.yaml)",
)
@click.option(
    "--log-level",
    "-l",
    default="INFO",
    envvar="LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level",
)
@click.option(
    "--log-format",
    "-f",
    default="text",
    envvar="LOG_FORMAT",
    type=click.Choice(["text", "json"], case_sensitive=False),
    help="Human-readable text or one JSON record per line",
)
@click.option(
    "--report",
    "-o",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the JSON summary to this file",
)
def main(
    root: Path,
    schemas_dir: Optional[Path],
    config_path: Optional[Path],
    log_level: str,
    log_format: str,
    report: Optional[Path],
) -> None:
    """
    Validate a token and contract registry.

    Read-only: never modifies the registry and never fetches URLs.
    """
    setup_logging(level=log_level, json_output=log_format.lower() == "json")
    set_global_context(service="registry-gate", version=__version__)

    try:
        config = load_validation_config(config_path)
        summary = validate_registry(root, schema_dir=schemas_dir, config=config)
    except FatalError as e:
        logger.error(
            f"FATAL ERROR: {e.message}",
            extra={"context": {"code": e.code.value}},
        )
        sys.exit(ExitCode.FATAL_ERROR.value)
    except Exception as e:
        logger.error(
            f"FATAL ERROR: {e}",
            extra={"context": {"error": type(e).__name__}},
            exc_info=True,
        )
        sys.exit(ExitCode.FATAL_ERROR.value)

    if report is not None:
        report.write_text(json.dumps(summary.to_dict(), indent=2), encoding="utf-8")

    counts = summary.counts()
    click.echo("\n" + "=" * 60)
    click.echo("REPOSITORY STATISTICS")
    click.echo("=" * 60)
    click.echo(f"Total tokens: {counts['tokens']}")
    click.echo(f"Total projects: {counts['projects']}")
    click.echo(f"Total contracts: {counts['contracts']}")
    click.echo(f"Total unique addresses: {counts['unique_addresses']}")
    click.echo(f"Errors: {counts['errors']}")
    click.echo(f"Warnings: {counts['warnings']}")
    click.echo("=" * 60)

    if summary.verdict == Verdict.FAILED:
        click.echo(f"Validation failed with {summary.error_count} error(s)")
    elif summary.verdict == Verdict.PASSED_WITH_WARNINGS:
        click.echo(f"Validation passed with {summary.warning_count} warning(s)")
    else:
        click.echo("All validations passed!")

    sys.exit(summary.exit_code.value)


if __name__ == "__main__":
    main()
