"""Command line interface of apimeta::

    apimeta render api.yml --version 3.1 --format yaml
    apimeta check api.yml Pet pet.json --context response
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Any

import click
import yaml

from .config import ApiMetaConfigModel, load_config
from .errors import Errors
from .loader import load_data, load_definitions
from .meta.schema import SchemaReference
from .openapi import to_document
from .values import wrap

logger = logging.getLogger(__name__)


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Returns True if ``env_var`` is set to "1", "true" or "yes" (case insensitive)."""
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging (overrides log_level if True)
        log_level: Log level string ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    """
    if not debug:
        debug = get_env_flag("APIMETA_DEBUG")

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    else:
        level = logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Output an error in either JSON or human-readable format."""
    error_info: dict[str, Any] = {"error": str(error)}
    if debug:
        error_info["traceback"] = traceback.format_exc()
        error_info["type"] = error.__class__.__name__

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2))
    else:
        click.echo(f"Error: {error_info['error']}", err=True)
        if debug and "traceback" in error_info:
            click.echo("\nTraceback:", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()


def _setup(debug: bool) -> ApiMetaConfigModel:
    config = load_config()
    configure_logging(debug=debug, log_level=config.log_level)
    return config


@click.group()
def cli() -> None:
    """apimeta: API meta models, value validation and OpenAPI documents."""


@cli.command(name="render")
@click.argument("definitions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--version",
    "version",
    type=click.Choice(["2.0", "3.0", "3.1", "3.2"]),
    help="OpenAPI version (default from config)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format",
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to file"
)
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def render(
    definitions_file: Path,
    version: str | None,
    output_format: str,
    output: Path | None,
    debug: bool,
) -> None:
    """Render the OpenAPI document of a definitions file.

    \b
    Examples:
        apimeta render api.yml                       # OpenAPI document as JSON
        apimeta render api.yml --version 2.0         # Swagger 2.0 document
        apimeta render api.yml --format yaml -o openapi.yml
    """
    try:
        config = _setup(debug)
        definitions = load_definitions(definitions_file)
        document = to_document(definitions, version or config.default_version)

        if output_format == "yaml":
            text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
        else:
            text = json.dumps(document, indent=2)

        if output is not None:
            output.write_text(text, encoding="utf-8")
            click.echo(f"Wrote OpenAPI {document.get('openapi', '2.0')} document to {output}")
        else:
            click.echo(text)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, debug=debug)


@cli.command(name="check")
@click.argument("definitions_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("schema_name")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--context",
    type=click.Choice(["request", "response"]),
    help="Validate the payload within requests or responses",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def check(
    definitions_file: Path,
    schema_name: str,
    payload_file: Path,
    context: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Validate a JSON or YAML payload against a schema.

    Exits with status 1 if the payload is invalid.

    \b
    Examples:
        apimeta check api.yml Pet pet.json
        apimeta check api.yml Pet pet.yml --context request --json-output
    """
    try:
        config = _setup(debug)
        definitions = load_definitions(definitions_file)
        payload = load_data(payload_file)
        node = wrap(
            payload,
            SchemaReference(ref=schema_name),
            definitions,
            context,  # type: ignore[arg-type]
            max_depth=config.max_depth,
        )
        errors = Errors()
        valid = node.validate(errors)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
        return

    if json_output:
        result = {
            "status": "ok" if valid else "invalid",
            "schema": schema_name,
            "errors": [issue.model_dump() for issue in errors],
        }
        click.echo(json.dumps(result, indent=2))
    elif valid:
        click.echo(click.style(f"✅ {payload_file} is a valid {schema_name}", fg="green"))
    else:
        click.echo(click.style(f"❌ {payload_file} isn't a valid {schema_name}", fg="red"))
        for message in errors.messages():
            click.echo(f"  • {message}")

    if not valid:
        sys.exit(1)
