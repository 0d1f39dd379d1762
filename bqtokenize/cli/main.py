#!/usr/bin/env python3
"""bqtokenize CLI - serve the remote function or run a request file offline."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from bqtokenize import __version__
from bqtokenize.core.config import TokenizeConfig, set_config
from bqtokenize.core.exceptions import ConfigurationError
from bqtokenize.dispatcher import Dispatcher
from bqtokenize.models import RemoteFnRequest, RemoteFnResponse
from bqtokenize.observability.logging import configure_logging, correlation_context


def _load_config(config_file: Optional[str]) -> TokenizeConfig:
    try:
        if config_file:
            return TokenizeConfig.from_file(config_file)
        return TokenizeConfig.from_environment()
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid configuration: {e.message}") from e


@click.group()
@click.version_option(version=__version__, prog_name="bqtokenize")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """bqtokenize: tokenize and reidentify BigQuery values with a remote function."""
    ctx.ensure_object(dict)


@cli.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind")
@click.option("--port", "-p", type=int, default=8080, show_default=True, help="Port to bind")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True),
    help="Path to a YAML configuration file",
)
def serve(host: str, port: int, config_file: Optional[str]) -> None:
    """Serve the remote function endpoint over HTTP."""
    import uvicorn

    from bqtokenize.api import create_app

    config = _load_config(config_file)
    configure_logging(config.logging)
    set_config(config)

    click.echo(f"Serving bqtokenize on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


@cli.command()
@click.argument("request_file", type=click.Path(exists=True))
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True),
    help="Path to a YAML configuration file",
)
@click.option("--pretty", is_flag=True, help="Indent the response JSON")
def run(request_file: str, config_file: Optional[str], pretty: bool) -> None:
    """Process one remote function request JSON file and print the response."""
    config = _load_config(config_file)
    # Keep stdout for the response JSON
    configure_logging(
        config.logging.model_copy(update={"level": "WARNING"}), stream=sys.stderr
    )

    try:
        request = RemoteFnRequest.model_validate_json(Path(request_file).read_text())
    except ValidationError as e:
        raise click.ClickException(f"Invalid request file: {e}") from e

    dispatcher = Dispatcher(config)
    with correlation_context(request.request_id):
        envelope = dispatcher.handle_context(request.calls, request.user_defined_context)

    response = RemoteFnResponse.from_envelope(envelope)
    click.echo(json.dumps(response.to_wire(), indent=2 if pretty else None))
    if not envelope.ok:
        sys.exit(1)


@cli.command()
def version() -> None:
    """Show bqtokenize version."""
    click.echo(f"bqtokenize v{__version__}")


def main() -> int:
    """Main entry point."""
    try:
        cli()
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
