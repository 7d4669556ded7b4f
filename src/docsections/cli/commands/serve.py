"""CLI command for serving the ingestion API over HTTP.

Implements the 'docsections serve' command.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from docsections.config.defaults import DEFAULT_SERVER_CONFIG
from docsections.config.loader import ConfigLoader
from docsections.lib.errors import ConfigError
from docsections.lib.logging_config import get_logger, setup_logging
from docsections.models.config import IngestConfig

logger = get_logger(__name__)


@click.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=DEFAULT_SERVER_CONFIG["port"],
    help="Port to listen on (default: 8000)",
)
@click.option(
    "--host",
    "-h",
    type=str,
    default=DEFAULT_SERVER_CONFIG["host"],
    help="Host to bind to (default: 127.0.0.1 for local-only access)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging",
)
@click.option(
    "--cors-origins",
    type=str,
    default=DEFAULT_SERVER_CONFIG["cors_origins"],
    help="Comma-separated list of allowed CORS origins",
)
def serve(
    port: int,
    host: str,
    config_path: Path | None,
    debug: bool,
    cors_origins: str,
) -> None:
    """Start an HTTP server exposing POST /api/ingest.

    Example:

        docsections serve

        docsections serve --port 9000 --config docsections.yaml
    """
    if debug:
        setup_logging(verbose=True)

    logger.info(f"Serve command invoked: port={port}, host={host}, debug={debug}")

    try:
        config = ConfigLoader().load(config_path)
        origins = [o.strip() for o in cors_origins.split(",") if o.strip()]
        asyncio.run(
            _run_server(
                config=config,
                host=host,
                port=port,
                cors_origins=origins,
                debug=debug,
            )
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        click.secho("Error: Failed to load configuration", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Server interrupted by user (Ctrl+C)")
        click.echo()
        click.secho("Server stopped.", fg="yellow")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        click.secho(f"Error: {str(e)}", fg="red", err=True)
        sys.exit(1)


async def _run_server(
    config: IngestConfig,
    host: str,
    port: int,
    cors_origins: list[str],
    debug: bool,
) -> None:
    """Run the HTTP server until uvicorn exits.

    Args:
        config: Resolved ingestion settings.
        host: Host to bind to.
        port: Port to listen on.
        cors_origins: List of allowed CORS origins.
        debug: Enable debug mode.
    """
    import uvicorn

    from docsections.lib.ingestion import DocumentIngestor
    from docsections.lib.ocr import DocumentAiOcrClient
    from docsections.serve.server import IngestServer

    ocr_client = DocumentAiOcrClient(config.ocr) if config.ocr else None
    server = IngestServer(
        ingestor=DocumentIngestor.from_config(config, ocr_client=ocr_client),
        ocr_client=ocr_client,
        host=host,
        port=port,
        cors_origins=cors_origins,
        debug=debug,
    )

    app = server.create_app()
    await server.start()
    _display_startup_info(host, port, ocr_enabled=ocr_client is not None)

    uvicorn_config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        log_level="debug" if debug else "info",
    )
    try:
        await uvicorn.Server(uvicorn_config).serve()
    finally:
        await server.stop()


def _display_startup_info(host: str, port: int, ocr_enabled: bool) -> None:
    """Display server startup information."""
    click.echo()
    click.secho("=" * 60, fg="cyan")
    click.secho("  docsections Ingestion Server", fg="cyan", bold=True)
    click.secho("=" * 60, fg="cyan")
    click.echo()
    click.echo(f"  URL:      http://{host}:{port}")
    click.echo(f"  OCR:      {'Document AI' if ocr_enabled else 'disabled'}")
    click.echo()
    click.secho("  Endpoints:", bold=True)
    click.echo("    POST /api/ingest Upload a PDF (multipart field 'file')")
    click.echo("    GET  /health     Health check")
    click.echo("    GET  /ready      Readiness check")
    click.echo()
    click.secho("  Press Ctrl+C to stop", fg="yellow")
    click.secho("=" * 60, fg="cyan")
    click.echo()
