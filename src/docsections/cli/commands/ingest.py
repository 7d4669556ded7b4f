"""Click command that runs the full ingestion pipeline on a local PDF.

Implements ``docsections ingest``: primary extraction, OCR fallback when the
embedded text is insufficient, then section recovery. OCR problems never
fail the command; they show up in the JSON output as ``needs_fallback``.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from docsections.config.loader import ConfigLoader
from docsections.lib.errors import ConfigError
from docsections.lib.ingestion import DocumentIngestor
from docsections.lib.logging_config import get_logger
from docsections.lib.ocr import DocumentAiOcrClient
from docsections.models.config import IngestConfig
from docsections.models.extraction import IngestResult

logger = get_logger(__name__)


@click.command(name="ingest")
@click.argument("pdf_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file",
)
@click.option("--no-ocr", is_flag=True, help="Never fall back to OCR")
@click.option(
    "--ocr-timeout",
    type=float,
    default=None,
    help="Seconds to wait for the OCR fallback",
)
@click.option("--indent", type=int, default=2, help="JSON indentation (default: 2)")
def ingest(
    pdf_file: Path,
    config_path: Path | None,
    no_ocr: bool,
    ocr_timeout: float | None,
    indent: int,
) -> None:
    """Extract sections from PDF_FILE and print the result as JSON.

    Example:

        docsections ingest lesson.pdf

        docsections ingest scan.pdf --config docsections.yaml --ocr-timeout 30
    """
    try:
        config = ConfigLoader().load(config_path)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}", exc_info=True)
        click.secho("Error: Failed to load configuration", fg="red", err=True)
        click.echo(f"  {str(e)}", err=True)
        sys.exit(1)

    if ocr_timeout is not None:
        config = config.model_copy(update={"ocr_timeout": ocr_timeout})
    if no_ocr:
        config = config.model_copy(update={"ocr": None})

    result = asyncio.run(_run_ingest(pdf_file.read_bytes(), config))
    click.echo(result.model_dump_json(indent=indent))

    if result.needs_fallback:
        click.secho(f"Warning: {result.diagnostic}", fg="yellow", err=True)


async def _run_ingest(payload: bytes, config: IngestConfig) -> IngestResult:
    """Run the pipeline, owning the OCR client for the duration of the call."""
    if config.ocr is None:
        return await DocumentIngestor.from_config(config).ingest(payload)

    async with DocumentAiOcrClient(config.ocr) as ocr_client:
        ingestor = DocumentIngestor.from_config(config, ocr_client=ocr_client)
        return await ingestor.ingest(payload)
