"""Click command that sections plain text without any PDF extraction."""

import json
from typing import TextIO

import click

from docsections.lib.section_assembler import normalize as normalize_text


@click.command(name="normalize")
@click.argument("text_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--indent", type=int, default=2, help="JSON indentation (default: 2)")
def normalize(text_file: TextIO, indent: int) -> None:
    """Split extracted text into titled sections and print them as JSON.

    TEXT_FILE defaults to standard input.

    Example:

        docsections normalize lesson.txt

        pdftotext lesson.pdf - | docsections normalize
    """
    sections = normalize_text(text_file.read())
    click.echo(
        json.dumps([section.model_dump() for section in sections], indent=indent)
    )
