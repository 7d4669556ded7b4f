"""Unit tests for the ingest and normalize CLI commands.

Tests cover:
- JSON output for the embedded-text path
- OCR fallback wiring from environment configuration
- --no-ocr and --ocr-timeout handling
- Exit code 1 on configuration errors
- normalize reading from a file and from stdin
"""

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from docsections.cli.commands.ingest import ingest
from docsections.cli.commands.normalize import normalize
from docsections.lib.pdf_processor import PdfTextExtractor
from docsections.models.document import ParsedPdf, PdfMetadata

LESSON_TEXT = "BIOLOGY UNIT\nLESSON PLAN\n\nTopics\nDNA replication\n\n-- 1 of 1 --"


def _parsed(text: str = LESSON_TEXT) -> ParsedPdf:
    return ParsedPdf(text=text, metadata=PdfMetadata(title="Lesson", page_count=1))


class TestIngestCommand:
    """Tests for `docsections ingest`."""

    def test_prints_sections_as_json(
        self, cli_runner: CliRunner, pdf_path: Path, isolated_env: dict[str, str]
    ) -> None:
        """Test the embedded-text path end to end."""
        with patch.object(PdfTextExtractor, "extract", return_value=_parsed()):
            result = cli_runner.invoke(ingest, [str(pdf_path), "--indent", "0"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["needs_fallback"] is False
        assert data["provenance"] == "primary"
        assert data["sections"] == [
            {"heading": "Biology Unit", "body": "LESSON PLAN"},
            {"heading": "Topics", "body": "DNA replication"},
        ]
        assert data["metadata"]["title"] == "Lesson"

    def test_insufficient_text_without_ocr_warns(
        self, cli_runner: CliRunner, pdf_path: Path, isolated_env: dict[str, str]
    ) -> None:
        """Test that a scan without OCR configured still exits 0 with a warning."""
        with patch.object(PdfTextExtractor, "extract", return_value=_parsed("")):
            result = cli_runner.invoke(ingest, [str(pdf_path)])

        assert result.exit_code == 0
        assert '"needs_fallback": true' in result.output
        assert "OCR fallback is not configured." in result.output

    def test_uses_ocr_when_configured(
        self,
        cli_runner: CliRunner,
        pdf_path: Path,
        isolated_env: dict[str, str],
        monkeypatch: Any,
        fake_ocr_client: Any,
    ) -> None:
        """Test that Document AI settings from the environment enable OCR."""
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT_ID", "proj")
        monkeypatch.setenv("GOOGLE_CLOUD_PROCESSOR_ID", "proc")
        ocr_client = fake_ocr_client(text="SCANNED PAGE\nmitosis notes")

        with (
            patch.object(PdfTextExtractor, "extract", return_value=_parsed("")),
            patch("docsections.cli.commands.ingest.DocumentAiOcrClient") as mock_cls,
        ):
            mock_cls.return_value.__aenter__.return_value = ocr_client
            result = cli_runner.invoke(ingest, [str(pdf_path)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["provenance"] == "ocr"
        assert data["sections"] == [{"heading": "Scanned Page", "body": "mitosis notes"}]
        assert mock_cls.call_args.args[0].project_id == "proj"
        ocr_client.process.assert_awaited_once_with(pdf_path.read_bytes())

    def test_no_ocr_flag(
        self,
        cli_runner: CliRunner,
        pdf_path: Path,
        isolated_env: dict[str, str],
        monkeypatch: Any,
    ) -> None:
        """Test that --no-ocr ignores configured Document AI settings."""
        monkeypatch.setenv("GOOGLE_CLOUD_PROJECT_ID", "proj")
        monkeypatch.setenv("GOOGLE_CLOUD_PROCESSOR_ID", "proc")

        with (
            patch.object(PdfTextExtractor, "extract", return_value=_parsed("")),
            patch("docsections.cli.commands.ingest.DocumentAiOcrClient") as mock_cls,
        ):
            result = cli_runner.invoke(ingest, [str(pdf_path), "--no-ocr"])

        assert result.exit_code == 0
        mock_cls.assert_not_called()

    def test_ocr_timeout_option(
        self, cli_runner: CliRunner, pdf_path: Path, isolated_env: dict[str, str]
    ) -> None:
        """Test that --ocr-timeout reaches the coordinator."""
        captured: dict[str, Any] = {}

        async def fake_run(payload: bytes, config: Any) -> MagicMock:
            captured["config"] = config
            result = MagicMock()
            result.model_dump_json.return_value = "{}"
            result.needs_fallback = False
            return result

        with patch("docsections.cli.commands.ingest._run_ingest", new=fake_run):
            result = cli_runner.invoke(ingest, [str(pdf_path), "--ocr-timeout", "7.5"])

        assert result.exit_code == 0, result.output
        assert captured["config"].ocr_timeout == 7.5

    def test_config_error_exits_1(
        self,
        cli_runner: CliRunner,
        pdf_path: Path,
        tmp_path: Path,
        isolated_env: dict[str, str],
    ) -> None:
        """Test that an invalid settings file exits with code 1."""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("min_text_characters: -3\n", encoding="utf-8")

        result = cli_runner.invoke(ingest, [str(pdf_path), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output

    def test_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Test that a nonexistent PDF path is a usage error."""
        result = cli_runner.invoke(ingest, [str(tmp_path / "absent.pdf")])

        assert result.exit_code == 2
        assert "does not exist" in result.output


class TestNormalizeCommand:
    """Tests for `docsections normalize`."""

    def test_reads_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Test sectioning a text file."""
        path = tmp_path / "lesson.txt"
        path.write_text("Steps\n1. Foo\n2) Bar\n", encoding="utf-8")

        result = cli_runner.invoke(normalize, [str(path)])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [{"heading": "Steps", "body": "- Foo\n- Bar"}]

    def test_reads_stdin(self, cli_runner: CliRunner) -> None:
        """Test that standard input is the default source."""
        result = cli_runner.invoke(normalize, [], input="INTRODUCTION\n")

        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"heading": "Document", "body": "INTRODUCTION"}
        ]

    def test_empty_input(self, cli_runner: CliRunner) -> None:
        """Test that empty input prints an empty list."""
        result = cli_runner.invoke(normalize, [], input="")

        assert json.loads(result.output) == []
