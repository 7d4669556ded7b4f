"""Tests for the ingestion API client helpers."""

import io
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from requests.exceptions import ConnectionError as RequestsConnectionError

from docsections.lib.errors import IngestApiError
from docsections.lib.ingest_client import (
    ContentInput,
    call_ingest_api,
    normalize_ingest_endpoint,
    resolve_pdf_content,
    to_pdf_bytes,
)
from docsections.models.document import Section

API_SECTIONS = [{"heading": "Topics", "body": "DNA"}]


def _session(
    status_code: int = 200,
    body: dict[str, Any] | None = None,
    text: str = "",
) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.text = text
    response.json.return_value = body if body is not None else {}
    session = MagicMock()
    session.post.return_value = response
    return session


class TestToPdfBytes:
    """Tests for to_pdf_bytes()."""

    def test_bytes_like(self) -> None:
        """Test bytes, bytearray and memoryview inputs."""
        assert to_pdf_bytes(b"%PDF") == b"%PDF"
        assert to_pdf_bytes(bytearray(b"%PDF")) == b"%PDF"
        assert to_pdf_bytes(memoryview(b"%PDF")) == b"%PDF"

    def test_file_object_and_path(self, tmp_path: Path) -> None:
        """Test binary file objects and paths."""
        path = tmp_path / "lesson.pdf"
        path.write_bytes(b"%PDF-1.7")
        assert to_pdf_bytes(path) == b"%PDF-1.7"
        assert to_pdf_bytes(io.BytesIO(b"%PDF-1.7")) == b"%PDF-1.7"

    def test_unsupported(self) -> None:
        """Test that text streams and other objects are rejected."""
        with pytest.raises(TypeError, match="Unsupported pdf_file type"):
            to_pdf_bytes(io.StringIO("not bytes"))
        with pytest.raises(TypeError):
            to_pdf_bytes(42)


class TestNormalizeIngestEndpoint:
    """Tests for normalize_ingest_endpoint()."""

    def test_absolute_unchanged(self) -> None:
        """Test that absolute URLs pass through."""
        url = "https://api.example.test/api/ingest"
        assert normalize_ingest_endpoint(url) == url

    def test_relative_uses_base(self) -> None:
        """Test that relative paths resolve against the given base."""
        assert (
            normalize_ingest_endpoint("/api/ingest", "https://app.example.test")
            == "https://app.example.test/api/ingest"
        )

    def test_relative_uses_default_base(self, isolated_env: dict[str, str]) -> None:
        """Test the localhost fallback base."""
        assert normalize_ingest_endpoint("/api/ingest") == (
            "http://localhost:3000/api/ingest"
        )


class TestCallIngestApi:
    """Tests for call_ingest_api()."""

    def test_success(self) -> None:
        """Test a successful upload and the multipart body it sends."""
        session = _session(body={"sections": API_SECTIONS, "metadata": {"title": "T"}})

        result = call_ingest_api(
            "http://host/api/ingest", b"%PDF", "lesson.pdf", session=session
        )

        assert result.sections == [Section(heading="Topics", body="DNA")]
        assert result.metadata == {"title": "T"}
        kwargs = session.post.call_args.kwargs
        assert kwargs["files"]["file"] == ("lesson.pdf", b"%PDF", "application/pdf")

    def test_default_file_name(self) -> None:
        """Test that uploads without a name are called upload.pdf."""
        session = _session(body={"sections": API_SECTIONS})

        call_ingest_api("http://host/api/ingest", b"%PDF", session=session)

        assert session.post.call_args.kwargs["files"]["file"][0] == "upload.pdf"

    def test_error_status(self) -> None:
        """Test that non-2xx responses raise with status and body."""
        session = _session(status_code=500, text="Unable to ingest PDF.")

        with pytest.raises(IngestApiError) as exc_info:
            call_ingest_api("http://host/api/ingest", b"%PDF", session=session)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Unable to ingest PDF."

    def test_empty_sections(self) -> None:
        """Test that a response without sections is an error."""
        session = _session(body={"sections": [], "needs_ocr": True})

        with pytest.raises(IngestApiError, match="no sections"):
            call_ingest_api("http://host/api/ingest", b"%PDF", session=session)

    def test_connection_error(self) -> None:
        """Test that unreachable servers raise IngestApiError."""
        session = MagicMock()
        session.post.side_effect = RequestsConnectionError("refused")

        with pytest.raises(IngestApiError) as exc_info:
            call_ingest_api("http://host/api/ingest", b"%PDF", session=session)

        assert exc_info.value.status_code is None
        assert "http://host/api/ingest" in str(exc_info.value)


class TestResolvePdfContent:
    """Tests for resolve_pdf_content()."""

    def test_sections_pass_through(self) -> None:
        """Test that supplied sections skip the API entirely."""
        session = _session()
        sections = [Section(heading="Intro", body="Hello")]

        resolved = resolve_pdf_content(
            ContentInput(sections=sections, metadata={"a": 1}), session=session
        )

        assert resolved.sections == sections
        assert resolved.metadata == {"a": 1}
        session.post.assert_not_called()

    def test_requires_sections_or_pdf(self) -> None:
        """Test that empty input is rejected."""
        with pytest.raises(ValueError, match="sections"):
            resolve_pdf_content(ContentInput())

    def test_default_endpoint(self, isolated_env: dict[str, str]) -> None:
        """Test the endpoint derived from the base URL."""
        session = _session(body={"sections": API_SECTIONS, "metadata": {"x": 1}})

        resolved = resolve_pdf_content(
            ContentInput(pdf_file=b"%PDF"),
            base_url="https://app.example.test/",
            session=session,
        )

        assert session.post.call_args.args[0] == "https://app.example.test/api/ingest"
        assert resolved.metadata == {"x": 1}

    def test_env_endpoint(
        self, isolated_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that DOCSECTIONS_INGEST_URL is honored."""
        monkeypatch.setenv("DOCSECTIONS_INGEST_URL", "https://ingest.example.test/x")
        session = _session(body={"sections": API_SECTIONS})

        resolve_pdf_content(ContentInput(pdf_file=b"%PDF"), session=session)

        assert session.post.call_args.args[0] == "https://ingest.example.test/x"

    def test_explicit_relative_url(self, isolated_env: dict[str, str]) -> None:
        """Test that a relative ingest_url resolves against the base."""
        session = _session(body={"sections": API_SECTIONS})

        resolve_pdf_content(
            ContentInput(pdf_file=b"%PDF", ingest_url="/v2/ingest"),
            base_url="https://app.example.test",
            session=session,
        )

        assert session.post.call_args.args[0] == "https://app.example.test/v2/ingest"

    def test_caller_metadata_wins(self, isolated_env: dict[str, str]) -> None:
        """Test that caller metadata replaces the API's metadata."""
        session = _session(body={"sections": API_SECTIONS, "metadata": {"x": 1}})

        resolved = resolve_pdf_content(
            ContentInput(pdf_file=b"%PDF", metadata={"mine": True}), session=session
        )

        assert resolved.metadata == {"mine": True}
