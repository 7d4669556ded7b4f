"""Pytest configuration and shared fixtures for docsections tests."""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from docsections.lib.ingestion import DocumentIngestor, ExtractionCoordinator
from docsections.models.document import ParsedPdf, PdfMetadata
from docsections.models.extraction import OcrResult

SAMPLE_LESSON_TEXT = (
    "BIOLOGY UNIT\nLESSON PLAN\n\nTopics\n• DNA structure\n• Replication\n\n"
    "-- 1 of 1 --"
)
SAMPLE_OCR_TEXT = "SCANNED WORKSHEET\nLabel the parts of the cell.\n"

DOCSECTIONS_ENV_VARS = (
    "DOCSECTIONS_MIN_TEXT_CHARACTERS",
    "DOCSECTIONS_OCR_TIMEOUT",
    "DOCSECTIONS_OCR_ENDPOINT",
    "DOCSECTIONS_INGEST_URL",
    "DOCSECTIONS_BASE_URL",
    "GOOGLE_CLOUD_PROJECT_ID",
    "GOOGLE_CLOUD_LOCATION",
    "GOOGLE_CLOUD_PROCESSOR_ID",
)


@pytest.fixture
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Generator[dict[str, str]]:
    """Remove docsections environment variables for the duration of a test.

    Yields:
        Copy of the environment as it was before the test
    """
    original_env = os.environ.copy()
    for name in DOCSECTIONS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield original_env


@pytest.fixture
def fake_extractor() -> Any:
    """Create a factory for primary extractors returning fixed text.

    Returns:
        Callable taking text and page count and returning a mock extractor
    """

    def _create(text: str = SAMPLE_LESSON_TEXT, page_count: int = 1) -> MagicMock:
        extractor = MagicMock()
        extractor.extract.return_value = ParsedPdf(
            text=text,
            metadata=PdfMetadata(title="Sample Lesson", page_count=page_count),
        )
        return extractor

    return _create


@pytest.fixture
def fake_ocr_client() -> Any:
    """Create a factory for OCR clients with a canned result or error.

    Returns:
        Callable returning a mock with async ``process`` and ``aclose``
    """

    def _create(
        text: str = SAMPLE_OCR_TEXT,
        page_count: int = 1,
        error: Exception | None = None,
    ) -> MagicMock:
        client = MagicMock()
        if error is not None:
            client.process = AsyncMock(side_effect=error)
        else:
            client.process = AsyncMock(
                return_value=OcrResult(text=text.strip(), page_count=page_count)
            )
        client.aclose = AsyncMock()
        return client

    return _create


@pytest.fixture
def make_ingestor(fake_extractor: Any) -> Any:
    """Create a factory for ingestors wired to fake collaborators.

    Returns:
        Callable taking primary text and an optional OCR client
    """

    def _create(
        text: str = SAMPLE_LESSON_TEXT,
        ocr_client: Any = None,
        page_count: int = 1,
    ) -> DocumentIngestor:
        return DocumentIngestor(
            extractor=fake_extractor(text, page_count),
            coordinator=ExtractionCoordinator(ocr_client=ocr_client),
        )

    return _create


def pytest_configure(config: Any) -> None:
    """Configure pytest with marker options."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "unit: marks tests as unit tests",
    )
