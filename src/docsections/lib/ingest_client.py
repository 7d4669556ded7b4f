"""Client helpers for consumers of the ingestion API.

A content generator either already has sections (e.g. from a previous run)
or has a PDF it needs sectioned. resolve_pdf_content() covers both cases,
uploading the PDF to ``/api/ingest`` only when no sections were supplied.
"""

import os
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlparse

import requests
from pydantic import BaseModel, ConfigDict, Field
from requests.exceptions import ConnectionError as RequestsConnectionError
from requests.exceptions import Timeout

from docsections.config.defaults import (
    DEFAULT_INGEST_BASE_URL,
    DEFAULT_INGEST_PATH,
    DEFAULT_INGEST_TIMEOUT,
)
from docsections.lib.errors import IngestApiError
from docsections.lib.logging_config import get_logger
from docsections.models.document import Section

logger = get_logger(__name__)

INGEST_URL_ENV = "DOCSECTIONS_INGEST_URL"
BASE_URL_ENV = "DOCSECTIONS_BASE_URL"


class ContentInput(BaseModel):
    """What a caller hands over when asking for teachable content.

    Attributes:
        sections: Pre-computed sections; used as-is when non-empty
        metadata: Caller metadata, preferred over the API's metadata
        pdf_file: PDF to upload when no sections are given
        pdf_file_name: Upload file name (default: upload.pdf)
        ingest_url: Explicit ingestion endpoint
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    sections: list[Section] | None = None
    metadata: dict[str, Any] | None = None
    pdf_file: Any = None
    pdf_file_name: str | None = None
    ingest_url: str | None = None


class ResolvedContent(BaseModel):
    """Sections and metadata ready for a content generator."""

    sections: list[Section]
    metadata: dict[str, Any] = Field(default_factory=dict)


class IngestApiResponse(BaseModel):
    """Subset of the ingestion API response used by consumers."""

    sections: list[Section] = Field(default_factory=list)
    metadata: dict[str, Any] | None = None
    needs_ocr: bool = False
    message: str | None = None


def to_pdf_bytes(file_like: Any) -> bytes:
    """Coerce supported PDF inputs to bytes.

    Args:
        file_like: bytes, bytearray, memoryview, a binary file object or a Path

    Returns:
        The PDF contents.

    Raises:
        TypeError: For any other input type
    """
    if isinstance(file_like, bytes):
        return file_like
    if isinstance(file_like, (bytearray, memoryview)):
        return bytes(file_like)
    if isinstance(file_like, Path):
        return file_like.read_bytes()
    if hasattr(file_like, "read"):
        content = file_like.read()
        if isinstance(content, bytes):
            return content
    raise TypeError(
        "Unsupported pdf_file type. Provide bytes, bytearray, memoryview, "
        "a binary file object, or a Path."
    )


def normalize_ingest_endpoint(endpoint: str, base: str | None = None) -> str:
    """Resolve an endpoint that may be relative against a base URL.

    Args:
        endpoint: Absolute URL or path such as ``/api/ingest``
        base: Base URL for relative endpoints (default: DOCSECTIONS_BASE_URL
            or http://localhost:3000)

    Returns:
        Absolute endpoint URL.
    """
    parsed = urlparse(endpoint)
    if parsed.scheme and parsed.netloc:
        return endpoint

    fallback_base = base or os.environ.get(BASE_URL_ENV) or DEFAULT_INGEST_BASE_URL
    return urljoin(fallback_base, endpoint)


def call_ingest_api(
    endpoint: str,
    file_like: Any,
    file_name: str | None = None,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_INGEST_TIMEOUT,
) -> IngestApiResponse:
    """Upload a PDF to the ingestion API.

    Args:
        endpoint: Absolute ingestion URL
        file_like: PDF input accepted by to_pdf_bytes()
        file_name: Upload file name (default: upload.pdf)
        session: requests session to reuse (default: a one-off request)
        timeout: Request timeout in seconds

    Returns:
        Parsed API response with at least one section.

    Raises:
        IngestApiError: On connection failure, non-2xx status, or empty sections
    """
    payload = to_pdf_bytes(file_like)
    files = {"file": (file_name or "upload.pdf", payload, "application/pdf")}
    http = session or requests

    try:
        response = http.post(endpoint, files=files, timeout=timeout)
    except (Timeout, RequestsConnectionError) as e:
        raise IngestApiError(None, f"Could not reach {endpoint}: {e}") from e

    if not response.ok:
        raise IngestApiError(response.status_code, response.text)

    result = IngestApiResponse.model_validate(response.json())
    if not result.sections:
        raise IngestApiError(None, "Ingestion API returned no sections.")

    if result.needs_ocr:
        logger.warning("Ingestion API flagged the document for OCR: %s", result.message)
    return result


def resolve_pdf_content(
    content: ContentInput,
    base_url: str | None = None,
    session: requests.Session | None = None,
) -> ResolvedContent:
    """Return sections for a content generator, ingesting the PDF if needed.

    Args:
        content: Sections and/or PDF supplied by the caller
        base_url: Base URL for the default ``/api/ingest`` endpoint
        session: requests session to reuse

    Returns:
        ResolvedContent with sections and metadata.

    Raises:
        ValueError: If neither sections nor a PDF were supplied
        IngestApiError: If the ingestion API call fails
    """
    if content.sections:
        return ResolvedContent(sections=content.sections, metadata=content.metadata or {})

    if content.pdf_file is None:
        raise ValueError(
            "Provide either `sections` or `pdf_file` so there is content to "
            "teach from."
        )

    endpoint = content.ingest_url or os.environ.get(INGEST_URL_ENV)
    if not endpoint:
        base = base_url or os.environ.get(BASE_URL_ENV) or DEFAULT_INGEST_BASE_URL
        endpoint = f"{base.rstrip('/')}{DEFAULT_INGEST_PATH}"

    endpoint = normalize_ingest_endpoint(endpoint, base_url)
    logger.debug("Resolving PDF content via %s", endpoint)

    response = call_ingest_api(
        endpoint, content.pdf_file, content.pdf_file_name, session=session
    )
    metadata = content.metadata if content.metadata is not None else response.metadata
    return ResolvedContent(sections=response.sections, metadata=metadata or {})
