"""Google Document AI OCR client.

The client is constructed explicitly with an OcrConfig and owns its HTTP
connection pool and credentials for its own lifetime. Nothing is cached at
module level, so two clients with different processors can coexist.

Example:
    >>> config = OcrConfig(project_id="my-proj", processor_id="abc123")
    >>> async with DocumentAiOcrClient(config) as client:
    ...     result = await client.process(pdf_bytes)
    ...     print(result.page_count, result.text[:100])
"""

from __future__ import annotations

import asyncio
import base64
import contextlib
from typing import TYPE_CHECKING, Any

import httpx

from docsections.config.defaults import DOCUMENT_AI_DEFAULTS
from docsections.lib.errors import OcrConnectionError, OcrError, OcrServiceError
from docsections.lib.logging_config import get_logger
from docsections.models.extraction import OcrResult

if TYPE_CHECKING:
    from google.auth.credentials import Credentials

    from docsections.models.config import OcrConfig

logger = get_logger(__name__)

DOCUMENT_AI_SCOPE = str(DOCUMENT_AI_DEFAULTS["scope"])


def _load_default_credentials() -> Credentials:
    """Resolve Application Default Credentials for the cloud-platform scope."""
    import google.auth

    credentials, _project = google.auth.default(scopes=[DOCUMENT_AI_SCOPE])
    return credentials


def _refresh_credentials(credentials: Credentials) -> None:
    """Refresh credentials in place using google-auth's requests transport."""
    from google.auth.transport.requests import Request

    credentials.refresh(Request())


def build_process_request(
    payload: bytes,
    mime_type: str = str(DOCUMENT_AI_DEFAULTS["mime_type"]),
) -> dict[str, Any]:
    """Build the JSON body for a ``:process`` call.

    Args:
        payload: Raw document bytes
        mime_type: Document MIME type (default: application/pdf)

    Returns:
        Request body with the base64-encoded document.
    """
    return {
        "rawDocument": {
            "content": base64.b64encode(payload).decode("ascii"),
            "mimeType": mime_type,
        }
    }


def parse_process_response(payload: dict[str, Any]) -> OcrResult:
    """Turn a ``:process`` response into an OcrResult.

    Missing ``document``, ``text`` or ``pages`` fields are treated as empty.
    """
    document = payload.get("document") or {}
    text = (document.get("text") or "").strip()
    pages = document.get("pages") or []
    return OcrResult(text=text, page_count=len(pages), raw_response=payload)


class DocumentAiOcrClient:
    """Async client for a single Document AI OCR processor.

    Attributes:
        config: Processor settings
    """

    def __init__(
        self,
        config: OcrConfig,
        credentials: Credentials | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Processor settings (project, location, processor, timeout)
            credentials: google-auth credentials. Application Default
                Credentials are resolved on first use when omitted.
            http_client: Pre-built httpx client. When omitted the client
                creates and owns one.
        """
        self.config = config
        self._credentials = credentials
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def __aenter__(self) -> DocumentAiOcrClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def _auth_headers(self) -> dict[str, str]:
        """Return an Authorization header, refreshing credentials if needed.

        Raises:
            OcrError: If no access token could be obtained
        """
        if self._credentials is None:
            self._credentials = await asyncio.to_thread(_load_default_credentials)

        credentials = self._credentials
        if not credentials.valid:
            await asyncio.to_thread(_refresh_credentials, credentials)

        token = credentials.token
        if not token:
            raise OcrError("Document AI OCR could not obtain an access token.")

        if not token.startswith("Bearer "):
            token = f"Bearer {token}"
        return {"Authorization": token}

    async def process(self, payload: bytes) -> OcrResult:
        """Run OCR over a document.

        Args:
            payload: PDF bytes

        Returns:
            OcrResult with trimmed text and page count.

        Raises:
            OcrConnectionError: Network or timeout failure
            OcrServiceError: Non-2xx response
            OcrError: Credential failure or unreadable response
        """
        url = self.config.process_url
        headers = {
            "Content-Type": "application/json; charset=utf-8",
            **(await self._auth_headers()),
        }

        logger.debug("Calling Document AI OCR (%d bytes)", len(payload))
        try:
            response = await self._http.post(
                url,
                headers=headers,
                json=build_process_request(payload),
                timeout=self.config.timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Document AI network error: %s", e)
            raise OcrConnectionError(url, original_error=e) from e

        if response.is_error:
            detail = None
            with contextlib.suppress(Exception):
                detail = response.json().get("error", {}).get("message")
            if detail is None:
                detail = response.text or None
            logger.error(
                "Document AI request failed with status %d: %s",
                response.status_code,
                detail,
            )
            raise OcrServiceError(response.status_code, detail)

        try:
            body = response.json()
        except ValueError as e:
            raise OcrError("Document AI OCR returned a non-JSON response.") from e

        result = parse_process_response(body)
        logger.info(
            "Document AI OCR returned %d characters over %d pages",
            len(result.text),
            result.page_count,
        )
        return result
