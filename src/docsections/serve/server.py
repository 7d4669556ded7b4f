"""Document ingestion HTTP server.

Provides the FastAPI application factory and server lifecycle for the
``POST /api/ingest`` upload endpoint.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docsections.lib.ingestion import DocumentIngestor
from docsections.lib.logging_config import get_logger
from docsections.serve.models import (
    ErrorResponse,
    HealthResponse,
    IngestResponse,
    ServerState,
)

if TYPE_CHECKING:
    from docsections.lib.ocr import DocumentAiOcrClient

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50 MB

MISSING_FILE_MESSAGE = "Expected a PDF file upload under the `file` field."
NOT_PDF_MESSAGE = "Only PDF uploads are supported."
TOO_LARGE_MESSAGE = "PDF uploads are limited to 50MB."
INGEST_FAILED_MESSAGE = "Unable to ingest PDF. Please try again."


def is_pdf_upload(content_type: str | None, filename: str | None) -> bool:
    """Accept an upload by MIME type or, failing that, by ``.pdf`` extension."""
    if content_type == PDF_MIME_TYPE:
        return True
    return isinstance(filename, str) and filename.lower().endswith(".pdf")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorResponse(error=message).model_dump()
    )


class IngestServer:
    """HTTP server wrapping a DocumentIngestor.

    Attributes:
        ingestor: Pipeline used for every upload
        ocr_client: OCR client closed when the server stops, if any
        host: The hostname to bind to
        port: The port to listen on
        state: The current server state
    """

    def __init__(
        self,
        ingestor: DocumentIngestor | None = None,
        ocr_client: DocumentAiOcrClient | None = None,
        host: str = "127.0.0.1",
        port: int = 8000,
        cors_origins: list[str] | None = None,
        debug: bool = False,
    ) -> None:
        """Initialize the ingestion server.

        Args:
            ingestor: Pipeline to run (default: pdfminer without OCR)
            ocr_client: OCR client owned by the server, closed on stop()
            host: The hostname to bind to (default: 127.0.0.1)
            port: The port to listen on (default: 8000)
            cors_origins: Allowed CORS origins (default: ["*"])
            debug: Include exception details in 500 responses
        """
        self.ingestor = ingestor or DocumentIngestor()
        self.ocr_client = ocr_client
        self.host = host
        self.port = port
        self.cors_origins = cors_origins or ["*"]
        self.debug = debug

        if host == "0.0.0.0":  # noqa: S104
            logger.warning(
                "Server binding to 0.0.0.0 exposes it to all network interfaces. "
                "Use 127.0.0.1 for local-only access."
            )

        self.state = ServerState.INITIALIZING
        self._app: FastAPI | None = None
        self._start_time: datetime | None = None

    @property
    def is_ready(self) -> bool:
        """Check if the server is ready to accept requests."""
        return self.state in (ServerState.READY, ServerState.RUNNING)

    @property
    def ocr_enabled(self) -> bool:
        return self.ingestor.coordinator.ocr_client is not None

    @property
    def uptime_seconds(self) -> float:
        """Return server uptime in seconds."""
        if self._start_time is None:
            return 0.0
        return (datetime.now(timezone.utc) - self._start_time).total_seconds()

    def create_app(self) -> FastAPI:
        """Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance.
        """
        app = FastAPI(
            title="docsections ingestion",
            description="Extract PDF text and recover titled sections",
            version="0.1.0",
        )

        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._register_health_endpoints(app)
        self._register_ingest_endpoint(app)

        self._app = app
        self.state = ServerState.READY
        logger.info("FastAPI app created (ocr=%s)", "on" if self.ocr_enabled else "off")
        return app

    def _register_health_endpoints(self, app: FastAPI) -> None:
        """Register health check endpoints."""

        @app.get("/health", response_model=HealthResponse, tags=["Health"])
        async def health() -> HealthResponse:
            """Basic health check endpoint."""
            return HealthResponse(
                status="healthy" if self.is_ready else "unhealthy",
                ocr_enabled=self.ocr_enabled,
                uptime_seconds=self.uptime_seconds,
            )

        @app.get("/ready", tags=["Health"])
        async def ready() -> dict[str, bool]:
            """Readiness check endpoint for orchestrators."""
            return {"ready": self.is_ready}

    def _register_ingest_endpoint(self, app: FastAPI) -> None:
        """Register the PDF upload endpoint."""

        @app.post(
            "/api/ingest",
            response_model=IngestResponse,
            response_model_exclude_none=True,
            responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
            tags=["Ingest"],
        )
        async def ingest_pdf(request: Request) -> IngestResponse | JSONResponse:
            """Ingest an uploaded PDF into titled sections."""
            form = await request.form()
            upload = form.get("file")

            if upload is None or isinstance(upload, str):
                return _error(400, MISSING_FILE_MESSAGE)

            if not is_pdf_upload(upload.content_type, upload.filename):
                return _error(400, NOT_PDF_MESSAGE)

            payload = await _read_upload(upload)
            if payload is None:
                return _error(400, TOO_LARGE_MESSAGE)

            logger.info("Ingesting upload '%s' (%d bytes)", upload.filename, len(payload))
            try:
                result = await self.ingestor.ingest(payload)
            except Exception as e:
                logger.error("Failed to ingest PDF: %s", e, exc_info=True)
                message = INGEST_FAILED_MESSAGE
                if self.debug:
                    message = f"{message} ({e})"
                return _error(500, message)
            return IngestResponse.from_result(result)

    async def start(self) -> None:
        """Mark the server as running; creates the app if needed."""
        if self._app is None:
            self.create_app()

        self._start_time = datetime.now(timezone.utc)
        self.state = ServerState.RUNNING
        logger.info(f"Ingestion server started at http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the server and release the OCR client."""
        self.state = ServerState.SHUTTING_DOWN

        if self.ocr_client is not None:
            await self.ocr_client.aclose()

        self.state = ServerState.STOPPED
        logger.info("Ingestion server stopped")


async def _read_upload(upload: UploadFile) -> bytes | None:
    """Read an upload, returning None when it exceeds MAX_UPLOAD_BYTES."""
    content = await upload.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        return None
    return content
