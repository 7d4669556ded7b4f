"""HTTP server exposing the ingestion pipeline.

Endpoints:
    POST /api/ingest   Multipart PDF upload under the ``file`` field
    GET  /health       Health check
    GET  /ready        Readiness check
"""

from docsections.serve.server import IngestServer

__all__ = ["IngestServer"]
