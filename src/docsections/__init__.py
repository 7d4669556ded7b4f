"""docsections - recover titled sections from uploaded documents.

Extracted PDF text arrives as a flat stream of lines. docsections decides
whether that text is usable, falls back to OCR when it is not, and rebuilds
an ordered list of (heading, body) sections for downstream content
generators.

Main features:
- Sufficiency check with Document AI OCR fallback that never raises
- Heuristic heading detection from casing and position
- Bullet and numbered list normalization
- FastAPI upload endpoint and click CLI
"""

__version__ = "0.1.0"

from docsections.lib.errors import ConfigError, DocSectionsError, OcrError  # noqa: E402
from docsections.lib.ingestion import (  # noqa: E402
    DocumentIngestor,
    ExtractionCoordinator,
    ingest,
)
from docsections.lib.sanitizer import sanitize  # noqa: E402
from docsections.lib.section_assembler import normalize  # noqa: E402
from docsections.lib.sufficiency import is_insufficient  # noqa: E402
from docsections.models.document import Section  # noqa: E402

__all__ = [
    "__version__",
    "ConfigError",
    "DocSectionsError",
    "DocumentIngestor",
    "ExtractionCoordinator",
    "OcrError",
    "Section",
    "ingest",
    "is_insufficient",
    "normalize",
    "sanitize",
]
