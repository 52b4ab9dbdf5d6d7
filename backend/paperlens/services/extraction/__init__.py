from paperlens.services.extraction.base import (
    DocumentMetadata,
    DocumentStructure,
    ExtractionResult,
    FallbackExtraction,
    PageRecord,
    SuccessfulExtraction,
)
from paperlens.services.extraction.pdf_extractor import PdfExtractor

__all__ = [
    "DocumentMetadata",
    "DocumentStructure",
    "ExtractionResult",
    "FallbackExtraction",
    "PageRecord",
    "PdfExtractor",
    "SuccessfulExtraction",
]
