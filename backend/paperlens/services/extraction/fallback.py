from paperlens.services.extraction.base import (
    DocumentMetadata,
    DocumentStructure,
    FallbackExtraction,
    PageRecord,
)
from paperlens.services.extraction.text_cleaner import count_words, normalize_text

ERROR_REPORT_SECTION = "Error Report"

DIAGNOSTIC_TEMPLATE = """PDF Processing Error Report

File: {filename}
Error: {error}

The document could not be fully processed. Likely causes:
- The PDF contains scanned images and needs OCR
- The PDF is password protected
- The file is corrupted or is not a valid PDF
- The document is too large or too complex to process

Try exporting the document to a text-based PDF and upload it again."""


def build_fallback_result(filename: str, file_size: int, error: BaseException | str) -> FallbackExtraction:
    """Build a single-page, well-formed result describing why extraction failed."""
    message = str(error) or type(error).__name__
    text = normalize_text(DIAGNOSTIC_TEMPLATE.format(filename=filename or "unknown", error=message))
    word_count = count_words(text)

    return FallbackExtraction(
        text=text,
        metadata=DocumentMetadata(
            page_count=1,
            word_count=word_count,
            file_size=file_size,
            file_name=filename,
            title=ERROR_REPORT_SECTION,
            source_page_count=0,
            extraction_method="fallback",
        ),
        pages=(PageRecord(page_number=1, text=text, word_count=word_count),),
        structure=DocumentStructure(sections=(ERROR_REPORT_SECTION,)),
        error=message,
    )
