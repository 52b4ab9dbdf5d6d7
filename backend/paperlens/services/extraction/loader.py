import asyncio
import io
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from paperlens.config import settings
from paperlens.core.exceptions import LoadError, MetadataError
from paperlens.core.logging import get_logger

logger = get_logger(__name__)

# The header may be preceded by junk bytes; pdfminer tolerates that too
PDF_MAGIC = b"%PDF"
HEADER_SEARCH_BYTES = 1024

# PDF Info dictionary key -> DocumentMetadata field
EMBEDDED_METADATA_FIELDS = {
    "Title": "title",
    "Author": "author",
    "Subject": "subject",
    "Creator": "creator",
    "Producer": "producer",
    "CreationDate": "creation_date",
    "ModDate": "modification_date",
}


@dataclass(frozen=True)
class LoaderOptions:
    """Resource configuration for text-only loading."""

    password: str = ""
    unicode_norm: str | None = None
    layout_analysis: bool = False

    @classmethod
    def from_settings(cls) -> "LoaderOptions":
        return cls(
            password=settings.pdf_password,
            unicode_norm=settings.pdf_unicode_norm,
            layout_analysis=settings.pdf_layout_analysis,
        )


class LoadedDocument(ABC):
    """A page-addressable document handle."""

    @property
    @abstractmethod
    def page_count(self) -> int: ...

    @abstractmethod
    async def get_text_fragments(self, page_number: int) -> list[str]:
        """Return the text fragments of a 1-based page, in reading order."""
        ...

    @abstractmethod
    def get_metadata(self) -> dict[str, str]:
        """Return embedded metadata keyed by DocumentMetadata field name."""
        ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def _describe_error(error: Exception) -> str:
    # pdfplumber wraps pdfminer errors, several of which carry no message
    inner = error.args[0] if error.args and isinstance(error.args[0], BaseException) else error
    return str(error) or type(inner).__name__


def _coerce_metadata_value(value) -> str | None:
    if value is None:
        return None
    if hasattr(value, "name"):  # pdfminer PSLiteral
        value = value.name
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    value = str(value).strip()
    return value or None


class PdfPlumberDocument(LoadedDocument):
    def __init__(self, pdf):
        self._pdf = pdf
        # pdfminer reads every page from one shared stream
        self._lock = threading.Lock()

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    async def get_text_fragments(self, page_number: int) -> list[str]:
        return await asyncio.to_thread(self._read_fragments, page_number)

    def _read_fragments(self, page_number: int) -> list[str]:
        with self._lock:
            page = self._pdf.pages[page_number - 1]
            try:
                words = page.extract_words(use_text_flow=True)
                return [w["text"] for w in words]
            finally:
                page.close()

    def get_metadata(self) -> dict[str, str]:
        try:
            info = self._pdf.metadata or {}
        except Exception as e:
            raise MetadataError(f"Failed to read embedded metadata: {e}") from e

        metadata = {}
        for key, field_name in EMBEDDED_METADATA_FIELDS.items():
            value = _coerce_metadata_value(info.get(key))
            if value:
                metadata[field_name] = value
        return metadata

    def close(self) -> None:
        # Waits for an in-flight page read after a cancelled extraction
        with self._lock:
            self._pdf.close()


def load_pdf_document(file_data: bytes, options: LoaderOptions | None = None) -> PdfPlumberDocument:
    """Open a PDF payload, raising LoadError for anything pdfplumber cannot read."""
    import pdfplumber

    options = options or LoaderOptions.from_settings()

    if not file_data:
        raise LoadError("Empty file")
    if PDF_MAGIC not in file_data[:HEADER_SEARCH_BYTES]:
        raise LoadError("File is not a PDF (missing %PDF header)")

    try:
        pdf = pdfplumber.open(
            io.BytesIO(file_data),
            laparams={} if options.layout_analysis else None,
            password=options.password,
            strict_metadata=False,
            unicode_norm=options.unicode_norm,
        )
    except Exception as e:
        reason = _describe_error(e)
        logger.warning(f"pdfplumber could not open document: {reason}")
        raise LoadError(f"Could not open PDF (corrupt, encrypted or unsupported): {reason}") from e

    try:
        # Resolves the page tree so a broken one fails here rather than mid-extraction
        len(pdf.pages)
    except Exception as e:
        pdf.close()
        raise LoadError(f"Could not read PDF page tree: {_describe_error(e)}") from e

    return PdfPlumberDocument(pdf)
