import asyncio
from pathlib import PurePath
from typing import Callable

from paperlens.config import settings
from paperlens.core.exceptions import ExtractionTimeoutError, FileTooLargeError
from paperlens.core.logging import get_logger
from paperlens.core.observer import EventEmitter, EventKind, ExtractionObserver, LoggingObserver
from paperlens.services.extraction.base import (
    DocumentExtractor,
    DocumentMetadata,
    ExtractionResult,
    PageRecord,
    SuccessfulExtraction,
)
from paperlens.services.extraction.fallback import build_fallback_result
from paperlens.services.extraction.file_guard import check_file_size
from paperlens.services.extraction.loader import LoadedDocument, LoaderOptions, load_pdf_document
from paperlens.services.extraction.metadata_heuristics import (
    HeuristicMetadata,
    MetadataStrategy,
    RegexMetadataStrategy,
)
from paperlens.services.extraction.page_extractor import BatchedPageExtractor
from paperlens.services.extraction.structure_analyzer import StructureAnalyzer
from paperlens.services.extraction.text_cleaner import count_words, normalize_text

logger = get_logger(__name__)

DocumentLoader = Callable[[bytes, LoaderOptions], LoadedDocument]


class PdfExtractor(DocumentExtractor):
    """Ingestion pipeline turning a PDF payload into an ExtractionResult.

    Stages: size check, load, batched page extraction, normalization, then
    structure analysis and metadata heuristics. Any failure other than a
    locally absorbed page, batch or metadata error produces a fallback
    result; nothing is raised to the caller.
    """

    def __init__(
        self,
        loader: DocumentLoader = load_pdf_document,
        loader_options: LoaderOptions | None = None,
        page_extractor: BatchedPageExtractor | None = None,
        structure_analyzer: StructureAnalyzer | None = None,
        metadata_strategy: MetadataStrategy | None = None,
        observer: ExtractionObserver | None = None,
        max_file_size_mb: int | None = None,
        timeout_seconds: float | None = None,
    ):
        self.loader = loader
        self.loader_options = loader_options or LoaderOptions.from_settings()
        self.page_extractor = page_extractor or BatchedPageExtractor()
        self.structure_analyzer = structure_analyzer or StructureAnalyzer()
        self.metadata_strategy = metadata_strategy or RegexMetadataStrategy()
        self.observer = observer or LoggingObserver()
        self.max_file_size_mb = max_file_size_mb or settings.max_file_size_mb
        self.timeout_seconds = (
            settings.extraction_timeout_seconds if timeout_seconds is None else timeout_seconds
        )

    def extract(
        self, file_data: bytes, filename: str, file_size: int | None = None
    ) -> ExtractionResult:
        """Blocking entry point. Must not be called from a running event loop."""
        return asyncio.run(self.aextract(file_data, filename, file_size))

    async def aextract(
        self, file_data: bytes, filename: str, file_size: int | None = None
    ) -> ExtractionResult:
        size = len(file_data) if file_size is None else file_size
        emitter = EventEmitter(self.observer, filename)

        try:
            emitter.emit(EventKind.STAGE_ENTERED, "file_guard", size=size)
            check_file_size(size, self.max_file_size_mb)

            if self.timeout_seconds and self.timeout_seconds > 0:
                try:
                    return await asyncio.wait_for(
                        self._run(file_data, filename, size, emitter), self.timeout_seconds
                    )
                except TimeoutError as e:
                    raise ExtractionTimeoutError(self.timeout_seconds) from e
            return await self._run(file_data, filename, size, emitter)

        except FileTooLargeError as e:
            logger.warning(f"Rejected {filename}: {e.message}")
            return self._fallback(filename, size, e, emitter)
        except Exception as e:
            logger.error(f"Extraction failed for {filename}: {e}", exc_info=True)
            return self._fallback(filename, size, e, emitter)

    def _fallback(self, filename: str, size: int, error: Exception, emitter: EventEmitter):
        result = build_fallback_result(filename, size, error)
        emitter.emit(EventKind.FALLBACK_BUILT, "fallback", error=result.error)
        return result

    async def _run(
        self, file_data: bytes, filename: str, size: int, emitter: EventEmitter
    ) -> SuccessfulExtraction:
        emitter.emit(EventKind.STAGE_ENTERED, "load")
        document = await asyncio.to_thread(self.loader, file_data, self.loader_options)

        with document:
            embedded = self._read_embedded_metadata(document, emitter)
            source_page_count = document.page_count

            emitter.emit(EventKind.STAGE_ENTERED, "pages", page_count=source_page_count)
            pages = await self.page_extractor.extract_pages(document, emitter)

        emitter.emit(EventKind.STAGE_ENTERED, "normalize")
        text = normalize_text("\n\n".join(page.text for page in pages))

        emitter.emit(EventKind.STAGE_ENTERED, "structure")
        structure = self.structure_analyzer.analyze(text)

        emitter.emit(EventKind.STAGE_ENTERED, "heuristics")
        heuristics = self._run_heuristics(text, emitter)

        result = SuccessfulExtraction(
            text=text,
            metadata=self._build_metadata(
                embedded, heuristics, pages, text, filename, size, source_page_count
            ),
            pages=tuple(pages),
            structure=structure,
        )
        emitter.emit(
            EventKind.EXTRACTION_COMPLETED,
            "complete",
            pages=result.metadata.page_count,
            words=result.metadata.word_count,
            truncated=result.metadata.truncated,
        )
        return result

    def _read_embedded_metadata(self, document: LoadedDocument, emitter: EventEmitter) -> dict[str, str]:
        emitter.emit(EventKind.STAGE_ENTERED, "metadata")
        try:
            return document.get_metadata()
        except Exception as e:
            logger.warning(f"Embedded metadata unavailable: {e}")
            emitter.emit(EventKind.METADATA_FAILED, "metadata", error=str(e))
            return {}

    def _run_heuristics(self, text: str, emitter: EventEmitter) -> HeuristicMetadata:
        try:
            return self.metadata_strategy.extract(text)
        except Exception as e:
            logger.warning(f"Metadata heuristics failed: {e}")
            emitter.emit(EventKind.HEURISTIC_FAILED, "heuristics", error=str(e))
            return HeuristicMetadata()

    def _build_metadata(
        self,
        embedded: dict[str, str],
        heuristics: HeuristicMetadata,
        pages: list[PageRecord],
        text: str,
        filename: str,
        size: int,
        source_page_count: int,
    ) -> DocumentMetadata:
        title = embedded.get("title") or heuristics.title or _title_from_filename(filename)
        author = embedded.get("author") or ", ".join(heuristics.authors) or None

        return DocumentMetadata(
            page_count=len(pages),
            word_count=count_words(text),
            file_size=size,
            file_name=filename,
            title=title,
            author=author,
            subject=embedded.get("subject"),
            creator=embedded.get("creator"),
            producer=embedded.get("producer"),
            creation_date=embedded.get("creation_date"),
            modification_date=embedded.get("modification_date"),
            authors=heuristics.authors,
            abstract=heuristics.abstract,
            keywords=heuristics.keywords,
            source_page_count=source_page_count,
            truncated=source_page_count > len(pages),
        )


def _title_from_filename(filename: str) -> str | None:
    name = PurePath(filename or "").name
    if name.lower().endswith(".pdf"):
        name = name[:-4]
    return name or None
