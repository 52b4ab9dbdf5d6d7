import asyncio

from paperlens.config import settings
from paperlens.core.exceptions import BatchJoinError, PageExtractionError
from paperlens.core.logging import get_logger
from paperlens.core.observer import EventEmitter, EventKind, NullObserver
from paperlens.services.extraction.base import PageRecord
from paperlens.services.extraction.loader import LoadedDocument
from paperlens.services.extraction.text_cleaner import count_words, join_fragments

logger = get_logger(__name__)


def failed_page(page_number: int) -> PageRecord:
    return PageRecord(
        page_number=page_number,
        text=f"[Page {page_number} extraction failed]",
        word_count=0,
    )


class BatchedPageExtractor:
    """Extracts page text in sequential batches of concurrently read pages.

    At most ``batch_size`` page reads are in flight at once. Each batch is
    fully joined before the next starts, with a short pause in between so
    other work on the event loop is not starved. A failing page only loses
    its own text; a failing batch only loses its own pages.
    """

    def __init__(
        self,
        batch_size: int | None = None,
        max_pages: int | None = None,
        batch_pause: float | None = None,
    ):
        self.batch_size = batch_size or settings.page_batch_size
        self.max_pages = max_pages or settings.max_pages
        self.batch_pause = settings.batch_pause_seconds if batch_pause is None else batch_pause

    async def extract_pages(
        self, document: LoadedDocument, emitter: EventEmitter | None = None
    ) -> list[PageRecord]:
        emitter = emitter or EventEmitter(NullObserver(), "")
        page_total = min(document.page_count, self.max_pages)
        records: list[PageRecord | None] = [None] * page_total

        for batch_start in range(0, page_total, self.batch_size):
            page_numbers = list(
                range(batch_start + 1, min(batch_start + self.batch_size, page_total) + 1)
            )
            batch = await self._extract_batch(document, page_numbers, emitter)

            # Slot by page number, never by completion order
            for offset, record in enumerate(batch):
                records[batch_start + offset] = record

            if batch_start + self.batch_size < page_total:
                await asyncio.sleep(self.batch_pause)

        return records

    async def _extract_batch(
        self, document: LoadedDocument, page_numbers: list[int], emitter: EventEmitter
    ) -> list[PageRecord]:
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [
                    tg.create_task(self._extract_page(document, n, emitter)) for n in page_numbers
                ]
            batch = [task.result() for task in tasks]
        except Exception as e:
            error = BatchJoinError(page_numbers, e)
            logger.warning(error.message)
            emitter.emit(
                EventKind.BATCH_FAILED, "pages", pages=f"{page_numbers[0]}-{page_numbers[-1]}", error=str(e)
            )
            return [failed_page(n) for n in page_numbers]

        emitter.emit(
            EventKind.BATCH_COMPLETED,
            "pages",
            pages=f"{page_numbers[0]}-{page_numbers[-1]}",
            failed=sum(1 for r in batch if r == failed_page(r.page_number)),
        )
        return batch

    async def _extract_page(
        self, document: LoadedDocument, page_number: int, emitter: EventEmitter
    ) -> PageRecord:
        try:
            fragments = await document.get_text_fragments(page_number)
            text = join_fragments(fragments)
            return PageRecord(page_number=page_number, text=text, word_count=count_words(text))
        except Exception as e:
            error = PageExtractionError(page_number, e)
            logger.warning(error.message)
            emitter.emit(EventKind.PAGE_FAILED, "pages", page=page_number, error=str(e))
            return failed_page(page_number)
