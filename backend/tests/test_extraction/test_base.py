import pytest

from paperlens.services.extraction.base import (
    DocumentMetadata,
    DocumentStructure,
    FallbackExtraction,
    PageRecord,
    SuccessfulExtraction,
)


def _metadata(page_count: int) -> DocumentMetadata:
    return DocumentMetadata(page_count=page_count, word_count=2, file_size=10, file_name="x.pdf")


def _pages(*numbers: int) -> tuple[PageRecord, ...]:
    return tuple(PageRecord(page_number=n, text="some text", word_count=2) for n in numbers)


class TestExtractionResultInvariants:
    def test_valid_result(self):
        result = SuccessfulExtraction(
            text="some text", metadata=_metadata(2), pages=_pages(1, 2), structure=DocumentStructure()
        )
        assert result.total_pages == 2
        assert result.kind == "success"

    def test_page_count_mismatch_rejected(self):
        with pytest.raises(ValueError, match="page_count"):
            SuccessfulExtraction(
                text="some text", metadata=_metadata(3), pages=_pages(1, 2), structure=DocumentStructure()
            )

    def test_duplicate_page_numbers_rejected(self):
        with pytest.raises(ValueError, match="ascending"):
            SuccessfulExtraction(
                text="some text", metadata=_metadata(2), pages=_pages(1, 1), structure=DocumentStructure()
            )

    def test_out_of_order_pages_rejected(self):
        with pytest.raises(ValueError, match="ascending"):
            FallbackExtraction(
                text="some text", metadata=_metadata(2), pages=_pages(2, 1), structure=DocumentStructure()
            )
