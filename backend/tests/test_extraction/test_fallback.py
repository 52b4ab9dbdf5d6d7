from paperlens.services.extraction.base import FallbackExtraction
from paperlens.services.extraction.fallback import build_fallback_result
from paperlens.services.extraction.text_cleaner import count_words, normalize_text


class TestFallbackResult:
    def test_single_page_error_report(self):
        result = build_fallback_result("thesis.pdf", 2048, ValueError("xref table is damaged"))

        assert isinstance(result, FallbackExtraction)
        assert result.kind == "fallback"
        assert result.metadata.page_count == 1
        assert len(result.pages) == 1
        assert result.pages[0].page_number == 1
        assert result.structure.sections == ("Error Report",)

    def test_diagnostic_text(self):
        result = build_fallback_result("thesis.pdf", 2048, ValueError("xref table is damaged"))

        assert "thesis.pdf" in result.text
        assert "xref table is damaged" in result.text
        assert "OCR" in result.text
        assert "password protected" in result.text
        assert "corrupted" in result.text
        assert "too large" in result.text
        assert result.error == "xref table is damaged"

    def test_word_count_consistent(self):
        result = build_fallback_result("a.pdf", 10, "boom")

        assert result.text == normalize_text(result.text)
        assert result.metadata.word_count == count_words(result.text)
        assert result.pages[0].word_count == result.metadata.word_count

    def test_metadata_fields(self):
        result = build_fallback_result("a.pdf", 10, RuntimeError("boom"))

        assert result.metadata.file_name == "a.pdf"
        assert result.metadata.file_size == 10
        assert result.metadata.extraction_method == "fallback"
        assert not result.structure.has_abstract

    def test_exception_without_message(self):
        result = build_fallback_result("a.pdf", 10, TimeoutError())
        assert result.error == "TimeoutError"
