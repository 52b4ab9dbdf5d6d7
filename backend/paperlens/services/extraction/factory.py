from paperlens.core.exceptions import UnsupportedFileTypeError
from paperlens.services.extraction.base import DocumentExtractor
from paperlens.services.extraction.pdf_extractor import PdfExtractor

EXTRACTOR_MAP: dict[str, type[DocumentExtractor]] = {
    "application/pdf": PdfExtractor,
    "application/x-pdf": PdfExtractor,
}


class ExtractorFactory:
    @staticmethod
    def get_extractor(mime_type: str, **kwargs) -> DocumentExtractor:
        extractor_class = EXTRACTOR_MAP.get(mime_type)
        if not extractor_class:
            raise UnsupportedFileTypeError(mime_type)
        return extractor_class(**kwargs)
