from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal


@dataclass(frozen=True)
class PageRecord:
    page_number: int
    text: str
    word_count: int


@dataclass(frozen=True)
class DocumentMetadata:
    page_count: int
    word_count: int
    file_size: int
    file_name: str
    extracted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None
    # Derived from the text by the metadata heuristics
    authors: tuple[str, ...] = ()
    abstract: str | None = None
    keywords: tuple[str, ...] = ()
    # Pages present in the binary; differs from page_count when truncated
    source_page_count: int = 0
    truncated: bool = False
    extraction_method: str = "pdfplumber"


@dataclass(frozen=True)
class DocumentStructure:
    has_abstract: bool = False
    has_introduction: bool = False
    has_methodology: bool = False
    has_results: bool = False
    has_conclusion: bool = False
    has_references: bool = False
    sections: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractionResult:
    text: str
    metadata: DocumentMetadata
    pages: tuple[PageRecord, ...]
    structure: DocumentStructure

    def __post_init__(self):
        if self.metadata.page_count != len(self.pages):
            raise ValueError(
                f"page_count {self.metadata.page_count} does not match {len(self.pages)} pages"
            )
        numbers = [p.page_number for p in self.pages]
        if any(b <= a for a, b in zip(numbers, numbers[1:])):
            raise ValueError("pages must be strictly ascending by page_number")

    @property
    def total_pages(self) -> int:
        return self.metadata.page_count


@dataclass(frozen=True)
class SuccessfulExtraction(ExtractionResult):
    kind: Literal["success"] = "success"


@dataclass(frozen=True)
class FallbackExtraction(ExtractionResult):
    error: str = ""
    kind: Literal["fallback"] = "fallback"


class DocumentExtractor(ABC):
    @abstractmethod
    async def aextract(
        self, file_data: bytes, filename: str, file_size: int | None = None
    ) -> ExtractionResult:
        """Extract text, metadata and structure from a document."""
        ...

    @abstractmethod
    def extract(
        self, file_data: bytes, filename: str, file_size: int | None = None
    ) -> ExtractionResult:
        """Blocking variant of aextract for callers without an event loop."""
        ...
