from dataclasses import asdict
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from paperlens.services.extraction.base import ExtractionResult, FallbackExtraction


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PageResponse(CamelModel):
    page_number: int
    text: str
    word_count: int


class MetadataResponse(CamelModel):
    title: str | None = None
    author: str | None = None
    subject: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: str | None = None
    modification_date: str | None = None
    page_count: int
    word_count: int
    extracted_at: datetime
    file_size: int
    file_name: str
    authors: list[str] = Field(default_factory=list)
    abstract: str | None = None
    keywords: list[str] = Field(default_factory=list)
    source_page_count: int = 0
    truncated: bool = False
    extraction_method: str


class StructureResponse(CamelModel):
    has_abstract: bool
    has_introduction: bool
    has_methodology: bool
    has_results: bool
    has_conclusion: bool
    has_references: bool
    sections: list[str]


class ExtractionResponse(CamelModel):
    status: Literal["success", "fallback"]
    error: str | None = None
    text: str
    metadata: MetadataResponse
    pages: list[PageResponse]
    structure: StructureResponse

    @classmethod
    def from_result(cls, result: ExtractionResult) -> "ExtractionResponse":
        return cls(
            status="fallback" if isinstance(result, FallbackExtraction) else "success",
            error=result.error if isinstance(result, FallbackExtraction) else None,
            text=result.text,
            metadata=MetadataResponse.model_validate(asdict(result.metadata)),
            pages=[PageResponse.model_validate(asdict(p)) for p in result.pages],
            structure=StructureResponse.model_validate(asdict(result.structure)),
        )
