"""
Rule-based derivation of title, authors, abstract and keywords from text.
Used when the document's embedded metadata is missing or unreliable.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from paperlens.core.logging import get_logger

logger = get_logger(__name__)

TITLE_SCAN_LINES = 5
MAX_AUTHORS = 10
MAX_KEYWORDS = 10
MAX_ABSTRACT_CHARS = 1000

TITLE_START = re.compile(r"[A-Z]")

AUTHOR_PATTERNS = [
    # "Authors: John Doe, Jane Smith" / "by John Doe"
    re.compile(r"\b(?:authors?|by)\b[^\S\n]*:?[^\S\n]*([^\s:][^\n]*)", re.IGNORECASE),
    # A line opening with capitalized two-word names
    re.compile(
        r"^([A-Z][a-z]+\s+[A-Z][a-z]+(?:\s*,\s*[A-Z][a-z]+\s+[A-Z][a-z]+)*)",
        re.MULTILINE,
    ),
]

ABSTRACT_PATTERN = re.compile(
    r"\babstract\b\s*:?\s*(.*?)(?=\n\s*\n|\b(?:introduction|keywords)\b|\b1\.|\Z)",
    re.IGNORECASE | re.DOTALL,
)

KEYWORDS_PATTERN = re.compile(
    r"\bkeywords?\b\s*:?\s*(.*?)(?=\n\s*\n|\b(?:introduction|abstract)\b|\Z)",
    re.IGNORECASE | re.DOTALL,
)

KEYWORD_SEPARATOR = re.compile(r"[,;]")


@dataclass(frozen=True)
class HeuristicMetadata:
    title: str | None = None
    authors: tuple[str, ...] = ()
    abstract: str | None = None
    keywords: tuple[str, ...] = ()


def extract_title(text: str) -> str | None:
    for line in text.split("\n")[:TITLE_SCAN_LINES]:
        candidate = line.strip()
        if (
            10 < len(candidate) < 200
            and not candidate.endswith(".")
            and TITLE_START.match(candidate)
            and "abstract" not in candidate.lower()
        ):
            return candidate
    return None


def extract_authors(text: str) -> list[str]:
    for pattern in AUTHOR_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        authors = [a.strip() for a in match.group(1).split(",")]
        authors = [a for a in authors if 3 < len(a) < 50][:MAX_AUTHORS]
        if authors:
            return authors
    return []


def extract_abstract(text: str) -> str | None:
    match = ABSTRACT_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).strip()[:MAX_ABSTRACT_CHARS]


def extract_keywords(text: str) -> list[str]:
    match = KEYWORDS_PATTERN.search(text)
    if not match:
        return []
    keywords = [k.strip() for k in KEYWORD_SEPARATOR.split(match.group(1))]
    return [k for k in keywords if 2 < len(k) < 50][:MAX_KEYWORDS]


class MetadataStrategy(ABC):
    @abstractmethod
    def extract(self, text: str) -> HeuristicMetadata:
        """Derive bibliographic metadata from normalized document text."""
        ...


class RegexMetadataStrategy(MetadataStrategy):
    """Runs each regex heuristic independently; one failing leaves the others intact."""

    def _safe(self, name: str, func, text: str, default):
        try:
            return func(text)
        except Exception as e:
            logger.warning(f"Heuristic '{name}' failed: {e}")
            return default

    def extract(self, text: str) -> HeuristicMetadata:
        return HeuristicMetadata(
            title=self._safe("title", extract_title, text, None),
            authors=tuple(self._safe("authors", extract_authors, text, [])),
            abstract=self._safe("abstract", extract_abstract, text, None),
            keywords=tuple(self._safe("keywords", extract_keywords, text, [])),
        )
