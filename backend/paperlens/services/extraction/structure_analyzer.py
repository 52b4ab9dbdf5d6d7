import re

from paperlens.config import settings
from paperlens.services.extraction.base import DocumentStructure

SECTION_KEYWORDS = {
    "has_abstract": ("abstract", "summary"),
    "has_introduction": ("introduction", "background"),
    "has_methodology": ("method", "approach", "procedure"),
    "has_results": ("results", "findings", "outcomes"),
    "has_conclusion": ("conclusion", "discussion"),
    "has_references": ("references", "bibliography"),
}

HEADER_START = re.compile(r"[A-Z]")


class StructureAnalyzer:
    """Tags canonical academic-paper sections and collects header candidates."""

    def __init__(self, scan_lines: int | None = None, max_sections: int | None = None):
        self.scan_lines = scan_lines or settings.section_scan_lines
        self.max_sections = max_sections or settings.max_section_headers

    def analyze(self, text: str) -> DocumentStructure:
        lower = text.lower()
        flags = {
            name: any(keyword in lower for keyword in keywords)
            for name, keywords in SECTION_KEYWORDS.items()
        }
        return DocumentStructure(**flags, sections=tuple(self.find_section_headers(text)))

    def find_section_headers(self, text: str) -> list[str]:
        sections: list[str] = []
        for line in text.split("\n")[: self.scan_lines]:
            candidate = line.strip()
            if not 3 < len(candidate) < 100:
                continue
            if not HEADER_START.match(candidate) or "." in candidate:
                continue
            if candidate in sections:
                continue
            sections.append(candidate)
            if len(sections) >= self.max_sections:
                break
        return sections
