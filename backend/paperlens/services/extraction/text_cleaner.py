"""
Text normalization for extracted document text.
Collapses whitespace, strips page-number lines and canonicalizes paragraph breaks.
"""

import re
from typing import Iterable

# Runs of whitespace that stay within one line
INLINE_WHITESPACE = re.compile(r"[^\S\n]+")
ANY_WHITESPACE = re.compile(r"\s+")
# Bare page numbers left behind by headers/footers
PAGE_NUMBER_LINE = re.compile(r"\d+")
BLANK_LINE_RUN = re.compile(r"\n{3,}")


def join_fragments(fragments: Iterable[str]) -> str:
    """Join a page's text fragments into a single line of text."""
    kept = [f for f in fragments if f and f.strip()]
    return ANY_WHITESPACE.sub(" ", " ".join(kept)).strip()


def count_words(text: str) -> int:
    return len(text.split())


def normalize_text(text: str) -> str:
    """Normalize concatenated document text.

    Whitespace runs inside a line collapse to one space, lines holding only
    digits are dropped, consecutive blank lines collapse to a single blank
    line and the result is trimmed. Normalizing twice changes nothing.
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lines = []
    for line in text.split("\n"):
        line = INLINE_WHITESPACE.sub(" ", line).strip()
        if PAGE_NUMBER_LINE.fullmatch(line):
            continue
        lines.append(line)

    cleaned = BLANK_LINE_RUN.sub("\n\n", "\n".join(lines))
    return cleaned.strip()
