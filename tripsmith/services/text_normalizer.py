"""
Line-level helpers shared by the checklist and activity parsers.

All functions are pure and total: they accept any string (or None where
noted) and never raise.
"""
import re
from typing import List, Optional

EMPHASIS = "**"

# A leading run of bullets, digits and dots, e.g. "- ", "2. ", "•", "**".
_LEADING_MARKERS = re.compile(r"^[-*•\d.]+")
_ASTERISKS = re.compile(r"\*+")
_LINE_BREAKS = re.compile(r"\r\n|\r|\n")

def segment_lines(text: Optional[str]) -> List[str]:
    """Splits text into stripped lines, dropping blank ones. None gives []."""
    if not text:
        return []
    return [line.strip() for line in _LINE_BREAKS.split(text) if line.strip()]

def strip_emphasis(text: str) -> str:
    """Removes every `**` emphasis marker."""
    return text.replace(EMPHASIS, "")

def normalize_title(line: str) -> str:
    """
    Cleans a heading line for display: asterisks go, then a single
    trailing colon, then surrounding whitespace.

    >>> normalize_title("**Clothing:**")
    'Clothing'
    """
    title = _ASTERISKS.sub("", line).strip()
    if title.endswith(":"):
        title = title[:-1]
    return title.strip()

def normalize_label(line: str) -> str:
    """
    Strips the leading bullet/numbering run from an item line.

    >>> normalize_label("2. Passport")
    'Passport'
    """
    return _LEADING_MARKERS.sub("", line, count=1).strip()
