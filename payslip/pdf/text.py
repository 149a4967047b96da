import re
import unicodedata

from payslip.extraction.models import RawPage

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_page_text(text: str) -> str:
    """Collapse whitespace and drop control/non-printable characters.

    Text is NFC-normalized first so accented letters coming out of
    embedded fonts as base letter + combining mark end up precomposed.
    """
    if not text:
        return ""
    normalized = unicodedata.normalize("NFC", text)
    cleaned = "".join(
        " " if ch.isspace() else ch
        for ch in normalized
        if ch.isspace() or not unicodedata.category(ch).startswith("C")
    )
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def build_pages(raw_texts: list[str]) -> list[RawPage]:
    """Wrap raw per-page strings into 1-based RawPage objects."""
    return [
        RawPage(text=normalize_page_text(raw), page_number=index)
        for index, raw in enumerate(raw_texts, start=1)
    ]
