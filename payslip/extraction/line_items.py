"""Line-item extraction for the ERP and RH payslip layouts.

A dialect compiles one pattern per wanted code: the code as a standalone
token, a description fragment and a Brazilian formatted amount. The scan
threads an explicit accumulator so recurring lines of the same code are
summed into one item that keeps the first description seen.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from typing import ClassVar

from payslip.extraction.amounts import AMOUNT_PATTERN, parse_brl_amount
from payslip.extraction.exceptions import AmountParseError
from payslip.extraction.models import ExtractedLineItem, Source
from payslip.logging.logger import Log

_TOKEN_START = r"(?<![\w.,/\-])"
_CODE_TAIL = r"\.?\s+"
_VALUE = rf"(?:R\$\s*)?(?P<value>{AMOUNT_PATTERN})(?![\d,])"
_LETTER_RE = re.compile(r"[^\W\d_]")


def _description(code_boundary: str) -> str:
    # Page text is a single line: a description never runs into the next item's code.
    stop = rf"(?!R\$)(?!{code_boundary})"
    return rf"(?P<description>{stop}\S(?:{stop}.){{0,79}}?)"


class ItemDialect(ABC):
    """Layout-specific line pattern for one source system."""

    @abstractmethod
    def compile(self, code: str) -> re.Pattern[str]:
        """Build the pattern matching lines of *code*."""

    @classmethod
    def normalize_code(cls, code: str) -> str:
        """Key under which two wanted codes denote the same line."""
        return code.strip()


class ErpDialect(ItemDialect):
    """ERP lines: ``0002 VENCIMENTO R$ 2.500,00`` (currency marker optional)."""

    CODE_BOUNDARY: ClassVar[str] = _TOKEN_START + r"\d{4}\.?\s+[^\W\d_]"

    def compile(self, code: str) -> re.Pattern[str]:
        return re.compile(
            _TOKEN_START
            + re.escape(code)
            + _CODE_TAIL
            + _description(self.CODE_BOUNDARY)
            + r"\s+"
            + _VALUE
        )


class RhDialect(ItemDialect):
    """RH lines: ``2 INSS 30 01.2024 350,00``.

    Codes are printed with 1 to 4 digits and compared left-zero-padded to
    four digits. A day/quantity column and a ``MM.YYYY`` column may sit
    between the description and the value.
    """

    CODE_WIDTH: ClassVar[int] = 4
    CODE_BOUNDARY: ClassVar[str] = _TOKEN_START + r"\d{1,4}\.?\s+[^\W\d_]"

    _SKIPPED_COLUMNS: ClassVar[str] = r"(?:\d+(?:\.\d{2})?\s+)?(?:\d{2}\.\d{4}\s+)?"

    @classmethod
    def normalize_code(cls, code: str) -> str:
        code = code.strip()
        if code.isdigit() and len(code) <= cls.CODE_WIDTH:
            return code.zfill(cls.CODE_WIDTH)
        return code

    def compile(self, code: str) -> re.Pattern[str]:
        normalized = self.normalize_code(code)
        if normalized.isdigit() and len(normalized) == self.CODE_WIDTH:
            significant = normalized.lstrip("0")
            token = (
                rf"(?=\d{{1,{self.CODE_WIDTH}}}\.?\s)"
                + (r"0*" + re.escape(significant) if significant else r"0+")
            )
        else:
            token = re.escape(code)
        return re.compile(
            _TOKEN_START
            + token
            + _CODE_TAIL
            + _description(self.CODE_BOUNDARY)
            + r"\s+"
            + self._SKIPPED_COLUMNS
            + _VALUE
        )


@dataclass
class _Entry:
    first_offset: int
    description: str
    total: Decimal


@dataclass
class ItemAccumulator:
    """Per-page running totals keyed by wanted code."""

    entries: dict[str, _Entry] = field(default_factory=dict)

    def add(self, code: str, offset: int, description: str, value: Decimal) -> None:
        entry = self.entries.get(code)
        if entry is None:
            self.entries[code] = _Entry(offset, description, value)
            return
        entry.total += value
        if offset < entry.first_offset:
            entry.first_offset = offset
            entry.description = description

    def items(self) -> list[ExtractedLineItem]:
        ordered = sorted(self.entries.items(), key=lambda kv: kv[1].first_offset)
        return [
            ExtractedLineItem(code=code, description=entry.description, value=entry.total)
            for code, entry in ordered
        ]


class LineItemExtractor:
    """Scans page text for the caller's wanted codes."""

    DIALECTS: ClassVar[dict[Source, ItemDialect]] = {
        Source.ERP: ErpDialect(),
        Source.RH: RhDialect(),
    }

    def __init__(self, dialects: dict[Source, ItemDialect] | None = None) -> None:
        self._dialects = dialects if dialects is not None else self.DIALECTS

    def extract(
        self,
        text: str,
        source: Source,
        wanted_codes: list[str],
    ) -> list[ExtractedLineItem]:
        """Return summed items for the wanted codes found in *text*.

        Items come back in first-seen page order and only for codes in
        *wanted_codes*; each code appears at most once. Wanted codes that
        the dialect treats as equal are scanned once, under the first
        spelling supplied.
        """
        if not text or not wanted_codes:
            return []
        dialect = self._dialects[source]
        accumulator = ItemAccumulator()
        seen: set[str] = set()
        for code in wanted_codes:
            key = dialect.normalize_code(code) if code else ""
            if not key or key in seen:
                continue
            seen.add(key)
            accumulator = self._scan(dialect.compile(code), text, code, accumulator)
        return accumulator.items()

    def _scan(
        self,
        pattern: re.Pattern[str],
        text: str,
        code: str,
        accumulator: ItemAccumulator,
    ) -> ItemAccumulator:
        for match in _candidates(pattern, text):
            description = match.group("description").strip()
            raw_value = match.group("value")
            try:
                value = parse_brl_amount(raw_value)
            except AmountParseError as exc:
                Log.debug(f"Discarding line for code {code}: {exc}")
                continue
            accumulator.add(code, match.start(), description, value)
        return accumulator


def _candidates(pattern: re.Pattern[str], text: str) -> Iterator[re.Match[str]]:
    """Yield accepted matches; a rejected match resumes one char later."""
    pos = 0
    while True:
        match = pattern.search(text, pos)
        if match is None:
            return
        if _LETTER_RE.search(match.group("description")):
            yield match
            pos = match.end()
        else:
            pos = match.start() + 1


def extract_items(
    text: str,
    source: Source,
    wanted_codes: list[str],
) -> list[ExtractedLineItem]:
    """Module-level shortcut using the default dialects."""
    return LineItemExtractor().extract(text, source, wanted_codes)
