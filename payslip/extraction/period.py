"""Reference-period resolution for payslip pages.

Each source layout has an ordered tuple of rules. Rules run against an
accent-folded, lower-cased copy of the page text and the first rule that
yields a valid month wins, so label-anchored rules must come before the
context-free ``MM/YYYY`` rule. New layouts are supported by adding rules,
not by changing the matching loop.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar

import icu  # type: ignore[import-untyped]

from payslip.extraction.exceptions import PeriodNotFoundError
from payslip.extraction.models import Period, Source
from payslip.logging.logger import Log

MONTH_NAMES: dict[str, int] = {
    "janeiro": 1,
    "fevereiro": 2,
    "março": 3,
    "marco": 3,
    "abril": 4,
    "maio": 5,
    "junho": 6,
    "julho": 7,
    "agosto": 8,
    "setembro": 9,
    "outubro": 10,
    "novembro": 11,
    "dezembro": 12,
}

MONTH_ABBREVIATIONS: dict[str, int] = {
    "jan": 1,
    "fev": 2,
    "mar": 3,
    "abr": 4,
    "mai": 5,
    "jun": 6,
    "jul": 7,
    "ago": 8,
    "set": 9,
    "out": 10,
    "nov": 11,
    "dez": 12,
}

# Folded text never contains accents, so only the ASCII spellings take part.
_FOLDED_MONTHS = "|".join(name for name in MONTH_NAMES if name.isascii())
_ABBREVIATIONS = "|".join(MONTH_ABBREVIATIONS)


@dataclass(frozen=True)
class PeriodRule:
    """A named pattern and the function turning its match into a Period."""

    name: str
    pattern: re.Pattern[str]
    build: Callable[[re.Match[str]], Period]

    def first_match(self, folded_text: str) -> Period | None:
        for match in self.pattern.finditer(folded_text):
            try:
                return self.build(match)
            except ValueError:
                continue
        return None


def _numeric(match: re.Match[str]) -> Period:
    return Period(year=int(match.group("year")), month=int(match.group("month")))


def _named(match: re.Match[str]) -> Period:
    return Period(year=int(match.group("year")), month=MONTH_NAMES[match.group("month")])


def _abbreviated(match: re.Match[str]) -> Period:
    return Period(
        year=int(match.group("year")),
        month=MONTH_ABBREVIATIONS[match.group("month")],
    )


_NUMERIC_PERIOD = r"(?P<month>\d{1,2})\s*[/\-. ]\s*(?P<year>\d{4})(?!\d)"

REFERENCE_LABEL_RULE = PeriodRule(
    name="reference-label",
    pattern=re.compile(
        r"\b(?:competencia|periodo(?: de referencia)?|(?:mes|data)(?: de)? referencia"
        r"|referencia)\b\s*:?\s*" + _NUMERIC_PERIOD
    ),
    build=_numeric,
)

DATE_LABEL_RULE = PeriodRule(
    name="date-label",
    pattern=re.compile(r"\bdata[^:]{0,30}?:\s*" + _NUMERIC_PERIOD),
    build=_numeric,
)

BARE_NUMERIC_RULE = PeriodRule(
    name="bare-numeric",
    pattern=re.compile(r"(?<![\d/\-.])(?P<month>\d{2})[/\-](?P<year>\d{4})(?![\d/\-])"),
    build=_numeric,
)

MONTH_NAME_RULE = PeriodRule(
    name="month-name",
    pattern=re.compile(
        rf"\b(?P<month>{_FOLDED_MONTHS})\b\s*(?:/\s*|de\s+)?(?P<year>\d{{4}})\b"
    ),
    build=_named,
)

MONTH_ABBREVIATION_RULE = PeriodRule(
    name="month-abbreviation",
    pattern=re.compile(rf"\b(?P<month>{_ABBREVIATIONS})\s*/\s*(?P<year>\d{{4}})\b"),
    build=_abbreviated,
)


class PeriodResolver:
    """Finds the reference month of a page using per-source rule cascades."""

    _ICU_TRANSFORM: ClassVar[str] = "Latin-ASCII; Lower"

    DEFAULT_RULES: ClassVar[dict[Source, tuple[PeriodRule, ...]]] = {
        Source.ERP: (REFERENCE_LABEL_RULE, DATE_LABEL_RULE, BARE_NUMERIC_RULE),
        Source.RH: (
            MONTH_NAME_RULE,
            MONTH_ABBREVIATION_RULE,
            REFERENCE_LABEL_RULE,
            DATE_LABEL_RULE,
            BARE_NUMERIC_RULE,
        ),
    }

    def __init__(
        self,
        rules: dict[Source, tuple[PeriodRule, ...]] | None = None,
    ) -> None:
        self._rules = rules if rules is not None else self.DEFAULT_RULES
        self._transliterator: icu.Transliterator = icu.Transliterator.createInstance(
            self._ICU_TRANSFORM
        )

    def fold(self, text: str) -> str:
        """Return *text* without accents and in lower case."""
        return self._transliterator.transliterate(text)

    def resolve(self, text: str, source: Source) -> Period:
        """Return the period of *text*.

        Raises:
            PeriodNotFoundError: if no rule for *source* matches.
        """
        folded = self.fold(text)
        for rule in self._rules.get(source, ()):
            period = rule.first_match(folded)
            if period is not None:
                Log.debug(f"Period {period} resolved by rule '{rule.name}'")
                return period
        raise PeriodNotFoundError(f"No {source.value} period found in page text")

    def resolve_period(self, text: str, source: Source) -> str | None:
        """Return the ``MM/YYYY`` key of *text*, or None when not found."""
        try:
            return str(self.resolve(text, source))
        except PeriodNotFoundError:
            return None
