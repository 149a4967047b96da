from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from payslip.extraction.exceptions import InvalidSourceError


class Source(str, Enum):
    """Institutional payslip layout a document was produced by."""

    ERP = "ERP"
    RH = "RH"

    @classmethod
    def parse(cls, value: str) -> "Source":
        try:
            return cls(value.strip().upper())
        except (AttributeError, ValueError) as exc:
            raise InvalidSourceError(
                f"Invalid source {value!r}. Must be one of: {[s.value for s in cls]}"
            ) from exc


@dataclass(frozen=True, order=True)
class Period:
    """Reference month of a payslip; orders chronologically."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")

    def __str__(self) -> str:
        return f"{self.month:02d}/{self.year:04d}"

    @classmethod
    def parse(cls, key: str) -> "Period":
        """Parse an ``MM/YYYY`` period key."""
        month, sep, year = key.strip().partition("/")
        if not sep or not month.isdigit() or not year.isdigit() or len(year) != 4:
            raise ValueError(f"Malformed period key: {key!r}")
        return cls(year=int(year), month=int(month))

    @classmethod
    def current(cls, now: datetime | None = None) -> "Period":
        now = now or datetime.now()
        return cls(year=now.year, month=now.month)


@dataclass(frozen=True)
class RawPage:
    """Normalized plain text of one document page (1-based page_number)."""

    text: str
    page_number: int


@dataclass
class ExtractedLineItem:
    """One payroll line: a code, its description and the summed value."""

    code: str
    description: str
    value: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "value": float(self.value),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ExtractedLineItem":
        return cls(
            code=str(raw["code"]),
            description=str(raw.get("description") or ""),
            value=Decimal(str(raw["value"])),
        )


@dataclass(frozen=True)
class ProcessedPayslip:
    """Line items found on one page, keyed by its ``MM/YYYY`` period."""

    date: str
    source: Source
    items: list[ExtractedLineItem] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return not self.items

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "source": self.source.value,
            "items": [item.to_dict() for item in self.items],
        }
