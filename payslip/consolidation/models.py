import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

_CODE_SEPARATOR_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class CodeAliasGroup:
    """A user-defined merge of several raw codes into one display column."""

    display_name: str
    codes: tuple[str, ...]

    @classmethod
    def from_string(cls, display_name: str, codes: str) -> "CodeAliasGroup":
        """Build a group from a stored comma/space separated code list."""
        return cls(
            display_name=display_name,
            codes=tuple(code for code in _CODE_SEPARATOR_RE.split(codes) if code),
        )


@dataclass(frozen=True)
class CodeInfo:
    """Column header: display code and its description."""

    code: str
    description: str


@dataclass
class ConsolidatedRow:
    """Summed values of every display code for one period."""

    date: str
    values: dict[str, Decimal] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {"date": self.date}
        row.update({code: float(value) for code, value in self.values.items()})
        return row


@dataclass
class ConsolidationResult:
    """Dense period x display-code table plus its column metadata."""

    rows: list[ConsolidatedRow] = field(default_factory=list)
    display_codes: list[str] = field(default_factory=list)
    code_info: list[CodeInfo] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "data": [row.as_dict() for row in self.rows],
            "codes": list(self.display_codes),
            "codeInfo": [
                {"code": info.code, "description": info.description}
                for info in self.code_info
            ],
        }
