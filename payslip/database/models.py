from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class PayrollDataRecord:
    """Represents a row from the payroll_data table."""

    id: int
    user_id: int
    date: str
    source: str
    code_data: list[dict[str, Any]]
    created_at: datetime | None = None


@dataclass
class CodeGroupRecord:
    """Represents a row from the code_groups table."""

    id: int
    user_id: int
    display_name: str
    codes: str


@dataclass
class TemplateRecord:
    """Represents a row from the templates table: a saved wanted-code list."""

    id: int
    user_id: int
    name: str
    codes: str
