from collections.abc import Iterable
from decimal import Decimal

from payslip.consolidation.models import (
    CodeAliasGroup,
    CodeInfo,
    ConsolidatedRow,
    ConsolidationResult,
)
from payslip.extraction.models import Period, ProcessedPayslip
from payslip.logging.logger import Log


def build_alias_map(alias_groups: Iterable[CodeAliasGroup]) -> dict[str, str]:
    """Map every aliased raw code to its group's display name.

    A raw code listed by several groups stays with the first one.
    """
    alias_map: dict[str, str] = {}
    for group in alias_groups:
        for code in group.codes:
            current = alias_map.get(code)
            if current is None:
                alias_map[code] = group.display_name
            elif current != group.display_name:
                Log.warning(
                    f"Code {code} is in groups '{current}' and '{group.display_name}', "
                    f"keeping '{current}'"
                )
    return alias_map


def consolidate(
    payslips: Iterable[ProcessedPayslip],
    alias_groups: Iterable[CodeAliasGroup],
    chronological: bool = False,
) -> ConsolidationResult:
    """Sum payslip items per (date, display code) into a dense table.

    Rows follow the order in which dates are first seen unless
    *chronological* is set, in which case they are sorted by period.
    """
    alias_map = build_alias_map(tuple(alias_groups))

    sums: dict[str, dict[str, Decimal]] = {}
    descriptions: dict[str, str] = {}
    for payslip in payslips:
        date_sums = sums.setdefault(payslip.date, {})
        for item in payslip.items:
            display_code = alias_map.get(item.code, item.code)
            date_sums[display_code] = date_sums.get(display_code, Decimal("0")) + item.value
            if item.code in alias_map:
                descriptions.setdefault(display_code, display_code)
            elif item.description:
                descriptions.setdefault(display_code, item.description)

    display_codes: list[str] = []
    for date_sums in sums.values():
        for code in date_sums:
            if code not in display_codes:
                display_codes.append(code)

    dates = list(sums)
    if chronological:
        dates = sort_periods(dates)

    rows = [
        ConsolidatedRow(
            date=date,
            values={code: sums[date].get(code, Decimal("0")) for code in display_codes},
        )
        for date in dates
    ]
    code_info = [
        CodeInfo(code=code, description=descriptions.get(code, code))
        for code in display_codes
    ]
    Log.info(f"Consolidated {len(rows)} periods over {len(display_codes)} codes")
    return ConsolidationResult(rows=rows, display_codes=display_codes, code_info=code_info)


def sort_periods(dates: list[str]) -> list[str]:
    """Sort ``MM/YYYY`` keys chronologically; malformed keys go last."""
    parsed: list[tuple[Period, str]] = []
    malformed: list[str] = []
    for date in dates:
        try:
            parsed.append((Period.parse(date), date))
        except ValueError:
            malformed.append(date)
    parsed.sort(key=lambda pair: pair[0])
    return [date for _period, date in parsed] + malformed
