import re

import pytest

from payslip.extraction.exceptions import PeriodNotFoundError
from payslip.extraction.models import Period, Source
from payslip.extraction.period import PeriodResolver, PeriodRule


@pytest.fixture(scope="module")
def resolver() -> PeriodResolver:
    return PeriodResolver()


class TestErpRules:
    def test_competency_label(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("Competência: 03/2024 0002 VENC", Source.ERP) == "03/2024"

    def test_unaccented_label(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("COMPETENCIA 11/2023", Source.ERP) == "11/2023"

    def test_period_label(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("Período: 07-2022", Source.ERP) == "07/2022"

    def test_label_wins_over_earlier_bare_date(self, resolver: PeriodResolver) -> None:
        text = "Emitido 05/2020 ... Competência: 03/2024"
        assert resolver.resolve_period(text, Source.ERP) == "03/2024"

    def test_admission_date_is_not_taken_as_period(self, resolver: PeriodResolver) -> None:
        text = "Data de Admissão: 01/03/2015 Matrícula 123 Mês 04/2024"
        assert resolver.resolve_period(text, Source.ERP) == "04/2024"

    def test_bare_fallback(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("FOLHA 09/2021 0002 X 1,00", Source.ERP) == "09/2021"

    def test_invalid_month_is_skipped(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("13/2024 then 12/2024", Source.ERP) == "12/2024"

    def test_month_names_are_not_erp_rules(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("Janeiro de 2024", Source.ERP) is None


class TestRhRules:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Março de 2024", "03/2024"),
            ("MARCO DE 2024", "03/2024"),
            ("fevereiro/2023", "02/2023"),
            ("Referente a dezembro 2022", "12/2022"),
            ("Mês: SET/2021", "09/2021"),
        ],
    )
    def test_month_names(self, resolver: PeriodResolver, text: str, expected: str) -> None:
        assert resolver.resolve_period(text, Source.RH) == expected

    def test_month_name_wins_over_numeric(self, resolver: PeriodResolver) -> None:
        text = "Admissão 02/2010 Pagamento de Maio de 2024"
        assert resolver.resolve_period(text, Source.RH) == "05/2024"

    def test_numeric_fallback(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("CONTRACHEQUE 06/2024", Source.RH) == "06/2024"

    def test_month_inside_word_is_ignored(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("maiores 2024", Source.RH) is None


class TestResolve:
    def test_returns_period(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve("Competência: 01/2024", Source.ERP) == Period(2024, 1)

    def test_raises_when_nothing_matches(self, resolver: PeriodResolver) -> None:
        with pytest.raises(PeriodNotFoundError):
            resolver.resolve("no date here", Source.RH)

    def test_empty_text(self, resolver: PeriodResolver) -> None:
        assert resolver.resolve_period("", Source.ERP) is None

    def test_custom_rules_are_tried_in_order(self) -> None:
        custom = PeriodRule(
            name="ano-mes",
            pattern=re.compile(r"(?P<year>\d{4})(?P<month>\d{2})"),
            build=lambda m: Period(int(m.group("year")), int(m.group("month"))),
        )
        resolver = PeriodResolver(rules={Source.ERP: (custom,)})
        assert resolver.resolve_period("ref 202405 or 03/2024", Source.ERP) == "05/2024"

    def test_fold_removes_accents(self, resolver: PeriodResolver) -> None:
        assert resolver.fold("Competência MARÇO") == "competencia marco"
