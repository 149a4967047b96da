from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from payslip.extraction.assembler import PayslipAssembler
from payslip.extraction.exceptions import PayslipParseError
from payslip.extraction.line_items import LineItemExtractor
from payslip.extraction.models import ExtractedLineItem, ProcessedPayslip, RawPage, Source
from payslip.pdf.exceptions import ExtractionError
from payslip.pdf.pdfplumber_adapter import PdfPlumberAdapter


def _fixed_clock() -> datetime:
    return datetime(2025, 6, 10, 12, 0)


def _make_assembler(pages: list[RawPage], **kwargs: object) -> PayslipAssembler:
    pdf_extractor = MagicMock()
    pdf_extractor.extract.return_value = pages
    return PayslipAssembler(pdf_extractor=pdf_extractor, clock=_fixed_clock, **kwargs)  # type: ignore[arg-type]


class TestAssemble:
    def test_erp_end_to_end_from_text(self) -> None:
        page = RawPage(text="Competência: 01/2024 0002 VENCIMENTO R$ 2.500,00", page_number=1)
        result = _make_assembler([page]).assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert result == [
            ProcessedPayslip(
                date="01/2024",
                source=Source.ERP,
                items=[
                    ExtractedLineItem(
                        code="0002", description="VENCIMENTO", value=Decimal("2500.00")
                    )
                ],
            )
        ]

    def test_rh_end_to_end_with_short_code(self) -> None:
        page = RawPage(text="Março de 2024 2 INSS 30 03.2024 350,00", page_number=1)
        result = _make_assembler([page]).assemble(b"%PDF-fake", ["0002"], Source.RH)
        assert result[0].date == "03/2024"
        assert result[0].items[0].code == "0002"
        assert result[0].items[0].value == Decimal("350.00")

    def test_keeps_page_order_and_drops_pages_without_items(self) -> None:
        pages = [
            RawPage(text="Competência: 02/2024 0002 VENC 2,00", page_number=1),
            RawPage(text="Competência: 03/2024 0900 OUTROS 9,00", page_number=2),
            RawPage(text="Competência: 01/2024 0002 VENC 1,00", page_number=3),
        ]
        result = _make_assembler(pages).assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert [p.date for p in result] == ["02/2024", "01/2024"]

    def test_drops_pages_without_period(self) -> None:
        pages = [
            RawPage(text="0002 VENC 5,00", page_number=1),
            RawPage(text="Competência: 01/2024 0002 VENC 1,00", page_number=2),
        ]
        result = _make_assembler(pages).assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert len(result) == 1
        assert result[0].date == "01/2024"

    def test_returns_placeholder_when_nothing_matches(self) -> None:
        pages = [RawPage(text="Competência: 01/2024 0900 OUTROS 9,00", page_number=1)]
        result = _make_assembler(pages).assemble(b"%PDF-fake", ["0002"], Source.RH)
        assert result == [ProcessedPayslip(date="06/2025", source=Source.RH, items=[])]
        assert result[0].is_placeholder

    def test_returns_placeholder_for_zero_pages(self) -> None:
        result = _make_assembler([]).assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert len(result) == 1
        assert result[0].items == []

    def test_placeholder_defaults_to_system_clock(self) -> None:
        pdf_extractor = MagicMock()
        pdf_extractor.extract.return_value = []
        result = PayslipAssembler(pdf_extractor).assemble(b"x", ["0002"], Source.ERP)
        now = datetime.now()
        assert result[0].date == f"{now.month:02d}/{now.year}"

    def test_fallback_dates_unresolved_pages_with_current_month(self) -> None:
        pages = [RawPage(text="0002 VENC 5,00", page_number=1)]
        assembler = _make_assembler(pages, fallback_to_current_period=True)
        result = assembler.assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert result[0].date == "06/2025"
        assert result[0].items[0].value == Decimal("5.00")

    def test_page_parse_error_does_not_abort_document(self) -> None:
        item_extractor = MagicMock(spec=LineItemExtractor)
        item_extractor.extract.side_effect = [
            PayslipParseError("broken page"),
            [ExtractedLineItem(code="0002", description="VENC", value=Decimal("1"))],
        ]
        pages = [
            RawPage(text="Competência: 01/2024", page_number=1),
            RawPage(text="Competência: 02/2024", page_number=2),
        ]
        assembler = _make_assembler(pages, item_extractor=item_extractor)
        result = assembler.assemble(b"%PDF-fake", ["0002"], Source.ERP)
        assert [p.date for p in result] == ["02/2024"]

    def test_extraction_error_propagates(self) -> None:
        pdf_extractor = MagicMock()
        pdf_extractor.extract.side_effect = ExtractionError("corrupt")
        assembler = PayslipAssembler(pdf_extractor)
        with pytest.raises(ExtractionError, match="corrupt"):
            assembler.assemble(b"garbage", ["0002"], Source.ERP)


class TestAssembleRealPdf:
    def test_erp_document(self, erp_payslip_pdf_bytes: bytes) -> None:
        assembler = PayslipAssembler(PdfPlumberAdapter(), clock=_fixed_clock)
        result = assembler.assemble(erp_payslip_pdf_bytes, ["0002", "0501"], Source.ERP)
        assert [p.date for p in result] == ["01/2024", "02/2024"]
        assert result[0].items == [
            ExtractedLineItem(code="0002", description="VENCIMENTO", value=Decimal("3000.00")),
            ExtractedLineItem(code="0501", description="INSS", value=Decimal("275.00")),
        ]
        assert result[1].items == [
            ExtractedLineItem(code="0002", description="VENCIMENTO", value=Decimal("2600.00")),
        ]

    def test_rh_document(self, rh_payslip_pdf_bytes: bytes) -> None:
        assembler = PayslipAssembler(PdfPlumberAdapter(), clock=_fixed_clock)
        result = assembler.assemble(rh_payslip_pdf_bytes, ["0002", "0153"], Source.RH)
        assert len(result) == 1
        assert result[0].date == "01/2024"
        assert {item.code: item.value for item in result[0].items} == {
            "0002": Decimal("350.00"),
            "0153": Decimal("1200.50"),
        }

    def test_blank_document_returns_placeholder(self, empty_pdf_bytes: bytes) -> None:
        assembler = PayslipAssembler(PdfPlumberAdapter(), clock=_fixed_clock)
        result = assembler.assemble(empty_pdf_bytes, ["0002"], Source.ERP)
        assert result == [ProcessedPayslip(date="06/2025", source=Source.ERP, items=[])]
