import pytest

from payslip.extraction.models import RawPage
from payslip.pdf.exceptions import ExtractionError
from payslip.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPyMuPdfAdapter:
    def test_extract_returns_one_page(self, sample_pdf_bytes: bytes) -> None:
        pages = PyMuPdfAdapter().extract(sample_pdf_bytes)
        assert pages == [RawPage(text="Hello PDF World", page_number=1)]

    def test_extract_multi_page_keeps_order(self, multi_page_pdf_bytes: bytes) -> None:
        pages = PyMuPdfAdapter().extract(multi_page_pdf_bytes)
        assert [p.page_number for p in pages] == [1, 2]
        assert pages[0].text == "Page one content"
        assert pages[1].text == "Page two content"

    def test_extract_blank_page_returns_empty_text(self, empty_pdf_bytes: bytes) -> None:
        pages = PyMuPdfAdapter().extract(empty_pdf_bytes)
        assert pages == [RawPage(text="", page_number=1)]

    def test_extract_collapses_lines_into_single_spaces(
        self, erp_payslip_pdf_bytes: bytes
    ) -> None:
        pages = PyMuPdfAdapter().extract(erp_payslip_pdf_bytes)
        assert len(pages) == 3
        assert "\n" not in pages[1].text
        assert "  " not in pages[1].text
        assert "Competencia: 01/2024 0002 VENCIMENTO R$ 2.500,00" in pages[1].text

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(ExtractionError):
            PyMuPdfAdapter().extract(b"not a pdf")
