import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def _render(pages: list[list[str]]) -> bytes:
    """Render each page as a list of text lines, top to bottom."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 800
        for line in lines:
            c.drawString(40, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _render([["Hello PDF World"]])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _render([["Page one content"], ["Page two content"]])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _render([[]])


@pytest.fixture()
def erp_payslip_pdf_bytes() -> bytes:
    """Two ERP payslips plus a cover page without any period."""
    return _render(
        [
            ["DEMONSTRATIVO DE PAGAMENTO", "Documento sem competencia"],
            [
                "DEMONSTRATIVO DE PAGAMENTO",
                "Data de Admissao: 01/03/2015",
                "Competencia: 01/2024",
                "0002 VENCIMENTO R$ 2.500,00",
                "0501 INSS R$ 275,00",
                "0002 VENCIMENTO R$ 500,00",
            ],
            [
                "DEMONSTRATIVO DE PAGAMENTO",
                "Competencia: 02/2024",
                "0002 VENCIMENTO R$ 2.600,00",
                "0900 OUTROS R$ 10,00",
            ],
        ]
    )


@pytest.fixture()
def rh_payslip_pdf_bytes() -> bytes:
    """One RH payslip with short codes and extra columns."""
    return _render(
        [
            [
                "CONTRACHEQUE",
                "Janeiro de 2024",
                "2 INSS 30 01.2024 350,00",
                "153 GRATIFICACAO 1.200,50",
            ],
        ]
    )
