import io

import pdfplumber

from payslip.extraction.models import RawPage
from payslip.pdf.base import BasePdfExtractor
from payslip.pdf.exceptions import ExtractionError
from payslip.pdf.text import build_pages


class PdfPlumberAdapter(BasePdfExtractor):
    """Extracts per-page text from PDF using pdfplumber."""

    def extract(self, pdf_bytes: bytes) -> list[RawPage]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                raw_texts = [page.extract_text() or "" for page in pdf.pages]
            return build_pages(raw_texts)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
