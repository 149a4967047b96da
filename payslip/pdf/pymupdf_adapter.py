import pymupdf

from payslip.extraction.models import RawPage
from payslip.pdf.base import BasePdfExtractor
from payslip.pdf.exceptions import ExtractionError
from payslip.pdf.text import build_pages


class PyMuPdfAdapter(BasePdfExtractor):
    """Extracts per-page text from PDF using PyMuPDF."""

    def extract(self, pdf_bytes: bytes) -> list[RawPage]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                raw_texts = [page.get_text() for page in doc]
            return build_pages(raw_texts)
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc
