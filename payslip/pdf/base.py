from abc import ABC, abstractmethod

from payslip.extraction.models import RawPage


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> list[RawPage]:
        """Extract normalized per-page text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One RawPage per document page, in document order. A document
            without pages yields an empty list.

        Raises:
            ExtractionError: if the bytes are not a readable PDF.
        """
