from collections.abc import Callable
from datetime import datetime

from payslip.extraction.exceptions import PayslipParseError, PeriodNotFoundError
from payslip.extraction.line_items import LineItemExtractor
from payslip.extraction.models import Period, ProcessedPayslip, RawPage, Source
from payslip.extraction.period import PeriodResolver
from payslip.logging.logger import Log
from payslip.pdf.base import BasePdfExtractor


class PayslipAssembler:
    """Turns a payslip document into one ProcessedPayslip per useful page.

    Pages whose period cannot be resolved, or which contain none of the
    wanted codes, are dropped. A document with no useful page yields a
    single empty placeholder dated with the current month.
    """

    def __init__(
        self,
        pdf_extractor: BasePdfExtractor,
        period_resolver: PeriodResolver | None = None,
        item_extractor: LineItemExtractor | None = None,
        fallback_to_current_period: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._period_resolver = period_resolver or PeriodResolver()
        self._item_extractor = item_extractor or LineItemExtractor()
        self._fallback_to_current_period = fallback_to_current_period
        self._clock = clock

    def assemble(
        self,
        document_bytes: bytes,
        wanted_codes: list[str],
        source: Source,
    ) -> list[ProcessedPayslip]:
        """Extract pages from *document_bytes* and assemble payslips.

        Raises:
            ExtractionError: if the document cannot be opened.
        """
        pages = self._pdf_extractor.extract(document_bytes)
        Log.info(f"Extracted {len(pages)} pages from {source.value} document")
        return self.assemble_pages(pages, wanted_codes, source)

    def assemble_pages(
        self,
        pages: list[RawPage],
        wanted_codes: list[str],
        source: Source,
    ) -> list[ProcessedPayslip]:
        results: list[ProcessedPayslip] = []
        for page in pages:
            payslip = self._assemble_page(page, wanted_codes, source)
            if payslip is not None:
                results.append(payslip)

        if not results:
            Log.info(f"No {source.value} page matched the wanted codes, returning placeholder")
            return [self._placeholder(source)]

        Log.info(f"Assembled {len(results)} {source.value} payslips")
        return results

    def _assemble_page(
        self,
        page: RawPage,
        wanted_codes: list[str],
        source: Source,
    ) -> ProcessedPayslip | None:
        try:
            period = self._resolve_period(page, source)
            items = self._item_extractor.extract(page.text, source, wanted_codes)
        except PeriodNotFoundError:
            Log.info(f"Period not found on page {page.page_number}, skipping")
            return None
        except PayslipParseError as exc:
            Log.warning(f"Failed to parse page {page.page_number}: {exc}")
            return None

        Log.info(f"Found {len(items)} items on page {page.page_number} ({period})")
        if not items:
            return None
        return ProcessedPayslip(date=str(period), source=source, items=items)

    def _resolve_period(self, page: RawPage, source: Source) -> Period:
        try:
            return self._period_resolver.resolve(page.text, source)
        except PeriodNotFoundError:
            if not self._fallback_to_current_period:
                raise
            period = Period.current(self._clock())
            Log.warning(
                f"Period not found on page {page.page_number}, using current month {period}"
            )
            return period

    def _placeholder(self, source: Source) -> ProcessedPayslip:
        return ProcessedPayslip(
            date=str(Period.current(self._clock())),
            source=source,
            items=[],
        )
