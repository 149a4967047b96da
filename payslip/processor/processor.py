from payslip.config.settings import Settings
from payslip.database.repositories.payroll_data_repository import PayrollDataRepository
from payslip.extraction.assembler import PayslipAssembler
from payslip.extraction.models import ProcessedPayslip
from payslip.logging.logger import Log
from payslip.pdf.factory import PdfExtractorFactory
from payslip.processor.models import PayslipUpload
from payslip.processor.pipeline import PipelineContext, PipelineStep
from payslip.processor.steps import (
    AssembleStep,
    LogFailureStep,
    ParseCodesStep,
    PersistPayslipsStep,
    ValidateUploadStep,
)


class Processor:
    """Runs the upload pipeline: validate -> parse codes -> assemble -> persist."""

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, upload: PayslipUpload) -> list[ProcessedPayslip]:
        """Run every step for *upload* and return the assembled payslips.

        On failure the failure step runs and the original error is re-raised.
        """
        Log.info(f"Processing upload '{upload.filename}' for user {upload.user_id}")
        context = PipelineContext(upload=upload)
        try:
            for step in self._steps:
                context = step.run(context)
        except Exception as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise
        Log.info(
            f"Upload '{upload.filename}' done: {len(context.payslips)} payslips, "
            f"{len(context.stored_ids)} stored"
        )
        return context.payslips


def build_assembler(settings: Settings) -> PayslipAssembler:
    return PayslipAssembler(
        pdf_extractor=PdfExtractorFactory.create(settings),
        fallback_to_current_period=settings.period_fallback_to_current_month,
    )


def build_processor(settings: Settings, persist: bool = True) -> Processor:
    """Build a Processor with all required adapters."""
    steps: list[PipelineStep] = [
        ValidateUploadStep(settings.max_upload_bytes),
        ParseCodesStep(),
        AssembleStep(build_assembler(settings)),
    ]
    if persist:
        steps.append(PersistPayslipsStep(PayrollDataRepository()))
    return Processor(steps=steps, failed_step=LogFailureStep())
