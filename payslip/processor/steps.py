from payslip.codes.parsing import parse_code_list
from payslip.database.repositories.payroll_data_repository import PayrollDataRepository
from payslip.extraction.assembler import PayslipAssembler
from payslip.extraction.models import Source
from payslip.logging.logger import Log
from payslip.processor.exceptions import (
    EmptyCodeListError,
    EmptyUploadError,
    UploadTooLargeError,
)
from payslip.processor.pipeline import PipelineContext, PipelineStep


class ValidateUploadStep(PipelineStep):
    def __init__(self, max_upload_bytes: int) -> None:
        self._max_upload_bytes = max_upload_bytes

    def run(self, context: PipelineContext) -> PipelineContext:
        upload = context.upload
        context.source = Source.parse(upload.source)
        size = len(upload.content)
        if size == 0:
            raise EmptyUploadError("Uploaded document is empty")
        if size > self._max_upload_bytes:
            raise UploadTooLargeError(
                f"Uploaded document has {size} bytes (max {self._max_upload_bytes})"
            )
        Log.info(
            f"Received {size} bytes from user {upload.user_id} "
            f"as {context.source.value}"
        )
        return context


class ParseCodesStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        codes = parse_code_list(context.upload.codes)
        if not codes:
            raise EmptyCodeListError("No valid codes provided")
        context.wanted_codes = codes
        Log.info(f"Looking for {len(codes)} codes: {', '.join(codes)}")
        return context


class AssembleStep(PipelineStep):
    def __init__(self, assembler: PayslipAssembler) -> None:
        self._assembler = assembler

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.source is None:
            raise ValueError("PipelineContext.source must be set before assembly")
        context.payslips = self._assembler.assemble(
            context.upload.content,
            context.wanted_codes,
            context.source,
        )
        return context


class PersistPayslipsStep(PipelineStep):
    def __init__(self, payroll_repo: PayrollDataRepository) -> None:
        self._payroll_repo = payroll_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        for payslip in context.payslips:
            if payslip.is_placeholder:
                Log.info("Nothing extracted, placeholder is not stored")
                continue
            record_id = self._payroll_repo.create(context.upload.user_id, payslip)
            context.stored_ids.append(record_id)
            Log.info(f"Stored payslip {payslip.date} as record {record_id}")
        return context


class LogFailureStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        Log.error(
            f"Processing upload '{context.upload.filename}' for user "
            f"{context.upload.user_id} failed: {context.error_message}"
        )
        return context
