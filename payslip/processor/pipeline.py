from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from payslip.extraction.models import ProcessedPayslip, Source
from payslip.processor.models import PayslipUpload


@dataclass(slots=True)
class PipelineContext:
    upload: PayslipUpload
    source: Source | None = None
    wanted_codes: list[str] = field(default_factory=list)
    payslips: list[ProcessedPayslip] = field(default_factory=list)
    stored_ids: list[int] = field(default_factory=list)
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
