from dataclasses import dataclass


@dataclass(frozen=True)
class PayslipUpload:
    """One uploaded payslip document as received from the upload boundary."""

    user_id: int
    source: str
    codes: str
    content: bytes
    filename: str = ""
