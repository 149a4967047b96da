from decimal import Decimal, InvalidOperation

from payslip.extraction.exceptions import AmountParseError

AMOUNT_PATTERN = r"\d{1,3}(?:\.\d{3})+,\d{2}|\d+,\d{2}"


def parse_brl_amount(raw: str) -> Decimal:
    """Parse a Brazilian formatted amount such as ``R$ 1.234,56``.

    All ``.`` are thousands separators and the last ``,`` is the decimal
    separator.

    Raises:
        AmountParseError: if the result is not a finite number.
    """
    text = raw.strip()
    if text.startswith("R$"):
        text = text[2:].strip()
    text = text.replace(".", "")
    head, sep, tail = text.rpartition(",")
    if sep:
        text = f"{head}.{tail}"
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError) as exc:
        raise AmountParseError(f"Not a number: {raw!r}") from exc
    if not value.is_finite():
        raise AmountParseError(f"Not a finite number: {raw!r}")
    return value
