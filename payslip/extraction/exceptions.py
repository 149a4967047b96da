class PayslipParseError(Exception):
    """Base exception for recoverable page-level parsing failures."""


class PeriodNotFoundError(PayslipParseError):
    """Raised when no period rule matches a page."""


class AmountParseError(PayslipParseError):
    """Raised when a captured amount is not a finite number."""


class InvalidSourceError(ValueError):
    """Raised when a source discriminator is neither ERP nor RH."""
