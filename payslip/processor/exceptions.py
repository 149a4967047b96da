class ProcessorError(Exception):
    """Base exception for all upload processing errors."""


class EmptyCodeListError(ProcessorError):
    """Raised when the wanted-codes input contains no usable code."""


class EmptyUploadError(ProcessorError):
    """Raised when the uploaded payload has no bytes."""


class UploadTooLargeError(ProcessorError):
    """Raised when the uploaded payload exceeds the configured limit."""
