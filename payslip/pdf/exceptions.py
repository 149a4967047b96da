class ExtractionError(Exception):
    """Raised when the document container cannot be opened or parsed."""
