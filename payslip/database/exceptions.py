class RepositoryError(Exception):
    """Base exception for persistence errors."""


class CodeGroupNotFoundError(RepositoryError):
    """Raised when a code group cannot be found in the database."""


class TemplateNotFoundError(RepositoryError):
    """Raised when a code template cannot be found in the database."""
