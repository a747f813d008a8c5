"""Custom exceptions for docveil."""


class DocVeilError(Exception):
    """Base exception for docveil errors."""
    pass


class InvalidPathError(DocVeilError, TypeError):
    """Raised when a field path is not a string."""
    def __init__(self, path):
        super().__init__(
            f"Field path must be a string, got {type(path).__name__}: {path!r}"
        )
        self.path = path


class SchemaDefinitionError(DocVeilError, ValueError):
    """Raised when a schema definition cannot be ingested."""
    def __init__(self, message: str, path: str = None):
        if path is not None:
            message = f"{message} (at '{path}')"
        super().__init__(message)
        self.message = message
        self.path = path
