"""Exception hierarchy for metadata aggregation."""

from typing import Optional


class MetadataError(Exception):
    """Base exception for all metadata aggregation errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ArchiveReadError(MetadataError):
    """Raised when a classpath archive cannot be opened or read."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, {"path": path})
        self.path = path


class MetadataParseError(MetadataError):
    """Raised when a metadata document is not well-formed."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line_number: Optional[int] = None):
        super().__init__(message, {
            "source": source,
            "line_number": line_number
        })
        self.source = source
        self.line_number = line_number


class ArtifactWriteError(MetadataError):
    """Raised when an output artifact cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, {"path": path})
        self.path = path


class TypeResolutionError(MetadataError):
    """Raised by type resolvers when a type cannot be introspected."""

    def __init__(self, message: str, type_name: Optional[str] = None):
        super().__init__(message, {"type_name": type_name})
        self.type_name = type_name


class DocumentationError(MetadataError):
    """Raised when a README documentation section cannot be generated."""

    def __init__(self, message: str, readme: Optional[str] = None):
        super().__init__(message, {"readme": readme})
        self.readme = readme


class AggregationError(MetadataError):
    """Wraps any failure of an aggregation run."""
    pass
