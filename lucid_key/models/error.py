# Path: lucid_key/models/error.py
"""
Error Handling System

Error classification for key archive loading.

This module defines:
- Error severity levels (CRITICAL, ERROR, WARNING, INFO)
- Error categories
- ParsingError records and the ErrorCollection that accumulates them
- The exception hierarchy raised by the loaders

Fatal problems (ArchiveError, StructureError) abort a load and leave no
model behind. Non-fatal problems (ScoringUnavailable,
MediaResolutionError) are raised where they are detected, caught by the
stage that owns them and recorded as ParsingError entries on the model.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Optional


# ==============================================================================
# ERROR SEVERITY LEVELS
# ==============================================================================

class ErrorSeverity(Enum):
    """
    Error severity classification.

    Levels:
        CRITICAL: Cannot continue (corrupt archive, missing key.data)
        ERROR: Data is missing or wrong (scores unavailable)
        WARNING: Something was skipped (media file absent, bad score code)
        INFO: Informational
    """
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: 'ErrorSeverity') -> bool:
        """Enable severity comparison (CRITICAL > ERROR > WARNING > INFO)."""
        order = {
            ErrorSeverity.INFO: 0,
            ErrorSeverity.WARNING: 1,
            ErrorSeverity.ERROR: 2,
            ErrorSeverity.CRITICAL: 3
        }
        return order[self] < order[other]


# ==============================================================================
# ERROR CATEGORIES
# ==============================================================================

class ErrorCategory(Enum):
    """
    Error category classification for grouping related errors.
    """
    # Container
    ARCHIVE_CORRUPT = "ARCHIVE_CORRUPT"
    DIRECTORY_MISSING = "DIRECTORY_MISSING"
    FILE_MISSING = "FILE_MISSING"
    NESTED_ARCHIVE_MISSING = "NESTED_ARCHIVE_MISSING"
    NESTED_ARCHIVE_CORRUPT = "NESTED_ARCHIVE_CORRUPT"

    # XML Structure
    XML_MALFORMED = "XML_MALFORMED"
    XML_ENCODING = "XML_ENCODING"

    # Scoring
    SCORING_UNAVAILABLE = "SCORING_UNAVAILABLE"
    INVALID_SCORE = "INVALID_SCORE"

    # Media
    MEDIA_NOT_FOUND = "MEDIA_NOT_FOUND"
    MEDIA_UNREADABLE = "MEDIA_UNREADABLE"

    # Other
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# PARSING ERROR CLASS
# ==============================================================================

@dataclass
class ParsingError:
    """
    Error information recorded while loading a key.

    Attributes:
        severity: Error severity level
        category: Error category
        message: Human-readable error message
        details: Additional error details (optional)
        source_file: Path inside the archive where the error occurred
        line_number: Line number in the XML document (optional)
        element_id: item_id of the problematic element (optional)
        timestamp: When the error occurred
    """
    severity: ErrorSeverity
    category: ErrorCategory
    message: str
    details: Optional[str] = None
    source_file: Optional[str] = None
    line_number: Optional[int] = None
    element_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        """String representation for logging."""
        parts = [f"[{self.severity.value}] {self.category.value}: {self.message}"]

        if self.source_file:
            location = self.source_file
            if self.line_number:
                location += f":{self.line_number}"
            parts.append(f"Location: {location}")

        if self.element_id:
            parts.append(f"Element: {self.element_id}")

        if self.details:
            parts.append(f"Details: {self.details}")

        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Returns:
            Dictionary representation of error
        """
        return {
            'severity': self.severity.value,
            'category': self.category.value,
            'message': self.message,
            'details': self.details,
            'source_file': self.source_file,
            'line_number': self.line_number,
            'element_id': self.element_id,
            'timestamp': self.timestamp.isoformat(),
        }


# ==============================================================================
# ERROR COLLECTION
# ==============================================================================

@dataclass
class ErrorCollection:
    """
    Collection of non-fatal parsing errors with filtering.

    Attributes:
        errors: list of parsing errors in the order they were recorded
    """
    errors: list[ParsingError] = field(default_factory=list)

    def add(self, error: ParsingError) -> None:
        """Add error to collection."""
        self.errors.append(error)

    def extend(self, errors: list[ParsingError]) -> None:
        """Add multiple errors to collection."""
        self.errors.extend(errors)

    def get_by_severity(self, severity: ErrorSeverity) -> list[ParsingError]:
        """Get all errors of specific severity."""
        return [e for e in self.errors if e.severity == severity]

    def get_by_category(self, category: ErrorCategory) -> list[ParsingError]:
        """Get all errors of specific category."""
        return [e for e in self.errors if e.category == category]

    def has_critical(self) -> bool:
        """Check if collection contains critical errors."""
        return any(e.severity == ErrorSeverity.CRITICAL for e in self.errors)

    def count_by_category(self) -> dict[ErrorCategory, int]:
        """Count errors by category."""
        counts: dict[ErrorCategory, int] = {}
        for error in self.errors:
            counts[error.category] = counts.get(error.category, 0) + 1
        return counts

    def messages(self) -> list[str]:
        """Plain messages, in recording order."""
        return [e.message for e in self.errors]

    def to_dict_list(self) -> list[dict[str, Any]]:
        """Convert all errors to list of dictionaries."""
        return [e.to_dict() for e in self.errors]

    def __len__(self) -> int:
        """Number of errors in collection."""
        return len(self.errors)

    def __bool__(self) -> bool:
        """True if collection has errors."""
        return len(self.errors) > 0

    def __iter__(self) -> Iterator[ParsingError]:
        """Iterate over errors."""
        return iter(self.errors)


# ==============================================================================
# EXCEPTIONS
# ==============================================================================

class KeyLoadError(Exception):
    """
    Base class for every error raised while loading a key archive.

    Attributes:
        error: ParsingError describing the failure
    """

    severity = ErrorSeverity.CRITICAL
    category = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        source_file: Optional[str] = None,
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message)
        self.error = ParsingError(
            severity=self.severity,
            category=category or self.category,
            message=message,
            details=details,
            source_file=source_file,
        )

    @property
    def message(self) -> str:
        return self.error.message


class ArchiveError(KeyLoadError):
    """The outer archive could not be read. Fatal."""

    category = ErrorCategory.ARCHIVE_CORRUPT


class StructureError(KeyLoadError):
    """
    A required directory, file or nested archive is absent. Fatal.

    Attributes:
        path: The path that could not be resolved
    """

    category = ErrorCategory.FILE_MISSING

    def __init__(
        self,
        message: str,
        path: str,
        details: Optional[str] = None,
        category: Optional[ErrorCategory] = None,
    ):
        super().__init__(message, details=details, source_file=path, category=category)
        self.path = path


class ScoringUnavailable(KeyLoadError):
    """The scoring document is missing or unreadable. Non-fatal."""

    severity = ErrorSeverity.ERROR
    category = ErrorCategory.SCORING_UNAVAILABLE


class MediaResolutionError(KeyLoadError):
    """A single media file is missing or unreadable. Non-fatal."""

    severity = ErrorSeverity.WARNING
    category = ErrorCategory.MEDIA_NOT_FOUND


__all__ = [
    'ErrorSeverity',
    'ErrorCategory',
    'ParsingError',
    'ErrorCollection',
    'KeyLoadError',
    'ArchiveError',
    'StructureError',
    'ScoringUnavailable',
    'MediaResolutionError',
]
