# Path: lucid_key/loaders/archive_extractor.py
"""
Archive Extractor

Locates and reads files inside a key archive (a ZIP holding further ZIPs).

RESPONSIBILITY: Case-insensitive, separator-agnostic access to archive
members. One normalized path index is built per archive when it is
opened; lookups never re-normalize the member list.

Reading a file from a nested archive is driven as a small state machine:

    UNOPENED -> OUTER_LOADED -> INNER_RESOLVED -> DECODED

with one failure state per phase (INNER_MISSING, INNER_CORRUPT,
TARGET_MISSING). Only the outer archive is fatal: if it cannot be opened,
ArchiveError is raised. Failures further in are returned as results.
"""

import io
import zipfile
import zlib
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config_loader import ConfigLoader
from ..constants import PATH_SEPARATOR, WINDOWS_SEPARATOR
from ..core.logger import get_input_logger
from ..models.error import (
    ArchiveError,
    ErrorCategory,
    ErrorSeverity,
    ParsingError,
)


logger = get_input_logger('archive_extractor')

# Exceptions zipfile can raise while inflating a single member
MEMBER_READ_ERRORS = (zipfile.BadZipFile, zlib.error, RuntimeError, OSError, EOFError)


# ==============================================================================
# PATH NORMALIZATION
# ==============================================================================

def normalize_path(path: str) -> str:
    """
    Normalize an archive path for lookup.

    Backslashes become forward slashes, leading slashes are dropped and
    the result is lower-cased.

    Args:
        path: Path as written in the archive or the key documents

    Returns:
        Normalized lookup key
    """
    return path.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR).lstrip(PATH_SEPARATOR).lower()


def decode_text(data: bytes, encodings: list[str]) -> str:
    """
    Decode bytes trying each encoding in order.

    A UTF-8 byte order mark is stripped. Falls back to UTF-8 with
    replacement characters when every encoding fails.
    """
    for encoding in encodings:
        codec = 'utf-8-sig' if encoding.lower() in ('utf-8', 'utf8') else encoding
        try:
            return data.decode(codec)
        except (UnicodeDecodeError, LookupError):
            continue
    return data.decode('utf-8', errors='replace')


class PathIndex:
    """
    Normalized index over the member names of one ZIP file.

    Every parent directory of every member is indexed as a directory,
    whether or not the archive stores an explicit directory record.
    When two member names normalize to the same key, the first one wins.
    """

    def __init__(self, names: list[str]):
        self._entries: dict[str, str] = {}
        self._directories: list[str] = []
        self._files: list[str] = []

        for name in names:
            display = name.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR).lstrip(PATH_SEPARATOR)
            parts = display.split(PATH_SEPARATOR)

            # Parent directories, outermost first
            for depth in range(1, len(parts)):
                self._add_directory(PATH_SEPARATOR.join(parts[:depth]) + PATH_SEPARATOR, None)

            if display.endswith(PATH_SEPARATOR):
                self._add_directory(display, name)
            elif display:
                key = normalize_path(display)
                if key not in self._entries:
                    self._entries[key] = name
                    self._files.append(name)

    def _add_directory(self, display: str, name: Optional[str]) -> None:
        key = normalize_path(display)
        if key in self._entries:
            return
        self._entries[key] = name if name is not None else display
        self._directories.append(self._entries[key])

    def find(self, path: str) -> Optional[str]:
        """Return the member name for a path, or None."""
        key = normalize_path(path)
        found = self._entries.get(key)
        if found is None and key and not key.endswith(PATH_SEPARATOR):
            found = self._entries.get(key + PATH_SEPARATOR)
        return found

    def is_directory(self, name: str) -> bool:
        return name.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR).endswith(PATH_SEPARATOR)

    @property
    def directories(self) -> list[str]:
        """Directory paths in archive order, each ending with '/'."""
        return list(self._directories)

    @property
    def files(self) -> list[str]:
        """File member names in archive order."""
        return list(self._files)

    def __len__(self) -> int:
        return len(self._entries)


# ==============================================================================
# NESTED READ STATE MACHINE
# ==============================================================================

class NestedReadState(Enum):
    """Phases of reading a file out of a nested archive."""
    UNOPENED = 'unopened'
    OUTER_LOADED = 'outer_loaded'
    INNER_RESOLVED = 'inner_resolved'
    DECODED = 'decoded'

    # Failure states
    INNER_MISSING = 'inner_missing'
    INNER_CORRUPT = 'inner_corrupt'
    TARGET_MISSING = 'target_missing'

    @property
    def is_failure(self) -> bool:
        return self in (
            NestedReadState.INNER_MISSING,
            NestedReadState.INNER_CORRUPT,
            NestedReadState.TARGET_MISSING,
        )


@dataclass
class NestedReadResult:
    """
    Outcome of a nested read.

    Attributes:
        inner_archive_path: Requested nested archive path
        inner_file_name: Requested file inside the nested archive
        state: Final state reached
        data: Raw bytes of the target (DECODED only)
        text: Decoded text of the target (DECODED only)
        error: ParsingError describing a failure state
    """
    inner_archive_path: str
    inner_file_name: str
    state: NestedReadState = NestedReadState.UNOPENED
    data: Optional[bytes] = None
    text: Optional[str] = None
    error: Optional[ParsingError] = None

    @property
    def ok(self) -> bool:
        return self.state == NestedReadState.DECODED

    @property
    def message(self) -> str:
        return self.error.message if self.error else ''

    def fail(
        self,
        state: NestedReadState,
        category: ErrorCategory,
        message: str,
        details: Optional[str] = None,
    ) -> 'NestedReadResult':
        """Move to a failure state and record why."""
        self.state = state
        self.error = ParsingError(
            severity=ErrorSeverity.WARNING,
            category=category,
            message=message,
            details=details,
            source_file=self.inner_archive_path,
        )
        return self


# ==============================================================================
# ARCHIVE EXTRACTOR
# ==============================================================================

class ArchiveExtractor:
    """
    Read-only access to a key archive held in memory.

    Example:
        extractor = ArchiveExtractor(archive_bytes)
        data_dir = extractor.find_directory('data')
        result = extractor.read_inner_entry(data_dir + 'mykey.data', 'key.data')
        if result.ok:
            document = decoder.decode(result.data, 'key.data')
    """

    def __init__(self, data: bytes, config: Optional[ConfigLoader] = None):
        """
        Open the outer archive.

        Args:
            data: Raw archive bytes
            config: Optional ConfigLoader instance (creates new if not provided)

        Raises:
            ArchiveError: If the bytes are not a readable ZIP archive
        """
        self.config = config if config else ConfigLoader()
        self.encodings = self._encoding_order()

        if not data:
            raise ArchiveError("Archive is empty", details="0 bytes supplied")

        try:
            self._zip = zipfile.ZipFile(io.BytesIO(data))
            names = self._zip.namelist()
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as e:
            raise ArchiveError(
                "Archive could not be opened",
                details=f"Exception: {e}, Type: {type(e).__name__}",
            ) from e

        self.index = PathIndex(names)
        logger.debug(f"Opened archive with {len(names)} members")

    def _encoding_order(self) -> list[str]:
        """Default encoding first, then the configured fallbacks, de-duplicated."""
        order = [self.config.get('default_encoding', 'utf-8')]
        for encoding in self.config.get('encoding_fallbacks', []):
            if encoding not in order:
                order.append(encoding)
        return order

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_entry(self, path: str) -> Optional[str]:
        """
        Find a member by case-insensitive, separator-agnostic path.

        Args:
            path: Path inside the outer archive

        Returns:
            Member name as stored in the archive, or None
        """
        return self.index.find(path)

    def find_directory(self, suffix: str) -> Optional[str]:
        """
        Find the first directory whose path ends with suffix.

        The match is on the raw path text, so 'data' finds 'Data/',
        'MyKey/DATA/' and also 'MyKey/KeyData/'.

        Args:
            suffix: Directory name, compared case-insensitively

        Returns:
            Directory path ending with '/', or None
        """
        wanted = normalize_path(suffix).rstrip(PATH_SEPARATOR) + PATH_SEPARATOR
        for directory in self.index.directories:
            if normalize_path(directory).endswith(wanted):
                return directory
        return None

    def list_directory(self, directory: str) -> list[str]:
        """
        File members located directly inside a directory.

        Args:
            directory: Directory path ending with '/'

        Returns:
            Member names in archive order
        """
        prefix = normalize_path(directory)
        found = []
        for name in self.index.files:
            key = normalize_path(name)
            if key.startswith(prefix) and PATH_SEPARATOR not in key[len(prefix):]:
                found.append(name)
        return found

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def read_bytes(self, path: str) -> Optional[bytes]:
        """
        Read a member of the outer archive.

        Args:
            path: Path inside the outer archive

        Returns:
            Member content, or None when no such file exists

        Raises:
            ArchiveError: If the member exists but cannot be inflated
        """
        name = self.find_entry(path)
        if name is None or self.index.is_directory(name):
            logger.debug(f"No archive member for path: {path}")
            return None

        try:
            return self._zip.read(name)
        except MEMBER_READ_ERRORS as e:
            raise ArchiveError(
                f"Archive member could not be read: {name}",
                details=f"Exception: {e}, Type: {type(e).__name__}",
                source_file=name,
            ) from e

    def read_text(self, path: str) -> Optional[str]:
        """Read and decode a member of the outer archive."""
        data = self.read_bytes(path)
        if data is None:
            return None
        return decode_text(data, self.encodings)

    def read_inner_entry(self, inner_archive_path: str, inner_file_name: str) -> NestedReadResult:
        """
        Read a named file from inside a nested archive.

        Args:
            inner_archive_path: Path of the nested archive in the outer one
            inner_file_name: File name inside the nested archive

        Returns:
            NestedReadResult in state DECODED or one of the failure states
        """
        result = NestedReadResult(inner_archive_path, inner_file_name)
        result.state = NestedReadState.OUTER_LOADED

        try:
            inner_bytes = self.read_bytes(inner_archive_path)
        except ArchiveError as e:
            return result.fail(
                NestedReadState.INNER_CORRUPT,
                ErrorCategory.NESTED_ARCHIVE_CORRUPT,
                f"Nested archive could not be read: {inner_archive_path}",
                details=e.error.details,
            )

        if inner_bytes is None:
            return result.fail(
                NestedReadState.INNER_MISSING,
                ErrorCategory.NESTED_ARCHIVE_MISSING,
                f"Nested archive not found: {inner_archive_path}",
            )

        try:
            with zipfile.ZipFile(io.BytesIO(inner_bytes)) as inner:
                inner_index = PathIndex(inner.namelist())
                result.state = NestedReadState.INNER_RESOLVED

                target = inner_index.find(inner_file_name)
                if target is None or inner_index.is_directory(target):
                    return result.fail(
                        NestedReadState.TARGET_MISSING,
                        ErrorCategory.FILE_MISSING,
                        f"File {inner_file_name} not found in {inner_archive_path}",
                    )

                result.data = inner.read(target)
        except (zipfile.LargeZipFile,) + MEMBER_READ_ERRORS as e:
            return result.fail(
                NestedReadState.INNER_CORRUPT,
                ErrorCategory.NESTED_ARCHIVE_CORRUPT,
                f"Nested archive is corrupt: {inner_archive_path}",
                details=f"Exception: {e}, Type: {type(e).__name__}",
            )

        result.text = decode_text(result.data, self.encodings)
        result.state = NestedReadState.DECODED
        logger.debug(f"Read {inner_file_name} ({len(result.data)} bytes) from {inner_archive_path}")
        return result

    def read_inner_text(self, inner_archive_path: str, inner_file_name: str) -> Optional[str]:
        """
        Fail-silent form of read_inner_entry.

        Returns:
            Decoded text, or None (a warning is logged)
        """
        result = self.read_inner_entry(inner_archive_path, inner_file_name)
        if not result.ok:
            logger.warning(result.message)
        return result.text

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> 'ArchiveExtractor':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


__all__ = [
    'ArchiveExtractor',
    'PathIndex',
    'NestedReadState',
    'NestedReadResult',
    'normalize_path',
    'decode_text',
]
