# Path: lucid_key/output/formatters/base_formatter.py
"""
Report Formatters

A formatter turns one ReportData into text (format_report) and saves it
as <report_type>_<key_name><extension> (write_report). Key names come
from archive file names, so they are reduced to safe file name
characters first.

FormatterRegistry maps format names and their aliases ('txt' for
'text') to formatter classes. Names are matched case-insensitively.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Type

from ..report_models import ReportData


UNSAFE_FILENAME_CHARS = re.compile(r'[^A-Za-z0-9._-]+')
FALLBACK_KEY_NAME = 'key'


def safe_filename_part(text: str) -> str:
    """Collapse runs of characters unsafe in file names to '_'."""
    cleaned = UNSAFE_FILENAME_CHARS.sub('_', text).strip('._')
    return cleaned or FALLBACK_KEY_NAME


class BaseFormatter(ABC):
    """
    Abstract base for report formatters.

    Subclasses walk the report sections generically and dispatch on
    section_type, falling back to a plain item list for unknown types.
    """

    # Extra names the registry accepts for this format
    aliases: tuple[str, ...] = ()

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Canonical name of the format ('text', 'json')."""

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Extension including the dot."""

    @abstractmethod
    def format_report(self, report: ReportData) -> str:
        """Render a report to a string."""

    def filename_for(self, report: ReportData) -> str:
        """File name a report is saved under, e.g. 'match_oaks.json'."""
        key_part = safe_filename_part(report.key_name or report.title)
        return f"{safe_filename_part(report.report_type)}_{key_part}{self.file_extension}"

    def write_report(self, report: ReportData, output_dir: Path) -> Path:
        """
        Render a report into output_dir, creating the directory.

        Returns:
            Path of the written file
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / self.filename_for(report)
        target.write_text(self.format_report(report), encoding='utf-8')
        return target


class FormatterRegistry:
    """
    Formatter classes by format name.

    get() returns a fresh instance or None; require() raises instead,
    naming the registered formats.
    """

    _formatters: dict[str, Type[BaseFormatter]] = {}
    _aliases: dict[str, str] = {}

    @classmethod
    def register(cls, formatter_class: Type[BaseFormatter]) -> None:
        """Register a formatter class under its name and aliases."""
        name = formatter_class().format_name.lower()
        cls._formatters[name] = formatter_class
        for alias in formatter_class.aliases:
            cls._aliases[alias.lower()] = name

    @classmethod
    def canonical_name(cls, format_name: str) -> Optional[str]:
        """Registered name for a name or alias, or None."""
        lowered = format_name.strip().lower()
        if lowered in cls._formatters:
            return lowered
        return cls._aliases.get(lowered)

    @classmethod
    def get(cls, format_name: str) -> Optional[BaseFormatter]:
        """Formatter instance for a name or alias, or None."""
        name = cls.canonical_name(format_name)
        if name is None:
            return None
        return cls._formatters[name]()

    @classmethod
    def require(cls, format_name: str) -> BaseFormatter:
        """
        Formatter instance for a name or alias.

        Raises:
            ValueError: If nothing is registered under the name
        """
        formatter = cls.get(format_name)
        if formatter is None:
            available = ', '.join(cls.get_available()) or 'none'
            raise ValueError(f"No formatter for '{format_name}' (available: {available})")
        return formatter

    @classmethod
    def get_available(cls) -> list[str]:
        """Canonical names of registered formats."""
        return list(cls._formatters)

    @classmethod
    def clear(cls) -> None:
        """Forget every registration (tests)."""
        cls._formatters.clear()
        cls._aliases.clear()


__all__ = ['BaseFormatter', 'FormatterRegistry', 'safe_filename_part']
