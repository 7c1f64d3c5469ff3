# Path: lucid_key/output/formatters/__init__.py
"""
Report Formatters

Each formatter renders ReportData into a specific output format.
Formatters know nothing about matching logic; new formats add new
formatters without changing the report builders.
"""

from .base_formatter import BaseFormatter, FormatterRegistry, safe_filename_part
from .json_formatter import JsonFormatter
from .text_formatter import TextFormatter

__all__ = [
    'BaseFormatter',
    'FormatterRegistry',
    'JsonFormatter',
    'TextFormatter',
    'safe_filename_part',
]
