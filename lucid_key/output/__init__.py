# Path: lucid_key/output/__init__.py
"""
Output Module for lucid_key

Human-readable and machine-readable views of a loaded key.

Architecture:
    ReportGenerator   - Builds key, match, profile and search reports
    FormatterRegistry - Register new output formats
    TreeFormatter     - ASCII tree rendering of entity and feature trees

Report generation flow:
    KeyData / MatchResult -> ReportGenerator -> ReportData -> [Formatters] -> Text / JSON

Usage:
    from lucid_key.output import ReportGenerator

    generator = ReportGenerator(config)
    report = generator.key_report(key)
    print(generator.render(report))
"""

# Report data models
from .report_models import ReportData, ReportSection, SectionItem

# Tree rendering
from .tree_formatter import TreeFormatter, format_tree

# Report generator
from .report_generator import ReportGenerator

# Formatters and registry
from .formatters import (
    BaseFormatter,
    FormatterRegistry,
    JsonFormatter,
    TextFormatter,
)


__all__ = [
    # Report models
    'ReportData',
    'ReportSection',
    'SectionItem',
    # Trees
    'TreeFormatter',
    'format_tree',
    # Generator
    'ReportGenerator',
    # Formatters
    'BaseFormatter',
    'FormatterRegistry',
    'JsonFormatter',
    'TextFormatter',
]
