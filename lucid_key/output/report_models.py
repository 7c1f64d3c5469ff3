# Path: lucid_key/output/report_models.py
"""
Report Data Models

Format-agnostic data structures for report generation.
Report builders produce these models; formatters consume them.

Section types used by the builders:
- 'overview': label/value rows
- 'entity_list': one row per entity, status tells how it matched
- 'tree': pre-rendered tree lines in metadata['lines']
- 'profile_group': one entity's characteristics under one group
- anything else is rendered generically
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class SectionItem:
    """
    Single data row within a report section.

    Attributes:
        key: Machine identifier (entity id, feature id, field name)
        label: Human-readable name
        value: Primary display value
        status: Rendering hint ('ok', 'warning', 'error', 'info', 'skip')
        details: Extra context
    """
    key: str
    label: str
    value: Any = None
    status: str = 'info'
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportSection:
    """
    A logical section of the report.

    Attributes:
        section_id: Unique identifier (e.g., 'remaining')
        title: Display title (e.g., 'Remaining Entities')
        section_type: Category hint for formatters
        items: Ordered list of data rows
        metadata: Section-level context
    """
    section_id: str
    title: str
    section_type: str
    items: list[SectionItem] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ReportData:
    """
    Complete report ready for formatting.

    Attributes:
        report_type: 'key', 'match', 'profile' or 'search'
        title: Key title
        key_name: Key base name
        generated_at: ISO timestamp of report generation
        sections: Ordered list of report sections
        summary: Top-level summary values
    """
    report_type: str
    title: str
    key_name: str = ''
    generated_at: str = ''
    sections: list[ReportSection] = field(default_factory=list)
    summary: dict[str, Any] = field(default_factory=dict)

    def get_section(self, section_id: str) -> Optional[ReportSection]:
        """Find a section by ID."""
        for section in self.sections:
            if section.section_id == section_id:
                return section
        return None

    def get_sections_by_type(self, section_type: str) -> list[ReportSection]:
        """Get all sections of a given type."""
        return [s for s in self.sections if s.section_type == section_type]


__all__ = ['SectionItem', 'ReportSection', 'ReportData']
