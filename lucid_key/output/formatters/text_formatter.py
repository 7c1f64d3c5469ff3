# Path: lucid_key/output/formatters/text_formatter.py
"""
Text Formatter

Renders ReportData as ASCII text suitable for console display
and plain-text file output. Handles all section types generically
with type-specific rendering hints.
"""

from ..report_models import ReportData, ReportSection, SectionItem
from .base_formatter import BaseFormatter

LINE_WIDTH = 70
DIVIDER = '=' * LINE_WIDTH
SUB_DIVIDER = '-' * LINE_WIDTH

STATUS_TAGS = {
    'ok': '[OK]',
    'error': '[--]',
    'warning': '[!!]',
    'skip': '[..]',
}


class TextFormatter(BaseFormatter):
    """Renders report as ASCII text."""

    aliases = ('txt',)

    @property
    def format_name(self) -> str:
        return 'text'

    @property
    def file_extension(self) -> str:
        return '.txt'

    def format_report(self, report: ReportData) -> str:
        """Render full report as text."""
        lines = []
        lines.append('')
        lines.append(DIVIDER)
        lines.append(f"  {report.report_type.upper()}: {report.title}")
        if report.key_name:
            lines.append(f"  Key: {report.key_name}")
        lines.append(DIVIDER)

        for section in report.sections:
            lines.extend(self._render_section(section))

        lines.append('')
        lines.append(DIVIDER)
        if report.generated_at:
            lines.append(f"  Generated: {report.generated_at}")
        lines.append('')
        return '\n'.join(lines)

    def _render_section(self, section: ReportSection) -> list[str]:
        """Dispatch to type-specific renderer."""
        renderers = {
            'overview': self._render_overview,
            'entity_list': self._render_entity_list,
            'tree': self._render_tree,
            'profile_group': self._render_profile_group,
        }
        renderer = renderers.get(section.section_type, self._render_generic)
        return renderer(section)

    def _header(self, section: ReportSection, count: bool = False) -> list[str]:
        title = section.title.upper()
        if count:
            title = f"{title} ({len(section.items)})"
        return ['', f"  {title}:", SUB_DIVIDER]

    def _render_overview(self, section: ReportSection) -> list[str]:
        """Render overview section."""
        lines = self._header(section)
        for item in section.items:
            display = item.details.get('display', item.value)
            lines.append(f"    {item.label:25s}  {display}")
        return lines

    def _render_entity_list(self, section: ReportSection) -> list[str]:
        """Render one line per entity."""
        lines = self._header(section, count=True)
        if not section.items:
            lines.append('    (none)')
        for item in section.items:
            lines.append(self._render_entity(item))
        return lines

    def _render_entity(self, item: SectionItem) -> str:
        tag = STATUS_TAGS.get(item.status, '[  ]')
        line = f"    {tag} {item.key:15s} {item.label}"
        kind = item.details.get('match')
        if kind and kind != 'direct':
            line += f" ({kind})"
        return line

    def _render_tree(self, section: ReportSection) -> list[str]:
        """Render a pre-drawn tree."""
        lines = self._header(section)
        tree_lines = section.metadata.get('lines', [])
        if not tree_lines:
            lines.append('    (empty)')
        lines.extend(f"    {line}" for line in tree_lines)
        return lines

    def _render_profile_group(self, section: ReportSection) -> list[str]:
        """Render one characteristic group of an entity profile."""
        lines = self._header(section)
        for item in section.items:
            label = item.details.get('score_label', '')
            suffix = f" [{label}]" if label else ''
            lines.append(f"    - {item.label}{suffix}")
        return lines

    def _render_generic(self, section: ReportSection) -> list[str]:
        """Fallback renderer for unknown section types."""
        lines = self._header(section)
        for item in section.items:
            tag = STATUS_TAGS.get(item.status, '[  ]')
            if item.value is not None:
                lines.append(f"    {tag} {item.label:30s}  {item.value}")
            else:
                lines.append(f"    {tag} {item.label}")
        return lines


__all__ = ['TextFormatter']
