# Path: lucid_key/output/report_generator.py
"""
Report Generator

Converts a loaded key, a match result, an entity profile or a search
into ReportData, then renders it via registered formatters.

Architecture:
    KeyData / MatchResult  ->  [ReportGenerator]  ->  ReportData  ->  [Formatters]  ->  Text / JSON

Report types:
    key      - key overview, load errors and optionally both trees
    match    - chosen constraints, remaining and discarded entities
    profile  - one entity's characteristics grouped by feature group
    search   - entity and feature names matching a search term

Usage:
    from lucid_key.output import ReportGenerator

    generator = ReportGenerator(config)
    report = generator.match_report(key, result, chosen)
    print(generator.render(report))
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config_loader import ConfigLoader
from ..core.logger.ipo_logging import get_output_logger
from ..models.error import ErrorSeverity
from ..models.key_data import EntityId, KeyData
from ..process.hierarchy.tree_utils import (
    chosen_feature_tree,
    find_entity_path,
    iter_nodes,
    search_entity_tree,
    search_feature_tree,
)
from ..process.matcher.constraints import ChosenConstraints, count_chosen_features
from ..process.matcher.match_engine import MatchResult
from ..process.matcher.tree_projection import discarded_tree, remaining_tree
from ..process.scoring.profiles import characteristic_label, group_characteristics
from .formatters import FormatterRegistry, JsonFormatter, TextFormatter
from .report_models import ReportData, ReportSection, SectionItem
from .tree_formatter import TreeFormatter


logger = get_output_logger('report_generator')


def _register_defaults() -> None:
    """Register built-in formatters."""
    FormatterRegistry.register(JsonFormatter)
    FormatterRegistry.register(TextFormatter)


# Auto-register on module import
_register_defaults()


PATH_SEPARATOR = ' > '


class ReportGenerator:
    """
    Builds reports over a loaded key and renders them.

    Example:
        generator = ReportGenerator()
        report = generator.key_report(key, include_tree=True)
        print(generator.render(report, 'text'))
    """

    def __init__(self, config: Optional[ConfigLoader] = None, use_unicode: bool = False):
        """
        Initialize report generator.

        Args:
            config: ConfigLoader instance (creates one if not provided)
            use_unicode: Draw trees with Unicode box characters
        """
        self.config = config or ConfigLoader()
        self.tree_formatter = TreeFormatter(use_unicode)

    # ==========================================================================
    # REPORT BUILDERS
    # ==========================================================================

    def key_report(self, key: KeyData, include_tree: bool = False) -> ReportData:
        """
        Overview of a loaded key.

        Args:
            key: Loaded key
            include_tree: Add entity and feature tree sections

        Returns:
            ReportData
        """
        overview = ReportSection('overview', 'Key', 'overview', items=[
            SectionItem('title', 'Title', key.title),
            SectionItem('authors', 'Authors', key.authors),
            SectionItem('entities', 'Entities', len(key.entities)),
            SectionItem('features', 'Scorable features', key.total_features_count),
            SectionItem('entity_media', 'Entities with media', len(key.entity_media)),
            SectionItem('feature_media', 'Features with media', len(key.feature_media)),
            SectionItem('errors', 'Load errors', len(key.errors)),
        ])
        if key.description:
            overview.items.append(SectionItem('description', 'Description', key.description))

        sections = [overview]
        if include_tree:
            sections.append(self._tree_section(
                'entity_tree', 'Entity Tree',
                self.tree_formatter.format_entities(key.entity_tree),
            ))
            sections.append(self._tree_section(
                'feature_tree', 'Feature Tree',
                self.tree_formatter.format_features(key.feature_tree),
            ))

        if key.errors:
            sections.append(ReportSection(
                'errors', 'Load Errors', 'errors',
                items=[
                    SectionItem(
                        key=error.category.value,
                        label=error.message,
                        status='error' if error.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.ERROR) else 'warning',
                        details=error.to_dict(),
                    )
                    for error in key.errors
                ],
            ))

        return self._report('key', key, sections, summary={
            'entities': len(key.entities),
            'features': key.total_features_count,
            'errors': len(key.errors),
        })

    def match_report(
        self,
        key: KeyData,
        result: MatchResult,
        chosen: Optional[ChosenConstraints] = None,
        include_tree: bool = False,
    ) -> ReportData:
        """
        Remaining and discarded entities for a chosen set.

        Args:
            key: Loaded key
            result: Output of compute_matches
            chosen: The chosen set the result was computed for
            include_tree: Add projected tree sections for both views

        Returns:
            ReportData
        """
        chosen = chosen or {}
        sections = []

        chosen_items = []
        for feature_id, constraint in chosen.items():
            feature = key.features.get(feature_id)
            if feature is None:
                chosen_items.append(SectionItem(
                    feature_id, feature_id, constraint.value,
                    status='skip', details={'reason': 'unknown feature'},
                ))
                continue
            label = feature.name
            if feature.parent_name:
                label = f"{feature.parent_name}: {feature.name}"
            chosen_items.append(SectionItem(
                feature_id, label,
                constraint.value if constraint.value is not None else feature.kind.value,
                status='ok', details={'kind': feature.kind.value},
            ))
        sections.append(ReportSection('chosen', 'Chosen Features', 'chosen', items=chosen_items))

        order = self._entity_order(key)
        remaining_items = [
            SectionItem(
                entity_id, key.entities[entity_id].name, status='ok',
                details={'match': 'direct' if entity_id in result.direct else 'indirect'},
            )
            for entity_id in order if entity_id in result.remaining
        ]
        discarded_items = [
            SectionItem(
                entity_id, key.entities[entity_id].name, status='error',
                details={
                    'match': 'direct' if entity_id in result.directly_discarded else 'group',
                },
            )
            for entity_id in order if entity_id in result.discarded
        ]
        sections.append(ReportSection(
            'remaining', 'Remaining Entities', 'entity_list', items=remaining_items,
        ))
        sections.append(ReportSection(
            'discarded', 'Discarded Entities', 'entity_list', items=discarded_items,
        ))

        if include_tree:
            sections.append(self._tree_section(
                'chosen_tree', 'Chosen Feature Tree',
                self.tree_formatter.format_features(
                    chosen_feature_tree(key.feature_tree, chosen)
                ),
            ))
            sections.append(self._tree_section(
                'remaining_tree', 'Remaining Tree',
                self.tree_formatter.format_entities(remaining_tree(key, result)),
            ))
            sections.append(self._tree_section(
                'discarded_tree', 'Discarded Tree',
                self.tree_formatter.format_entities(discarded_tree(key, result)),
            ))

        return self._report('match', key, sections, summary={
            'chosen': count_chosen_features(chosen, key.features),
            'direct': len(result.direct),
            'indirect': len(result.indirect),
            'remaining': len(result.remaining),
            'discarded': len(result.discarded),
        })

    def profile_report(self, key: KeyData, entity_id: str) -> ReportData:
        """
        Characteristics of one entity, grouped by feature group.

        Args:
            key: Loaded key
            entity_id: Entity to describe

        Returns:
            ReportData

        Raises:
            ValueError: If the entity id is not in the key
        """
        entity = key.entities.get(EntityId(entity_id))
        if entity is None:
            raise ValueError(f"Unknown entity id: {entity_id}")

        path = find_entity_path(key.entity_tree, entity.id)
        media = key.entity_media.get(entity.id, [])
        overview = ReportSection('overview', 'Entity', 'overview', items=[
            SectionItem('id', 'Id', entity.id),
            SectionItem('name', 'Name', entity.name),
            SectionItem(
                'path', 'Classification',
                PATH_SEPARATOR.join(node.name for node in path),
            ),
            SectionItem(
                'media', 'Media', len(media),
                details={'paths': [m.path for m in media]},
            ),
        ])
        sections = [overview]

        profile = key.entity_profiles.get(entity.id)
        grouped = group_characteristics(profile) if profile else {}
        for index, (group, characteristics) in enumerate(grouped.items()):
            sections.append(ReportSection(
                f'group_{index}', group, 'profile_group',
                items=[
                    SectionItem(
                        key=c.score or c.kind.value,
                        label=c.text,
                        value=c.score,
                        details={
                            'kind': c.kind.value,
                            'score_label': characteristic_label(c),
                        },
                    )
                    for c in characteristics
                ],
            ))

        return self._report('profile', key, sections, summary={
            'entity': entity.id,
            'groups': len(grouped),
            'characteristics': sum(len(c) for c in grouped.values()),
        })

    def search_report(self, key: KeyData, term: str) -> ReportData:
        """
        Entity and feature names containing a term.

        Args:
            key: Loaded key
            term: Case-insensitive search term

        Returns:
            ReportData

        Raises:
            ValueError: If the term is empty
        """
        entity_hits = search_entity_tree(key.entity_tree, term)
        feature_hits = search_feature_tree(key.feature_tree, term)
        if entity_hits is None or feature_hits is None:
            raise ValueError("Search term must not be empty")

        entity_items = [
            SectionItem(node.id, node.name, status='ok')
            for node in iter_nodes(key.entity_tree)
            if node.id in entity_hits.matching_ids
        ]
        feature_items = [
            SectionItem(node.id, node.name, node.kind.value, status='ok')
            for node in iter_nodes(key.feature_tree)
            if node.id in feature_hits.matching_ids
        ]
        sections = [
            ReportSection(
                'entities', 'Matching Entities', 'entity_list', items=entity_items,
                metadata={'expanded': sorted(entity_hits.expanded_ids)},
            ),
            ReportSection(
                'features', 'Matching Features', 'features', items=feature_items,
                metadata={'expanded': sorted(feature_hits.expanded_ids)},
            ),
        ]

        return self._report('search', key, sections, summary={
            'term': term,
            'entities': len(entity_items),
            'features': len(feature_items),
        })

    # ==========================================================================
    # RENDERING
    # ==========================================================================

    def render(self, report: ReportData, format_name: Optional[str] = None) -> str:
        """
        Render a report with a registered formatter.

        Args:
            report: ReportData to render
            format_name: Format name (default: output_format setting)

        Returns:
            Rendered string

        Raises:
            ValueError: If no formatter is registered under the name
        """
        format_name = format_name or self.config.get('output_format', 'text')
        return FormatterRegistry.require(format_name).format_report(report)

    def write(
        self,
        report: ReportData,
        output_dir: Path,
        formats: Optional[list[str]] = None,
    ) -> dict[str, Path]:
        """
        Write report to files in requested formats.

        Args:
            report: ReportData to write
            output_dir: Target directory
            formats: List of format names (default: output_format setting)

        Returns:
            Dict mapping format name to written file path
        """
        if formats is None:
            formats = [self.config.get('output_format', 'text')]

        written = {}
        for fmt_name in formats:
            formatter = FormatterRegistry.get(fmt_name)
            if formatter is None:
                logger.warning(f"No formatter for: {fmt_name}")
                continue

            filepath = formatter.write_report(report, output_dir)
            written[formatter.format_name] = filepath
            logger.info(f"Wrote {fmt_name}: {filepath}")

        return written

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    def _report(
        self,
        report_type: str,
        key: KeyData,
        sections: list[ReportSection],
        summary: dict,
    ) -> ReportData:
        report = ReportData(
            report_type=report_type,
            title=key.title,
            key_name=key.key_name,
            generated_at=datetime.now().isoformat(timespec='seconds'),
            sections=sections,
            summary=summary,
        )
        logger.info(f"Generated {report_type} report: {len(sections)} sections for {key.title}")
        return report

    @staticmethod
    def _tree_section(section_id: str, title: str, lines: list[str]) -> ReportSection:
        return ReportSection(section_id, title, 'tree', metadata={'lines': lines})

    @staticmethod
    def _entity_order(key: KeyData) -> list[EntityId]:
        """Entity ids in tree pre-order, then any ids outside the tree."""
        order = []
        seen = set()
        for node in iter_nodes(key.entity_tree):
            if node.id in key.entities and node.id not in seen:
                seen.add(node.id)
                order.append(node.id)
        order.extend(sorted(i for i in key.entities if i not in seen))
        return order


__all__ = ['ReportGenerator']
