# Path: tests/unit/test_output.py
"""
Unit Tests for the output layer

Tests:
- Tree rendering
- Formatter registry and formatters
- Key, match, profile and search reports
"""

import json

import pytest

from lucid_key.constants import FeatureKind
from lucid_key.models.key_data import EntityNode, FeatureNode
from lucid_key.output import (
    FormatterRegistry,
    JsonFormatter,
    ReportData,
    ReportGenerator,
    ReportSection,
    SectionItem,
    TextFormatter,
    TreeFormatter,
    format_tree,
)
from lucid_key.process.matcher import Constraint, compute_matches


# ==============================================================================
# TREES
# ==============================================================================

class TestTreeFormatter:
    """Test ASCII tree rendering."""

    def test_entity_tree(self, sample_key):
        lines = TreeFormatter().format_entities(sample_key.entity_tree)
        assert lines == [
            '+-- g1 Quercus (group)',
            '|   +-- e1 Quercus alba',
            '|   `-- e2 Quercus rubra',
            '`-- e3 Fagus sylvatica',
        ]

    def test_feature_tree(self, sample_key):
        lines = TreeFormatter().format_features(sample_key.feature_tree)
        assert lines[0] == '`-- f_leaf Leaf [other]'
        assert lines[-1] == '    `-- f_length Leaf length [numeric]'
        assert '    |   +-- s_lobed Lobed' in lines

    def test_dimmed_flag(self):
        roots = [EntityNode('g', 'G', [EntityNode('a', 'A')], is_group=True, is_dimmed=True)]
        assert TreeFormatter().format_entities(roots)[0] == '`-- g G (group, dimmed)'

    def test_unicode(self):
        roots = [EntityNode('a', 'A'), EntityNode('b', 'B')]
        lines = TreeFormatter(use_unicode=True).format_entities(roots)
        assert lines == ['├── a A', '└── b B']

    def test_format_tree_detects_kind(self):
        roots = [FeatureNode('n', 'N', FeatureKind.NUMERIC)]
        assert format_tree(roots) == '`-- n N [numeric]'
        assert format_tree([]) == ''

    def test_deep_tree(self):
        root = EntityNode('n0', 'N0')
        current = root
        for i in range(1, 2000):
            child = EntityNode(f'n{i}', f'N{i}')
            current.children.append(child)
            current.is_group = True
            current = child
        lines = TreeFormatter().format_entities([root])
        assert len(lines) == 2000


# ==============================================================================
# FORMATTERS
# ==============================================================================

@pytest.fixture
def report():
    return ReportData(
        report_type='match',
        title='Oaks',
        key_name='oaks',
        generated_at='2024-01-01T00:00:00',
        sections=[
            ReportSection('overview', 'Key', 'overview', items=[
                SectionItem('entities', 'Entities', 4),
            ]),
            ReportSection('remaining', 'Remaining Entities', 'entity_list', items=[
                SectionItem('e1', 'Quercus alba', status='ok', details={'match': 'direct'}),
                SectionItem('g1', 'Quercus', status='ok', details={'match': 'indirect'}),
            ]),
            ReportSection('tree', 'Tree', 'tree', metadata={'lines': ['`-- e1 Quercus alba']}),
            ReportSection('misc', 'Misc', 'unknown', items=[
                SectionItem('x', 'Something', 1, status='warning'),
            ]),
        ],
        summary={'remaining': 2},
    )


class TestFormatterRegistry:
    """Test formatter lookup."""

    def test_defaults_registered(self):
        assert {'text', 'json'} <= set(FormatterRegistry.get_available())

    def test_get_unknown(self):
        assert FormatterRegistry.get('pdf') is None

    def test_get_returns_instance(self):
        assert isinstance(FormatterRegistry.get('text'), TextFormatter)

    def test_alias_and_case(self):
        assert isinstance(FormatterRegistry.get('txt'), TextFormatter)
        assert isinstance(FormatterRegistry.get(' JSON '), JsonFormatter)
        assert 'txt' not in FormatterRegistry.get_available()

    def test_require_unknown_names_available(self):
        with pytest.raises(ValueError, match=r"available: .*text"):
            FormatterRegistry.require('pdf')


class TestTextFormatter:
    """Test text rendering."""

    def test_sections_rendered(self, report):
        text = TextFormatter().format_report(report)
        assert 'MATCH: Oaks' in text
        assert 'REMAINING ENTITIES (2):' in text
        assert '[OK] e1' in text
        assert 'Quercus (indirect)' in text
        assert '`-- e1 Quercus alba' in text
        assert '[!!] Something' in text
        assert 'Generated: 2024-01-01T00:00:00' in text

    def test_empty_entity_list(self):
        report = ReportData('match', 'Oaks', sections=[
            ReportSection('discarded', 'Discarded Entities', 'entity_list'),
        ])
        assert '(none)' in TextFormatter().format_report(report)

    def test_write_report(self, report, temp_dir):
        path = TextFormatter().write_report(report, temp_dir / 'out')
        assert path.name == 'match_oaks.txt'
        assert 'MATCH: Oaks' in path.read_text(encoding='utf-8')

    def test_filename_from_unsafe_key_name(self):
        report = ReportData('key', 'Oaks', key_name='my key (v2)')
        assert TextFormatter().filename_for(report) == 'key_my_key_v2.txt'

    def test_filename_falls_back_to_title(self):
        report = ReportData('search', '')
        assert JsonFormatter(indent=2).filename_for(report) == 'search_key.json'


class TestJsonFormatter:
    """Test JSON rendering."""

    def test_round_trip_structure(self, report):
        data = json.loads(JsonFormatter(indent=2).format_report(report))
        assert data['report_type'] == 'match'
        assert data['summary'] == {'remaining': 2}
        assert data['sections'][1]['items'][0]['key'] == 'e1'
        assert data['sections'][2]['metadata']['lines'] == ['`-- e1 Quercus alba']

    def test_indent_from_config(self, mock_env_vars, report):
        text = JsonFormatter().format_report(report)
        assert '\n    "report_type"' in text


# ==============================================================================
# REPORTS
# ==============================================================================

class TestReportGenerator:
    """Test report building over the sample key."""

    def test_key_report(self, sample_key):
        report = ReportGenerator().key_report(sample_key, include_tree=True)
        overview = report.get_section('overview')
        values = {item.key: item.value for item in overview.items}
        assert values['title'] == 'Oaks and Beeches'
        assert values['entities'] == 4
        assert values['features'] == 2
        assert report.get_section('entity_tree').metadata['lines'][0] == '+-- g1 Quercus (group)'
        assert report.get_section('errors') is not None

    def test_match_report(self, sample_key):
        chosen = {'s_lobed': Constraint(True), 'ghost': Constraint(True)}
        result = compute_matches(sample_key, chosen)
        report = ReportGenerator().match_report(sample_key, result, chosen, include_tree=True)

        assert report.summary['direct'] == 1
        assert report.summary['chosen'] == 1
        remaining = report.get_section('remaining')
        assert [(i.key, i.details['match']) for i in remaining.items] == [
            ('g1', 'indirect'), ('e1', 'direct'),
        ]
        discarded = report.get_section('discarded')
        assert [i.key for i in discarded.items] == ['e2', 'e3']
        chosen_items = report.get_section('chosen').items
        assert chosen_items[0].label == 'Leaf shape: Lobed'
        assert chosen_items[1].status == 'skip'
        assert report.get_section('chosen_tree').metadata['lines'] == [
            '`-- f_leaf Leaf [other]',
            '    `-- f_shape Leaf shape [other]',
            '        `-- s_lobed Lobed',
        ]

    def test_profile_report(self, sample_key):
        report = ReportGenerator().profile_report(sample_key, 'e1')
        values = {item.key: item.value for item in report.get_section('overview').items}
        assert values['path'] == 'Quercus > Quercus alba'
        assert values['media'] == 1
        groups = report.get_sections_by_type('profile_group')
        assert [s.title for s in groups] == ['Leaf shape', 'Leaf length']
        assert groups[0].items[0].details['score_label'] == 'common'
        assert groups[1].items[0].label == '10 - 20 cm'
        assert groups[1].items[0].details['score_label'] == 'interval'

    def test_profile_unknown_entity(self, sample_key):
        with pytest.raises(ValueError):
            ReportGenerator().profile_report(sample_key, 'nope')

    def test_search_report(self, sample_key):
        report = ReportGenerator().search_report(sample_key, 'quercus')
        assert [i.key for i in report.get_section('entities').items] == ['g1', 'e1', 'e2']
        assert report.summary['features'] == 0

    def test_search_empty_term(self, sample_key):
        with pytest.raises(ValueError):
            ReportGenerator().search_report(sample_key, '')

    def test_render_unknown_format(self, sample_key):
        generator = ReportGenerator()
        with pytest.raises(ValueError):
            generator.render(generator.key_report(sample_key), 'pdf')

    def test_write(self, sample_key, temp_dir):
        generator = ReportGenerator()
        written = generator.write(generator.key_report(sample_key), temp_dir, ['json', 'pdf'])
        assert list(written) == ['json']
        assert json.loads(written['json'].read_text(encoding='utf-8'))['report_type'] == 'key'
