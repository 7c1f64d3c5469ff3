# Path: tests/unit/test_matcher.py
"""
Unit Tests for the matcher

Tests:
- Constraint parsing and updates
- Mismatch rules per feature kind
- compute_matches partitioning and indirect propagation
- Tree projection for the remaining and discarded views
"""

import pytest

from fixtures.key_builder import make_key, node, numeric, state
from lucid_key.constants import FeatureKind
from lucid_key.models.key_data import Feature, NumericScore, StateScore
from lucid_key.process.hierarchy.tree_utils import iter_nodes
from lucid_key.process.matcher import (
    Constraint,
    compute_matches,
    discarded_tree,
    is_mismatch,
    project_tree,
    remaining_tree,
    update_constraints,
)
from lucid_key.process.matcher.constraints import count_chosen_features, parse_number


# ==============================================================================
# CONSTRAINTS
# ==============================================================================

class TestParseNumber:
    """Test user number parsing."""

    @pytest.mark.parametrize('raw,expected', [
        ('5', 5.0),
        (' 2.5 ', 2.5),
        (3, 3.0),
        ('-1e2', -100.0),
        ('5cm', 5.0),
        (' 6.5 cm', 6.5),
        ('.5', 0.5),
        ('3e', 3.0),
    ])
    def test_parseable(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize('raw', ['abc', '', None, True, False, 'nan', 'cm5', float('nan')])
    def test_unparseable(self, raw):
        assert parse_number(raw) is None


class TestUpdateConstraints:
    """Test chosen set updates."""

    def test_select_and_deselect_state(self):
        chosen = update_constraints({}, 's1', True)
        assert chosen == {'s1': Constraint(True)}
        assert update_constraints(chosen, 's1', False) == {}

    def test_numeric_stored_as_given(self):
        chosen = update_constraints({}, 'n1', '4.5', is_numeric=True)
        assert chosen['n1'] == Constraint('4.5')

    def test_numeric_with_trailing_unit_kept(self):
        chosen = update_constraints({}, 'n1', '5cm', is_numeric=True)
        assert chosen == {'n1': Constraint('5cm')}

    @pytest.mark.parametrize('value', ['', 'abc', True])
    def test_numeric_cleared(self, value):
        chosen = {'n1': Constraint('3')}
        assert update_constraints(chosen, 'n1', value, is_numeric=True) == {}

    def test_input_not_mutated(self):
        chosen = {'s1': Constraint(True)}
        update_constraints(chosen, 's2', True)
        assert chosen == {'s1': Constraint(True)}


class TestCountChosenFeatures:
    """Test distinct chosen feature counting."""

    def test_states_of_one_feature_count_once(self):
        features = {
            's1': state('s1', parent_name='Colour'),
            's2': state('s2', parent_name='Colour'),
            'n1': numeric('n1'),
        }
        chosen = {'s1': Constraint(True), 's2': Constraint(True), 'n1': Constraint('2')}
        assert count_chosen_features(chosen, features) == 2

    def test_unknown_ids_ignored(self):
        assert count_chosen_features({'x': Constraint(True)}, {}) == 0


# ==============================================================================
# MISMATCH RULES
# ==============================================================================

class TestIsMismatch:
    """Test a single constraint against a single score."""

    def test_no_score_mismatches(self):
        assert is_mismatch(state('f'), None, Constraint(True))
        assert is_mismatch(numeric('f'), None, Constraint('1'))

    def test_state_absent_mismatches(self):
        assert is_mismatch(state('f'), StateScore('0'), Constraint(True))

    @pytest.mark.parametrize('code', ['1', '2', '3', '4', '5'])
    def test_other_state_codes_match(self, code):
        assert not is_mismatch(state('f'), StateScore(code), Constraint(True))

    @pytest.mark.parametrize('value,mismatch', [
        ('6', True),
        ('5', False),
        ('2', False),
        ('1.99', True),
        ('abc', True),
        ('5cm', False),
        ('6 cm', True),
        (None, True),
    ])
    def test_numeric_range(self, value, mismatch):
        score = NumericScore(2.0, 5.0)
        assert is_mismatch(numeric('f'), score, Constraint(value)) is mismatch

    def test_inverted_range_always_mismatches(self):
        assert is_mismatch(numeric('f'), NumericScore(5.0, 2.0), Constraint('3'))

    def test_numeric_feature_with_state_score_mismatches(self):
        assert is_mismatch(numeric('f'), StateScore('1'), Constraint('3'))

    def test_other_kind_matches_on_presence(self):
        feature = Feature('f', 'F', FeatureKind.OTHER)
        assert not is_mismatch(feature, StateScore('0'), Constraint(True))
        assert is_mismatch(feature, None, Constraint(True))


# ==============================================================================
# COMPUTE MATCHES
# ==============================================================================

class TestComputeMatches:
    """Test entity partitioning."""

    def test_empty_chosen_keeps_everything(self):
        key = make_key(['a', 'b', 'g'], [state('f')], {}, tree=[node('g', node('a')), node('b')])
        result = compute_matches(key, {})
        assert result.direct == {'a', 'b', 'g'}
        assert result.indirect == frozenset()
        assert result.discarded == frozenset()

    def test_state_scenario(self):
        key = make_key(
            ['E1', 'E2'],
            [state('F1')],
            {'E1': {'F1': StateScore('1')}, 'E2': {'F1': StateScore('0')}},
        )
        result = compute_matches(key, {'F1': Constraint(True)})
        assert result.direct == {'E1'}
        assert result.discarded == {'E2'}
        assert result.indirect == frozenset()

    def test_uncertain_state_not_discarded(self):
        key = make_key(['E'], [state('F')], {'E': {'F': StateScore('3')}})
        assert compute_matches(key, {'F': Constraint(True)}).direct == {'E'}

    @pytest.mark.parametrize('value,kept', [
        ('6', False),
        ('5', True),
        ('abc', False),
        ('5cm', True),
        ('5.5 cm', False),
    ])
    def test_numeric_scenario(self, value, kept):
        key = make_key(['E'], [numeric('F')], {'E': {'F': NumericScore(2.0, 5.0)}})
        result = compute_matches(key, {'F': Constraint(value)})
        assert ('E' in result.direct) is kept
        assert ('E' in result.discarded) is not kept

    def test_unscored_entity_discarded(self):
        key = make_key(['E'], [state('F')], {})
        assert compute_matches(key, {'F': Constraint(True)}).discarded == {'E'}

    def test_all_constraints_must_pass(self):
        key = make_key(
            ['E'],
            [state('F'), numeric('N')],
            {'E': {'F': StateScore('1'), 'N': NumericScore(0.0, 1.0)}},
        )
        result = compute_matches(key, {'F': Constraint(True), 'N': Constraint('7')})
        assert result.directly_discarded == {'E'}

    def test_unknown_feature_ignored(self):
        key = make_key(['E'], [state('F')], {'E': {'F': StateScore('1')}})
        result = compute_matches(key, {'F': Constraint(True), 'ghost': Constraint(True)})
        assert result.direct == {'E'}

    def test_indirect_fixpoint_over_deep_chain(self):
        tree = [node('G1', node('G2', node('G3', node('E'))))]
        key = make_key(['G1', 'G2', 'G3', 'E'], [state('F')], {'E': {'F': StateScore('1')}}, tree)
        result = compute_matches(key, {'F': Constraint(True)})
        assert result.direct == {'E'}
        assert result.indirect == {'G1', 'G2', 'G3'}
        assert result.discarded == frozenset()
        assert result.directly_discarded == {'G1', 'G2', 'G3'}

    def test_group_without_remaining_child_discarded(self):
        tree = [node('G', node('A'), node('B')), node('C')]
        key = make_key(
            ['G', 'A', 'B', 'C'],
            [state('F')],
            {'A': {'F': StateScore('0')}, 'C': {'F': StateScore('1')}},
            tree,
        )
        result = compute_matches(key, {'F': Constraint(True)})
        assert result.remaining == {'C'}
        assert result.discarded == {'G', 'A', 'B'}

    def test_partition_is_complete_and_disjoint(self, sample_key):
        result = compute_matches(sample_key, {'s_lobed': Constraint(True)})
        assert result.direct | result.indirect | result.discarded == sample_key.entity_ids
        assert not (result.direct & result.indirect)
        assert not (result.remaining & result.discarded)

    def test_idempotent_and_order_independent(self):
        tree = [node('G', node('A'), node('B'))]
        scores = {'A': {'F': StateScore('1'), 'N': NumericScore(1.0, 3.0)}, 'B': {'F': StateScore('0')}}
        forward = make_key(['G', 'A', 'B'], [state('F'), numeric('N')], scores, tree)
        backward = make_key(['B', 'A', 'G'], [numeric('N'), state('F')], scores, tree)
        chosen = {'F': Constraint(True), 'N': Constraint('2')}
        reordered = dict(reversed(list(chosen.items())))

        first = compute_matches(forward, chosen)
        assert compute_matches(forward, chosen) == first
        assert compute_matches(backward, reordered) == first

    def test_to_dict_sorted(self, sample_key):
        data = compute_matches(sample_key, {'s_lobed': Constraint(True)}).to_dict()
        assert data['direct'] == ['e1']
        assert data['indirect'] == ['g1']
        assert data['discarded'] == ['e2', 'e3']
        assert data['directly_discarded'] == ['e2', 'e3', 'g1']


# ==============================================================================
# TREE PROJECTION
# ==============================================================================

class TestProjectTree:
    """Test entity tree projection."""

    def tree(self):
        return [node('g', node('a'), node('b')), node('c')]

    def test_remaining_view(self, sample_key):
        result = compute_matches(sample_key, {'s_lobed': Constraint(True)})
        roots = remaining_tree(sample_key, result)
        assert [n.id for n in iter_nodes(roots)] == ['g1', 'e1']
        assert not roots[0].is_dimmed

    def test_discarded_view(self, sample_key):
        result = compute_matches(sample_key, {'s_lobed': Constraint(True)})
        roots = discarded_tree(sample_key, result)
        assert [n.id for n in iter_nodes(roots)] == ['g1', 'e2', 'e3']
        # g1 was itself discarded by the constraint, so it is not dimmed
        assert not roots[0].is_dimmed

    def test_parent_kept_for_children_is_dimmed(self):
        roots = project_tree(self.tree(), {'a'}, set())
        assert [n.id for n in iter_nodes(roots)] == ['g', 'a']
        assert roots[0].is_dimmed

    def test_discarded_parent_not_dimmed(self):
        roots = project_tree(self.tree(), {'a'}, set(), {'g'})
        assert not roots[0].is_dimmed

    def test_empty_allowed_group_dropped(self):
        assert project_tree(self.tree(), {'g'}, set()) == []

    def test_direct_group_kept_without_children(self):
        roots = project_tree(self.tree(), {'g'}, {'g'})
        assert [n.id for n in roots] == ['g']
        assert roots[0].children == []

    def test_input_untouched(self):
        tree = self.tree()
        project_tree(tree, {'a'}, set())
        assert len(tree[0].children) == 2
        assert not tree[0].is_dimmed
