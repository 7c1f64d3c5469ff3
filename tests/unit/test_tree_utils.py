# Path: tests/unit/test_tree_utils.py
"""
Unit Tests for tree utilities

Tests:
- Pre-order iteration and entity paths
- Feature and entity name search
- Pruning the feature tree to chosen features
"""

from lucid_key.process.hierarchy.tree_utils import (
    chosen_feature_tree,
    find_entity_path,
    iter_nodes,
    search_entity_tree,
    search_feature_tree,
)
from lucid_key.process.matcher import Constraint


class TestIteration:
    """Test tree walking."""

    def test_pre_order(self, sample_key):
        assert [n.id for n in iter_nodes(sample_key.entity_tree)] == ['g1', 'e1', 'e2', 'e3']

    def test_find_entity_path(self, sample_key):
        path = find_entity_path(sample_key.entity_tree, 'e2')
        assert [n.id for n in path] == ['g1', 'e2']

    def test_find_entity_path_root(self, sample_key):
        assert [n.id for n in find_entity_path(sample_key.entity_tree, 'e3')] == ['e3']

    def test_find_entity_path_absent(self, sample_key):
        assert find_entity_path(sample_key.entity_tree, 'nope') == []


class TestFeatureSearch:
    """Test feature name search."""

    def test_empty_term(self, sample_key):
        assert search_feature_tree(sample_key.feature_tree, '') is None

    def test_state_match_bubbles_up(self, sample_key):
        result = search_feature_tree(sample_key.feature_tree, 'LOBED')
        assert result.matching_ids == {'s_lobed', 'f_shape', 'f_leaf'}
        assert result.expanded_ids == {'f_leaf', 'f_shape'}

    def test_name_match(self, sample_key):
        result = search_feature_tree(sample_key.feature_tree, 'length')
        assert result.matching_ids == {'f_length', 'f_leaf'}
        assert result.expanded_ids == {'f_leaf'}

    def test_no_match(self, sample_key):
        result = search_feature_tree(sample_key.feature_tree, 'bark')
        assert result.matching_ids == frozenset()
        assert result.expanded_ids == frozenset()


class TestEntitySearch:
    """Test entity name search."""

    def test_empty_term(self, sample_key):
        assert search_entity_tree(sample_key.entity_tree, '') is None

    def test_leaf_match_under_non_matching_group(self, sample_key):
        result = search_entity_tree(sample_key.entity_tree, 'alba')
        assert result.matching_ids == {'e1'}
        assert result.expanded_ids == frozenset()

    def test_matching_group_expanded(self, sample_key):
        result = search_entity_tree(sample_key.entity_tree, 'quercus')
        assert result.matching_ids == {'g1', 'e1', 'e2'}
        assert result.expanded_ids == {'g1'}


class TestChosenFeatureTree:
    """Test pruning to chosen features."""

    def test_keeps_ancestors_of_chosen(self, sample_key):
        pruned = chosen_feature_tree(sample_key.feature_tree, {'s_lobed': Constraint(True)})
        assert [n.id for n in iter_nodes(pruned)] == ['f_leaf', 'f_shape', 's_lobed']

    def test_input_tree_untouched(self, sample_key):
        chosen_feature_tree(sample_key.feature_tree, {'f_length': Constraint('5')})
        assert len(list(iter_nodes(sample_key.feature_tree))) == 5

    def test_nothing_chosen(self, sample_key):
        assert chosen_feature_tree(sample_key.feature_tree, {}) == []
