# Path: lucid_key/process/matcher/__init__.py
"""
Matching Engine - Constraint-Based Candidate Filtering

Narrows the candidate entities of a key by the feature values a user has
chosen. Matching is exact set filtering: no ranking, no fuzzy search.

Core Components:
    - Constraint / update_constraints: the chosen set and how it changes
    - compute_matches: direct / indirect / discarded partition
    - project_tree: entity trees for the remaining and discarded views

Example:
    from lucid_key.process.matcher import compute_matches, update_constraints

    chosen = update_constraints({}, 'state_red', True)
    chosen = update_constraints(chosen, 'leaf_length', '4.5', is_numeric=True)
    result = compute_matches(key, chosen)
"""

from .constraints import (
    Constraint,
    ChosenConstraints,
    parse_number,
    update_constraints,
    count_chosen_features,
)
from .match_engine import MatchResult, is_mismatch, compute_matches
from .tree_projection import project_tree, remaining_tree, discarded_tree

__all__ = [
    'Constraint',
    'ChosenConstraints',
    'parse_number',
    'update_constraints',
    'count_chosen_features',
    'MatchResult',
    'is_mismatch',
    'compute_matches',
    'project_tree',
    'remaining_tree',
    'discarded_tree',
]
