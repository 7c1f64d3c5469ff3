# Path: lucid_key/process/matcher/match_engine.py
"""
Match Engine

Partitions every entity of a key into direct matches, indirect matches
and discarded, for a set of chosen constraints.

Algorithm:
1. An entity is directly discarded when any chosen constraint mismatches
   its score map (first mismatch stops the checks for that entity).
2. Direct matches are all entities not directly discarded.
3. Indirect matches: group nodes of the entity tree with at least one
   child already remaining are added, pass after pass over the whole
   tree, until a pass adds nothing.
4. Discarded is everything not remaining (direct or indirect).

compute_matches is a pure function over the model and the chosen set
and keeps no state between calls.
"""

from dataclasses import dataclass
from typing import Optional

from ...constants import FeatureKind, ScoreCode
from ...core.logger import get_process_logger
from ...models.key_data import (
    EntityNode,
    Feature,
    KeyData,
    NumericScore,
    Score,
    StateScore,
)
from ..hierarchy.tree_utils import iter_nodes
from .constraints import ChosenConstraints, Constraint, parse_number


logger = get_process_logger('matcher.match_engine')


@dataclass(frozen=True)
class MatchResult:
    """
    Result of matching all entities against a chosen set.

    Attributes:
        direct: Entities with no constraint mismatch
        indirect: Groups kept because a descendant remains
        discarded: Every entity not remaining
        directly_discarded: Entities that mismatched a constraint
    """
    direct: frozenset
    indirect: frozenset
    discarded: frozenset
    directly_discarded: frozenset

    @property
    def remaining(self) -> frozenset:
        """Direct and indirect matches together."""
        return self.direct | self.indirect

    def to_dict(self) -> dict:
        """Convert to dictionary with sorted id lists."""
        return {
            'direct': sorted(self.direct),
            'indirect': sorted(self.indirect),
            'discarded': sorted(self.discarded),
            'directly_discarded': sorted(self.directly_discarded),
        }


def is_mismatch(feature: Feature, score: Optional[Score], constraint: Constraint) -> bool:
    """
    Test one chosen constraint against one entity's score.

    - No score for the feature: mismatch.
    - State: mismatch only when the score code is '0' (absent).
    - Numeric: mismatch when the chosen value is not a number or lies
      outside the closed [min, max] range.

    Args:
        feature: Catalog entry of the chosen feature
        score: The entity's score for that feature, if any
        constraint: The chosen value

    Returns:
        True when the entity is excluded by this constraint
    """
    if score is None:
        return True

    if feature.kind == FeatureKind.STATE:
        return isinstance(score, StateScore) and score.value == ScoreCode.ABSENT.value

    if feature.kind == FeatureKind.NUMERIC:
        value = parse_number(constraint.value)
        if value is None or not isinstance(score, NumericScore):
            return True
        return not score.contains(value)

    return False


def _group_nodes(tree: list[EntityNode]) -> list[EntityNode]:
    """Every group node of the tree, in pre-order."""
    return [node for node in iter_nodes(tree) if node.is_group]


def compute_matches(key: KeyData, chosen: ChosenConstraints) -> MatchResult:
    """
    Partition all entities of a key for a chosen set.

    Constraints whose feature id is not in the catalog are ignored.

    Args:
        key: Loaded key
        chosen: Mapping of feature id to Constraint

    Returns:
        MatchResult

    Example:
        result = compute_matches(key, {FeatureId('s1'): Constraint(True)})
        print(sorted(result.direct))
    """
    all_ids = frozenset(key.entities)
    empty: frozenset = frozenset()

    if not chosen:
        return MatchResult(all_ids, empty, empty, empty)

    # Resolve chosen ids once; unknown features take no part
    active = [
        (key.features[feature_id], constraint)
        for feature_id, constraint in chosen.items()
        if feature_id in key.features
    ]

    directly_discarded = set()
    for entity_id in all_ids:
        scores = key.entity_scores.get(entity_id, {})
        for feature, constraint in active:
            if is_mismatch(feature, scores.get(feature.id), constraint):
                directly_discarded.add(entity_id)
                break

    direct = all_ids - directly_discarded

    indirect = set()
    remaining = set(direct)
    groups = _group_nodes(key.entity_tree)
    changed = True
    passes = 0
    while changed:
        changed = False
        passes += 1
        for node in groups:
            if node.id in remaining:
                continue
            if any(child.id in remaining for child in node.children):
                indirect.add(node.id)
                remaining.add(node.id)
                changed = True

    discarded = all_ids - remaining

    logger.debug(
        f"{len(active)} constraints: {len(direct)} direct, {len(indirect)} indirect, "
        f"{len(discarded)} discarded ({passes} propagation passes)"
    )

    return MatchResult(
        direct=frozenset(direct),
        indirect=frozenset(indirect),
        discarded=frozenset(discarded),
        directly_discarded=frozenset(directly_discarded),
    )


__all__ = ['MatchResult', 'is_mismatch', 'compute_matches']
