# Path: lucid_key/process/matcher/constraints.py
"""
Chosen Constraints

A constraint is a user-chosen feature value: a selected state, or a
number entered for a numeric feature. The chosen set is a plain mapping
from feature id to Constraint and is never mutated in place; every
update returns a new mapping.
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ...models.key_data import Feature, FeatureId
from ..scoring.units import parse_leading_number


@dataclass(frozen=True)
class Constraint:
    """
    One chosen feature value.

    Attributes:
        value: True for a selected state, the entered value for a numeric feature
    """
    value: Any = None


ChosenConstraints = Mapping[FeatureId, Constraint]


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a user-supplied numeric value.

    Text is read up to the end of its leading number, so '6.5 cm' is
    6.5. Booleans, NaN and text not starting with a number are
    unparseable.

    Returns:
        The number, or None
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number: Optional[float] = float(value)
    else:
        number = parse_leading_number(str(value))
    if number is None or math.isnan(number):
        return None
    return number


def update_constraints(
    chosen: ChosenConstraints,
    feature_id: FeatureId,
    value: Any,
    is_numeric: bool = False,
) -> dict[FeatureId, Constraint]:
    """
    Apply one user choice to a chosen set.

    State: a truthy value selects the state, a falsy one deselects it.
    Numeric: an empty string, a boolean or an unparseable value clears the
    feature; anything else is stored as given.

    Args:
        chosen: Current chosen constraints
        feature_id: Feature or state being changed
        value: New value
        is_numeric: Whether the feature is numeric

    Returns:
        New mapping; chosen is left untouched
    """
    updated = dict(chosen)

    if not is_numeric:
        if value:
            updated[feature_id] = Constraint(True)
        else:
            updated.pop(feature_id, None)
        return updated

    if value == '' or parse_number(value) is None:
        updated.pop(feature_id, None)
    else:
        updated[feature_id] = Constraint(value)
    return updated


def count_chosen_features(
    chosen: ChosenConstraints,
    features: Mapping[FeatureId, Feature],
) -> int:
    """
    Number of distinct features in a chosen set.

    Several chosen states of one categorical feature count once, under
    their parent feature name. Unknown ids are ignored.
    """
    counted: set = set()
    for feature_id in chosen:
        feature = features.get(feature_id)
        if feature is None:
            continue
        if feature.is_state and feature.parent_name:
            counted.add(('group', feature.parent_name))
        else:
            counted.add(('feature', feature.id))
    return len(counted)


__all__ = [
    'Constraint',
    'ChosenConstraints',
    'parse_number',
    'update_constraints',
    'count_chosen_features',
]
