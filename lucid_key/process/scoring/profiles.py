# Path: lucid_key/process/scoring/profiles.py
"""
Profile Helpers

Grouping and labelling of entity profile lines for display.
"""

from ...constants import FeatureKind
from ...models.key_data import Characteristic, EntityProfile
from .units import score_label


NUMERIC_LABEL = 'interval'


def group_characteristics(profile: EntityProfile) -> dict[str, list[Characteristic]]:
    """
    Profile lines grouped by parent group.

    Groups appear in the order they are first seen; lines keep their
    order inside each group.

    Args:
        profile: Entity profile

    Returns:
        Mapping of group name to its characteristics
    """
    grouped: dict[str, list[Characteristic]] = {}
    for characteristic in profile.characteristics:
        grouped.setdefault(characteristic.parent_group, []).append(characteristic)
    return grouped


def characteristic_label(characteristic: Characteristic) -> str:
    """Badge text of a profile line: the score label, or 'interval' for ranges."""
    if characteristic.kind == FeatureKind.NUMERIC:
        return NUMERIC_LABEL
    return score_label(characteristic.score)


__all__ = ['group_characteristics', 'characteristic_label']
