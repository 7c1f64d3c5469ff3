# Path: lucid_key/process/scoring/__init__.py
"""
Scoring Package for lucid_key

Parses normal.sco into the score table and renders scores for display.
"""

from .score_index import ScoreIndex
from .profiles import group_characteristics, characteristic_label
from .units import (
    parse_leading_number,
    get_unit_symbol,
    format_number,
    format_range,
    score_label,
)

__all__ = [
    'ScoreIndex',
    'parse_leading_number',
    'get_unit_symbol',
    'format_number',
    'format_range',
    'score_label',
    'group_characteristics',
    'characteristic_label',
]
