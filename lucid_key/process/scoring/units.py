# Path: lucid_key/process/scoring/units.py
"""
Unit and Score Display Helpers

Display strings for numeric ranges and score codes.
"""

import math
import re
from typing import Optional

from ...constants import (
    BASE_UNIT_SYMBOLS,
    FeatureKind,
    NUMERIC_RANGE_SEPARATOR,
    SCORE_CODE_LABELS,
    UNIT_NONE,
    UNIT_PREFIX_SYMBOLS,
)
from ...models.key_data import Feature, NumericScore


# Sign, digits with optional fraction and exponent; the rest of the text is ignored
LEADING_NUMBER = re.compile(r'[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def parse_leading_number(text: str) -> Optional[float]:
    """
    Number at the start of text, ignoring whatever follows it.

    '5 cm' and '5cm' give 5.0, '-2.5e1mm' gives -25.0. Text that does
    not start with a number (after whitespace) gives None.
    """
    match = LEADING_NUMBER.match(text.strip())
    if match is None:
        return None
    return float(match.group())


def get_unit_symbol(feature: Optional[Feature]) -> str:
    """
    Unit symbol of a numeric feature.

    The prefix symbol is composed with the base-unit symbol, e.g.
    centi + metre -> 'cm'. Unknown or 'none' parts render as ''.

    Args:
        feature: Feature from the catalog

    Returns:
        Unit symbol, '' for non-numeric features
    """
    if feature is None or feature.kind != FeatureKind.NUMERIC:
        return ''
    prefix = UNIT_PREFIX_SYMBOLS.get(feature.unit_prefix or UNIT_NONE, '')
    base = BASE_UNIT_SYMBOLS.get(feature.base_unit or UNIT_NONE, '')
    return prefix + base


def format_number(value: float) -> str:
    """Render a float, dropping the '.0' of integral values."""
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def format_range(score: NumericScore, feature: Optional[Feature] = None) -> str:
    """
    Render a numeric score as 'min - max unit'.

    Example:
        format_range(NumericScore(2.0, 5.5), feature)  # '2 - 5.5 cm'
    """
    text = (
        f"{format_number(score.min)}{NUMERIC_RANGE_SEPARATOR}"
        f"{format_number(score.max)} {get_unit_symbol(feature)}"
    )
    return text.rstrip()


def score_label(code: Optional[str]) -> str:
    """Human-readable label of a score code ('' when unknown)."""
    if code is None:
        return ''
    return SCORE_CODE_LABELS.get(code, '')


__all__ = [
    'parse_leading_number',
    'get_unit_symbol',
    'format_number',
    'format_range',
    'score_label',
]
