# Path: lucid_key/constants.py
"""
System-Wide Constants for lucid_key

Central repository for the constant values of the key archive format
and the matching engine. NO HARDCODED VALUES in module code.

Constants are organized by category:
- Archive Layout
- XML Tags and Attributes
- Metadata Properties
- Feature Kinds
- Score Codes
- Unit Symbols
- Display Defaults
"""

from enum import Enum
from typing import Final


# ==============================================================================
# ARCHIVE LAYOUT
# ==============================================================================

DATA_DIR_NAME: Final[str] = 'data'
MEDIA_DIR_NAME: Final[str] = 'Media'
KEY_DATA_FILE: Final[str] = 'key.data'
SCORE_FILE: Final[str] = 'normal.sco'
DATA_ARCHIVE_SUFFIX: Final[str] = '.data'
SCORE_ARCHIVE_SUFFIX: Final[str] = '.sco'
PATH_SEPARATOR: Final[str] = '/'
WINDOWS_SEPARATOR: Final[str] = '\\'


# ==============================================================================
# XML TAGS AND ATTRIBUTES
# ==============================================================================

TAG_PROPERTY: Final[str] = 'property'
TAG_ENTITY_ITEM: Final[str] = 'entity_item'
TAG_FEATURE_ITEM: Final[str] = 'feature_item'
TAG_STATE_ITEM: Final[str] = 'state_item'
TAG_FEATURE_NODE: Final[str] = 'feature_node'
TAG_ENTITY_TREE: Final[str] = 'entity_tree'
TAG_FEATURE_TREE: Final[str] = 'feature_tree'
TAG_CHILD_NODES: Final[str] = 'nodes'
TAG_MEDIA_ITEM: Final[str] = 'media_item'
TAG_MEDIA_DETAILS: Final[str] = 'media_details'
TAG_NORMAL_SCORE_DATA: Final[str] = 'normal_score_data'
TAG_NUMERIC_SCORE_DATA: Final[str] = 'numeric_score_data'
TAG_SCORING_ITEM: Final[str] = 'scoring_item'
TAG_SCORED_ITEM: Final[str] = 'scored_item'
TAG_SCORED_DATA: Final[str] = 'scored_data'

ATTR_KEY: Final[str] = 'key'
ATTR_VALUE: Final[str] = 'value'
ATTR_ITEM_ID: Final[str] = 'item_id'
ATTR_ITEM_NAME: Final[str] = 'item_name'
ATTR_SCORE_TYPE: Final[str] = 'score_type'
ATTR_BASE_UNIT: Final[str] = 'base_unit'
ATTR_UNIT_PREFIX: Final[str] = 'unit_prefix'
ATTR_MEDIA_PATH: Final[str] = 'media_path'
ATTR_CAPTION: Final[str] = 'caption'
ATTR_COPYRIGHT: Final[str] = 'copyright'
ATTR_COMMENTS: Final[str] = 'comments'
ATTR_OMIN: Final[str] = 'omin'
ATTR_OMAX: Final[str] = 'omax'


# ==============================================================================
# METADATA PROPERTIES
# ==============================================================================

PROP_KEY_TITLE: Final[str] = 'key_title'
PROP_KEY_AUTHORS: Final[str] = 'key_authors'
PROP_KEY_DESCRIPTION: Final[str] = 'key_description'

UNKNOWN_ENTITY_NAME: Final[str] = 'Unknown Entity'
UNKNOWN_FEATURE_NAME: Final[str] = 'Unknown Feature'


# ==============================================================================
# FEATURE KINDS
# ==============================================================================

class FeatureKind(str, Enum):
    """
    Kinds of diagnostic features.

    TEXT features never reach the catalog; they are listed so the
    declared score type of an item can be recognized and dropped.
    OTHER covers items with a missing or unrecognized score type
    (categorical parents, grouping nodes): they can only be matched
    through the presence of a score.
    """
    STATE = 'state'
    NUMERIC = 'numeric'
    TEXT = 'text'
    OTHER = 'other'

    @classmethod
    def from_score_type(cls, score_type: str | None) -> 'FeatureKind':
        """Map a declared score_type attribute onto a kind."""
        try:
            return cls((score_type or '').strip().lower())
        except ValueError:
            return cls.OTHER


# ==============================================================================
# SCORE CODES
# ==============================================================================

class ScoreCode(str, Enum):
    """
    How a state relates to an entity.

    Only ABSENT eliminates an entity when the state is chosen.
    """
    ABSENT = '0'
    COMMON = '1'
    RARE = '2'
    UNCERTAIN = '3'
    COMMON_MISINTERPRETED = '4'
    RARE_MISINTERPRETED = '5'


VALID_SCORE_CODES: Final[frozenset] = frozenset(code.value for code in ScoreCode)

SCORE_CODE_LABELS: Final[dict[str, str]] = {
    ScoreCode.ABSENT.value: 'absent',
    ScoreCode.COMMON.value: 'common',
    ScoreCode.RARE.value: 'rare',
    ScoreCode.UNCERTAIN.value: 'uncertain',
    ScoreCode.COMMON_MISINTERPRETED.value: 'common but misinterpreted',
    ScoreCode.RARE_MISINTERPRETED.value: 'rare but misinterpreted',
}


# ==============================================================================
# UNIT SYMBOLS
# ==============================================================================

UNIT_NONE: Final[str] = 'none'

UNIT_PREFIX_SYMBOLS: Final[dict[str, str]] = {
    'kilo': 'k',
    'hecto': 'h',
    'deca': 'da',
    'deci': 'd',
    'centi': 'c',
    'milli': 'm',
    'micro': 'µ',
    UNIT_NONE: '',
}

BASE_UNIT_SYMBOLS: Final[dict[str, str]] = {
    'metre': 'm',
    'square metre': 'm²',
    'cubic metre': 'm³',
    'litre': 'l',
    'degrees celcius': '°C',
    'degrees planar': '°',
    UNIT_NONE: '',
}


# ==============================================================================
# DISPLAY DEFAULTS
# ==============================================================================

DEFAULT_PROFILE_GROUP: Final[str] = 'Others'
NUMERIC_RANGE_SEPARATOR: Final[str] = ' - '

# CLI status markers
STATUS_OK: Final[str] = '[OK]'
STATUS_FAIL: Final[str] = '[FAIL]'
STATUS_INFO: Final[str] = '[INFO]'
STATUS_WARN: Final[str] = '[WARN]'

# Exit codes
EXIT_SUCCESS: Final[int] = 0
EXIT_FAILURE: Final[int] = 1
EXIT_INTERRUPTED: Final[int] = 130
