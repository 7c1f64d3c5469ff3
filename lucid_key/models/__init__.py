# Path: lucid_key/models/__init__.py
"""
Models Package

Domain data structures, media ownership and the error model.
"""

from .error import (
    ErrorSeverity,
    ErrorCategory,
    ParsingError,
    ErrorCollection,
    KeyLoadError,
    ArchiveError,
    StructureError,
    ScoringUnavailable,
    MediaResolutionError,
)
from .media import MediaHandle, MediaStore, Media
from .key_data import (
    EntityId,
    FeatureId,
    Entity,
    EntityNode,
    Feature,
    FeatureNode,
    FeatureSummary,
    StateScore,
    NumericScore,
    Score,
    Characteristic,
    EntityProfile,
    KeyData,
)

__all__ = [
    # Errors
    'ErrorSeverity',
    'ErrorCategory',
    'ParsingError',
    'ErrorCollection',
    'KeyLoadError',
    'ArchiveError',
    'StructureError',
    'ScoringUnavailable',
    'MediaResolutionError',
    # Media
    'MediaHandle',
    'MediaStore',
    'Media',
    # Key data
    'EntityId',
    'FeatureId',
    'Entity',
    'EntityNode',
    'Feature',
    'FeatureNode',
    'FeatureSummary',
    'StateScore',
    'NumericScore',
    'Score',
    'Characteristic',
    'EntityProfile',
    'KeyData',
]
