# Path: lucid_key/models/key_data.py
"""
Key Data Models

Normalized in-memory model of an identification key:
- Entity / EntityNode: candidate items and their classification tree
- Feature / FeatureNode: diagnostic features and their tree
- StateScore / NumericScore: how a feature relates to an entity
- EntityProfile / Characteristic: human-readable score summary
- KeyData: the aggregate returned by the loader

Entity ids and feature ids are distinct NewTypes so the two
namespaces are not mixed by accident.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType, Optional, Union

from ..constants import FeatureKind, ScoreCode
from .error import ErrorCollection
from .media import Media, MediaStore


EntityId = NewType('EntityId', str)
FeatureId = NewType('FeatureId', str)


# ==============================================================================
# ENTITIES
# ==============================================================================

@dataclass(frozen=True)
class Entity:
    """A candidate item (terminal taxon or grouping node)."""
    id: EntityId
    name: str


@dataclass
class EntityNode:
    """
    Node of the entity classification tree.

    Attributes:
        id: Entity id (present in the entity catalog)
        name: Entity name
        children: Ordered child nodes
        is_group: True when the node has children
        is_dimmed: Rendering hint set by tree projection
    """
    id: EntityId
    name: str
    children: list[EntityNode] = field(default_factory=list, repr=False)
    is_group: bool = False
    is_dimmed: bool = False

    def to_dict(self) -> dict:
        """Convert to nested dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'is_group': self.is_group,
            'is_dimmed': self.is_dimmed,
            'children': [child.to_dict() for child in self.children],
        }


# ==============================================================================
# FEATURES
# ==============================================================================

@dataclass(frozen=True)
class Feature:
    """
    A diagnostic feature or one state of a categorical feature.

    Attributes:
        id: Feature id
        name: Feature name
        kind: STATE, NUMERIC or OTHER (TEXT features are never cataloged)
        is_state: True for states of a categorical feature
        parent_name: Name of the enclosing feature group, if any
        base_unit: Declared base unit of a numeric feature
        unit_prefix: Declared unit prefix of a numeric feature
    """
    id: FeatureId
    name: str
    kind: FeatureKind
    is_state: bool = False
    parent_name: Optional[str] = None
    base_unit: Optional[str] = None
    unit_prefix: Optional[str] = None


@dataclass
class FeatureNode:
    """Node of the feature tree. State children are states, not features."""
    id: FeatureId
    name: str
    kind: FeatureKind
    is_state: bool = False
    children: list[FeatureNode] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict:
        """Convert to nested dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'kind': self.kind.value,
            'is_state': self.is_state,
            'children': [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class FeatureSummary:
    """Flat entry of the feature list used for constraint suggestions."""
    id: FeatureId
    kind: FeatureKind
    description: str


# ==============================================================================
# SCORES
# ==============================================================================

@dataclass(frozen=True)
class StateScore:
    """Score code of a state for one entity."""
    value: str

    @property
    def is_absent(self) -> bool:
        return self.value == ScoreCode.ABSENT.value


@dataclass(frozen=True)
class NumericScore:
    """Closed range of a numeric feature for one entity."""
    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Closed-interval test. An inverted range contains nothing."""
        return self.min <= value <= self.max


Score = Union[StateScore, NumericScore]


# ==============================================================================
# PROFILES
# ==============================================================================

@dataclass(frozen=True)
class Characteristic:
    """
    One display line of an entity profile.

    Attributes:
        text: State name or formatted numeric range
        parent_group: Group the line is displayed under
        kind: STATE or NUMERIC
        score: Score code for state lines
    """
    text: str
    parent_group: str
    kind: FeatureKind
    score: Optional[str] = None


@dataclass
class EntityProfile:
    """Human-readable denormalization of an entity's scores."""
    name: str
    characteristics: list[Characteristic] = field(default_factory=list)


# ==============================================================================
# AGGREGATE
# ==============================================================================

@dataclass(frozen=True)
class KeyData:
    """
    Root object returned by the loader.

    Built once per archive and never mutated afterwards. Owns every media
    handle through media_store; call release() (or use the instance as a
    context manager) when the key is discarded.
    """
    title: str
    authors: str
    description: str
    entities: dict[EntityId, Entity]
    entity_tree: list[EntityNode]
    features: dict[FeatureId, Feature]
    feature_tree: list[FeatureNode]
    entity_scores: dict[EntityId, dict[FeatureId, Score]]
    entity_profiles: dict[EntityId, EntityProfile]
    entity_media: dict[EntityId, list[Media]]
    feature_media: dict[FeatureId, list[Media]]
    total_features_count: int
    feature_list: list[FeatureSummary]
    errors: ErrorCollection = field(default_factory=ErrorCollection)
    media_store: MediaStore = field(default_factory=MediaStore, repr=False)
    key_name: str = ''
    root_prefix: str = ''

    @property
    def parsing_errors(self) -> list[str]:
        """Messages of every non-fatal error recorded during the load."""
        return self.errors.messages()

    @property
    def entity_ids(self) -> frozenset:
        return frozenset(self.entities)

    def release(self) -> int:
        """Release every media handle owned by this key."""
        return self.media_store.release_all()

    def __enter__(self) -> KeyData:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release()


__all__ = [
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
