# Path: lucid_key/process/hierarchy/__init__.py
"""
Hierarchy Package for lucid_key

Builds the entity and feature catalogs and trees from key.data, and
provides the walks used over those trees.

Components:
- ModelBuilder: key.data document -> KeyCatalog
- build_feature_tree / build_entity_tree: iterative tree construction
- count_scorable_features: the "total features" figure
- Tree utilities: iteration, path lookup, name search, chosen-feature pruning

Example:
    from lucid_key.process.hierarchy import ModelBuilder, search_entity_tree

    catalog = ModelBuilder().build(document, key_name='mykey')
    result = search_entity_tree(catalog.entity_tree, 'oak')
"""

from .model_builder import (
    KeyCatalog,
    ModelBuilder,
    build_feature_tree,
    build_entity_tree,
    count_scorable_features,
)
from .tree_utils import (
    TreeSearchResult,
    iter_nodes,
    find_entity_path,
    search_feature_tree,
    search_entity_tree,
    chosen_feature_tree,
)

__all__ = [
    'KeyCatalog',
    'ModelBuilder',
    'build_feature_tree',
    'build_entity_tree',
    'count_scorable_features',
    'TreeSearchResult',
    'iter_nodes',
    'find_entity_path',
    'search_feature_tree',
    'search_entity_tree',
    'chosen_feature_tree',
]
