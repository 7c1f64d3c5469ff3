# Path: lucid_key/process/hierarchy/tree_utils.py
"""
Tree Utilities

Walks over entity and feature trees: iteration, path lookup, name
search and pruning to the chosen features.

Every walk uses an explicit stack.
"""

from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Optional, Union

from ...constants import FeatureKind
from ...models.key_data import EntityId, EntityNode, FeatureNode


TreeNode = Union[EntityNode, FeatureNode]


@dataclass(frozen=True)
class TreeSearchResult:
    """
    Outcome of a name search over a tree.

    Attributes:
        matching_ids: Nodes to highlight
        expanded_ids: Nodes to expand so every match is visible
    """
    matching_ids: frozenset
    expanded_ids: frozenset


def iter_nodes(tree: list[TreeNode]) -> Iterator[TreeNode]:
    """Pre-order iteration over every node of a tree."""
    stack = list(reversed(tree))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _iter_with_path(tree: list[TreeNode]) -> Iterator[tuple[TreeNode, tuple]]:
    """Pre-order iteration yielding each node with its ancestor chain."""
    stack = [(node, ()) for node in reversed(tree)]
    while stack:
        node, path = stack.pop()
        yield node, path
        child_path = path + (node,)
        stack.extend((child, child_path) for child in reversed(node.children))


def find_entity_path(tree: list[EntityNode], entity_id: EntityId) -> list[EntityNode]:
    """
    Nodes from a root down to the first node with entity_id.

    Returns:
        List starting at a root and ending at the entity, or [] if absent
    """
    for node, path in _iter_with_path(tree):
        if node.id == entity_id:
            return list(path) + [node]
    return []


def search_feature_tree(tree: list[FeatureNode], term: str) -> Optional[TreeSearchResult]:
    """
    Case-insensitive substring search over feature names.

    States and numeric features are leaves for the search. Any other node
    matches when its own name matches or when one of its children matches.
    Every ancestor of a matching node is expanded.

    Args:
        tree: Feature tree roots
        term: Search text

    Returns:
        TreeSearchResult, or None for an empty term
    """
    if not term:
        return None
    needle = term.lower()

    visited = list(_iter_feature_search(tree))
    matching: set = set()

    # Children come after their parent in pre-order, so walk backwards
    for node, _ in reversed(visited):
        is_leaf = node.is_state or node.kind == FeatureKind.NUMERIC
        if needle in node.name.lower():
            matching.add(node.id)
        elif not is_leaf and any(child.id in matching for child in node.children):
            matching.add(node.id)

    expanded: set = set()
    for node, path in visited:
        if node.id in matching:
            expanded.update(ancestor.id for ancestor in path)

    return TreeSearchResult(frozenset(matching), frozenset(expanded))


def _iter_feature_search(tree: list[FeatureNode]) -> Iterator[tuple[FeatureNode, tuple]]:
    """Pre-order walk that does not descend below search leaves."""
    stack = [(node, ()) for node in reversed(tree)]
    while stack:
        node, path = stack.pop()
        yield node, path
        if node.is_state or node.kind == FeatureKind.NUMERIC:
            continue
        child_path = path + (node,)
        stack.extend((child, child_path) for child in reversed(node.children))


def search_entity_tree(tree: list[EntityNode], term: str) -> Optional[TreeSearchResult]:
    """
    Case-insensitive substring search over entity names.

    Only nodes whose own name matches are reported as matching. A match
    expands the matching groups above it, not the non-matching ones.

    Args:
        tree: Entity tree roots
        term: Search text

    Returns:
        TreeSearchResult, or None for an empty term
    """
    if not term:
        return None
    needle = term.lower()

    # (node, matching ancestors passed down)
    visited: list[tuple[EntityNode, tuple]] = []
    stack = [(node, ()) for node in reversed(tree)]
    while stack:
        node, parents = stack.pop()
        visited.append((node, parents))
        if node.is_group:
            if needle in node.name.lower():
                child_parents = parents + (node.id,)
            else:
                child_parents = parents
            stack.extend((child, child_parents) for child in reversed(node.children))

    matching = {node.id for node, _ in visited if needle in node.name.lower()}

    subtree_match: set = set()
    for node, _ in reversed(visited):
        if node.id in matching or (
            node.is_group and any(id(child) in subtree_match for child in node.children)
        ):
            subtree_match.add(id(node))

    expanded: set = set()
    for node, parents in visited:
        if id(node) in subtree_match:
            expanded.update(parents)

    return TreeSearchResult(frozenset(matching), frozenset(expanded))


def chosen_feature_tree(
    tree: list[FeatureNode],
    chosen: Mapping,
) -> list[FeatureNode]:
    """
    Feature tree pruned to chosen nodes and their ancestors.

    Returns new nodes; the input tree is left untouched.

    Args:
        tree: Feature tree roots
        chosen: Mapping keyed by chosen feature ids

    Returns:
        Pruned tree roots
    """
    roots: list[FeatureNode] = []
    kept: dict[int, list[FeatureNode]] = {}
    stack: list[tuple[FeatureNode, bool, Optional[FeatureNode]]] = [
        (node, False, None) for node in reversed(tree)
    ]

    while stack:
        node, expanded, parent = stack.pop()
        if not expanded:
            stack.append((node, True, parent))
            kept[id(node)] = []
            stack.extend((child, False, node) for child in reversed(node.children))
            continue

        new_children = kept.pop(id(node))
        if node.id in chosen or new_children:
            target = roots if parent is None else kept[id(parent)]
            target.append(replace(node, children=new_children))

    return roots


__all__ = [
    'TreeSearchResult',
    'iter_nodes',
    'find_entity_path',
    'search_feature_tree',
    'search_entity_tree',
    'chosen_feature_tree',
]
