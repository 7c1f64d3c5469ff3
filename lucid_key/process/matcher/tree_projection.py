# Path: lucid_key/process/matcher/tree_projection.py
"""
Tree Projection

Shapes the entity tree for the remaining and discarded views.

project_tree keeps the allowed nodes, drops groups with neither direct
membership nor surviving children, and keeps a non-allowed group only
as the parent of shown children. Such a group is marked dimmed unless
it was itself discarded by a constraint.

The discarded view is projected with no direct ids and with the directly
discarded set, so its dimming reflects only that set.
"""

from dataclasses import replace
from typing import AbstractSet, Optional

from ...models.key_data import EntityNode, KeyData
from .match_engine import MatchResult


def project_tree(
    tree: list[EntityNode],
    allowed_ids: AbstractSet,
    direct_ids: AbstractSet,
    discarded_ids: Optional[AbstractSet] = None,
) -> list[EntityNode]:
    """
    Filter an entity tree to the allowed ids.

    Returns new nodes; the input tree is never modified.

    Args:
        tree: Entity tree roots
        allowed_ids: Ids to show
        direct_ids: Ids that are direct matches
        discarded_ids: Ids discarded by a constraint (never dimmed)

    Returns:
        Projected tree roots
    """
    discarded_ids = discarded_ids if discarded_ids is not None else frozenset()

    roots: list[EntityNode] = []
    kept: dict[int, list[EntityNode]] = {}
    stack: list[tuple[EntityNode, bool, Optional[EntityNode]]] = [
        (node, False, None) for node in reversed(tree)
    ]

    while stack:
        node, visited, parent = stack.pop()
        if not visited:
            stack.append((node, True, parent))
            kept[id(node)] = []
            if node.is_group:
                stack.extend((child, False, node) for child in reversed(node.children))
            continue

        new_children = kept.pop(id(node))
        target = roots if parent is None else kept[id(parent)]

        if node.id in allowed_ids:
            if node.is_group and not new_children and node.id not in direct_ids:
                continue
            target.append(replace(node, children=new_children))
        elif node.is_group and new_children:
            target.append(replace(
                node,
                children=new_children,
                is_dimmed=node.id not in discarded_ids,
            ))

    return roots


def remaining_tree(key: KeyData, result: MatchResult) -> list[EntityNode]:
    """Entity tree of the remaining view."""
    return project_tree(key.entity_tree, result.remaining, result.direct)


def discarded_tree(key: KeyData, result: MatchResult) -> list[EntityNode]:
    """Entity tree of the discarded view."""
    return project_tree(
        key.entity_tree,
        result.discarded,
        frozenset(),
        result.directly_discarded,
    )


__all__ = ['project_tree', 'remaining_tree', 'discarded_tree']
