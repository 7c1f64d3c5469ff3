# Path: lucid_key/output/tree_formatter.py
"""
Tree Formatter

Renders entity and feature trees as ASCII art, like the 'tree' command:

    +-- g1 Quercus (group)
    |   +-- e1 Quercus alba
    |   `-- e2 Quercus rubra
    `-- g2 Fagus (group, dimmed)
        `-- e3 Fagus sylvatica

Keys can nest deeply, so rendering walks an explicit stack instead of
recursing.
"""

from typing import Callable, Sequence, TypeVar, Union

from ..models.key_data import EntityNode, FeatureNode


NodeT = TypeVar('NodeT', EntityNode, FeatureNode)


class TreeFormatter:
    """
    Formats entity and feature trees as ASCII art.

    Uses box-drawing characters for clear hierarchy visualization:
    +-- for branch
    |   for continuation
    `-- for last child
    """

    # Tree drawing characters
    BRANCH = '+-- '
    LAST_BRANCH = '`-- '
    PIPE = '|   '
    SPACE = '    '

    def __init__(self, use_unicode: bool = False):
        """
        Initialize formatter.

        Args:
            use_unicode: Use Unicode box-drawing chars instead of ASCII
        """
        if use_unicode:
            self.BRANCH = '\u251c\u2500\u2500 '  # ├──
            self.LAST_BRANCH = '\u2514\u2500\u2500 '  # └──
            self.PIPE = '\u2502   '  # │
            self.SPACE = '    '

    def format_entities(self, roots: Sequence[EntityNode]) -> list[str]:
        """
        Format an entity tree.

        Args:
            roots: Entity tree roots (full or projected)

        Returns:
            List of formatted lines
        """
        return self._format(roots, self._entity_text)

    def format_features(self, roots: Sequence[FeatureNode]) -> list[str]:
        """
        Format a feature tree.

        Args:
            roots: Feature tree roots

        Returns:
            List of formatted lines
        """
        return self._format(roots, self._feature_text)

    def _format(
        self,
        roots: Sequence[NodeT],
        text_of: Callable[[NodeT], str],
    ) -> list[str]:
        lines = []
        stack: list[tuple[NodeT, str, bool]] = [
            (node, '', i == len(roots) - 1)
            for i, node in reversed(list(enumerate(roots)))
        ]

        while stack:
            node, prefix, is_last = stack.pop()
            connector = self.LAST_BRANCH if is_last else self.BRANCH
            lines.append(f'{prefix}{connector}{text_of(node)}')

            child_prefix = prefix + (self.SPACE if is_last else self.PIPE)
            children = node.children
            for i in range(len(children) - 1, -1, -1):
                stack.append((children[i], child_prefix, i == len(children) - 1))

        return lines

    @staticmethod
    def _entity_text(node: EntityNode) -> str:
        flags = []
        if node.is_group:
            flags.append('group')
        if node.is_dimmed:
            flags.append('dimmed')
        text = f'{node.id} {node.name}'
        return f'{text} ({", ".join(flags)})' if flags else text

    @staticmethod
    def _feature_text(node: FeatureNode) -> str:
        if node.is_state:
            return f'{node.id} {node.name}'
        return f'{node.id} {node.name} [{node.kind.value}]'


def format_tree(
    roots: Sequence[Union[EntityNode, FeatureNode]],
    use_unicode: bool = False,
) -> str:
    """Render any entity or feature tree as a single string."""
    formatter = TreeFormatter(use_unicode)
    if roots and isinstance(roots[0], FeatureNode):
        return '\n'.join(formatter.format_features(roots))
    return '\n'.join(formatter.format_entities(roots))


__all__ = ['TreeFormatter', 'format_tree']
