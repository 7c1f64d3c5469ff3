# Path: lucid_key/process/hierarchy/model_builder.py
"""
Model Builder

Translates the decoded key.data document into the entity and feature
catalogs and their trees.

RESPONSIBILITY: Structure only. Scores are added afterwards by
ScoreIndex and media by MediaResolver, both writing into the
KeyCatalog produced here.

Tree shape in key.data:

    <feature_tree>
      <feature_node>
        <feature_item item_id="f1" item_name="Leaf shape"/>
        <nodes>
          <feature_node><state_item item_id="s1" item_name="Round"/></feature_node>
          ...
        </nodes>
      </feature_node>
    </feature_tree>

A node's identity is its own item element and its children come from its
direct <nodes> container. Nodes referencing an id absent from the catalog
are dropped together with everything below them.
"""

from dataclasses import dataclass, field
from typing import Optional

from lxml import etree

from ...constants import (
    FeatureKind,
    TAG_PROPERTY,
    TAG_ENTITY_ITEM,
    TAG_FEATURE_ITEM,
    TAG_STATE_ITEM,
    TAG_FEATURE_NODE,
    TAG_ENTITY_TREE,
    TAG_FEATURE_TREE,
    TAG_CHILD_NODES,
    ATTR_KEY,
    ATTR_VALUE,
    ATTR_ITEM_ID,
    ATTR_ITEM_NAME,
    ATTR_SCORE_TYPE,
    ATTR_BASE_UNIT,
    ATTR_UNIT_PREFIX,
    PROP_KEY_TITLE,
    PROP_KEY_AUTHORS,
    PROP_KEY_DESCRIPTION,
    UNKNOWN_ENTITY_NAME,
    UNKNOWN_FEATURE_NAME,
)
from ...core.logger import get_process_logger
from ...loaders.document_decoder import (
    DecodedDocument,
    attr,
    child,
    element_children,
    nearest_ancestor,
    next_element_sibling,
)
from ...models.key_data import (
    Entity,
    EntityId,
    EntityNode,
    EntityProfile,
    Feature,
    FeatureId,
    FeatureNode,
    FeatureSummary,
    Score,
)


logger = get_process_logger('hierarchy.model_builder')


@dataclass
class KeyCatalog:
    """
    Mutable catalogs assembled while a key is being loaded.

    Frozen into KeyData once every stage has run.
    """
    title: str = ''
    authors: str = ''
    description: str = ''
    entities: dict[EntityId, Entity] = field(default_factory=dict)
    features: dict[FeatureId, Feature] = field(default_factory=dict)
    feature_list: list[FeatureSummary] = field(default_factory=list)
    entity_tree: list[EntityNode] = field(default_factory=list)
    feature_tree: list[FeatureNode] = field(default_factory=list)
    entity_scores: dict[EntityId, dict[FeatureId, Score]] = field(default_factory=dict)
    entity_profiles: dict[EntityId, EntityProfile] = field(default_factory=dict)
    total_features_count: int = 0


class ModelBuilder:
    """
    Builds a KeyCatalog from the decoded key.data document.

    Example:
        builder = ModelBuilder()
        catalog = builder.build(document, key_name='mykey')
        print(catalog.total_features_count)
    """

    def build(self, document: DecodedDocument, key_name: str = '') -> KeyCatalog:
        """
        Build catalogs and trees.

        Args:
            document: Decoded key.data document (root must be present)
            key_name: Base name of the key, used as fallback title

        Returns:
            KeyCatalog without scores or media
        """
        catalog = KeyCatalog()
        root = document.root

        catalog.title = self._read_property(root, PROP_KEY_TITLE) or key_name
        catalog.authors = self._read_property(root, PROP_KEY_AUTHORS)
        catalog.description = self._read_property(root, PROP_KEY_DESCRIPTION)

        self._collect_entities(root, catalog)
        self._collect_features(root, catalog)

        feature_tree_root = next(root.iter(TAG_FEATURE_TREE), None)
        if feature_tree_root is not None:
            catalog.feature_tree = build_feature_tree(feature_tree_root, catalog.features)

        entity_tree_root = next(root.iter(TAG_ENTITY_TREE), None)
        if entity_tree_root is not None:
            catalog.entity_tree = build_entity_tree(entity_tree_root, catalog.entities)

        catalog.total_features_count = count_scorable_features(catalog.feature_tree)

        logger.info(
            f"Built catalog '{catalog.title}': {len(catalog.entities)} entities, "
            f"{len(catalog.features)} features, "
            f"{catalog.total_features_count} scorable"
        )
        return catalog

    @staticmethod
    def _read_property(root: etree._Element, key: str) -> str:
        """Value of the first <property key=...>, or ''."""
        for element in root.iter(TAG_PROPERTY):
            if element.get(ATTR_KEY) == key:
                return element.get(ATTR_VALUE) or ''
        return ''

    def _collect_entities(self, root: etree._Element, catalog: KeyCatalog) -> None:
        for element in root.iter(TAG_ENTITY_ITEM):
            entity_id = attr(element, ATTR_ITEM_ID)
            if entity_id is None:
                continue
            entity_id = EntityId(entity_id)
            name = attr(element, ATTR_ITEM_NAME) or UNKNOWN_ENTITY_NAME

            # A repeated id replaces the earlier definition; scores are read later
            catalog.entities[entity_id] = Entity(id=entity_id, name=name)
            catalog.entity_scores[entity_id] = {}
            catalog.entity_profiles[entity_id] = EntityProfile(name=name)

    def _collect_features(self, root: etree._Element, catalog: KeyCatalog) -> None:
        for element in root.iter(TAG_FEATURE_ITEM, TAG_STATE_ITEM):
            is_state = element.tag == TAG_STATE_ITEM
            if is_state:
                kind = FeatureKind.STATE
            else:
                kind = FeatureKind.from_score_type(element.get(ATTR_SCORE_TYPE))
            if kind == FeatureKind.TEXT:
                continue

            feature_id = attr(element, ATTR_ITEM_ID)
            if feature_id is None:
                continue
            feature_id = FeatureId(feature_id)

            name = attr(element, ATTR_ITEM_NAME) or UNKNOWN_FEATURE_NAME
            parent_name = self._enclosing_group_name(element)

            catalog.features[feature_id] = Feature(
                id=feature_id,
                name=name,
                kind=kind,
                is_state=is_state,
                parent_name=parent_name,
                base_unit=element.get(ATTR_BASE_UNIT),
                unit_prefix=element.get(ATTR_UNIT_PREFIX),
            )

            if not is_state and self._is_grouping_item(element):
                continue

            description = f"{parent_name}: {name}" if parent_name else name
            catalog.feature_list.append(
                FeatureSummary(id=feature_id, kind=kind, description=description)
            )

    @staticmethod
    def _enclosing_group_name(element: etree._Element) -> Optional[str]:
        """
        Name of the feature item heading the tree node that encloses this
        item's own tree node.
        """
        own_node = nearest_ancestor(element, TAG_FEATURE_NODE)
        if own_node is None:
            return None
        parent_node = nearest_ancestor(own_node, TAG_FEATURE_NODE)
        if parent_node is None:
            return None
        heading = child(parent_node, TAG_FEATURE_ITEM)
        return heading.get(ATTR_ITEM_NAME) if heading is not None else None

    @staticmethod
    def _is_grouping_item(element: etree._Element) -> bool:
        """A feature item directly followed by a child container heads a group."""
        sibling = next_element_sibling(element)
        return sibling is not None and sibling.tag == TAG_CHILD_NODES


# ==============================================================================
# TREE CONSTRUCTION
# ==============================================================================

def _node_item(xml_node: etree._Element, tags: tuple[str, ...]) -> Optional[etree._Element]:
    """First direct child that is one of the item tags."""
    for element in element_children(xml_node):
        if element.tag in tags:
            return element
    return None


def build_feature_tree(
    tree_root: etree._Element,
    features: dict[FeatureId, Feature],
) -> list[FeatureNode]:
    """
    Mirror the <feature_tree> nesting as FeatureNode objects.

    Uses an explicit work stack, so nesting depth is not bounded by the
    interpreter recursion limit.

    Args:
        tree_root: The <feature_tree> element
        features: Feature catalog

    Returns:
        Top-level feature nodes in document order
    """
    roots: list[FeatureNode] = []
    stack = [(xml_node, roots) for xml_node in reversed(element_children(tree_root))]

    while stack:
        xml_node, siblings = stack.pop()

        item = _node_item(xml_node, (TAG_FEATURE_ITEM, TAG_STATE_ITEM))
        feature_id = attr(item, ATTR_ITEM_ID)
        feature = features.get(FeatureId(feature_id)) if feature_id else None
        if feature is None:
            continue

        node = FeatureNode(
            id=feature.id,
            name=feature.name,
            kind=feature.kind,
            is_state=feature.is_state,
        )
        siblings.append(node)

        container = child(xml_node, TAG_CHILD_NODES)
        if container is not None:
            for child_node in reversed(element_children(container)):
                stack.append((child_node, node.children))

    return roots


def build_entity_tree(
    tree_root: etree._Element,
    entities: dict[EntityId, Entity],
) -> list[EntityNode]:
    """
    Mirror the <entity_tree> nesting as EntityNode objects.

    is_group is set once the whole tree is built, from the children that
    actually survived.

    Args:
        tree_root: The <entity_tree> element
        entities: Entity catalog

    Returns:
        Top-level entity nodes in document order
    """
    roots: list[EntityNode] = []
    built: list[EntityNode] = []
    stack = [(xml_node, roots) for xml_node in reversed(element_children(tree_root))]

    while stack:
        xml_node, siblings = stack.pop()

        item = _node_item(xml_node, (TAG_ENTITY_ITEM,))
        entity_id = attr(item, ATTR_ITEM_ID)
        entity = entities.get(EntityId(entity_id)) if entity_id else None
        if entity is None:
            continue

        node = EntityNode(id=entity.id, name=entity.name)
        siblings.append(node)
        built.append(node)

        container = child(xml_node, TAG_CHILD_NODES)
        if container is not None:
            for child_node in reversed(element_children(container)):
                stack.append((child_node, node.children))

    for node in built:
        node.is_group = len(node.children) > 0

    return roots


def count_scorable_features(tree: list[FeatureNode]) -> int:
    """
    Count the features a user can actually score against.

    - a numeric feature counts as 1
    - a categorical feature (its children are states) counts as 1 and its
      states are not visited
    - a grouping node is not counted; its children are visited

    Args:
        tree: Feature tree roots

    Returns:
        Number of scorable features
    """
    count = 0
    stack = list(tree)

    while stack:
        node = stack.pop()
        if node.kind == FeatureKind.NUMERIC:
            count += 1
        elif node.children and node.children[0].is_state:
            count += 1
        elif node.children:
            stack.extend(node.children)

    return count


__all__ = [
    'KeyCatalog',
    'ModelBuilder',
    'build_feature_tree',
    'build_entity_tree',
    'count_scorable_features',
]
