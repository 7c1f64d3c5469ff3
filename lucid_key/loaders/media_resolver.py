# Path: lucid_key/loaders/media_resolver.py
"""
Media Resolver

Resolves the media_item references of key.data to loadable resources.

Each media_item carries a media_path attribute (relative to the
archive's Media/ directory) and a media_details child naming the entity
or feature it illustrates. Resolved files become MediaHandle objects
owned by the key's MediaStore.

Missing or unreadable files are not fatal: each one is recorded as a
ParsingError and the item simply gets no media.
"""

from dataclasses import dataclass, field
from typing import Optional

from lxml import etree

from ..constants import (
    ATTR_CAPTION,
    ATTR_COMMENTS,
    ATTR_COPYRIGHT,
    ATTR_ITEM_ID,
    ATTR_MEDIA_PATH,
    MEDIA_DIR_NAME,
    PATH_SEPARATOR,
    TAG_MEDIA_DETAILS,
    TAG_MEDIA_ITEM,
    WINDOWS_SEPARATOR,
)
from ..core.logger import get_input_logger
from ..models.error import (
    ArchiveError,
    ErrorCategory,
    MediaResolutionError,
    ParsingError,
)
from ..models.key_data import Entity, EntityId, Feature, FeatureId
from ..models.media import Media, MediaStore
from .archive_extractor import ArchiveExtractor
from .document_decoder import DecodedDocument, attr


logger = get_input_logger('media_resolver')


@dataclass
class MediaResolution:
    """
    Media attached to the catalogs.

    Attributes:
        entity_media: Media per entity id
        feature_media: Media per feature id
        errors: Non-fatal resolution errors
        unattached: Items whose id is neither an entity nor a feature
    """
    entity_media: dict[EntityId, list[Media]] = field(default_factory=dict)
    feature_media: dict[FeatureId, list[Media]] = field(default_factory=dict)
    errors: list[ParsingError] = field(default_factory=list)
    unattached: int = 0


class MediaResolver:
    """
    Resolves media references against the outer archive.

    Example:
        resolver = MediaResolver(extractor, root_prefix='MyKey/')
        resolution = resolver.resolve(document, entities, features, store)
        for error in resolution.errors:
            print(error.message)
    """

    def __init__(self, extractor: ArchiveExtractor, root_prefix: str = ''):
        """
        Args:
            extractor: Extractor over the outer archive
            root_prefix: Path prefix in front of the data directory
        """
        self.extractor = extractor
        self.root_prefix = root_prefix

    def media_path(self, relative_path: str) -> str:
        """Full archive path of a media file: <root-prefix>Media/<relative_path>."""
        full = f"{self.root_prefix}{MEDIA_DIR_NAME}{PATH_SEPARATOR}{relative_path}"
        return full.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR)

    def resolve(
        self,
        document: DecodedDocument,
        entities: dict[EntityId, Entity],
        features: dict[FeatureId, Feature],
        store: MediaStore,
    ) -> MediaResolution:
        """
        Resolve every media_item of key.data.

        Args:
            document: Decoded key.data
            entities: Entity catalog
            features: Feature catalog
            store: Store taking ownership of every created handle

        Returns:
            MediaResolution
        """
        resolution = MediaResolution()

        for item in document.iter(TAG_MEDIA_ITEM):
            details = next(item.iter(TAG_MEDIA_DETAILS), None)
            relative_path = attr(item, ATTR_MEDIA_PATH)
            item_id = attr(details, ATTR_ITEM_ID)
            if details is None or relative_path is None or item_id is None:
                continue

            try:
                media = self._load(relative_path, details, store)
            except MediaResolutionError as e:
                logger.warning(e.message)
                resolution.errors.append(e.error)
                continue

            if item_id in entities:
                resolution.entity_media.setdefault(EntityId(item_id), []).append(media)
            elif item_id in features:
                resolution.feature_media.setdefault(FeatureId(item_id), []).append(media)
            else:
                logger.info(f"Media {media.path} references unknown item {item_id}")
                media.handle.release()
                resolution.unattached += 1

        logger.info(
            f"Resolved media for {len(resolution.entity_media)} entities and "
            f"{len(resolution.feature_media)} features, {len(resolution.errors)} missing"
        )
        return resolution

    def _load(self, relative_path: str, details: etree._Element, store: MediaStore) -> Media:
        """
        Materialize one media file.

        Raises:
            MediaResolutionError: If the file is absent or cannot be read
        """
        full_path = self.media_path(relative_path)

        try:
            data: Optional[bytes] = self.extractor.read_bytes(full_path)
        except ArchiveError as e:
            raise MediaResolutionError(
                f"Media file could not be read: {full_path}",
                details=e.error.details,
                source_file=full_path,
                category=ErrorCategory.MEDIA_UNREADABLE,
            ) from e

        if data is None:
            raise MediaResolutionError(
                f"Media file not found in archive: {full_path}",
                source_file=full_path,
            )

        return Media(
            handle=store.register(full_path, data),
            caption=attr(details, ATTR_CAPTION),
            copyright=attr(details, ATTR_COPYRIGHT),
            comments=attr(details, ATTR_COMMENTS),
        )


__all__ = ['MediaResolver', 'MediaResolution']
