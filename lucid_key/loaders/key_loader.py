# Path: lucid_key/loaders/key_loader.py
"""
Key Loader

Entry point that turns a key archive into a KeyData model.

Pipeline (strictly sequential):
1. ArchiveExtractor opens the outer archive and finds the data/ directory
2. key.data is read from <data>/<key>.data and decoded
3. ModelBuilder builds the catalogs and trees
4. normal.sco is read from <data>/<key>.sco and indexed by ScoreIndex
5. MediaResolver attaches media to entities and features

Fatal problems (ArchiveError, StructureError) propagate and no model is
produced. ScoringUnavailable and media errors are recorded on the model.
"""

from pathlib import Path
from typing import Optional, Union

from ..config_loader import ConfigLoader
from ..constants import (
    DATA_ARCHIVE_SUFFIX,
    DATA_DIR_NAME,
    KEY_DATA_FILE,
    PATH_SEPARATOR,
    SCORE_ARCHIVE_SUFFIX,
    SCORE_FILE,
    WINDOWS_SEPARATOR,
)
from ..core.logger import get_input_logger
from ..models.error import (
    ArchiveError,
    ErrorCategory,
    ErrorCollection,
    ScoringUnavailable,
    StructureError,
)
from ..models.key_data import KeyData
from ..models.media import MediaStore
from ..process.hierarchy.model_builder import KeyCatalog, ModelBuilder
from ..process.scoring.score_index import ScoreIndex
from .archive_extractor import ArchiveExtractor, NestedReadState
from .document_decoder import DecodedDocument, DocumentDecoder
from .media_resolver import MediaResolver


logger = get_input_logger('key_loader')


class KeyLoader:
    """
    Loads key archives into KeyData models.

    Example:
        loader = KeyLoader()
        with loader.load(archive_bytes, 'oaks.lk4') as key:
            print(key.title, len(key.entities))
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize loader.

        Args:
            config: Optional ConfigLoader instance (creates new if not provided)
        """
        self.config = config if config else ConfigLoader()
        self.decoder = DocumentDecoder(self.config)
        self.archive_extensions = [
            ext.lower() for ext in self.config.get('archive_extensions', [])
        ]
        self.require_score_archive = self.config.get('require_score_archive', True)
        self.load_media = self.config.get('load_media', True)

    def load(self, data: bytes, file_name: Optional[str] = None) -> KeyData:
        """
        Load a key archive.

        Args:
            data: Raw archive bytes
            file_name: Name of the archive file, used for the key base name

        Returns:
            Immutable KeyData

        Raises:
            ArchiveError: Outer archive unreadable
            StructureError: data/ directory, key.data or a nested archive missing
        """
        with ArchiveExtractor(data, self.config) as extractor:
            data_dir = extractor.find_directory(DATA_DIR_NAME)
            if data_dir is None:
                raise StructureError(
                    "Invalid key archive: data directory not found",
                    path=DATA_DIR_NAME + PATH_SEPARATOR,
                    category=ErrorCategory.DIRECTORY_MISSING,
                )
            root_prefix = root_prefix_of(data_dir)
            key_name = self._resolve_key_name(extractor, data_dir, file_name)
            logger.info(f"Loading key '{key_name}' from {data_dir}")

            errors = ErrorCollection()

            key_document = self._read_key_document(extractor, data_dir, key_name)
            errors.extend(key_document.errors)

            catalog = ModelBuilder().build(key_document, key_name)

            try:
                self._apply_scores(extractor, data_dir, key_name, catalog, errors)
            except ScoringUnavailable as e:
                logger.warning(f"{e.message}. Scores will not be loaded.")
                errors.add(e.error)

            store = MediaStore()
            entity_media: dict = {}
            feature_media: dict = {}
            if self.load_media:
                resolution = MediaResolver(extractor, root_prefix).resolve(
                    key_document, catalog.entities, catalog.features, store
                )
                entity_media = resolution.entity_media
                feature_media = resolution.feature_media
                errors.extend(resolution.errors)

        key = KeyData(
            title=catalog.title,
            authors=catalog.authors,
            description=catalog.description,
            entities=catalog.entities,
            entity_tree=catalog.entity_tree,
            features=catalog.features,
            feature_tree=catalog.feature_tree,
            entity_scores=catalog.entity_scores,
            entity_profiles=catalog.entity_profiles,
            entity_media=entity_media,
            feature_media=feature_media,
            total_features_count=catalog.total_features_count,
            feature_list=catalog.feature_list,
            errors=errors,
            media_store=store,
            key_name=key_name,
            root_prefix=root_prefix,
        )

        logger.info(
            f"Loaded key '{key.title}': {len(key.entities)} entities, "
            f"{key.total_features_count} features, {len(errors)} non-fatal errors"
        )
        return key

    # ------------------------------------------------------------------
    # Key name
    # ------------------------------------------------------------------

    def _strip_extension(self, file_name: str) -> str:
        """Archive file name without directories and known extension."""
        base = file_name.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR).rsplit(PATH_SEPARATOR, 1)[-1]
        lowered = base.lower()
        for extension in self.archive_extensions:
            if extension and lowered.endswith(extension):
                return base[:-len(extension)]
        return base

    def _resolve_key_name(
        self,
        extractor: ArchiveExtractor,
        data_dir: str,
        file_name: Optional[str],
    ) -> str:
        """
        Key base name: from the file name when <base>.data exists, else
        the single *.data archive inside the data directory.
        """
        supplied = self._strip_extension(file_name) if file_name else ''
        if supplied and extractor.find_entry(data_dir + supplied + DATA_ARCHIVE_SUFFIX):
            return supplied

        candidates = [
            name for name in extractor.list_directory(data_dir)
            if name.lower().endswith(DATA_ARCHIVE_SUFFIX)
        ]
        if len(candidates) == 1:
            discovered = candidates[0].replace(WINDOWS_SEPARATOR, PATH_SEPARATOR)
            discovered = discovered.rsplit(PATH_SEPARATOR, 1)[-1][:-len(DATA_ARCHIVE_SUFFIX)]
            if supplied:
                logger.warning(
                    f"No {supplied}{DATA_ARCHIVE_SUFFIX} in {data_dir}; "
                    f"using key name '{discovered}'"
                )
            return discovered

        if supplied:
            # Reading the nested archive reports the missing path
            return supplied

        raise StructureError(
            f"Cannot determine key name: expected one *{DATA_ARCHIVE_SUFFIX} "
            f"archive in {data_dir}, found {len(candidates)}",
            path=data_dir,
            category=ErrorCategory.NESTED_ARCHIVE_MISSING,
        )

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _read_key_document(
        self,
        extractor: ArchiveExtractor,
        data_dir: str,
        key_name: str,
    ) -> DecodedDocument:
        """
        Read and decode key.data.

        Raises:
            StructureError: If the nested archive or key.data is missing
                or cannot be decoded
        """
        inner_path = f"{data_dir}{key_name}{DATA_ARCHIVE_SUFFIX}"
        result = extractor.read_inner_entry(inner_path, KEY_DATA_FILE)

        if not result.ok:
            missing = inner_path
            if result.state == NestedReadState.TARGET_MISSING:
                missing = f"{inner_path}{PATH_SEPARATOR}{KEY_DATA_FILE}"
            raise StructureError(
                f"Could not find or read {KEY_DATA_FILE}: {result.message}",
                path=missing,
                details=result.error.details,
                category=result.error.category,
            )

        document = self.decoder.decode(result.data, KEY_DATA_FILE)
        if not document.has_root:
            raise StructureError(
                f"{KEY_DATA_FILE} could not be decoded",
                path=f"{inner_path}{PATH_SEPARATOR}{KEY_DATA_FILE}",
                details='; '.join(e.message for e in document.errors),
                category=ErrorCategory.XML_MALFORMED,
            )
        return document

    def _apply_scores(
        self,
        extractor: ArchiveExtractor,
        data_dir: str,
        key_name: str,
        catalog: KeyCatalog,
        errors: ErrorCollection,
    ) -> None:
        """
        Read normal.sco into the catalog.

        Raises:
            StructureError: If the .sco archive is missing or corrupt and
                require_score_archive is set
            ScoringUnavailable: If normal.sco is missing or undecodable
        """
        inner_path = f"{data_dir}{key_name}{SCORE_ARCHIVE_SUFFIX}"
        result = extractor.read_inner_entry(inner_path, SCORE_FILE)

        if not result.ok:
            nested_failure = result.state in (
                NestedReadState.INNER_MISSING,
                NestedReadState.INNER_CORRUPT,
            )
            if nested_failure and self.require_score_archive:
                raise StructureError(
                    result.message,
                    path=inner_path,
                    details=result.error.details,
                    category=result.error.category,
                )
            raise ScoringUnavailable(
                f"Could not find or read {SCORE_FILE} from {inner_path}",
                details=result.message,
                source_file=inner_path,
            )

        document = self.decoder.decode(result.data, SCORE_FILE)
        if not document.has_root:
            raise ScoringUnavailable(
                f"{SCORE_FILE} could not be decoded",
                details='; '.join(e.message for e in document.errors),
                source_file=f"{inner_path}{PATH_SEPARATOR}{SCORE_FILE}",
            )
        errors.extend(document.errors)
        errors.extend(ScoreIndex().apply(document, catalog))


def root_prefix_of(data_dir: str, dir_name: str = DATA_DIR_NAME) -> str:
    """
    Everything in front of the trailing '<dir_name>/' of the data directory.

    'OakKey/data/' gives 'OakKey/'; 'OakKey/KeyData/' gives 'OakKey/Key'.
    """
    display = data_dir.replace(WINDOWS_SEPARATOR, PATH_SEPARATOR).lstrip(PATH_SEPARATOR)
    suffix = dir_name + PATH_SEPARATOR
    if not display.lower().endswith(suffix.lower()):
        raise ValueError(f"Not a {dir_name} directory: {data_dir}")
    return display[:-len(suffix)]


def load_archive(
    data: bytes,
    file_name: Optional[str] = None,
    config: Optional[ConfigLoader] = None,
) -> KeyData:
    """
    Load a key archive from bytes.

    Args:
        data: Raw archive bytes
        file_name: Optional archive file name (e.g. 'oaks.lk4')
        config: Optional ConfigLoader instance

    Returns:
        KeyData

    Raises:
        ArchiveError: Outer archive unreadable
        StructureError: Required directory, file or nested archive missing
    """
    return KeyLoader(config).load(data, file_name)


def load_archive_file(
    path: Union[str, Path],
    config: Optional[ConfigLoader] = None,
) -> KeyData:
    """
    Load a key archive from disk.

    Raises:
        ArchiveError: If the file cannot be read or is not an archive
        StructureError: Required directory, file or nested archive missing
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ArchiveError(
            f"Archive file could not be read: {path}",
            details=f"Exception: {e}, Type: {type(e).__name__}",
            source_file=str(path),
        ) from e
    return load_archive(data, path.name, config)


__all__ = ['KeyLoader', 'load_archive', 'load_archive_file', 'root_prefix_of']
