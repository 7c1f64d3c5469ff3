# Path: lucid_key/loaders/__init__.py
"""
INPUT layer for lucid_key

Reads key archives:
- ArchiveExtractor: case-insensitive access to the outer and nested ZIPs
- DocumentDecoder: hardened lxml decoding of key.data and normal.sco
- MediaResolver: media references -> MediaHandle objects
- KeyLoader / load_archive: the whole load pipeline
"""

from .archive_extractor import (
    ArchiveExtractor,
    PathIndex,
    NestedReadState,
    NestedReadResult,
    normalize_path,
)
from .document_decoder import DocumentDecoder, DecodedDocument
from .media_resolver import MediaResolver, MediaResolution
from .key_loader import KeyLoader, load_archive, load_archive_file

__all__ = [
    'ArchiveExtractor',
    'PathIndex',
    'NestedReadState',
    'NestedReadResult',
    'normalize_path',
    'DocumentDecoder',
    'DecodedDocument',
    'MediaResolver',
    'MediaResolution',
    'KeyLoader',
    'load_archive',
    'load_archive_file',
]
