# Path: lucid_key/loaders/document_decoder.py
"""
Document Decoder

XML decoding of the key documents (key.data, normal.sco).

Features:
- Error recovery mode (parse despite errors)
- Line tracking for recovered errors
- XXE (XML External Entity) protection
- Billion laughs protection (huge_tree disabled)
- Query helpers for the element shapes the key format uses

Raw bytes are preferred input: lxml then honors the XML declaration.
Text input is re-encoded and parsed with the encoding forced, so a stale
declaration inside an already-decoded string does not matter.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from lxml import etree

from ..config_loader import ConfigLoader
from ..core.logger import get_input_logger
from ..models.error import ErrorCategory, ErrorSeverity, ParsingError


logger = get_input_logger('document_decoder')

ENCODING_ERROR_TYPES = frozenset({
    etree.ErrorTypes.ERR_INVALID_ENCODING,
    etree.ErrorTypes.ERR_UNKNOWN_ENCODING,
    etree.ErrorTypes.ERR_UNSUPPORTED_ENCODING,
})


@dataclass
class DecodedDocument:
    """
    Result of decoding one XML document.

    Attributes:
        source: Name of the document inside the archive
        root: Root element (None when no tree could be produced)
        errors: Recovered parse problems, as WARNING entries
    """
    source: str
    root: Optional[etree._Element]
    errors: list[ParsingError] = field(default_factory=list)

    @property
    def has_root(self) -> bool:
        return self.root is not None

    @property
    def recovered(self) -> bool:
        """True when the parser had to repair the markup."""
        return len(self.errors) > 0

    def iter(self, tag: str) -> Iterator[etree._Element]:
        """All elements with a tag, in document order."""
        if self.root is None:
            return iter(())
        return self.root.iter(tag)


class DocumentDecoder:
    """
    Hardened lxml decoder with error recovery.

    Example:
        decoder = DocumentDecoder()
        document = decoder.decode(raw_bytes, 'key.data')
        if document.has_root:
            for item in document.iter('entity_item'):
                ...
    """

    def __init__(self, config: Optional[ConfigLoader] = None):
        """
        Initialize decoder.

        Args:
            config: Optional ConfigLoader instance (creates new if not provided)
        """
        self.config = config if config else ConfigLoader()
        self.disable_external_entities = self.config.get('disable_external_entities', True)
        self.default_encoding = self.config.get('default_encoding', 'utf-8')

    def decode(self, content: Union[bytes, str], source: str) -> DecodedDocument:
        """
        Parse XML content.

        Never raises for bad markup: the caller decides whether a missing
        root is fatal for this document.

        Args:
            content: Raw bytes or already-decoded text
            source: Document name used in error records

        Returns:
            DecodedDocument (root is None if nothing could be recovered)
        """
        if isinstance(content, str):
            parser = self._create_parser(encoding=self.default_encoding)
            data = content.encode(self.default_encoding, errors='replace')
        else:
            parser = self._create_parser()
            data = content

        document = DecodedDocument(source=source, root=None)

        if not data or not data.strip():
            document.errors.append(ParsingError(
                severity=ErrorSeverity.CRITICAL,
                category=ErrorCategory.XML_MALFORMED,
                message=f"Document is empty: {source}",
                source_file=source,
            ))
            return document

        try:
            document.root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            document.errors.append(ParsingError(
                severity=ErrorSeverity.CRITICAL,
                category=ErrorCategory.XML_MALFORMED,
                message=f"Fatal XML syntax error in {source}: {e}",
                details=f"Exception: {e}, Type: XMLSyntaxError",
                source_file=source,
                line_number=getattr(e, 'lineno', None),
            ))
            return document

        document.errors.extend(self._collect_parser_errors(parser, source))
        if document.recovered:
            logger.warning(f"{source}: recovered from {len(document.errors)} XML errors")
        return document

    def _create_parser(self, encoding: Optional[str] = None) -> etree.XMLParser:
        """
        Create lxml parser with security and recovery settings.

        Returns:
            Configured XMLParser instance
        """
        return etree.XMLParser(
            recover=True,
            remove_blank_text=False,
            resolve_entities=not self.disable_external_entities,
            no_network=True if self.disable_external_entities else False,
            huge_tree=False,
            remove_comments=False,
            remove_pis=False,
            encoding=encoding,
        )

    def _collect_parser_errors(self, parser: etree.XMLParser, source: str) -> list[ParsingError]:
        """Map the lxml error log onto WARNING ParsingError entries."""
        collected = []
        for entry in parser.error_log:
            if entry.type in ENCODING_ERROR_TYPES:
                category = ErrorCategory.XML_ENCODING
            else:
                category = ErrorCategory.XML_MALFORMED
            collected.append(ParsingError(
                severity=ErrorSeverity.WARNING,
                category=category,
                message=f"{source}: {entry.message}",
                details=f"Type: {entry.type_name}, Level: {entry.level_name}",
                source_file=source,
                line_number=entry.line,
            ))
        return collected


# ==============================================================================
# QUERY HELPERS
# ==============================================================================

def child(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """First direct child with a tag."""
    return element.find(tag)


def children(element: etree._Element, tag: str) -> list[etree._Element]:
    """Direct children with a tag, in document order."""
    return element.findall(tag)


def element_children(element: etree._Element) -> list[etree._Element]:
    """Direct child elements, without comments or processing instructions."""
    return [node for node in element if isinstance(node.tag, str)]


def next_element_sibling(element: etree._Element) -> Optional[etree._Element]:
    """Following sibling element, skipping comments and processing instructions."""
    for sibling in element.itersiblings():
        if isinstance(sibling.tag, str):
            return sibling
    return None


def nearest_ancestor(element: etree._Element, tag: str) -> Optional[etree._Element]:
    """Closest enclosing element with a tag."""
    return next(element.iterancestors(tag), None)


def attr(element: Optional[etree._Element], name: str) -> Optional[str]:
    """Attribute value with empty strings reported as None."""
    if element is None:
        return None
    value = element.get(name)
    return value if value else None


__all__ = [
    'DocumentDecoder',
    'DecodedDocument',
    'child',
    'children',
    'element_children',
    'next_element_sibling',
    'nearest_ancestor',
    'attr',
]
