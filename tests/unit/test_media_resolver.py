# Path: tests/unit/test_media_resolver.py
"""
Unit Tests for MediaResolver

Tests media resolution including:
- Full media paths under the root prefix
- Attachment to entities and features
- Missing files and unknown item ids
"""

import pytest

from fixtures.sample_key import make_zip
from lucid_key.constants import FeatureKind
from lucid_key.loaders.archive_extractor import ArchiveExtractor
from lucid_key.loaders.document_decoder import DocumentDecoder
from lucid_key.loaders.media_resolver import MediaResolver
from lucid_key.models.error import ErrorCategory
from lucid_key.models.key_data import Entity, EntityId, Feature, FeatureId
from lucid_key.models.media import MediaStore


MEDIA_XML = """<key><media>
  <media_item media_path="Photos\\a.JPG"><media_details item_id="e1" caption="" comments="side view"/></media_item>
  <media_item media_path="b.png"><media_details item_id="s1"/></media_item>
  <media_item media_path="gone.png"><media_details item_id="e1"/></media_item>
  <media_item media_path="c.png"><media_details item_id="stranger"/></media_item>
  <media_item media_path="d.png"/>
</media></key>"""


@pytest.fixture
def resolved():
    archive = make_zip({
        'K/data/k.data': b'',
        'K/Media/photos/a.jpg': b'jpeg',
        'K/Media/b.png': b'png',
        'K/Media/c.png': b'png',
        'K/Media/d.png': b'png',
    })
    document = DocumentDecoder().decode(MEDIA_XML.encode('utf-8'), 'key.data')
    entities = {EntityId('e1'): Entity(EntityId('e1'), 'E1')}
    features = {FeatureId('s1'): Feature(FeatureId('s1'), 'S1', FeatureKind.STATE)}
    store = MediaStore()
    with ArchiveExtractor(archive) as extractor:
        resolution = MediaResolver(extractor, 'K/').resolve(document, entities, features, store)
    return resolution, store


class TestMediaPath:
    """Test full path construction."""

    def test_root_prefix_and_separators(self):
        resolver = MediaResolver(extractor=None, root_prefix='K/')
        assert resolver.media_path('Photos\\a.JPG') == 'K/Media/Photos/a.JPG'

    def test_archive_root(self):
        assert MediaResolver(extractor=None).media_path('x.png') == 'Media/x.png'


class TestResolve:
    """Test attachment of media items."""

    def test_entity_media_case_insensitive(self, resolved):
        resolution, _ = resolved
        media = resolution.entity_media['e1']
        assert len(media) == 1
        assert media[0].handle.read() == b'jpeg'
        assert media[0].caption is None
        assert media[0].comments == 'side view'

    def test_feature_media(self, resolved):
        resolution, _ = resolved
        assert resolution.feature_media['s1'][0].path == 'K/Media/b.png'

    def test_missing_file_recorded(self, resolved):
        resolution, _ = resolved
        assert len(resolution.errors) == 1
        assert resolution.errors[0].category == ErrorCategory.MEDIA_NOT_FOUND
        assert resolution.errors[0].message == 'Media file not found in archive: K/Media/gone.png'

    def test_unknown_item_released(self, resolved):
        resolution, store = resolved
        assert resolution.unattached == 1
        assert store.live_count == 2
        assert len(store) == 3

    def test_item_without_details_skipped(self, resolved):
        _, store = resolved
        assert all(not h.path.endswith('d.png') for h in store)
