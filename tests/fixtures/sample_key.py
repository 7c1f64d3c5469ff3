# Path: tests/fixtures/sample_key.py
"""
Sample Key Archive Generators for Testing

Builds key archives in memory: an outer ZIP holding the data/ directory
with the nested <key>.data and <key>.sco ZIPs, plus Media/ files.

Sample key layout:

    Entities                       Features
    g1 Quercus (group)             f_leaf Leaf (group)
      e1 Quercus alba                f_shape Leaf shape
      e2 Quercus rubra                 s_lobed Lobed
    e3 Fagus sylvatica                 s_entire Entire
                                     f_length Leaf length (cm, numeric)
                                   f_notes Notes (text, never cataloged)

    Scores        s_lobed  s_entire  f_length
    e1            1        2         10 - 20
    e2            0        3         12 - 22.5
    e3            0        1         5 - 11
"""

import io
import zipfile
from typing import Optional


KEY_NAME = 'oaks'
ROOT_PREFIX = 'OakKey/'


KEY_DATA_XML = """<?xml version="1.0" encoding="UTF-8"?>
<key>
  <properties>
    <property key="key_title" value="Oaks and Beeches"/>
    <property key="key_authors" value="A. Botanist"/>
    <property key="key_description" value="A small test key"/>
  </properties>
  <entity_tree>
    <entity_node>
      <entity_item item_id="g1" item_name="Quercus"/>
      <nodes>
        <entity_node><entity_item item_id="e1" item_name="Quercus alba"/></entity_node>
        <entity_node><entity_item item_id="e2" item_name="Quercus rubra"/></entity_node>
      </nodes>
    </entity_node>
    <entity_node><entity_item item_id="e3" item_name="Fagus sylvatica"/></entity_node>
  </entity_tree>
  <feature_tree>
    <feature_node>
      <feature_item item_id="f_leaf" item_name="Leaf"/>
      <nodes>
        <feature_node>
          <feature_item item_id="f_shape" item_name="Leaf shape"/>
          <nodes>
            <feature_node><state_item item_id="s_lobed" item_name="Lobed"/></feature_node>
            <feature_node><state_item item_id="s_entire" item_name="Entire"/></feature_node>
          </nodes>
        </feature_node>
        <feature_node>
          <feature_item item_id="f_length" item_name="Leaf length" score_type="numeric"
                        base_unit="metre" unit_prefix="centi"/>
        </feature_node>
      </nodes>
    </feature_node>
    <feature_node>
      <feature_item item_id="f_notes" item_name="Notes" score_type="text"/>
    </feature_node>
  </feature_tree>
  <media>
    <media_item media_path="e1.jpg">
      <media_details item_id="e1" caption="White oak" copyright="CC-BY"/>
    </media_item>
    <media_item media_path="images\\lobed.png">
      <media_details item_id="s_lobed" caption="Lobed leaf"/>
    </media_item>
    <media_item media_path="missing.jpg">
      <media_details item_id="e2"/>
    </media_item>
    <media_item media_path="orphan.jpg">
      <media_details item_id="nobody"/>
    </media_item>
  </media>
</key>
"""


SCORE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<scores>
  <normal_score_data>
    <scoring_item item_id="s_lobed">
      <scored_item item_id="e1" value="1"/>
      <scored_item item_id="e2" value="0"/>
      <scored_item item_id="e3" value="0"/>
    </scoring_item>
    <scoring_item item_id="s_entire">
      <scored_item item_id="e1" value="2"/>
      <scored_item item_id="e2" value="3"/>
      <scored_item item_id="e3" value="1"/>
    </scoring_item>
  </normal_score_data>
  <numeric_score_data>
    <scoring_item item_id="f_length">
      <scored_item item_id="e1"><scored_data omin="10" omax="20"/></scored_item>
      <scored_item item_id="e2"><scored_data omin="12" omax="22.5"/></scored_item>
      <scored_item item_id="e3"><scored_data omin="5" omax="11"/></scored_item>
    </scoring_item>
  </numeric_score_data>
</scores>
"""


MEDIA_FILES = {
    'Media/e1.jpg': b'\xff\xd8\xff\xe0 fake jpeg',
    'Media/images/lobed.png': b'\x89PNG fake png',
    'Media/orphan.jpg': b'orphan bytes',
}


def make_zip(members: dict[str, bytes]) -> bytes:
    """
    Create a ZIP archive in memory.

    Args:
        members: Member name -> content

    Returns:
        Archive bytes
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def build_key_archive(
    key_data: Optional[str] = KEY_DATA_XML,
    scores: Optional[str] = SCORE_XML,
    key_name: str = KEY_NAME,
    root_prefix: str = ROOT_PREFIX,
    data_dir: str = 'data',
    media: Optional[dict[str, bytes]] = None,
    include_score_archive: bool = True,
    extra: Optional[dict[str, bytes]] = None,
) -> bytes:
    """
    Build a complete key archive.

    Args:
        key_data: key.data content (None leaves it out of the .data archive)
        scores: normal.sco content (None leaves it out of the .sco archive)
        key_name: Base name of the nested archives
        root_prefix: Folder everything lives under ('' for the archive root)
        data_dir: Name of the data directory
        media: Media files relative to the root prefix (default MEDIA_FILES)
        include_score_archive: False leaves out <key>.sco entirely
        extra: Additional outer members, added verbatim

    Returns:
        Outer archive bytes
    """
    data_members = {'key.data': key_data.encode('utf-8')} if key_data is not None else {'readme.txt': b'x'}
    members = {
        f'{root_prefix}{data_dir}/{key_name}.data': make_zip(data_members),
    }

    if include_score_archive:
        score_members = {'normal.sco': scores.encode('utf-8')} if scores is not None else {'other.sco': b'x'}
        members[f'{root_prefix}{data_dir}/{key_name}.sco'] = make_zip(score_members)

    for path, content in (MEDIA_FILES if media is None else media).items():
        members[f'{root_prefix}{path}'] = content

    members.update(extra or {})
    return make_zip(members)
