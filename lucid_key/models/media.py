# Path: lucid_key/models/media.py
"""
Media Models

Media resources attached to entities and features.

Each resolved media file becomes a MediaHandle. All handles of a loaded
key are owned by one MediaStore, which releases them together when the
key is discarded.
"""

import mimetypes
from dataclasses import dataclass
from typing import Iterator, Optional


DEFAULT_MEDIA_TYPE = 'application/octet-stream'


class MediaHandle:
    """
    Loadable binary resource materialized from the archive.

    Attributes:
        path: Member path inside the outer archive
        media_type: MIME type guessed from the file extension
    """

    def __init__(self, path: str, data: bytes):
        self.path = path
        self.media_type = mimetypes.guess_type(path)[0] or DEFAULT_MEDIA_TYPE
        self._data: Optional[bytes] = data
        self._size = len(data)

    @property
    def size(self) -> int:
        """Size of the resource in bytes (kept after release)."""
        return self._size

    @property
    def released(self) -> bool:
        return self._data is None

    def read(self) -> bytes:
        """
        Return the resource content.

        Raises:
            ValueError: If the handle has been released
        """
        if self._data is None:
            raise ValueError(f"Media handle released: {self.path}")
        return self._data

    def release(self) -> None:
        """Drop the resource content. Safe to call more than once."""
        self._data = None

    def __repr__(self) -> str:
        state = 'released' if self.released else f'{self._size} bytes'
        return f"MediaHandle({self.path!r}, {self.media_type}, {state})"


class MediaStore:
    """
    Owner of every MediaHandle created for one key.

    Example:
        store = MediaStore()
        handle = store.register('Media/Images/a.jpg', data)
        ...
        store.release_all()
    """

    def __init__(self):
        self._handles: list[MediaHandle] = []

    def register(self, path: str, data: bytes) -> MediaHandle:
        """Create and take ownership of a handle."""
        handle = MediaHandle(path, data)
        self._handles.append(handle)
        return handle

    def release_all(self) -> int:
        """
        Release every owned handle.

        Returns:
            Number of handles that were still live
        """
        live = [h for h in self._handles if not h.released]
        for handle in live:
            handle.release()
        return len(live)

    @property
    def live_count(self) -> int:
        return sum(1 for h in self._handles if not h.released)

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[MediaHandle]:
        return iter(self._handles)


@dataclass
class Media:
    """
    Media reference attached to either an entity or a feature.

    Attributes:
        handle: Resolved resource
        caption: Optional caption text
        copyright: Optional copyright notice
        comments: Optional free-form comments
    """
    handle: MediaHandle
    caption: Optional[str] = None
    copyright: Optional[str] = None
    comments: Optional[str] = None

    @property
    def path(self) -> str:
        return self.handle.path

    def to_dict(self) -> dict:
        """Convert to dictionary (content excluded)."""
        return {
            'path': self.handle.path,
            'media_type': self.handle.media_type,
            'size': self.handle.size,
            'caption': self.caption,
            'copyright': self.copyright,
            'comments': self.comments,
        }


__all__ = ['MediaHandle', 'MediaStore', 'Media']
