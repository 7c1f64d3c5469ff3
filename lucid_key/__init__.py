# Path: lucid_key/__init__.py
"""
lucid_key - Identification Key Reader

Loads packaged identification-key archives (a hierarchy of candidate
entities scored against a hierarchy of diagnostic features) and narrows
the candidates by chosen feature values.

Example:
    from lucid_key import load_archive_file, compute_matches, update_constraints

    with load_archive_file('oaks.lk4') as key:
        chosen = update_constraints({}, 'leaf_lobed', True)
        result = compute_matches(key, chosen)
        print(sorted(result.direct))
"""

# loaders first: the process layer imports decoder helpers from it
from .loaders import load_archive, load_archive_file, KeyLoader
from .models import (
    KeyData,
    KeyLoadError,
    ArchiveError,
    StructureError,
    ScoringUnavailable,
    MediaResolutionError,
)
from .process.matcher import (
    Constraint,
    MatchResult,
    compute_matches,
    update_constraints,
    project_tree,
)

__version__ = '0.1.0'

__all__ = [
    'load_archive',
    'load_archive_file',
    'KeyLoader',
    'KeyData',
    'KeyLoadError',
    'ArchiveError',
    'StructureError',
    'ScoringUnavailable',
    'MediaResolutionError',
    'Constraint',
    'MatchResult',
    'compute_matches',
    'update_constraints',
    'project_tree',
]
