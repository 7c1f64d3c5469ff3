# Path: lucid_key/process/__init__.py
"""
PROCESS layer for lucid_key

- hierarchy: catalogs and trees from key.data
- scoring: score table and profiles from normal.sco
- matcher: constraint matching and tree projection
"""
