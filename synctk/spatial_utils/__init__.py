# !/usr/bin/python
# coding=utf-8
"""Spatial lookup utilities.

All classes are lazy-loaded via synctk root package.
Import from synctk directly: from synctk import KDTree
"""

# Lazy-loaded via parent package - no explicit imports needed
