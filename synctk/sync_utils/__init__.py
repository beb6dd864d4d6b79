# !/usr/bin/python
# coding=utf-8
"""Component synchronization engine.

All classes are lazy-loaded via synctk root package.
Import from synctk directly: from synctk import ComponentCopier
"""

# Lazy-loaded via parent package - no explicit imports needed
