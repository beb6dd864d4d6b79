# !/usr/bin/python
# coding=utf-8
"""Name matching utilities.

All classes are lazy-loaded via synctk root package.
Import from synctk directly: from synctk import NameMatcher
"""

# Lazy-loaded via parent package - no explicit imports needed
