# !/usr/bin/python
# coding=utf-8
"""Scene host contract and the in-memory scene.

All classes are lazy-loaded via synctk root package.
Import from synctk directly: from synctk import SceneHost
"""

# Lazy-loaded via parent package - no explicit imports needed
