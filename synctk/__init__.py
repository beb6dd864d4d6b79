# !/usr/bin/python
# coding=utf-8
from pythontk.core_utils.module_resolver import bootstrap_package


__package__ = "synctk"
__version__ = "0.1.0"

"""Dynamic Attribute Resolver for Module-based Packages

``bootstrap_package`` wires a :class:`ModuleAttributeResolver` into this package so the
classes listed below resolve lazily from the root: ``from synctk import ComponentCopier``.
"""

DEFAULT_INCLUDE = {
    # Name matching
    "match_utils._match_utils": ["NameMatcher"],
    "match_utils.humanoid": [
        "HumanoidBone",
        "BoneGroup",
        "bones_in_group",
    ],
    "match_utils.replacement_rule": ["ReplacementRule", "RuleType"],
    # Spatial
    "spatial_utils.kd_tree": "KDTree",
    # Scene hosts
    "scene_utils._scene_utils": ["SceneHost", "ComponentKind"],
    "scene_utils.memory_scene": [
        "MemoryHost",
        "SceneNode",
        "Component",
        "Transform",
        "Cloth",
        "Animator",
    ],
    # Synchronization
    "sync_utils._sync_utils": ["ComponentCopier", "SyncSession"],
    "sync_utils.tree_item": ["TreeItem", "RouteHop"],
    "sync_utils.modification": [
        "ModificationEntry",
        "ModificationLog",
        "ModificationOperation",
    ],
    "sync_utils.copy_settings": "CopySettings",
    "sync_utils.reference_remap": "ReferenceRemapper",
}

bootstrap_package(
    globals(),
    include=DEFAULT_INCLUDE,
)
