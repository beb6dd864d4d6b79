# !/usr/bin/python
# coding=utf-8
"""Contract between the synchronization engine and a scene-graph host."""
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
import pythontk as ptk

# From this package:
from synctk.match_utils.humanoid import HumanoidBone


class ComponentKind(Enum):
    """How the engine treats a component during a merge."""

    TRANSFORM = "transform"
    CLOTH = "cloth"
    GENERIC = "generic"


class SceneHost(ptk.LoggingMixin):
    """Everything the engine needs from a scene graph.

    A host binding wraps one application's object model: node enumeration and
    naming, subtree duplication, component add/destroy, and a field capability
    (``list_fields``/``get_field``/``set_field``) that the generic
    :meth:`copy_fields` primitive is built on. The engine only ever talks to
    the scene through this interface.
    """

    def __init__(self, log_level: str = "WARNING"):
        self.logger.setLevel(log_level)

    # --------------------------------------------------------------------------------------------
    # Nodes
    # --------------------------------------------------------------------------------------------

    def node_name(self, node) -> str:
        """Display name of a node."""
        raise NotImplementedError

    def node_type(self, node) -> str:
        """Type tag of a node, compared between source and destination."""
        raise NotImplementedError

    def parent(self, node):
        """Parent node, or None for a scene root."""
        raise NotImplementedError

    def children(self, node) -> List:
        """Direct children in host order."""
        raise NotImplementedError

    def duplicate(self, node, parent, name: str):
        """Clone ``node`` and its whole subtree under ``parent`` as ``name``."""
        raise NotImplementedError

    def is_node(self, value) -> bool:
        """Whether a field value is a node reference."""
        raise NotImplementedError

    def node_path(self, node, root=None) -> str:
        """Slash separated path of ``node``, relative to ``root`` when given.

        The root's own name is the first path element.
        """
        names = []
        current = node
        while current is not None:
            names.append(self.node_name(current))
            if current is root:
                break
            current = self.parent(current)
        return "/".join(reversed(names))

    def bone_mapping(self, root) -> Dict[str, HumanoidBone]:
        """Node name -> semantic bone for the skeleton under ``root``.

        Hosts without skeleton data return an empty mapping, which disables
        bone equivalence rules.
        """
        return {}

    # --------------------------------------------------------------------------------------------
    # Components
    # --------------------------------------------------------------------------------------------

    def components(self, node) -> List:
        """Attached components, in attachment order."""
        raise NotImplementedError

    def component_type(self, component) -> str:
        """Fully qualified type name, e.g. ``Physics.BoxCollider``."""
        raise NotImplementedError

    def component_owner(self, component):
        """The node a component is attached to."""
        raise NotImplementedError

    def component_kind(self, component) -> ComponentKind:
        """Merge category of a component."""
        raise NotImplementedError

    def add_component(self, node, component_type: str):
        """Attach a new default component of ``component_type`` and return it."""
        raise NotImplementedError

    def destroy_component(self, component) -> None:
        """Detach and discard a component."""
        raise NotImplementedError

    def is_component(self, value) -> bool:
        """Whether a field value is a component reference."""
        raise NotImplementedError

    def component_type_name(self, component) -> str:
        """Short type name, the last element of the qualified name."""
        return self.component_type(component).rsplit(".", 1)[-1]

    def components_of_type(self, node, component_type: str) -> List:
        return [c for c in self.components(node) if self.component_type(c) == component_type]

    def is_transform(self, component) -> bool:
        return self.component_kind(component) is ComponentKind.TRANSFORM

    def transform(self, node):
        """The node's transform component, if it has one."""
        return next((c for c in self.components(node) if self.is_transform(c)), None)

    # --------------------------------------------------------------------------------------------
    # Field capability
    # --------------------------------------------------------------------------------------------

    def list_fields(self, component) -> List[str]:
        """Identifiers of the component's copyable fields."""
        raise NotImplementedError

    def get_field(self, component, field: str) -> Any:
        """Current value of a field."""
        raise NotImplementedError

    def set_field(self, component, field: str, value: Any) -> None:
        """Assign a field."""
        raise NotImplementedError

    def copy_fields(self, src, dst) -> int:
        """Copy every field of ``src`` onto ``dst`` (same declared type).

        A failure to enumerate the source counts as nothing copied; a field
        that fails to copy is skipped and the rest still go through.

        Returns:
            (int) Number of fields copied.
        """
        try:
            fields = self.list_fields(src)
        except Exception as error:
            self.logger.warning(
                f"Could not read fields of {self.component_type_name(src)}: {error}"
            )
            return 0

        copied = 0
        for field in fields:
            try:
                self.set_field(dst, field, self.get_field(src, field))
            except Exception as error:
                self.logger.debug(f"Skipping field '{field}': {error}")
                continue
            copied += 1
        return copied

    # --------------------------------------------------------------------------------------------
    # Cloth (point + coefficient simulation)
    # --------------------------------------------------------------------------------------------

    def cloth_vertices(self, cloth) -> np.ndarray:
        """(N, 3) simulation points of a cloth component."""
        raise NotImplementedError

    def cloth_coefficients(self, cloth) -> np.ndarray:
        """Per-point coefficient rows of a cloth component (a copy)."""
        raise NotImplementedError

    def set_cloth_coefficients(self, cloth, coefficients: np.ndarray) -> None:
        """Assign the per-point coefficient rows."""
        raise NotImplementedError

    def find_component(self, node, component_type: str) -> Optional[Any]:
        """First component of the given qualified type, or None."""
        return next(iter(self.components_of_type(node, component_type)), None)
