# !/usr/bin/python
# coding=utf-8
"""A plain-Python scene graph and the SceneHost binding over it.

Nodes always own a Transform; other components are attached by type name.
The binding is used by the test-suite and by tools that build or inspect
hierarchies outside of a DCC application.
"""
from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np

# From this package:
from synctk.match_utils.humanoid import HumanoidBone
from synctk.scene_utils._scene_utils import ComponentKind, SceneHost


class SceneNode:
    """A named node with ordered children and attached components."""

    def __init__(
        self,
        name: str,
        parent: Optional["SceneNode"] = None,
        mesh: Optional[Sequence] = None,
        node_type: str = "Scene.GameObject",
    ):
        self.name = name
        self.node_type = node_type
        self.parent = None
        self.children: List["SceneNode"] = []
        self.components: List["Component"] = []
        self.mesh = None if mesh is None else np.asarray(mesh, dtype=float)

        Transform().attach(self)
        if parent is not None:
            parent.add_child(self)

    def add_child(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.children.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def add(self, component: "Component") -> "Component":
        """Attach a component instance and return it."""
        return component.attach(self)

    @property
    def transform(self) -> "Transform":
        return self.components[0]

    def get_components(self, type_name: Optional[str] = None) -> List["Component"]:
        return [
            c for c in self.components if type_name is None or c.type_name == type_name
        ]

    def find(self, path: str) -> Optional["SceneNode"]:
        """Descendant at a slash separated relative path; first name match per hop."""
        current = self
        for name in filter(None, path.split("/")):
            current = next((c for c in current.children if c.name == name), None)
            if current is None:
                return None
        return current

    def walk(self) -> Iterator["SceneNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def __repr__(self):
        return f"<SceneNode {self.name} components={len(self.components)}>"


class Component:
    """A generic component: a qualified type name plus a dict of fields."""

    type_name = "Scene.Component"

    def __init__(self, type_name: Optional[str] = None, **fields):
        if type_name is not None:
            self.type_name = type_name
        self.node: Optional[SceneNode] = None
        self.fields: Dict[str, Any] = dict(fields)

    def attach(self, node: SceneNode) -> "Component":
        self.node = node
        node.components.append(self)
        return self

    def __repr__(self):
        owner = self.node.name if self.node is not None else None
        return f"<{self.type_name.rsplit('.', 1)[-1]} on {owner}>"


class Transform(Component):
    type_name = "Scene.Transform"

    def __init__(self, position=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0), scale=(1.0, 1.0, 1.0)):
        super().__init__(position=tuple(position), rotation=tuple(rotation), scale=tuple(scale))


class Cloth(Component):
    """Point + coefficient simulation component.

    Points come from the owner's mesh; coefficients hold one
    ``[max_distance, collision_sphere_distance]`` row per point. Neither is a
    copyable field.
    """

    type_name = "Physics.Cloth"

    def __init__(self, **fields):
        fields.setdefault("stretching_stiffness", 1.0)
        fields.setdefault("bending_stiffness", 0.0)
        fields.setdefault("damping", 0.0)
        fields.setdefault("capsule_colliders", [])
        super().__init__(**fields)
        self.coefficients = np.zeros((0, 2))

    def attach(self, node: SceneNode) -> "Cloth":
        super().attach(node)
        self.coefficients = np.zeros((len(self.vertices), 2))
        return self

    @property
    def vertices(self) -> np.ndarray:
        if self.node is None or self.node.mesh is None:
            return np.zeros((0, 3))
        return self.node.mesh


class Animator(Component):
    """Holds the humanoid skeleton definition: bone tag -> node."""

    type_name = "Animation.Animator"

    def __init__(self, bones: Optional[Dict[HumanoidBone, SceneNode]] = None):
        super().__init__(bones=dict(bones or {}))


COMPONENT_TYPES = {cls.type_name: cls for cls in (Transform, Cloth, Animator)}


class MemoryHost(SceneHost):
    """SceneHost binding over :class:`SceneNode` graphs."""

    def node_name(self, node: SceneNode) -> str:
        return node.name

    def node_type(self, node: SceneNode) -> str:
        return node.node_type

    def parent(self, node: SceneNode) -> Optional[SceneNode]:
        return node.parent

    def children(self, node: SceneNode) -> List[SceneNode]:
        return list(node.children)

    def is_node(self, value) -> bool:
        return isinstance(value, SceneNode)

    def bone_mapping(self, root: SceneNode) -> Dict[str, HumanoidBone]:
        animator = next(
            (c for c in root.components if isinstance(c, Animator)), None
        )
        if animator is None:
            return {}
        return {
            node.name: bone
            for bone, node in animator.fields["bones"].items()
            if node is not None
        }

    def duplicate(self, node: SceneNode, parent: SceneNode, name: str) -> SceneNode:
        """Clone a subtree; references into the cloned subtree follow the clone."""
        mapping: Dict[int, Any] = {}
        clone = self._clone_node(node, mapping)
        clone.name = name
        parent.add_child(clone)

        for new_node in clone.walk():
            for component in new_node.components:
                for field, value in component.fields.items():
                    component.fields[field] = self._remap_value(value, mapping)
        self.logger.debug(f"Duplicated '{node.name}' as '{self.node_path(clone)}'")
        return clone

    def _clone_node(self, node: SceneNode, mapping: Dict[int, Any]) -> SceneNode:
        clone = SceneNode(node.name, mesh=node.mesh, node_type=node.node_type)
        clone.components = []
        mapping[id(node)] = clone

        for component in node.components:
            new = self._instantiate(component.type_name)
            new.fields = dict(component.fields)
            new.attach(clone)
            if isinstance(component, Cloth):
                new.coefficients = component.coefficients.copy()
            mapping[id(component)] = new

        for child in node.children:
            clone.add_child(self._clone_node(child, mapping))
        return clone

    def _remap_value(self, value, mapping: Dict[int, Any]):
        if isinstance(value, (SceneNode, Component)):
            return mapping.get(id(value), value)
        if isinstance(value, list):
            return [self._remap_value(v, mapping) for v in value]
        if isinstance(value, tuple):
            return tuple(self._remap_value(v, mapping) for v in value)
        if isinstance(value, dict):
            return {k: self._remap_value(v, mapping) for k, v in value.items()}
        return value

    # --------------------------------------------------------------------------------------------

    def components(self, node: SceneNode) -> List[Component]:
        return list(node.components)

    def component_type(self, component: Component) -> str:
        return component.type_name

    def component_owner(self, component: Component) -> Optional[SceneNode]:
        return component.node

    def component_kind(self, component: Component) -> ComponentKind:
        if isinstance(component, Transform):
            return ComponentKind.TRANSFORM
        if isinstance(component, Cloth):
            return ComponentKind.CLOTH
        return ComponentKind.GENERIC

    def is_component(self, value) -> bool:
        return isinstance(value, Component)

    @staticmethod
    def _instantiate(type_name: str) -> Component:
        cls = COMPONENT_TYPES.get(type_name)
        return cls() if cls is not None else Component(type_name)

    def add_component(self, node: SceneNode, component_type: str) -> Component:
        """Attach a new default component.

        Raises:
            ValueError: For a second transform; a node owns exactly one.
        """
        if component_type == Transform.type_name:
            raise ValueError(f"'{node.name}' already has a transform")
        return self._instantiate(component_type).attach(node)

    def destroy_component(self, component: Component) -> None:
        if component.node is not None:
            component.node.components.remove(component)
            component.node = None

    # --------------------------------------------------------------------------------------------

    def list_fields(self, component: Component) -> List[str]:
        return list(component.fields)

    def get_field(self, component: Component, field: str) -> Any:
        value = component.fields[field]
        # Containers are copied so two components never share one list.
        if isinstance(value, (list, dict)):
            return type(value)(value)
        return value

    def set_field(self, component: Component, field: str, value: Any) -> None:
        component.fields[field] = value

    # --------------------------------------------------------------------------------------------

    def cloth_vertices(self, cloth: Cloth) -> np.ndarray:
        return cloth.vertices

    def cloth_coefficients(self, cloth: Cloth) -> np.ndarray:
        return cloth.coefficients.copy()

    def set_cloth_coefficients(self, cloth: Cloth, coefficients: np.ndarray) -> None:
        """Assign coefficient rows.

        Raises:
            ValueError: If the row count differs from the cloth's point count.
        """
        coefficients = np.asarray(coefficients, dtype=float)
        if len(coefficients) != len(cloth.vertices):
            raise ValueError(
                f"Expected {len(cloth.vertices)} coefficient rows, got {len(coefficients)}"
            )
        cloth.coefficients = coefficients.copy()
