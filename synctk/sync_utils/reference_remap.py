# !/usr/bin/python
# coding=utf-8
from typing import Any, List, Optional, Tuple

import pythontk as ptk

# From this package:
from synctk.sync_utils.tree_item import RouteHop


class ReferenceRemapper(ptk.LoggingMixin):
    """Point references held by pasted components at their destination counterparts.

    After a paste, the components it created still reference nodes and
    components of the source hierarchy (copied field values). A reference is
    re-targeted when its owner was captured: the owner's (name, type) route
    from the source root is replayed from the destination root, and the
    reference is replaced by the node, transform, or same-index component of
    the same type found there. Unresolvable references are left untouched.

    Parameters:
        host (SceneHost): Binding to the scene graph.
        session (SyncSession): Holds the source root, membership, capture, and created components.
    """

    def __init__(self, host, session, log_level: str = "WARNING"):
        self.logger.setLevel(log_level)
        self.host = host
        self.session = session
        self._membership = {id(node) for node in session.transforms}

    def update_properties(self, dst_root) -> int:
        """Remap every reference field of the session's created components.

        Returns:
            (int) Number of fields reassigned.
        """
        self._membership = {id(node) for node in self.session.transforms}
        updated = 0

        for component in self.session.components:
            if component is None:
                continue
            try:
                fields = self.host.list_fields(component)
            except Exception as error:
                self.logger.warning(f"Could not read fields of {component}: {error}")
                continue

            for field in fields:
                value = self.host.get_field(component, field)
                new_value, changed = self._remap_value(value, dst_root)
                if not changed:
                    continue
                self.host.set_field(component, field, new_value)
                updated += 1
                self.logger.debug(f"Remapped '{field}' on {component}")

        if updated:
            self.logger.info(f"Remapped {updated} reference field(s).")
        return updated

    def _remap_value(self, value, dst_root) -> Tuple[Any, bool]:
        if isinstance(value, dict):
            remapped = {k: self._remap_value(v, dst_root) for k, v in value.items()}
            if not any(changed for _, changed in remapped.values()):
                return value, False
            return {k: v for k, (v, _) in remapped.items()}, True

        if isinstance(value, (list, tuple)):
            remapped = [self._remap_value(v, dst_root) for v in value]
            if not any(changed for _, changed in remapped):
                return value, False
            return type(value)(v for v, _ in remapped), True

        if self.host.is_node(value) or self.host.is_component(value):
            resolved = self.resolve_reference(value, dst_root)
            if resolved is not None and resolved is not value:
                return resolved, True
        return value, False

    def resolve_reference(self, reference, dst_root):
        """Destination counterpart of a source node or component, or None."""
        host = self.host
        session = self.session

        src_node = reference if host.is_node(reference) else host.component_owner(reference)
        if src_node is None or id(src_node) not in self._membership:
            return None

        route = self.search_route(host, session.root, src_node)
        if route is None:
            return None
        current = self.walk_route(host, dst_root, route)
        if current is None:
            return None

        if host.is_node(reference):
            return current
        if host.is_transform(reference):
            return host.transform(current)

        if session.copy_tree is None or not session.copy_tree.contains_component(reference):
            return None
        index = self.get_reference_index(host, src_node, reference)
        if index < 0:
            return None
        candidates = host.components_of_type(current, host.component_type(reference))
        if index >= len(candidates):
            return None
        return candidates[index]

    @staticmethod
    def search_route(host, root, node) -> Optional[List[RouteHop]]:
        """(name, type) hops from ``root`` down to ``node``; None if ``node`` is outside it."""
        route = []
        current = node
        while current is not root:
            if current is None:
                return None
            route.append(RouteHop(host.node_name(current), host.node_type(current)))
            current = host.parent(current)
        route.reverse()
        return route

    @staticmethod
    def walk_route(host, root, route: List[RouteHop]):
        """Follow ``route`` from ``root`` by exact name and type; None at the first miss."""
        current = root
        for hop in route:
            current = next(
                (
                    c
                    for c in host.children(current)
                    if host.node_name(c) == hop.name and host.node_type(c) == hop.type
                ),
                None,
            )
            if current is None:
                return None
        return current

    @staticmethod
    def get_reference_index(host, node, component) -> int:
        """Ordinal of ``component`` among ``node``'s components of the same type, -1 if absent."""
        same_type = host.components_of_type(node, host.component_type(component))
        return next((i for i, c in enumerate(same_type) if c is component), -1)
