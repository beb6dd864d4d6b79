# !/usr/bin/python
# coding=utf-8
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pythontk as ptk

# From this package:
from synctk.match_utils._match_utils import NameMatcher
from synctk.match_utils.humanoid import HumanoidBone
from synctk.scene_utils._scene_utils import ComponentKind, SceneHost
from synctk.spatial_utils.kd_tree import KDTree
from synctk.sync_utils.copy_settings import CopySettings
from synctk.sync_utils.modification import (
    MESSAGES,
    ModificationEntry,
    ModificationLog,
    ModificationOperation,
)
from synctk.sync_utils.reference_remap import ReferenceRemapper
from synctk.sync_utils.tree_item import TreeItem


@dataclass
class SyncSession:
    """All state shared between a copy and the pastes/dry-runs that follow it.

    ``copy`` resets the snapshot and membership; each ``paste``/``dry_run``
    clears both logs and the created-components list.
    """

    copy_tree: Optional[TreeItem] = None
    root: Any = None
    transforms: List[Any] = field(default_factory=list)
    components: List[Any] = field(default_factory=list)
    modification_logs: ModificationLog = field(default_factory=ModificationLog)
    modification_object_logs: ModificationLog = field(default_factory=ModificationLog)
    settings: CopySettings = field(default_factory=CopySettings)
    src_bone_mapping: Dict[str, HumanoidBone] = field(default_factory=dict)
    dst_bone_mapping: Dict[str, HumanoidBone] = field(default_factory=dict)
    destination: Any = None

    @property
    def has_snapshot(self) -> bool:
        return self.copy_tree is not None and self.root is not None


class ComponentCopier(ptk.LoggingMixin):
    """Copy selected components from one hierarchy and reconcile them onto another.

    ``copy`` captures a snapshot of a source subtree: every node, plus the
    components whose qualified type matches the settings' regex. ``paste``
    applies it to a destination root in four passes (cleanup, object creation,
    merge, reference remap); ``dry_run`` performs the same walks and logs what
    would happen without touching the destination.

    Parameters:
        host (SceneHost): Binding to the scene graph holding both hierarchies.
        session (SyncSession): State to work on. A fresh one is created if omitted.
        log_level (str): Logging level for this instance.

    Example:
        copier = ComponentCopier(MemoryHost())
        copier.copy(source_root, CopySettings(pattern="Collider"))
        copier.dry_run(destination_root, settings)
        for entry in copier.modification_logs: ...
    """

    def __init__(
        self,
        host: SceneHost,
        session: Optional[SyncSession] = None,
        log_level: str = "WARNING",
    ):
        self.logger.setLevel(log_level)
        self.host = host
        self.session = session if session is not None else SyncSession()

    # Read access for report consumers.
    @property
    def copy_tree(self) -> Optional[TreeItem]:
        return self.session.copy_tree

    @property
    def transforms(self) -> List[Any]:
        return self.session.transforms

    @property
    def components(self) -> List[Any]:
        return self.session.components

    @property
    def modification_logs(self) -> ModificationLog:
        return self.session.modification_logs

    @property
    def modification_object_logs(self) -> ModificationLog:
        return self.session.modification_object_logs

    @property
    def settings(self) -> CopySettings:
        return self.session.settings

    @property
    def destination(self):
        """Root of the last paste or dry run."""
        return self.session.destination

    # --------------------------------------------------------------------------------------------
    # Entry points
    # --------------------------------------------------------------------------------------------

    def copy(self, source, settings: CopySettings) -> Optional[TreeItem]:
        """Capture ``source`` and the components selected by ``settings.pattern``.

        Parameters:
            source: Root node of the hierarchy to capture.
            settings (CopySettings): ``pattern`` and ``copy_transform_values`` are read here.

        Returns:
            (TreeItem/None) The captured tree, None when there is no source.
        """
        if source is None:
            self.logger.warning("Nothing to copy: no source root given.")
            return None

        session = self.session
        session.copy_tree = TreeItem.from_node(self.host, source)
        session.root = source
        session.transforms = []
        session.components = []
        session.settings = settings
        session.src_bone_mapping = self.host.bone_mapping(source)

        try:
            regex = re.compile(settings.pattern)
        except re.error as error:
            self.logger.warning(f"Invalid component pattern '{settings.pattern}': {error}")
            regex = None

        self.copy_walkdown(source, session.copy_tree, regex)
        self.logger.info(
            f"Copied {session.copy_tree.component_count()} component(s) across "
            f"{len(session.transforms)} node(s) from '{session.copy_tree.name}'."
        )
        return session.copy_tree

    def paste(self, destination, settings: CopySettings) -> SyncSession:
        """Apply the captured snapshot to ``destination``.

        Returns:
            (SyncSession) The session, whose logs describe what was changed.
        """
        return self._apply(destination, settings, dry_run=False)

    def dry_run(self, destination, settings: CopySettings) -> SyncSession:
        """Log what :meth:`paste` would change, leaving ``destination`` untouched.

        Returns:
            (SyncSession) The session holding the preview logs.
        """
        return self._apply(destination, settings, dry_run=True)

    def _apply(self, destination, settings: CopySettings, dry_run: bool) -> SyncSession:
        session = self.session
        if not session.has_snapshot or destination is None:
            self.logger.warning("Nothing to paste: copy a source and pick a destination first.")
            return session

        session.destination = destination
        session.settings = settings
        session.components = []
        session.dst_bone_mapping = self.host.bone_mapping(destination)
        if not session.src_bone_mapping and session.copy_tree.node is not None:
            session.src_bone_mapping = self.host.bone_mapping(session.copy_tree.node)

        session.modification_logs.clear()
        session.modification_object_logs.clear()

        prefix = "[DRY-RUN] " if dry_run else ""
        self.logger.info(
            f"{prefix}Pasting '{session.copy_tree.name}' onto '{self.host.node_name(destination)}'."
        )

        if settings.remove_before_merge:
            self.remove_walkdown(destination, session.copy_tree, dry_run=dry_run)

        if settings.create_missing_objects:
            self.copy_object_walkdown(session.copy_tree, destination, dry_run=dry_run)

        self.merge_walkdown(destination, session.copy_tree, dry_run=dry_run)

        if not dry_run:
            ReferenceRemapper(self.host, session).update_properties(destination)

        self.logger.notice(
            f"{prefix}Components: {session.modification_logs.summary() or 'no changes'}, "
            f"objects: {session.modification_object_logs.summary() or 'no changes'}."
        )
        return session

    # --------------------------------------------------------------------------------------------
    # Walks
    # --------------------------------------------------------------------------------------------

    def _log_enabled(self, dry_run: bool) -> bool:
        return dry_run or self.session.settings.record_log

    def _names_match(self, src_name: str, dst_name: str) -> bool:
        session = self.session
        return NameMatcher.names_match(
            src_name,
            dst_name,
            session.settings.replacement_rules,
            session.src_bone_mapping,
            session.dst_bone_mapping,
        )

    def copy_walkdown(self, node, tree: TreeItem, regex: Optional[re.Pattern]) -> None:
        """Capture ``node``'s matching components and recurse into every child."""
        host = self.host
        self.session.transforms.append(node)

        for component in host.components(node):
            if component is None or regex is None:
                continue
            if not regex.search(host.component_type(component)):
                continue
            if host.is_transform(component) and not self.session.settings.copy_transform_values:
                continue
            tree.components.append(component)

        for child in host.children(node):
            item = TreeItem.from_node(host, child)
            tree.children.append(item)
            self.copy_walkdown(child, item, regex)

    def remove_walkdown(
        self,
        node,
        tree: TreeItem,
        depth: int = 0,
        dry_run: bool = False,
        record: Optional[bool] = None,
    ) -> None:
        """Destroy destination components whose type was captured on the matching item.

        Transforms are never removed.

        Parameters:
            record (bool): Log REMOVE entries. Defaults to the session's logging state.
        """
        host = self.host
        if depth > 0 and not self._names_match(tree.name, host.node_name(node)):
            return
        if record is None:
            record = self._log_enabled(dry_run)

        types = tree.component_types(host)
        for component in host.components(node):
            if component is None or host.component_type(component) not in types:
                continue
            if host.is_transform(component):
                continue

            if record:
                self.session.modification_logs.add(
                    ModificationEntry(
                        operation=ModificationOperation.REMOVE,
                        target_object=node,
                        component_type=host.component_type_name(component),
                        message=MESSAGES[ModificationOperation.REMOVE],
                    )
                )
            if dry_run:
                continue
            host.destroy_component(component)

        for child in host.children(node):
            for tree_child in tree.children:
                if self._names_match(
                    tree_child.name, host.node_name(child)
                ) and host.node_type(child) == tree_child.type:
                    self.remove_walkdown(child, tree_child, depth + 1, dry_run, record)
                    break

    def copy_object_walkdown(
        self, tree: TreeItem, destination, route: Optional[List[TreeItem]] = None, dry_run: bool = False
    ) -> None:
        """Create destination nodes for captured children that have no counterpart.

        With ``object_copy_matched_only`` only items carrying captured
        components are considered; their ancestors are created along the way.
        """
        route = route or []
        matched_only = self.session.settings.object_copy_matched_only
        for child in tree.children:
            child_route = route + [child]
            if not matched_only or child.components:
                self.copy_object(self.session.root, destination, child_route, dry_run)
            self.copy_object_walkdown(child, destination, child_route, dry_run)

    def _find_child(self, node, name: str):
        return next(
            (c for c in self.host.children(node) if self._names_match(name, self.host.node_name(c))),
            None,
        )

    def copy_object(self, src_root, dst_root, route: List[TreeItem], dry_run: bool = False):
        """Walk ``route`` from both roots, duplicating the first source hop missing on the destination.

        The duplicate is renamed to the captured name and pruned of the captured
        component types, which the merge pass then adds back.

        Returns:
            The destination node at the end of the route, or None when the walk
            stopped (dry run creation point, or no source counterpart).
        """
        host = self.host
        logs = self.session.modification_object_logs
        src, dst = src_root, dst_root
        current_path = host.node_name(dst_root)

        for item in route:
            src_child = self._find_child(src, item.name)
            dst_child = self._find_child(dst, item.name)
            current_path += "/" + item.name

            if src_child is not None and dst_child is None:
                if self._log_enabled(dry_run):
                    if logs.find(current_path, ModificationOperation.CREATE_OBJECT) is None:
                        logs.add(
                            ModificationEntry(
                                operation=ModificationOperation.CREATE_OBJECT,
                                target_path=current_path,
                                message=MESSAGES[ModificationOperation.CREATE_OBJECT],
                            )
                        )
                    if dry_run:
                        self.logger.debug(f"[DRY-RUN] Would create '{current_path}'")
                        return None

                try:
                    clone = host.duplicate(src_child, dst, item.name)
                except Exception as error:
                    self.logger.warning(f"Could not create '{current_path}': {error}")
                    return None

                entry = logs.find(current_path, ModificationOperation.CREATE_OBJECT)
                if entry is not None:
                    entry.created_object = clone
                self.logger.debug(f"Created '{current_path}'")

                self.remove_walkdown(clone, item, record=False)
                dst = clone
            else:
                dst = dst_child
            src = src_child

            if src is None or dst is None:
                return None
        return dst

    def merge_walkdown(self, node, tree: TreeItem, depth: int = 0, dry_run: bool = False) -> None:
        """Copy each captured component onto the matching destination node, then recurse."""
        host = self.host
        session = self.session
        if depth > 0 and not self._names_match(tree.name, host.node_name(node)):
            return

        # Types cleanup would have destroyed; a dry run leaves them in place.
        cleaned = (
            tree.component_types(host)
            if dry_run and session.settings.remove_before_merge
            else []
        )

        for component in tree.components:
            kind = host.component_kind(component)
            component_type = host.component_type(component)
            type_name = host.component_type_name(component)
            target = host.find_component(node, component_type)

            if kind is ComponentKind.TRANSFORM:
                if not session.settings.copy_transform_values:
                    continue
                if target is not None:
                    op = ModificationOperation.UPDATE
                    message = MESSAGES[op]
                else:
                    op, message = ModificationOperation.NONE, ""
                action = self._transform_action(component, target)

            elif kind is ComponentKind.CLOTH:
                if component_type in cleaned:
                    target = None
                if target is not None:
                    op = ModificationOperation.UPDATE
                    message = MESSAGES[op]
                    if session.settings.use_nearest_neighbor_coefficients:
                        message += " (NNS)"
                else:
                    op = ModificationOperation.ADD
                    message = MESSAGES[op]
                action = self._cloth_action(node, component, component_type)

            else:
                op = ModificationOperation.ADD
                message = MESSAGES[op]
                action = self._generic_action(node, component, component_type)

            self.run_component_operation(node, type_name, op, message, dry_run, action)

        child_dic = {}
        for child in host.children(node):
            child_dic[host.node_name(child)] = child

        for tree_child in tree.children:
            matched_name = NameMatcher.find_matching_name(
                child_dic,
                tree_child.name,
                session.settings.replacement_rules,
                session.src_bone_mapping,
                session.dst_bone_mapping,
            )
            if matched_name is None:
                self.logger.debug(f"No destination child for '{tree_child.name}', skipping.")
                continue

            child = child_dic[matched_name]
            if host.node_type(child) == tree_child.type:
                self.merge_walkdown(child, tree_child, depth + 1, dry_run)

    def run_component_operation(
        self,
        node,
        component_type: str,
        op: ModificationOperation,
        message: str,
        dry_run: bool,
        action: Callable[[], Any],
    ):
        """Log an operation, then perform it unless this is a dry run.

        An entry is only written when ``message`` is non-empty. A failing action
        is logged and treated as producing nothing.

        Returns:
            The component produced by ``action``, or None.
        """
        entry = None
        if self._log_enabled(dry_run) and message:
            entry = self.session.modification_logs.add(
                ModificationEntry(
                    operation=op,
                    target_object=node,
                    component_type=component_type,
                    message=message,
                )
            )

        if dry_run:
            return None

        try:
            result = action()
        except Exception as error:
            self.logger.warning(
                f"{component_type} on '{self.host.node_name(node)}' failed: {error}"
            )
            return None

        if result is not None:
            self.session.components.append(result)
            if entry is not None:
                entry.created_component = result
        return result

    # --------------------------------------------------------------------------------------------
    # Merge actions
    # --------------------------------------------------------------------------------------------

    def _transform_action(self, component, target) -> Callable[[], Any]:
        def action():
            if target is None:
                return None
            self.host.copy_fields(component, target)
            return target

        return action

    def _generic_action(self, node, component, component_type: str) -> Callable[[], Any]:
        def action():
            new = self.host.add_component(node, component_type)
            self.host.copy_fields(component, new)
            # The most recently attached component is the result.
            return self.host.components(node)[-1]

        return action

    def _cloth_action(self, node, component, component_type: str) -> Callable[[], Any]:
        def action():
            cloth = self.host.find_component(node, component_type)
            if cloth is None:
                cloth = self.host.add_component(node, component_type)
            self.host.copy_fields(component, cloth)
            self.transfer_coefficients(component, cloth)
            return cloth

        return action

    def transfer_coefficients(self, src_cloth, dst_cloth) -> bool:
        """Copy per-point coefficients from one cloth onto another.

        With ``use_nearest_neighbor_coefficients`` each destination point takes
        the coefficients of the nearest source point; otherwise rows are copied
        positionally, and only when both counts match.

        Returns:
            (bool) Whether coefficients were written.
        """
        host = self.host
        src_coefficients = host.cloth_coefficients(src_cloth)
        dst_coefficients = host.cloth_coefficients(dst_cloth)

        if self.session.settings.use_nearest_neighbor_coefficients:
            src_vertices = host.cloth_vertices(src_cloth)
            dst_vertices = host.cloth_vertices(dst_cloth)
            count = min(len(src_vertices), len(src_coefficients))
            if count == 0:
                self.logger.debug("Source cloth has no points, skipping coefficient transfer.")
                return False

            kdtree = KDTree(src_vertices, 0, count - 1)
            for i in range(min(len(dst_coefficients), len(dst_vertices))):
                dst_coefficients[i] = src_coefficients[kdtree.find_nearest(dst_vertices[i])]
            host.set_cloth_coefficients(dst_cloth, dst_coefficients)
            return True

        if len(src_coefficients) == len(dst_coefficients):
            dst_coefficients[:] = src_coefficients
            host.set_cloth_coefficients(dst_cloth, dst_coefficients)
            return True

        self.logger.debug(
            f"Coefficient counts differ ({len(src_coefficients)} vs {len(dst_coefficients)}), skipping transfer."
        )
        return False
