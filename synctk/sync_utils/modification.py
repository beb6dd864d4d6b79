# !/usr/bin/python
# coding=utf-8
"""Modification log entries recorded by paste and dry-run."""
from enum import IntEnum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


class ModificationOperation(IntEnum):
    NONE = 0
    ADD = 1
    REMOVE = 2
    UPDATE = 3
    CREATE_OBJECT = 4


# Display strings for report consumers; localization happens outside this package.
MESSAGES = {
    ModificationOperation.ADD: "Added",
    ModificationOperation.REMOVE: "Removed",
    ModificationOperation.UPDATE: "Updated",
    ModificationOperation.CREATE_OBJECT: "Created",
}


@dataclass
class ModificationEntry:
    """A single logged change.

    Component-level entries target a live node (``target_object``);
    object-level entries target a path string (``target_path``) because the
    node may not exist yet. ``created_component``/``created_object`` are filled
    in by an executing paste once the change has been made.
    """

    operation: ModificationOperation = ModificationOperation.NONE
    target_object: Any = None
    target_path: Optional[str] = None
    component_type: Optional[str] = None
    message: Optional[str] = None
    created_component: Any = None
    created_object: Any = None

    def relative_path(self, host, root=None) -> Optional[str]:
        """Target path relative to ``root``, comparable across destinations."""
        if self.target_object is not None:
            path = host.node_path(self.target_object, root)
        else:
            path = self.target_path
        if path is None or root is None:
            return path
        # Drop the root's own name so equally shaped trees compare equal.
        _, _, rest = path.partition("/")
        return rest

    def key(self, host, root=None) -> tuple:
        """(operation, type-or-path, relative path), the dry-run/execute comparison key."""
        return (
            self.operation,
            self.component_type or self.target_path,
            self.relative_path(host, root),
        )


class ModificationLog:
    """Ordered list of :class:`ModificationEntry`."""

    def __init__(self):
        self.entries: List[ModificationEntry] = []

    def add(self, entry: ModificationEntry) -> ModificationEntry:
        self.entries.append(entry)
        return entry

    def clear(self) -> None:
        self.entries.clear()

    def find(
        self, target_path: str, operation: ModificationOperation
    ) -> Optional[ModificationEntry]:
        return next(
            (
                e
                for e in self.entries
                if e.target_path == target_path and e.operation == operation
            ),
            None,
        )

    def filter(self, operation: ModificationOperation) -> List[ModificationEntry]:
        return [e for e in self.entries if e.operation == operation]

    def last(self) -> Optional[ModificationEntry]:
        return self.entries[-1] if self.entries else None

    def summary(self) -> Dict[str, int]:
        """Entry count per operation name, in first-seen order."""
        counts: Dict[str, int] = {}
        for entry in self.entries:
            counts[entry.operation.name] = counts.get(entry.operation.name, 0) + 1
        return counts

    def __iter__(self) -> Iterator[ModificationEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index) -> ModificationEntry:
        return self.entries[index]
