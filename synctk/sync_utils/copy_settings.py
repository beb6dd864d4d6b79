# !/usr/bin/python
# coding=utf-8
"""Options for copy, paste and dry-run, with key-value store persistence."""
import json
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, MutableMapping

# From this package:
from synctk.match_utils.replacement_rule import ReplacementRule

CONFIG_PREFIX = "synctk/"


def _parse_bool(value, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes", "on"):
        return True
    if text in ("false", "0", "no", "off"):
        return False
    return default


@dataclass
class CopySettings:
    """Paste options.

    Attributes:
        pattern (str): Regex matched against qualified component type names at copy time.
        remove_before_merge (bool): Remove destination components of the captured types first.
        create_missing_objects (bool): Duplicate source nodes missing from the destination.
        object_copy_matched_only (bool): Only create nodes that carry captured components.
        use_nearest_neighbor_coefficients (bool): Transfer cloth coefficients from the nearest source point.
        copy_transform_values (bool): Capture transforms and copy their values onto existing ones.
        record_log (bool): Keep the modification logs during an executing paste.
        replacement_rules (list): Ordered ReplacementRule list used for name matching.
    """

    pattern: str = ""
    remove_before_merge: bool = False
    create_missing_objects: bool = False
    object_copy_matched_only: bool = False
    use_nearest_neighbor_coefficients: bool = False
    copy_transform_values: bool = False
    record_log: bool = False
    replacement_rules: List[ReplacementRule] = field(default_factory=list)

    @classmethod
    def _flag_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.type is bool or f.type == "bool"]

    def load(self, store: MutableMapping[str, Any]) -> "CopySettings":
        """Read values from a key-value store; missing or bad values keep their defaults."""
        self.pattern = store.get(CONFIG_PREFIX + "pattern") or self.pattern
        for name in self._flag_names():
            setattr(
                self, name, _parse_bool(store.get(CONFIG_PREFIX + name), getattr(self, name))
            )

        raw_rules = store.get(CONFIG_PREFIX + "replacement_rules")
        if raw_rules:
            try:
                self.replacement_rules = [
                    ReplacementRule.from_dict(d) for d in json.loads(raw_rules)
                ]
            except (ValueError, TypeError, AttributeError):
                # Keep the current rules when the stored list is unreadable.
                pass
        return self

    def save(self, store: MutableMapping[str, Any]) -> None:
        store[CONFIG_PREFIX + "pattern"] = self.pattern
        for name in self._flag_names():
            store[CONFIG_PREFIX + name] = str(getattr(self, name))
        store[CONFIG_PREFIX + "replacement_rules"] = json.dumps(
            [rule.to_dict() for rule in self.replacement_rules]
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {name: getattr(self, name) for name in self._flag_names()}
        data["pattern"] = self.pattern
        data["replacement_rules"] = [rule.to_dict() for rule in self.replacement_rules]
        return data
