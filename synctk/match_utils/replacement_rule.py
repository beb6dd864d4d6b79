# !/usr/bin/python
# coding=utf-8
"""Name replacement rules consumed by the NameMatcher."""
from enum import Enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

# From this package:
from synctk.match_utils.humanoid import BoneGroup, HumanoidBone, bones_in_group


class RuleType(Enum):
    PATTERN = "pattern"
    BONE_EQUIVALENCE = "bone_equivalence"


@dataclass
class ReplacementRule:
    """A single entry of an ordered rule list.

    Pattern rules rewrite a source name with a regex search/replace.
    Bone-equivalence rules declare two differently named nodes equivalent when
    both resolve to the same semantic bone; ``bone`` (a single tag) takes
    precedence over ``bone_group`` when set.
    """

    rule_type: RuleType = RuleType.PATTERN
    src_pattern: str = ""
    dst_pattern: str = ""
    bone_group: BoneGroup = BoneGroup.ALL
    bone: Optional[HumanoidBone] = None
    enabled: bool = True

    @classmethod
    def pattern(cls, src_pattern: str, dst_pattern: str, enabled: bool = True):
        return cls(
            rule_type=RuleType.PATTERN,
            src_pattern=src_pattern,
            dst_pattern=dst_pattern,
            enabled=enabled,
        )

    @classmethod
    def bone_group_rule(cls, bone_group: BoneGroup = BoneGroup.ALL, enabled: bool = True):
        return cls(
            rule_type=RuleType.BONE_EQUIVALENCE, bone_group=bone_group, enabled=enabled
        )

    @classmethod
    def single_bone(cls, bone: HumanoidBone, enabled: bool = True):
        return cls(rule_type=RuleType.BONE_EQUIVALENCE, bone=bone, enabled=enabled)

    @property
    def is_pattern(self) -> bool:
        return self.rule_type is RuleType.PATTERN

    @property
    def is_bone_equivalence(self) -> bool:
        return self.rule_type is RuleType.BONE_EQUIVALENCE

    def selects(self, bone: HumanoidBone) -> bool:
        """Whether a source bone tag passes this rule's bone selection."""
        if self.bone is not None:
            return bone == self.bone
        return bone in bones_in_group(self.bone_group)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.rule_type.value,
            "src_pattern": self.src_pattern,
            "dst_pattern": self.dst_pattern,
            "bone_group": self.bone_group.value,
            "bone": self.bone.name if self.bone is not None else None,
            "enabled": self.enabled,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReplacementRule":
        """Rebuild a rule written by :meth:`to_dict`.

        Raises:
            ValueError: If the rule type, bone group or bone is unknown.
        """
        try:
            rule_type = RuleType(data.get("type", RuleType.PATTERN.value))
            bone_group = BoneGroup(data.get("bone_group", BoneGroup.ALL.value))
            bone = data.get("bone")
            bone = HumanoidBone[bone] if bone else None
        except KeyError as error:
            raise ValueError(f"Unknown humanoid bone: {error}") from error

        return cls(
            rule_type=rule_type,
            src_pattern=data.get("src_pattern") or "",
            dst_pattern=data.get("dst_pattern") or "",
            bone_group=bone_group,
            bone=bone,
            enabled=bool(data.get("enabled", True)),
        )
