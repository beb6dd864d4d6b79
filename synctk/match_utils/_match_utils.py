# !/usr/bin/python
# coding=utf-8
import re
from typing import Dict, Iterable, List, Mapping, Optional

import pythontk as ptk

# From this package:
from synctk.match_utils.humanoid import (
    BONE_ALIASES,
    BoneGroup,
    HumanoidBone,
    bones_in_group,
)
from synctk.match_utils.replacement_rule import ReplacementRule

BoneMapping = Dict[str, HumanoidBone]

# $1, ${1} and ${name} -> python's \g<...>; $$ is a literal dollar.
_DOLLAR_GROUP = re.compile(r"\$(?:(\$)|\{(\w+)\}|(\d+))")


class NameMatcher(ptk.HelpMixin):
    """Decide whether two node names refer to "the same" node under a rule set.

    Pattern rules rewrite the source name and compare the result; bone
    equivalence rules compare the semantic bone each name is mapped to.
    """

    @staticmethod
    def get_bones_in_group(group: BoneGroup) -> List[HumanoidBone]:
        """Return the bone tags belonging to the given group.

        Parameters:
            group (BoneGroup): The group to expand. ``BoneGroup.ALL`` expands to
                every tag except the ``LAST_BONE`` sentinel.

        Returns:
            (list) HumanoidBone members, empty for an unknown group.
        """
        return bones_in_group(group)

    @staticmethod
    def get_bone_aliases(bone: HumanoidBone) -> List[str]:
        """Known names for a bone, falling back to the tag's own name."""
        return list(BONE_ALIASES.get(bone, [bone.name]))

    @staticmethod
    def get_humanoid_bone_aliases() -> Dict[HumanoidBone, List[str]]:
        return {bone: list(aliases) for bone, aliases in BONE_ALIASES.items()}

    @staticmethod
    def guess_bone_mapping(names: Iterable[str]) -> BoneMapping:
        """Build a bone mapping from well-known naming conventions.

        Useful for hosts that carry no skeleton definition. Comparison is case
        insensitive; the first bone whose alias list contains a name wins.

        Parameters:
            names (iterable): Node display names, e.g. every node under a root.

        Returns:
            (dict) name -> HumanoidBone for each recognised name.
        """
        lookup = {}
        for bone, aliases in BONE_ALIASES.items():
            for alias in aliases:
                lookup.setdefault(alias.lower(), bone)

        mapping = {}
        for name in names:
            bone = lookup.get(name.lower())
            if bone is not None:
                mapping.setdefault(name, bone)
        return mapping

    @staticmethod
    def _convert_template(template: str) -> str:
        return _DOLLAR_GROUP.sub(
            lambda m: "$" if m.group(1) else r"\g<{}>".format(m.group(2) or m.group(3)),
            template,
        )

    @classmethod
    def _apply_pattern_rule(cls, name: str, rule: ReplacementRule) -> str:
        if not rule.src_pattern:
            return name
        try:
            return re.sub(
                rule.src_pattern, cls._convert_template(rule.dst_pattern or ""), name
            )
        except (re.error, IndexError):
            # An invalid pattern or template leaves the name untouched.
            return name

    @classmethod
    def transform_name(
        cls, name: str, rules: Optional[List[ReplacementRule]]
    ) -> str:
        """Apply the enabled pattern rules to a name, in order.

        Bone equivalence rules never rewrite a name.

        Parameters:
            name (str): The source name.
            rules (list): ReplacementRule instances. None is treated as empty.

        Returns:
            (str) The rewritten name.
        """
        if not rules:
            return name

        result = name
        for rule in rules:
            if rule.enabled and rule.is_pattern:
                result = cls._apply_pattern_rule(result, rule)
        return result

    @staticmethod
    def _bone_rule_matches(
        rule: ReplacementRule,
        src: str,
        dst: str,
        src_bone_map: Optional[Mapping[str, HumanoidBone]],
        dst_bone_map: Optional[Mapping[str, HumanoidBone]],
    ) -> bool:
        if not src_bone_map or not dst_bone_map:
            return False

        src_bone = src_bone_map.get(src)
        if src_bone is None or not rule.selects(src_bone):
            return False

        return dst_bone_map.get(dst) == src_bone

    @classmethod
    def names_match(
        cls,
        src: str,
        dst: str,
        rules: Optional[List[ReplacementRule]],
        src_bone_map: Optional[Mapping[str, HumanoidBone]] = None,
        dst_bone_map: Optional[Mapping[str, HumanoidBone]] = None,
    ) -> bool:
        """Check whether a source name corresponds to a destination name.

        Parameters:
            src (str): Source node name.
            dst (str): Destination node name.
            rules (list): ReplacementRule instances evaluated in order.
            src_bone_map (dict): Source name -> HumanoidBone.
            dst_bone_map (dict): Destination name -> HumanoidBone.

        Returns:
            (bool) True on an exact match, a match after the pattern chain, or a
            shared semantic bone selected by an enabled bone rule.
        """
        if src == dst:
            return True

        if not rules:
            return False

        if cls.transform_name(src, rules) == dst:
            return True

        return any(
            cls._bone_rule_matches(rule, src, dst, src_bone_map, dst_bone_map)
            for rule in rules
            if rule.enabled and rule.is_bone_equivalence
        )

    @classmethod
    def find_matching_name(
        cls,
        name_to_node: Mapping[str, object],
        src_name: str,
        rules: Optional[List[ReplacementRule]],
        src_bone_map: Optional[Mapping[str, HumanoidBone]] = None,
        dst_bone_map: Optional[Mapping[str, HumanoidBone]] = None,
    ) -> Optional[str]:
        """Find the key of ``name_to_node`` that matches ``src_name``.

        An exact key wins; otherwise keys are tested in mapping order and the
        first match is returned.

        Returns:
            (str/None) The matched key.
        """
        if src_name in name_to_node:
            return src_name

        if not rules:
            return None

        for key in name_to_node:
            if cls.names_match(src_name, key, rules, src_bone_map, dst_bone_map):
                return key
        return None
