# !/usr/bin/python
# coding=utf-8
import unittest

from synctk.match_utils._match_utils import NameMatcher
from synctk.match_utils.humanoid import BoneGroup, HumanoidBone
from synctk.match_utils.replacement_rule import ReplacementRule, RuleType


class NameMatcherTest(unittest.TestCase):
    def test_exact_names_always_match(self):
        tests = [None, [], [ReplacementRule.pattern("a", "b")]]
        for rules in tests:
            with self.subTest(rules=rules):
                self.assertTrue(NameMatcher.names_match("hips", "hips", rules))

    def test_different_names_without_rules(self):
        self.assertFalse(NameMatcher.names_match("hips", "pelvis", None))
        self.assertFalse(NameMatcher.names_match("hips", "pelvis", []))

    def test_pattern_rule(self):
        rules = [ReplacementRule.pattern("hips", "pelvis")]
        self.assertTrue(NameMatcher.names_match("hips", "pelvis", rules))
        self.assertFalse(NameMatcher.names_match("pelvis", "hips", rules))

    def test_pattern_rules_chain_in_order(self):
        rules = [
            ReplacementRule.pattern("^L_", "Left"),
            ReplacementRule.pattern("Left", "left_"),
        ]
        self.assertEqual(NameMatcher.transform_name("L_arm", rules), "left_arm")
        self.assertTrue(NameMatcher.names_match("L_arm", "left_arm", rules))

    def test_dollar_templates(self):
        tests = [
            (r"(\w+)_L$", r"$1_Left", "arm_Left"),
            (r"(\w+)_L$", r"${1}_Left", "arm_Left"),
            (r"(\w+)_(?P<side>L)$", r"${side}_arm", "L_arm"),
            (r"(\w+)_L$", r"$$$1", "$arm"),
            (r"(\w+)_L$", r"$1$$", "arm$"),
            (r"_L$", r"$${1}", "arm${1}"),
        ]
        for src_pattern, template, expected in tests:
            with self.subTest(template=template):
                rule = ReplacementRule.pattern(src_pattern, template)
                self.assertEqual(NameMatcher.transform_name("arm_L", [rule]), expected)

    def test_invalid_rules_leave_name_untouched(self):
        tests = [
            ReplacementRule.pattern("([", "x"),
            ReplacementRule.pattern("a", "$2"),
            ReplacementRule.pattern("", "x"),
        ]
        for rule in tests:
            with self.subTest(src=rule.src_pattern, dst=rule.dst_pattern):
                self.assertEqual(NameMatcher.transform_name("abc", [rule]), "abc")
                self.assertFalse(NameMatcher.names_match("abc", "x", [rule]))

    def test_disabled_rule_is_ignored(self):
        rules = [ReplacementRule.pattern("hips", "pelvis", enabled=False)]
        self.assertFalse(NameMatcher.names_match("hips", "pelvis", rules))

    def test_bone_equivalence(self):
        src_map = {"Hips": HumanoidBone.HIPS, "Spine": HumanoidBone.SPINE}
        dst_map = {"pelvis_jnt": HumanoidBone.HIPS, "spine_01": HumanoidBone.SPINE}
        tests = [
            (ReplacementRule.bone_group_rule(), True),
            (ReplacementRule.bone_group_rule(BoneGroup.HIPS), True),
            (ReplacementRule.bone_group_rule(BoneGroup.HEAD), False),
            (ReplacementRule.single_bone(HumanoidBone.HIPS), True),
            (ReplacementRule.single_bone(HumanoidBone.SPINE), False),
        ]
        for rule, expected in tests:
            with self.subTest(rule=rule):
                self.assertEqual(
                    NameMatcher.names_match("Hips", "pelvis_jnt", [rule], src_map, dst_map),
                    expected,
                )

        # Different bones never match.
        rule = ReplacementRule.bone_group_rule()
        self.assertFalse(
            NameMatcher.names_match("Hips", "spine_01", [rule], src_map, dst_map)
        )

    def test_bone_equivalence_needs_both_mappings(self):
        rule = ReplacementRule.bone_group_rule()
        src_map = {"Hips": HumanoidBone.HIPS}
        self.assertFalse(NameMatcher.names_match("Hips", "pelvis", [rule], src_map, None))
        self.assertFalse(NameMatcher.names_match("Hips", "pelvis", [rule], None, src_map))
        self.assertFalse(NameMatcher.names_match("Hips", "pelvis", [rule], src_map, {}))

    def test_bone_rule_does_not_rewrite_names(self):
        rules = [ReplacementRule.bone_group_rule()]
        self.assertEqual(NameMatcher.transform_name("Hips", rules), "Hips")

    def test_find_matching_name_prefers_exact_key(self):
        nodes = {"pelvis": 1, "hips": 2}
        rules = [ReplacementRule.pattern("hips", "pelvis")]
        self.assertEqual(NameMatcher.find_matching_name(nodes, "hips", rules), "hips")

    def test_find_matching_name_first_match_wins(self):
        nodes = {"Hips_2": 1, "Pelvis": 2}
        src_map = {"Hips": HumanoidBone.HIPS}
        dst_map = {"Hips_2": HumanoidBone.HIPS, "Pelvis": HumanoidBone.HIPS}
        rules = [ReplacementRule.bone_group_rule()]
        self.assertEqual(
            NameMatcher.find_matching_name(nodes, "Hips", rules, src_map, dst_map), "Hips_2"
        )

    def test_find_matching_name_none(self):
        self.assertIsNone(NameMatcher.find_matching_name({"a": 1}, "b", None))
        self.assertIsNone(
            NameMatcher.find_matching_name({"a": 1}, "b", [ReplacementRule.pattern("c", "a")])
        )
        self.assertEqual(
            NameMatcher.find_matching_name({"a": 1}, "b", [ReplacementRule.pattern("b", "a")]),
            "a",
        )

    def test_get_bones_in_group(self):
        all_bones = NameMatcher.get_bones_in_group(BoneGroup.ALL)
        self.assertEqual(len(all_bones), 55)
        self.assertNotIn(HumanoidBone.LAST_BONE, all_bones)
        self.assertEqual(len(NameMatcher.get_bones_in_group(BoneGroup.LEFT_FINGERS)), 15)
        self.assertEqual(NameMatcher.get_bones_in_group(BoneGroup.HIPS), [HumanoidBone.HIPS])

    def test_guess_bone_mapping_conventions(self):
        names = ["J_Bip_C_Head", "mixamorig:Head", "Head", "HEAD"]
        mapping = NameMatcher.guess_bone_mapping(names)
        self.assertEqual(mapping, {name: HumanoidBone.HEAD for name in names})

    def test_guess_bone_mapping(self):
        mapping = NameMatcher.guess_bone_mapping(
            ["Hips", "mixamorig:Spine", "skirt", "pelvis", "LeftIndexProximal"]
        )
        self.assertEqual(
            mapping,
            {
                "Hips": HumanoidBone.HIPS,
                "mixamorig:Spine": HumanoidBone.SPINE,
                "pelvis": HumanoidBone.HIPS,
                "LeftIndexProximal": HumanoidBone.LEFT_INDEX_PROXIMAL,
            },
        )


class ReplacementRuleTest(unittest.TestCase):
    def test_dict_round_trip(self):
        rules = [
            ReplacementRule.pattern(r"(\w+)_L", "$1_Left"),
            ReplacementRule.bone_group_rule(BoneGroup.LEFT_ARM, enabled=False),
            ReplacementRule.single_bone(HumanoidBone.HEAD),
        ]
        for rule in rules:
            with self.subTest(rule=rule):
                self.assertEqual(ReplacementRule.from_dict(rule.to_dict()), rule)

    def test_from_dict_rejects_unknown_values(self):
        tests = [
            {"type": "nonsense"},
            {"type": RuleType.BONE_EQUIVALENCE.value, "bone_group": "tail"},
            {"type": RuleType.BONE_EQUIVALENCE.value, "bone": "TAIL"},
        ]
        for data in tests:
            with self.subTest(data=data):
                with self.assertRaises(ValueError):
                    ReplacementRule.from_dict(data)

    def test_selects(self):
        self.assertTrue(ReplacementRule.bone_group_rule().selects(HumanoidBone.JAW))
        self.assertFalse(
            ReplacementRule.bone_group_rule(BoneGroup.LEFT_ARM).selects(HumanoidBone.RIGHT_HAND)
        )
        # A single bone takes precedence over the group.
        rule = ReplacementRule.single_bone(HumanoidBone.NECK)
        self.assertFalse(rule.selects(HumanoidBone.HEAD))
        self.assertTrue(rule.selects(HumanoidBone.NECK))


if __name__ == "__main__":
    unittest.main()
