# !/usr/bin/python
# coding=utf-8
import unittest

import numpy as np

from base_test import SyncTkTestCase
from synctk.match_utils.humanoid import HumanoidBone
from synctk.scene_utils._scene_utils import ComponentKind
from synctk.scene_utils.memory_scene import Animator, Cloth, SceneNode, Transform


class MemorySceneTest(SyncTkTestCase):
    def test_nodes_own_a_transform(self):
        node = SceneNode("a")
        self.assertEqual(len(node.components), 1)
        self.assertIsInstance(node.transform, Transform)
        self.assertIs(self.host.transform(node), node.transform)

    def test_node_path(self):
        root = self.build_tree("root", "hips/skirt")
        skirt = root.find("hips/skirt")
        self.assertEqual(self.host.node_path(skirt), "root/hips/skirt")
        self.assertEqual(self.host.node_path(skirt, root.find("hips")), "hips/skirt")

    def test_component_kinds(self):
        node = SceneNode("a", mesh=[(0, 0, 0)])
        tests = {
            node.transform: ComponentKind.TRANSFORM,
            node.add(Cloth()): ComponentKind.CLOTH,
            self.collider(node): ComponentKind.GENERIC,
        }
        for component, expected in tests.items():
            with self.subTest(component=component):
                self.assertIs(self.host.component_kind(component), expected)

    def test_component_type_names(self):
        component = self.collider(SceneNode("a"), "Physics.BoxCollider")
        self.assertEqual(self.host.component_type(component), "Physics.BoxCollider")
        self.assertEqual(self.host.component_type_name(component), "BoxCollider")

    def test_add_second_transform_raises(self):
        with self.assertRaises(ValueError):
            self.host.add_component(SceneNode("a"), Transform.type_name)

    def test_add_and_destroy_component(self):
        node = SceneNode("a")
        cloth = self.host.add_component(node, Cloth.type_name)
        self.assertIsInstance(cloth, Cloth)
        generic = self.host.add_component(node, "Physics.Joint")
        self.assertEqual(generic.type_name, "Physics.Joint")
        self.assertEqual(self.host.components(node)[-1], generic)

        self.host.destroy_component(cloth)
        self.assertIsNone(cloth.node)
        self.assertEqual(self.host.components_of_type(node, Cloth.type_name), [])

    def test_copy_fields(self):
        src = self.collider(SceneNode("a"), radius=0.5, tags=["x"])
        dst = self.host.add_component(SceneNode("b"), src.type_name)

        self.assertEqual(self.host.copy_fields(src, dst), 2)
        self.assertEqual(dst.fields, {"radius": 0.5, "tags": ["x"]})
        # Containers are not shared between the two components.
        dst.fields["tags"].append("y")
        self.assertEqual(src.fields["tags"], ["x"])

    def test_cloth_points_follow_mesh(self):
        node = SceneNode("a", mesh=[(0, 0, 0), (1, 0, 0)])
        cloth = node.add(Cloth())
        self.assertEqual(self.host.cloth_vertices(cloth).shape, (2, 3))
        self.assertEqual(self.host.cloth_coefficients(cloth).shape, (2, 2))

        self.host.set_cloth_coefficients(cloth, [[1, 2], [3, 4]])
        np.testing.assert_array_equal(cloth.coefficients, [[1, 2], [3, 4]])
        with self.assertRaises(ValueError):
            self.host.set_cloth_coefficients(cloth, [[1, 2]])

    def test_duplicate_remaps_internal_references(self):
        root = self.build_tree("root", "skirt/ribbon")
        skirt = root.find("skirt")
        ribbon = root.find("skirt/ribbon")
        joint = self.collider(ribbon, "Physics.Joint", target=skirt, bodies=[ribbon.transform], world=root)

        clone = self.host.duplicate(skirt, root, "skirt_copy")
        cloned_ribbon = clone.find("ribbon")
        cloned_joint = cloned_ribbon.get_components("Physics.Joint")[0]

        self.assertIs(clone.parent, root)
        self.assertEqual(clone.name, "skirt_copy")
        self.assertIsNot(cloned_joint, joint)
        self.assertIs(cloned_joint.fields["target"], clone)
        self.assertIs(cloned_joint.fields["bodies"][0], cloned_ribbon.transform)
        # References outside the duplicated subtree are kept.
        self.assertIs(cloned_joint.fields["world"], root)
        self.assertIs(joint.fields["target"], skirt)

    def test_duplicate_copies_cloth_coefficients(self):
        root = SceneNode("root")
        node = SceneNode("a", root, mesh=[(0, 0, 0), (1, 0, 0)])
        cloth = node.add(Cloth())
        cloth.coefficients = np.array([[1.0, 2.0], [3.0, 4.0]])

        clone = self.host.duplicate(node, root, "b")
        cloned = clone.get_components(Cloth.type_name)[0]
        np.testing.assert_array_equal(cloned.coefficients, cloth.coefficients)
        self.assertIsNot(cloned.coefficients, cloth.coefficients)

    def test_bone_mapping_from_animator(self):
        root = self.build_tree("root", "Hips/Spine")
        self.assertEqual(self.host.bone_mapping(root), {})

        root.add(
            Animator(
                {
                    HumanoidBone.HIPS: root.find("Hips"),
                    HumanoidBone.SPINE: root.find("Hips/Spine"),
                    HumanoidBone.HEAD: None,
                }
            )
        )
        self.assertEqual(
            self.host.bone_mapping(root),
            {"Hips": HumanoidBone.HIPS, "Spine": HumanoidBone.SPINE},
        )

    def test_find_and_walk(self):
        root = self.build_tree("root", "a/b", "a/c", "d")
        self.assertEqual([n.name for n in root.walk()], ["root", "a", "b", "c", "d"])
        self.assertIsNone(root.find("a/x"))
        self.assertIs(root.find("a").find("c"), root.find("a/c"))

    def test_reparenting(self):
        root = self.build_tree("root", "a", "b")
        a, b = root.find("a"), root.find("b")
        a.add_child(b)
        self.assertEqual([c.name for c in root.children], ["a"])
        self.assertIs(b.parent, a)


if __name__ == "__main__":
    unittest.main()
