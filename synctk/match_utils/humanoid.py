# !/usr/bin/python
# coding=utf-8
"""Semantic skeleton bone tags, bone groups and well-known naming aliases."""
from enum import Enum
from typing import Dict, List


class HumanoidBone(Enum):
    """Standard humanoid joints, independent of any project's naming."""

    HIPS = 0
    LEFT_UPPER_LEG = 1
    RIGHT_UPPER_LEG = 2
    LEFT_LOWER_LEG = 3
    RIGHT_LOWER_LEG = 4
    LEFT_FOOT = 5
    RIGHT_FOOT = 6
    SPINE = 7
    CHEST = 8
    NECK = 9
    HEAD = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_UPPER_ARM = 13
    RIGHT_UPPER_ARM = 14
    LEFT_LOWER_ARM = 15
    RIGHT_LOWER_ARM = 16
    LEFT_HAND = 17
    RIGHT_HAND = 18
    LEFT_TOES = 19
    RIGHT_TOES = 20
    LEFT_EYE = 21
    RIGHT_EYE = 22
    JAW = 23
    LEFT_THUMB_PROXIMAL = 24
    LEFT_THUMB_INTERMEDIATE = 25
    LEFT_THUMB_DISTAL = 26
    LEFT_INDEX_PROXIMAL = 27
    LEFT_INDEX_INTERMEDIATE = 28
    LEFT_INDEX_DISTAL = 29
    LEFT_MIDDLE_PROXIMAL = 30
    LEFT_MIDDLE_INTERMEDIATE = 31
    LEFT_MIDDLE_DISTAL = 32
    LEFT_RING_PROXIMAL = 33
    LEFT_RING_INTERMEDIATE = 34
    LEFT_RING_DISTAL = 35
    LEFT_LITTLE_PROXIMAL = 36
    LEFT_LITTLE_INTERMEDIATE = 37
    LEFT_LITTLE_DISTAL = 38
    RIGHT_THUMB_PROXIMAL = 39
    RIGHT_THUMB_INTERMEDIATE = 40
    RIGHT_THUMB_DISTAL = 41
    RIGHT_INDEX_PROXIMAL = 42
    RIGHT_INDEX_INTERMEDIATE = 43
    RIGHT_INDEX_DISTAL = 44
    RIGHT_MIDDLE_PROXIMAL = 45
    RIGHT_MIDDLE_INTERMEDIATE = 46
    RIGHT_MIDDLE_DISTAL = 47
    RIGHT_RING_PROXIMAL = 48
    RIGHT_RING_INTERMEDIATE = 49
    RIGHT_RING_DISTAL = 50
    RIGHT_LITTLE_PROXIMAL = 51
    RIGHT_LITTLE_INTERMEDIATE = 52
    RIGHT_LITTLE_DISTAL = 53
    UPPER_CHEST = 54
    LAST_BONE = 55  # sentinel, never a real joint


class BoneGroup(Enum):
    ALL = "all"
    HEAD = "head"
    NECK = "neck"
    CHEST = "chest"
    SPINE = "spine"
    HIPS = "hips"
    LEFT_ARM = "left_arm"
    RIGHT_ARM = "right_arm"
    LEFT_LEG = "left_leg"
    RIGHT_LEG = "right_leg"
    LEFT_FINGERS = "left_fingers"
    RIGHT_FINGERS = "right_fingers"


def _fingers(side: str) -> List[HumanoidBone]:
    return [
        HumanoidBone[f"{side}_{finger}_{segment}"]
        for finger in ("THUMB", "INDEX", "MIDDLE", "RING", "LITTLE")
        for segment in ("PROXIMAL", "INTERMEDIATE", "DISTAL")
    ]


BONE_GROUP_MEMBERS: Dict[BoneGroup, List[HumanoidBone]] = {
    BoneGroup.HEAD: [
        HumanoidBone.HEAD,
        HumanoidBone.LEFT_EYE,
        HumanoidBone.RIGHT_EYE,
        HumanoidBone.JAW,
    ],
    BoneGroup.NECK: [HumanoidBone.NECK],
    BoneGroup.CHEST: [HumanoidBone.CHEST, HumanoidBone.UPPER_CHEST],
    BoneGroup.SPINE: [HumanoidBone.SPINE],
    BoneGroup.HIPS: [HumanoidBone.HIPS],
    BoneGroup.LEFT_ARM: [
        HumanoidBone.LEFT_SHOULDER,
        HumanoidBone.LEFT_UPPER_ARM,
        HumanoidBone.LEFT_LOWER_ARM,
        HumanoidBone.LEFT_HAND,
    ],
    BoneGroup.RIGHT_ARM: [
        HumanoidBone.RIGHT_SHOULDER,
        HumanoidBone.RIGHT_UPPER_ARM,
        HumanoidBone.RIGHT_LOWER_ARM,
        HumanoidBone.RIGHT_HAND,
    ],
    BoneGroup.LEFT_LEG: [
        HumanoidBone.LEFT_UPPER_LEG,
        HumanoidBone.LEFT_LOWER_LEG,
        HumanoidBone.LEFT_FOOT,
        HumanoidBone.LEFT_TOES,
    ],
    BoneGroup.RIGHT_LEG: [
        HumanoidBone.RIGHT_UPPER_LEG,
        HumanoidBone.RIGHT_LOWER_LEG,
        HumanoidBone.RIGHT_FOOT,
        HumanoidBone.RIGHT_TOES,
    ],
    BoneGroup.LEFT_FINGERS: _fingers("LEFT"),
    BoneGroup.RIGHT_FINGERS: _fingers("RIGHT"),
}


# Naming conventions seen in the wild: Unity humanoid, VRM, Blender rigify-ish, Mixamo.
BONE_ALIASES: Dict[HumanoidBone, List[str]] = {
    HumanoidBone.HEAD: ["Head", "J_Bip_C_Head", "head", "mixamorig:Head"],
    HumanoidBone.LEFT_EYE: ["LeftEye", "J_Adj_L_FaceEye", "Eye_L", "mixamorig:LeftEye"],
    HumanoidBone.RIGHT_EYE: ["RightEye", "J_Adj_R_FaceEye", "Eye_R", "mixamorig:RightEye"],
    HumanoidBone.JAW: ["Jaw", "J_Adj_C_Jaw", "jaw"],
    HumanoidBone.NECK: ["Neck", "J_Bip_C_Neck", "neck", "mixamorig:Neck"],
    HumanoidBone.CHEST: ["Chest", "J_Bip_C_Chest", "chest", "mixamorig:Spine1"],
    HumanoidBone.UPPER_CHEST: [
        "UpperChest",
        "J_Bip_C_UpperChest",
        "upper_chest",
        "mixamorig:Spine2",
    ],
    HumanoidBone.SPINE: ["Spine", "J_Bip_C_Spine", "spine", "mixamorig:Spine"],
    HumanoidBone.HIPS: ["Hips", "J_Bip_C_Hips", "hips", "mixamorig:Hips", "Pelvis"],
    HumanoidBone.LEFT_SHOULDER: [
        "LeftShoulder",
        "J_Bip_L_Shoulder",
        "shoulder_L",
        "mixamorig:LeftShoulder",
    ],
    HumanoidBone.LEFT_UPPER_ARM: [
        "LeftUpperArm",
        "J_Bip_L_UpperArm",
        "upper_arm_L",
        "mixamorig:LeftArm",
        "Arm_L",
    ],
    HumanoidBone.LEFT_LOWER_ARM: [
        "LeftLowerArm",
        "J_Bip_L_LowerArm",
        "lower_arm_L",
        "mixamorig:LeftForeArm",
        "ForeArm_L",
    ],
    HumanoidBone.LEFT_HAND: [
        "LeftHand",
        "J_Bip_L_Hand",
        "hand_L",
        "mixamorig:LeftHand",
        "Hand_L",
    ],
    HumanoidBone.RIGHT_SHOULDER: [
        "RightShoulder",
        "J_Bip_R_Shoulder",
        "shoulder_R",
        "mixamorig:RightShoulder",
    ],
    HumanoidBone.RIGHT_UPPER_ARM: [
        "RightUpperArm",
        "J_Bip_R_UpperArm",
        "upper_arm_R",
        "mixamorig:RightArm",
        "Arm_R",
    ],
    HumanoidBone.RIGHT_LOWER_ARM: [
        "RightLowerArm",
        "J_Bip_R_LowerArm",
        "lower_arm_R",
        "mixamorig:RightForeArm",
        "ForeArm_R",
    ],
    HumanoidBone.RIGHT_HAND: [
        "RightHand",
        "J_Bip_R_Hand",
        "hand_R",
        "mixamorig:RightHand",
        "Hand_R",
    ],
    HumanoidBone.LEFT_UPPER_LEG: [
        "LeftUpperLeg",
        "J_Bip_L_UpperLeg",
        "upper_leg_L",
        "mixamorig:LeftUpLeg",
        "Thigh_L",
    ],
    HumanoidBone.LEFT_LOWER_LEG: [
        "LeftLowerLeg",
        "J_Bip_L_LowerLeg",
        "lower_leg_L",
        "mixamorig:LeftLeg",
        "Leg_L",
    ],
    HumanoidBone.LEFT_FOOT: [
        "LeftFoot",
        "J_Bip_L_Foot",
        "foot_L",
        "mixamorig:LeftFoot",
        "Foot_L",
    ],
    HumanoidBone.LEFT_TOES: [
        "LeftToes",
        "J_Bip_L_ToeBase",
        "toe_L",
        "mixamorig:LeftToeBase",
        "Toe_L",
    ],
    HumanoidBone.RIGHT_UPPER_LEG: [
        "RightUpperLeg",
        "J_Bip_R_UpperLeg",
        "upper_leg_R",
        "mixamorig:RightUpLeg",
        "Thigh_R",
    ],
    HumanoidBone.RIGHT_LOWER_LEG: [
        "RightLowerLeg",
        "J_Bip_R_LowerLeg",
        "lower_leg_R",
        "mixamorig:RightLeg",
        "Leg_R",
    ],
    HumanoidBone.RIGHT_FOOT: [
        "RightFoot",
        "J_Bip_R_Foot",
        "foot_R",
        "mixamorig:RightFoot",
        "Foot_R",
    ],
    HumanoidBone.RIGHT_TOES: [
        "RightToes",
        "J_Bip_R_ToeBase",
        "toe_R",
        "mixamorig:RightToeBase",
        "Toe_R",
    ],
}

# Finger aliases follow a regular pattern in every convention, so build them.
_FINGER_NAMES = {
    "THUMB": ("Thumb", "thumb", "Thumb"),
    "INDEX": ("Index", "index", "Index"),
    "MIDDLE": ("Middle", "middle", "Middle"),
    "RING": ("Ring", "ring", "Ring"),
    "LITTLE": ("Little", "pinky", "Pinky"),
}
_SEGMENTS = ("PROXIMAL", "INTERMEDIATE", "DISTAL")

for _side, _short in (("LEFT", "L"), ("RIGHT", "R")):
    for _finger, (_vrm, _blender, _mixamo) in _FINGER_NAMES.items():
        for _number, _segment in enumerate(_SEGMENTS, start=1):
            _bone = HumanoidBone[f"{_side}_{_finger}_{_segment}"]
            _unity = f"{_side.title()}{_finger.title()}{_segment.title()}"
            BONE_ALIASES[_bone] = [
                _unity,
                f"J_Bip_{_short}_{_vrm}{_number}",
                f"{_blender}_0{_number}_{_short}",
                f"mixamorig:{_side.title()}Hand{_mixamo}{_number}",
            ]


def bones_in_group(group: BoneGroup) -> List[HumanoidBone]:
    """Member tags of a bone group; ``ALL`` is every tag but the sentinel."""
    if group is BoneGroup.ALL:
        return [bone for bone in HumanoidBone if bone is not HumanoidBone.LAST_BONE]
    return list(BONE_GROUP_MEMBERS.get(group, []))
