"""Built-in fighting poses for the humanoid rig.

Rotations are degrees relative to bind; x/y are offsets from the bind position.
"""
from typing import Dict

DEFAULT_POSES: Dict[str, Dict[str, Dict[str, float]]] = {
    "idle": {},
    "guard": {
        "upperArm-left": {"rotation": -60},
        "forearm-left": {"rotation": -90},
        "upperArm-right": {"rotation": -60},
        "forearm-right": {"rotation": -90},
    },
    # Punches
    "punch_extend_left": {
        "upperArm-left": {"rotation": -90},
        "forearm-left": {"rotation": 0},
        "upperArm-right": {"rotation": -45},
        "forearm-right": {"rotation": -90},
        "torso": {"rotation": 10},
    },
    "punch_extend_right": {
        "upperArm-right": {"rotation": -90},
        "forearm-right": {"rotation": 0},
        "upperArm-left": {"rotation": -45},
        "forearm-left": {"rotation": -90},
        "torso": {"rotation": -10},
    },
    "hook_windup_left": {
        "upperArm-left": {"rotation": -120},
        "forearm-left": {"rotation": -90},
        "torso": {"rotation": -20},
    },
    "hook_extend_left": {
        "upperArm-left": {"rotation": -90},
        "forearm-left": {"rotation": -90},
        "torso": {"rotation": 30},
    },
    "hook_windup_right": {
        "upperArm-right": {"rotation": -120},
        "forearm-right": {"rotation": -90},
        "torso": {"rotation": 20},
    },
    "hook_extend_right": {
        "upperArm-right": {"rotation": -90},
        "forearm-right": {"rotation": -90},
        "torso": {"rotation": -30},
    },
    "uppercut_windup_left": {
        "upperArm-left": {"rotation": 20},
        "forearm-left": {"rotation": -120},
        "torso": {"rotation": -15},
        "spine": {"rotation": 10},
    },
    "uppercut_extend_left": {
        "upperArm-left": {"rotation": -120},
        "forearm-left": {"rotation": -60},
        "torso": {"rotation": 10},
        "spine": {"rotation": -5},
    },
    "uppercut_windup_right": {
        "upperArm-right": {"rotation": 20},
        "forearm-right": {"rotation": -120},
        "torso": {"rotation": 15},
        "spine": {"rotation": 10},
    },
    "uppercut_extend_right": {
        "upperArm-right": {"rotation": -120},
        "forearm-right": {"rotation": -60},
        "torso": {"rotation": -10},
        "spine": {"rotation": -5},
    },
    # Kicks
    "kick_extend_left": {
        "thigh-left": {"rotation": -90},
        "shin-left": {"rotation": 20},
        "thigh-right": {"rotation": 10},
    },
    "kick_extend_right": {
        "thigh-right": {"rotation": -90},
        "shin-right": {"rotation": 20},
        "thigh-left": {"rotation": 10},
    },
    "roundhouse_windup_right": {
        "thigh-right": {"rotation": 45},
        "shin-right": {"rotation": -90},
        "torso": {"rotation": -30},
    },
    "roundhouse_extend_right": {
        "thigh-right": {"rotation": -60},
        "shin-right": {"rotation": 0},
        "torso": {"rotation": 20},
    },
    # Defense
    "block_high": {
        "upperArm-left": {"rotation": -120},
        "forearm-left": {"rotation": -45},
        "upperArm-right": {"rotation": -120},
        "forearm-right": {"rotation": -45},
    },
    "block_low": {
        "upperArm-left": {"rotation": -30},
        "forearm-left": {"rotation": -60},
        "upperArm-right": {"rotation": -30},
        "forearm-right": {"rotation": -60},
    },
    "parry_left": {
        "upperArm-left": {"rotation": -100},
        "forearm-left": {"rotation": -30},
        "torso": {"rotation": 15},
    },
    "parry_right": {
        "upperArm-right": {"rotation": -100},
        "forearm-right": {"rotation": -30},
        "torso": {"rotation": -15},
    },
    "dodge_back": {
        "spine": {"rotation": 20, "y": 10},
        "torso": {"rotation": 15},
        "thigh-left": {"rotation": 15},
        "thigh-right": {"rotation": 15},
    },
    "dodge_left": {
        "spine": {"x": -20},
        "torso": {"rotation": 20},
    },
    "dodge_right": {
        "spine": {"x": 20},
        "torso": {"rotation": -20},
    },
    # Reactions
    "stagger_back": {
        "spine": {"rotation": 25, "x": -15},
        "torso": {"rotation": 15},
        "neck": {"rotation": 10},
        "upperArm-left": {"rotation": 30},
        "upperArm-right": {"rotation": 30},
    },
    "stagger_left": {
        "spine": {"x": -25},
        "torso": {"rotation": 25},
        "neck": {"rotation": 15},
    },
    "stagger_right": {
        "spine": {"x": 25},
        "torso": {"rotation": -25},
        "neck": {"rotation": -15},
    },
    "knockdown_falling": {
        "spine": {"rotation": 45, "y": 30},
        "torso": {"rotation": 30},
        "neck": {"rotation": 20},
        "upperArm-left": {"rotation": 60},
        "upperArm-right": {"rotation": 60},
        "thigh-left": {"rotation": -30},
        "thigh-right": {"rotation": -30},
    },
    "knockdown_ground": {
        "spine": {"rotation": 90, "y": 80},
        "torso": {"rotation": 0},
        "neck": {"rotation": -10},
        "upperArm-left": {"rotation": 90},
        "forearm-left": {"rotation": 45},
        "upperArm-right": {"rotation": 90},
        "forearm-right": {"rotation": 45},
        "thigh-left": {"rotation": -90},
        "shin-left": {"rotation": 45},
        "thigh-right": {"rotation": -90},
        "shin-right": {"rotation": 45},
    },
    "getup_crouch": {
        "spine": {"rotation": 45, "y": 40},
        "torso": {"rotation": -20},
        "thigh-left": {"rotation": -60},
        "shin-left": {"rotation": 90},
        "thigh-right": {"rotation": -60},
        "shin-right": {"rotation": 90},
        "upperArm-left": {"rotation": -30},
        "upperArm-right": {"rotation": -30},
    },
}
