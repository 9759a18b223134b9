"""Rig kernel tests: transforms, bone propagation, humanoid rig."""
import math

import pytest

from choreo.rig_kernel.geometry import Transform, lerp_angle, rotate_point, shortest_angle_delta
from choreo.rig_kernel.schemas import BoneData, JointData, SkeletonData, TransformData
from choreo.rig_kernel.skeleton import Bone, Skeleton, humanoid_definition


def _chain() -> Skeleton:
    data = SkeletonData(
        joints=[
            JointData(name="a", x=0, y=0),
            JointData(name="b", x=10, y=0),
            JointData(name="c", x=20, y=0),
        ],
        bones=[
            BoneData(name="upper", length=10, joint_start="a", joint_end="b"),
            BoneData(name="lower", length=10, parent_name="upper", joint_start="b", joint_end="c",
                     bind_transform=TransformData(x=10)),
        ],
    )
    return Skeleton.from_data(data)


class TestTransform:
    """Angle math and transform helpers."""

    def test_defaults(self):
        t = Transform()
        assert (t.x, t.y, t.rotation, t.scale_x, t.scale_y) == (0, 0, 0, 1, 1)

    def test_shortest_delta_wraps(self):
        assert shortest_angle_delta(170, -170) == pytest.approx(20)
        assert shortest_angle_delta(-170, 170) == pytest.approx(-20)
        assert shortest_angle_delta(0, 180) == pytest.approx(180)
        assert shortest_angle_delta(0, -180) == pytest.approx(180)

    def test_angle_wraparound_midpoint(self):
        """170 -> -170 at t=0.5 crosses the 20 degree gap and lands on 180."""
        assert lerp_angle(170, -170, 0.5) == pytest.approx(180)

    def test_transform_lerp_uses_shortest_path(self):
        a = Transform(rotation=350, x=0, scale_x=1)
        b = Transform(rotation=10, x=10, scale_x=3)
        mid = a.lerp(b, 0.5)
        assert mid.rotation == pytest.approx(360)
        assert mid.x == pytest.approx(5)
        assert mid.scale_x == pytest.approx(2)

    def test_clone_is_independent(self):
        a = Transform(x=1)
        b = a.clone()
        b.x = 5
        assert a.x == 1

    def test_copy_from_and_reset(self):
        a = Transform()
        a.copy_from(Transform(x=2, rotation=45, scale_y=2))
        assert a.rotation == 45
        a.reset()
        assert a == Transform()

    def test_sparse_data_round_trip(self):
        data = Transform(rotation=90).to_data()
        assert data.model_dump(exclude_none=True) == {"rotation": 90}
        assert Transform.from_data(data).rotation == 90
        assert Transform.from_data(None) == Transform()

    def test_rotate_point(self):
        x, y = rotate_point(1, 0, 90)
        assert x == pytest.approx(0, abs=1e-12)
        assert y == pytest.approx(1)


class TestBone:
    def test_root_world_equals_local(self):
        bone = Bone(name="b", length=5, joint_start_name="a", joint_end_name="c",
                    local_transform=Transform(x=3, y=4, rotation=30))
        bone.update_world_transform(None)
        assert (bone.world_x, bone.world_y, bone.world_rotation) == (3, 4, 30)

    def test_child_offset_rotated_into_parent_frame(self):
        parent = Bone(name="p", length=10, joint_start_name="a", joint_end_name="b",
                      local_transform=Transform(x=1, y=1, rotation=90))
        parent.update_world_transform(None)
        child = Bone(name="c", length=10, joint_start_name="b", joint_end_name="c",
                     local_transform=Transform(x=10, rotation=15))
        child.update_world_transform(parent)
        assert child.world_x == pytest.approx(1)
        assert child.world_y == pytest.approx(11)
        assert child.world_rotation == pytest.approx(105)

    def test_end_point(self):
        bone = Bone(name="b", length=10, joint_start_name="a", joint_end_name="c",
                    local_transform=Transform(rotation=90))
        bone.update_world_transform(None)
        x, y = bone.end_point()
        assert x == pytest.approx(0, abs=1e-9)
        assert y == pytest.approx(10)

    def test_zero_length_collapses(self):
        bone = Bone(name="b", length=0, joint_start_name="a", joint_end_name="a",
                    local_transform=Transform(x=2, y=3, rotation=47))
        bone.update_world_transform(None)
        assert bone.end_point() == pytest.approx(bone.start_point())

    def test_rotation_is_relative_to_bind(self):
        bone = Bone.from_data(BoneData(name="b", length=1, joint_start="a", joint_end="c",
                                       bind_transform=TransformData(rotation=-90)))
        bone.set_rotation(30)
        assert bone.local_transform.rotation == pytest.approx(-60)
        assert bone.get_rotation() == pytest.approx(30)
        bone.set_rotation(0)
        assert bone.local_transform.rotation == bone.bind_transform.rotation

    def test_set_offset_only_touches_given_channels(self):
        bone = Bone.from_data(BoneData(name="b", length=1, joint_start="a", joint_end="c",
                                       bind_transform=TransformData(x=5, y=7)))
        bone.set_offset(x=2)
        assert bone.local_transform.x == 7
        assert bone.local_transform.y == 7

    def test_reset_to_bind(self):
        bone = Bone.from_data(BoneData(name="b", length=1, joint_start="a", joint_end="c",
                                       bind_transform=TransformData(x=5)))
        bone.local_transform.x = 99
        bone.reset_to_bind()
        assert bone.local_transform.x == 5


class TestSkeleton:
    def test_chain_hierarchy(self):
        skeleton = _chain()
        assert skeleton.root_names == ["upper"]
        assert [b.name for b in skeleton.children_of("upper")] == ["lower"]
        assert skeleton.children_of("missing") == []

    def test_parent_rotation_carries_descendants(self):
        """Rotating a parent rotates descendants about its origin; child locals stay put."""
        skeleton = _chain()
        lower = skeleton.get_bone("lower")
        before = lower.local_transform.clone()

        skeleton.get_bone("upper").set_rotation(90)
        skeleton.update_transforms()

        assert lower.world_x == pytest.approx(0, abs=1e-9)
        assert lower.world_y == pytest.approx(10)
        end_x, end_y = lower.end_point()
        assert end_x == pytest.approx(0, abs=1e-9)
        assert end_y == pytest.approx(20)
        assert lower.local_transform == before

    def test_joint_positions_follow_bones(self):
        skeleton = _chain()
        skeleton.get_bone("upper").set_rotation(90)
        skeleton.update_transforms()
        c = skeleton.get_joint("c")
        assert (c.world_x, c.world_y) == pytest.approx((0, 20), abs=1e-9)

    def test_update_bone_only_touches_subtree(self):
        skeleton = _chain()
        skeleton.get_bone("lower").set_rotation(45)
        skeleton.update_bone("lower")
        assert skeleton.get_bone("lower").world_rotation == pytest.approx(45)
        skeleton.update_bone("nope")

    def test_dangling_parent_becomes_root(self, caplog):
        data = SkeletonData(
            joints=[JointData(name="a")],
            bones=[BoneData(name="orphan", length=5, parent_name="ghost", joint_start="a", joint_end="zz")],
        )
        skeleton = Skeleton.from_data(data)
        orphan = skeleton.get_bone("orphan")
        assert skeleton.root_names == ["orphan"]
        assert orphan.parent is None
        assert orphan.joint_start is skeleton.get_joint("a")
        assert orphan.joint_end is None
        assert "ghost" in caplog.text

    def test_missing_lookups_return_none(self):
        skeleton = _chain()
        assert skeleton.get_bone("nope") is None
        assert skeleton.get_joint("nope") is None

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError):
            SkeletonData(joints=[JointData(name="a"), JointData(name="a")])

    def test_definition_accepts_camel_case(self):
        data = SkeletonData.model_validate({
            "joints": [{"name": "a", "x": 0, "y": 0}, {"name": "b", "x": 0, "y": 5}],
            "bones": [{"name": "x", "length": 5, "jointStart": "a", "jointEnd": "b",
                       "bindTransform": {"rotation": 90, "scaleX": 2}}],
        })
        bone = Skeleton.from_data(data).get_bone("x")
        assert bone.bind_transform.rotation == 90
        assert bone.bind_transform.scale_x == 2

    def test_to_data_round_trip(self):
        skeleton = Skeleton.create_humanoid()
        rebuilt = Skeleton.from_data(skeleton.to_data())
        assert rebuilt.bone_names == skeleton.bone_names
        assert rebuilt.joint_names == skeleton.joint_names
        assert rebuilt.get_bone("torso").parent == "spine"


class TestHumanoid:
    def test_topology(self):
        skeleton = Skeleton.create_humanoid()
        assert len(skeleton.joints) == 16
        assert len(skeleton.bones) == 14
        assert skeleton.root_names == ["spine"]
        for bone in skeleton.bones.values():
            assert bone.joint_start is not None
            assert bone.joint_end is not None

    def test_bind_pose_identity(self):
        """Every bone starts and ends on its bind joints after a reset."""
        skeleton = Skeleton.create_humanoid()
        skeleton.get_bone("spine").set_rotation(33)
        skeleton.get_bone("forearm-left").set_offset(x=4)
        skeleton.reset_to_bind()

        for bone in skeleton.bones.values():
            sx, sy = bone.start_point()
            ex, ey = bone.end_point()
            assert sx == pytest.approx(bone.joint_start.bind_x, abs=1e-9), bone.name
            assert sy == pytest.approx(bone.joint_start.bind_y, abs=1e-9), bone.name
            assert ex == pytest.approx(bone.joint_end.bind_x, abs=1e-9), bone.name
            assert ey == pytest.approx(bone.joint_end.bind_y, abs=1e-9), bone.name
            assert bone.get_rotation() == 0
        for joint in skeleton.joints.values():
            assert (joint.world_x, joint.world_y) == pytest.approx((joint.bind_x, joint.bind_y), abs=1e-9)

    def test_spine_rotation_moves_head_about_hips(self):
        skeleton = Skeleton.create_humanoid()
        skeleton.get_bone("spine").set_rotation(90)
        skeleton.update_transforms()
        head = skeleton.get_joint("head")
        # Head was at (0, -140); a 90 degree turn about the hips puts it at (140, 0).
        assert head.world_x == pytest.approx(140)
        assert head.world_y == pytest.approx(0, abs=1e-9)
        assert skeleton.get_bone("torso").get_rotation() == 0

    def test_snapshot_exposes_world_state(self):
        skeleton = Skeleton.create_humanoid()
        snap = skeleton.snapshot()
        assert set(snap) == set(skeleton.bone_names)
        shin = snap["shin-left"]
        assert shin.end_x == pytest.approx(-15)
        assert shin.end_y == pytest.approx(100)
        assert shin.world_rotation == pytest.approx(90)

    def test_definition_is_fresh_each_call(self):
        assert humanoid_definition() is not humanoid_definition()
        assert math.isclose(humanoid_definition().bones[0].bind_transform.rotation, -90)
