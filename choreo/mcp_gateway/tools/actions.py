from typing import Optional

from pydantic import BaseModel, Field

from choreo.choreography.action_library import get_action_library
from choreo.common.error_envelope import not_found_error
from choreo.mcp_gateway.inventory import Tool, ToolContext
from choreo.pose_kernel.library import get_pose_library
from choreo.rig_kernel.skeleton import Skeleton


class ListActionsInput(BaseModel):
    category: Optional[str] = Field(None, description="Filter by category: attack, defense, reaction, transition")


class PreviewActionInput(BaseModel):
    action: str = Field(..., description="The action name to preview")
    t: Optional[float] = Field(None, ge=0.0, le=1.0, description="Normalized time for a blended pose preview")


class ListPosesInput(BaseModel):
    pass


class PreviewPoseInput(BaseModel):
    pose: str = Field(..., description="The pose name to preview")


def _pose_payload(pose):
    return pose.to_data().model_dump(by_alias=True, exclude_none=True)


async def list_actions_handler(ctx: ToolContext, args: ListActionsInput):
    library = get_action_library()
    actions = library.get_by_category(args.category) if args.category else [
        library.get(name) for name in library.names
    ]
    return {
        "actions": [
            {
                "name": action.name,
                "category": action.category,
                "duration": action.duration,
                "keyframes": len(action.keyframes),
            }
            for action in actions
        ],
        "categories": library.categories(),
        "count": len(actions),
    }


async def preview_action_handler(ctx: ToolContext, args: PreviewActionInput):
    actions = get_action_library()
    poses = get_pose_library()
    action = actions.get(args.action)
    if action is None:
        not_found_error("action", args.action, actions.names)

    result = {
        "name": action.name,
        "category": action.category,
        "duration": action.duration,
        "keyframes": [
            {
                "time": kf.time,
                "pose": kf.pose,
                "easing": kf.easing,
                "pose_data": _pose_payload(poses.get(kf.pose)) if poses.has(kf.pose) else None,
            }
            for kf in action.keyframes
        ],
    }
    if args.t is not None:
        blended = action.get_pose_at_time(args.t, poses)
        result["t"] = args.t
        result["pose_at_t"] = _pose_payload(blended) if blended else None
    return result


async def list_poses_handler(ctx: ToolContext, args: ListPosesInput):
    library = get_pose_library()
    return {"poses": library.names, "count": len(library)}


async def preview_pose_handler(ctx: ToolContext, args: PreviewPoseInput):
    library = get_pose_library()
    pose = library.get(args.pose)
    if pose is None:
        not_found_error("pose", args.pose, library.names)

    skeleton = Skeleton.create_humanoid()
    pose.apply_to(skeleton)
    return {
        "pose": _pose_payload(pose),
        "bones": {name: state.model_dump() for name, state in skeleton.snapshot().items()},
    }


def register(inventory):
    tool = Tool(
        id="actions",
        name="Actions & Poses",
        summary="Browse the built-in action and pose libraries.",
    )

    tool.add_scope(
        name="actions.list",
        description="List available actions, optionally filtered by category",
        input_model=ListActionsInput,
        handler=list_actions_handler,
    )

    tool.add_scope(
        name="actions.preview",
        description="Show an action's keyframes and, given t, the blended pose at that point",
        input_model=PreviewActionInput,
        handler=preview_action_handler,
    )

    tool.add_scope(
        name="poses.list",
        description="List available pose names",
        input_model=ListPosesInput,
        handler=list_poses_handler,
    )

    tool.add_scope(
        name="poses.preview",
        description="Show a pose's channels and the humanoid bone states it produces",
        input_model=PreviewPoseInput,
        handler=preview_pose_handler,
    )

    inventory.register_tool(tool)
