from typing import Optional

from pydantic import BaseModel, Field

from choreo.choreography.schemas import Facing
from choreo.common.error_envelope import conflict_error, not_found_error
from choreo.logging.event_log import log_event
from choreo.mcp_gateway.inventory import Tool, ToolContext
from choreo.mcp_gateway.state import get_state


class CreateFigureInput(BaseModel):
    name: str = Field(..., min_length=1, description='Unique name for the figure (e.g., "hero")')
    x: float = Field(0.0, description="X position in scene")
    y: float = Field(0.0, description="Y position in scene")
    facing: Facing = Field("right", description="Direction the figure faces")
    color: Optional[str] = Field(None, description="Hex color, e.g. #ff6b6b")


class ListFiguresInput(BaseModel):
    pass


class FigureNameInput(BaseModel):
    name: str = Field(..., description="The figure name")


class PerformInput(BaseModel):
    name: str = Field(..., description="The figure name")
    action: str = Field(..., description="Action to perform")
    t: float = Field(1.0, ge=0.0, le=1.0, description="Normalized progress through the action")


def _figure_names():
    return [figure.name for figure in get_state().list_figures()]


async def create_figure_handler(ctx: ToolContext, args: CreateFigureInput):
    try:
        figure = get_state().create_figure(args.name, x=args.x, y=args.y, facing=args.facing, color=args.color)
    except ValueError as exc:
        conflict_error("figure", str(exc))
    log_event("figure.created", "figure", figure.name, request_id=ctx.request_id)
    return {"figure": figure.model_dump(by_alias=True, exclude_none=True)}


async def list_figures_handler(ctx: ToolContext, args: ListFiguresInput):
    figures = get_state().list_figures()
    return {
        "figures": [figure.model_dump(by_alias=True, exclude_none=True) for figure in figures],
        "count": len(figures),
    }


async def get_figure_handler(ctx: ToolContext, args: FigureNameInput):
    figure = get_state().get_figure(args.name)
    if figure is None:
        not_found_error("figure", args.name, _figure_names())
    return {"figure": figure.model_dump(by_alias=True, exclude_none=True)}


async def delete_figure_handler(ctx: ToolContext, args: FigureNameInput):
    if not get_state().delete_figure(args.name):
        not_found_error("figure", args.name, _figure_names())
    log_event("figure.deleted", "figure", args.name, request_id=ctx.request_id)
    return {"deleted": args.name}


async def perform_handler(ctx: ToolContext, args: PerformInput):
    figure = get_state().build_figure(args.name)
    if figure is None:
        not_found_error("figure", args.name, _figure_names())
    if figure.perform(args.action) is None:
        not_found_error("action", args.action, figure.available_actions())
    figure.seek_progress(args.t)
    return {
        "figure": args.name,
        "action": args.action,
        "t": args.t,
        "bones": {name: state.model_dump() for name, state in figure.snapshot().items()},
    }


def register(inventory):
    tool = Tool(
        id="figures",
        name="Figures",
        summary="Create and inspect stick-figure fighters.",
    )

    tool.add_scope(
        name="figures.create",
        description="Create a figure with a name, position, facing and color",
        input_model=CreateFigureInput,
        handler=create_figure_handler,
    )

    tool.add_scope(
        name="figures.list",
        description="List all figures",
        input_model=ListFiguresInput,
        handler=list_figures_handler,
    )

    tool.add_scope(
        name="figures.get",
        description="Get one figure by name",
        input_model=FigureNameInput,
        handler=get_figure_handler,
    )

    tool.add_scope(
        name="figures.delete",
        description="Delete a figure by name",
        input_model=FigureNameInput,
        handler=delete_figure_handler,
    )

    tool.add_scope(
        name="figures.perform",
        description="Bone states of a figure part-way through an action",
        input_model=PerformInput,
        handler=perform_handler,
    )

    inventory.register_tool(tool)
