import json
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from choreo.animator.ticker import Animator
from choreo.choreography.action_library import get_action_library
from choreo.choreography.figure import Figure
from choreo.choreography.schemas import BeatData
from choreo.choreography.sequence import Sequence
from choreo.common.error_envelope import conflict_error, error_response, not_found_error
from choreo.logging.event_log import log_event
from choreo.mcp_gateway.inventory import Tool, ToolContext
from choreo.mcp_gateway.state import ChoreographyState, get_state
from choreo.persistence import serializer
from choreo.persistence.schemas import PROJECT_VERSION


class ValidateBeatInput(BaseModel):
    time: float = Field(..., description="Start time in seconds")
    actor: str = Field(..., description="Figure name performing the action")
    action: str = Field(..., description="Action name to perform")
    target: Optional[str] = Field(None, description="Optional target figure")


class ComposeSequenceInput(BaseModel):
    name: str = Field(..., min_length=1, description="Unique name for the sequence")
    figures: List[str] = Field(..., description="Figure names to include")
    beats: List[BeatData] = Field(default_factory=list, description="Choreographed beats")


class SequenceNameInput(BaseModel):
    name: str = Field(..., description="The sequence name")


class ListSequencesInput(BaseModel):
    pass


class SampleSequenceInput(BaseModel):
    name: str = Field("sample_fight", description="Name for the stored sequence")
    figure_a: str = Field("A", description="Attacker; created if missing")
    figure_b: str = Field("B", description="Defender; created if missing")


class SnapshotInput(BaseModel):
    name: str = Field(..., description="The sequence name")
    time: float = Field(..., ge=0.0, description="Seconds from the start; clamped to the duration")


class ExportSequenceInput(BaseModel):
    name: str = Field(..., description="The sequence name to export")
    filename: Optional[str] = Field(None, description="Write the JSON to this file under CHOREO_EXPORT_DIR")


class ClearStateInput(BaseModel):
    pass


def _beat_errors(state: ChoreographyState, beat: ValidateBeatInput, cast: Optional[List[str]] = None) -> List[str]:
    """Problems with a beat; cast restricts actor/target to a sequence's figures."""
    errors: List[str] = []
    known = (lambda name: name in cast) if cast is not None else state.has_figure
    if beat.time < 0:
        errors.append("Time must be non-negative")
    if not known(beat.actor):
        errors.append(f"Actor figure {beat.actor!r} does not exist")
    if not get_action_library().has(beat.action):
        errors.append(f"Action {beat.action!r} does not exist")
    if beat.target and not known(beat.target):
        errors.append(f"Target figure {beat.target!r} does not exist")
    return errors


def _sequence_or_404(state: ChoreographyState, name: str) -> Sequence:
    sequence = state.build_sequence(name)
    if sequence is None:
        not_found_error("sequence", name, [s.name for s in state.list_sequences()])
    return sequence


def _bones(figure: Figure):
    return {name: bone.model_dump() for name, bone in figure.snapshot().items()}


async def validate_beat_handler(ctx: ToolContext, args: ValidateBeatInput):
    errors = _beat_errors(get_state(), args)
    return {"valid": not errors, "errors": errors}


async def compose_sequence_handler(ctx: ToolContext, args: ComposeSequenceInput):
    state = get_state()
    if state.has_sequence(args.name):
        conflict_error("sequence", f"Sequence {args.name!r} already exists")
    for figure_name in args.figures:
        if not state.has_figure(figure_name):
            not_found_error("figure", figure_name, [f.name for f in state.list_figures()])

    errors = []
    for index, beat in enumerate(args.beats):
        for error in _beat_errors(state, ValidateBeatInput(**beat.model_dump()), cast=args.figures):
            errors.append(f"Beat {index}: {error}")
    if errors:
        error_response(
            code="sequence.invalid_beats",
            message="Invalid beats",
            status_code=400,
            resource_kind="beat",
            details={"errors": errors, "available_actions": get_action_library().names},
        )

    data = state.create_sequence(args.name, args.figures, args.beats)
    sequence = state.build_sequence(args.name)
    log_event("sequence.composed", "sequence", args.name, request_id=ctx.request_id, beats=len(data.beats))
    return {"sequence": data.model_dump(exclude_none=True), "duration": sequence.get_duration()}


async def get_sequence_handler(ctx: ToolContext, args: SequenceNameInput):
    state = get_state()
    sequence = _sequence_or_404(state, args.name)
    return {
        "sequence": state.get_sequence(args.name).model_dump(exclude_none=True),
        "duration": sequence.get_duration(),
    }


async def list_sequences_handler(ctx: ToolContext, args: ListSequencesInput):
    sequences = get_state().list_sequences()
    return {
        "sequences": [
            {"name": s.name, "figure_count": len(s.figures), "beat_count": len(s.beats)}
            for s in sequences
        ],
        "count": len(sequences),
    }


async def sample_sequence_handler(ctx: ToolContext, args: SampleSequenceInput):
    state = get_state()
    if state.has_sequence(args.name):
        conflict_error("sequence", f"Sequence {args.name!r} already exists")
    if not state.has_figure(args.figure_a):
        state.create_figure(args.figure_a, x=-60.0, facing="right")
    if not state.has_figure(args.figure_b):
        state.create_figure(args.figure_b, x=60.0, facing="left")

    animator = Animator()
    sample = Sequence.create_sample_fight(
        Figure(args.figure_a, animator=animator), Figure(args.figure_b, animator=animator), animator=animator
    )
    data = sample.to_data()
    state.create_sequence(args.name, data.figures, data.beats)
    log_event("sequence.composed", "sequence", args.name, request_id=ctx.request_id, beats=len(data.beats))
    return {"sequence": state.get_sequence(args.name).model_dump(exclude_none=True), "duration": sample.get_duration()}


async def snapshot_handler(ctx: ToolContext, args: SnapshotInput):
    sequence = _sequence_or_404(get_state(), args.name)
    sequence.seek(args.time)
    return {
        "name": args.name,
        "time": sequence.get_time(),
        "duration": sequence.get_duration(),
        "figures": {figure.name: _bones(figure) for figure in sequence.figures},
    }


async def export_sequence_handler(ctx: ToolContext, args: ExportSequenceInput):
    state = get_state()
    sequence = _sequence_or_404(state, args.name)
    payload = {
        "version": PROJECT_VERSION,
        "exported_at": datetime.now(timezone.utc).isoformat(),
        "sequence": sequence.to_data().model_dump(exclude_none=True),
        "figures": [figure.to_data().model_dump(by_alias=True, exclude_none=True) for figure in sequence.figures],
    }
    if not args.filename:
        return {"export": payload}

    try:
        path = serializer.write_export(json.dumps(payload, indent=2), args.filename)
    except ValueError as exc:
        error_response(code="export.invalid", message=str(exc), status_code=400, resource_kind="export")
    log_event("sequence.exported", "sequence", args.name, request_id=ctx.request_id, path=str(path))
    return {"export": payload, "path": str(path)}


async def delete_sequence_handler(ctx: ToolContext, args: SequenceNameInput):
    state = get_state()
    if not state.delete_sequence(args.name):
        not_found_error("sequence", args.name, [s.name for s in state.list_sequences()])
    return {"deleted": args.name}


async def clear_state_handler(ctx: ToolContext, args: ClearStateInput):
    state = get_state()
    cleared = state.stats()
    state.clear()
    log_event("state.cleared", "state", "choreography", request_id=ctx.request_id, **cleared)
    return {"cleared": cleared}


def register(inventory):
    tool = Tool(
        id="sequences",
        name="Sequences",
        summary="Compose, inspect and export multi-figure fight sequences.",
    )

    for entry in (
        ("sequences.validate_beat", "Check a beat against known figures and actions",
         ValidateBeatInput, validate_beat_handler),
        ("sequences.compose", "Create a sequence from existing figures and a list of beats",
         ComposeSequenceInput, compose_sequence_handler),
        ("sequences.get", "Get a sequence definition and its duration",
         SequenceNameInput, get_sequence_handler),
        ("sequences.list", "List all sequences", ListSequencesInput, list_sequences_handler),
        ("sequences.sample", "Store the built-in two-fighter sample exchange",
         SampleSequenceInput, sample_sequence_handler),
        ("sequences.snapshot", "Every figure's bone states at a point in the sequence",
         SnapshotInput, snapshot_handler),
        ("sequences.export", "Export a sequence as JSON, optionally to a file",
         ExportSequenceInput, export_sequence_handler),
        ("sequences.delete", "Delete a sequence by name", SequenceNameInput, delete_sequence_handler),
        ("state.clear", "Remove every figure and sequence", ClearStateInput, clear_state_handler),
    ):
        tool.add_scope(*entry)

    inventory.register_tool(tool)
