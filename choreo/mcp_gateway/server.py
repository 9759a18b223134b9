from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from choreo.common.error_envelope import build_error_envelope, error_response
from choreo.logging.event_log import log_event
from choreo.mcp_gateway.inventory import Inventory, ToolContext, get_inventory
from choreo.mcp_gateway.tools import actions, figures, sequences

logger = logging.getLogger(__name__)

# --- Error Handling ---

async def _http_exception_handler(request: Request, exc: HTTPException):
    detail = exc.detail
    if isinstance(detail, dict) and "error" in detail:
        return JSONResponse(content=detail, status_code=exc.status_code)

    envelope = build_error_envelope(
        code="http.exception",
        message=str(detail) if detail else "HTTP exception",
        status_code=exc.status_code,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=exc.status_code)


async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    envelope = build_error_envelope(
        code="validation.error",
        message="Validation failed",
        status_code=400,
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(content=envelope.model_dump(), status_code=400)


async def _generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    envelope = build_error_envelope(
        code="internal.error",
        message="Internal server error",
        status_code=500,
    )
    return JSONResponse(content=envelope.model_dump(), status_code=500)


def register_error_handlers(target_app: FastAPI) -> None:
    target_app.add_exception_handler(HTTPException, _http_exception_handler)
    target_app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    target_app.add_exception_handler(Exception, _generic_exception_handler)

# --- Models ---

class ToolCallRequest(BaseModel):
    tool_id: str
    scope_name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


def get_tool_context(x_request_id: Optional[str] = Header(None)) -> ToolContext:
    return ToolContext(request_id=x_request_id) if x_request_id else ToolContext()


def load_tools(inventory: Inventory) -> None:
    inventory.load((actions, figures, sequences))

# --- App Factory ---

def create_app() -> FastAPI:
    app = FastAPI(title="Choreo Gateway")

    register_error_handlers(app)
    load_tools(get_inventory())

    @app.get("/health")
    async def health_check():
        return {
            "service": "choreo_gateway",
            "version": "0.1.0",
            "time": time.time(),
            "status": "ok",
        }

    @app.post("/tools/list")
    async def list_tools():
        return {"tools": get_inventory().describe()}

    @app.post("/tools/call")
    async def call_tool(req: ToolCallRequest, ctx: ToolContext = Depends(get_tool_context)):
        scope = get_inventory().get_scope(req.tool_id, req.scope_name)
        if not scope:
            error_response(
                code="tool.not_found",
                message=f"Scope {req.tool_id}.{req.scope_name} not found",
                status_code=404,
                resource_kind="tool",
            )

        try:
            validated_args = scope.parse(req.arguments)
        except ValidationError as exc:
            error_response(
                code="validation.error",
                message="Argument validation failed",
                status_code=400,
                details={"errors": exc.errors(include_url=False, include_context=False)},
            )

        action_key = f"{req.tool_id}.{req.scope_name}"
        try:
            result = await scope.handler(ctx, validated_args)
        except HTTPException as exc:
            log_event("tool.failed", "tool", action_key, request_id=ctx.request_id, status=exc.status_code)
            raise
        except ValueError as exc:
            log_event("tool.failed", "tool", action_key, request_id=ctx.request_id, status=400)
            error_response(code="tool.invalid_request", message=str(exc), status_code=400, resource_kind="tool")
        log_event("tool.called", "tool", action_key, request_id=ctx.request_id)
        return {"result": result}

    return app


app = create_app()
