"""Registry of gateway tools and the scopes they expose."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Type
from uuid import uuid4

from pydantic import BaseModel

from choreo.mcp_gateway.schema_gen import generate_json_schema

@dataclass
class ToolContext:
    """Per-call context handed to scope handlers."""
    request_id: str = field(default_factory=lambda: uuid4().hex)


Handler = Callable[[ToolContext, BaseModel], Awaitable[Any]]


@dataclass
class Scope:
    name: str  # e.g. "figures.create"
    description: str
    input_model: Type[BaseModel]
    handler: Handler

    @property
    def input_schema(self) -> Dict[str, Any]:
        return generate_json_schema(self.input_model)

    def parse(self, arguments: Dict[str, Any]) -> BaseModel:
        """Validate call arguments; raises pydantic.ValidationError."""
        return self.input_model.model_validate(arguments)

    def describe(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass
class Tool:
    id: str  # e.g. "figures"
    name: str
    summary: str
    scopes: Dict[str, Scope] = field(default_factory=dict)

    def add_scope(self, name: str, description: str, input_model: Type[BaseModel], handler: Handler) -> Scope:
        scope = Scope(name, description, input_model, handler)
        self.scopes[name] = scope
        return scope

    def describe(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "scopes": [scope.describe() for scope in self.scopes.values()],
        }


class Inventory:
    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register_tool(self, tool: Tool) -> None:
        self._tools[tool.id] = tool

    def load(self, modules: Iterable[Any]) -> None:
        """Replace every tool with those registered by each module's ``register(inventory)``."""
        self._tools.clear()
        for module in modules:
            module.register(self)

    def get_tool(self, tool_id: str) -> Optional[Tool]:
        return self._tools.get(tool_id)

    def list_tools(self) -> List[Tool]:
        return list(self._tools.values())

    def get_scope(self, tool_id: str, scope_name: str) -> Optional[Scope]:
        tool = self._tools.get(tool_id)
        return tool.scopes.get(scope_name) if tool else None

    def describe(self) -> List[Dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]


_inventory = Inventory()


def get_inventory() -> Inventory:
    return _inventory
