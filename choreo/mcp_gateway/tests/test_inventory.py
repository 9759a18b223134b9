import pytest
from pydantic import BaseModel, ValidationError

from choreo.mcp_gateway.inventory import Inventory, Tool, ToolContext


class PingInput(BaseModel):
    count: int = 1


async def ping_handler(ctx: ToolContext, args: PingInput):
    return {"pong": args.count}


class _PingTools:
    @staticmethod
    def register(inventory):
        tool = Tool(id="ping", name="Ping", summary="Answers pings.")
        tool.add_scope("ping.send", "Send a ping", PingInput, ping_handler)
        inventory.register_tool(tool)


def test_load_replaces_registered_tools():
    inventory = Inventory()
    inventory.register_tool(Tool(id="stale", name="Stale", summary=""))
    inventory.load([_PingTools])
    assert [tool.id for tool in inventory.list_tools()] == ["ping"]
    assert inventory.get_scope("ping", "ping.send").handler is ping_handler
    assert inventory.get_scope("ping", "ping.missing") is None
    assert inventory.get_scope("stale", "anything") is None


def test_describe_lists_scopes_with_schemas():
    inventory = Inventory()
    inventory.load([_PingTools])
    (tool,) = inventory.describe()
    assert tool["id"] == "ping"
    (scope,) = tool["scopes"]
    assert scope["name"] == "ping.send"
    assert scope["inputSchema"]["properties"]["count"]["type"] == "integer"


def test_scope_parse_validates_arguments():
    inventory = Inventory()
    inventory.load([_PingTools])
    scope = inventory.get_scope("ping", "ping.send")
    assert scope.parse({"count": 3}).count == 3
    with pytest.raises(ValidationError):
        scope.parse({"count": "many"})


def test_context_request_ids_are_unique():
    assert ToolContext().request_id != ToolContext().request_id
    assert ToolContext(request_id="abc").request_id == "abc"
