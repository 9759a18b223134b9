import pytest
from fastapi.testclient import TestClient

from choreo.logging.event_log import set_event_logger
from choreo.mcp_gateway.server import app
from choreo.mcp_gateway.state import get_state, set_state

client = TestClient(app)


@pytest.fixture(autouse=True)
def fresh_state():
    set_state(None)
    yield
    set_state(None)


def call(tool_id, scope_name, **arguments):
    return client.post("/tools/call", json={"tool_id": tool_id, "scope_name": scope_name, "arguments": arguments})


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "choreo_gateway"
    assert data["status"] == "ok"


def test_list_tools_exposes_scopes_with_schemas():
    response = client.post("/tools/list")
    assert response.status_code == 200
    tools = {tool["id"]: tool for tool in response.json()["tools"]}
    assert set(tools) == {"actions", "figures", "sequences"}
    scopes = {scope["name"]: scope for scope in tools["sequences"]["scopes"]}
    assert "sequences.snapshot" in scopes
    assert "time" in scopes["sequences.snapshot"]["inputSchema"]["properties"]


def test_unknown_scope_is_404():
    response = call("figures", "figures.teleport")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "tool.not_found"


def test_bad_arguments_are_400():
    response = call("figures", "figures.create", name="A", facing="up")
    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "validation.error"
    assert body["error"]["details"]["errors"]


def test_malformed_request_uses_envelope():
    response = client.post("/tools/call", json={"scope_name": "figures.list"})
    assert response.status_code == 400
    assert response.json()["error"]["http_status"] == 400


class TestActionTools:
    def test_list_actions_by_category(self):
        response = call("actions", "actions.list", category="transition")
        assert response.status_code == 200
        result = response.json()["result"]
        assert {a["name"] for a in result["actions"]} == {"ready", "relax"}
        assert result["count"] == 2

    def test_preview_action_with_blend(self):
        result = call("actions", "actions.preview", action="jab", t=0.4).json()["result"]
        assert result["duration"] == pytest.approx(0.3)
        assert [kf["pose"] for kf in result["keyframes"]] == ["guard", "punch_extend_left", "guard"]
        assert result["pose_at_t"]["boneTransforms"]["upperArm-left"]["rotation"] == pytest.approx(-90)

    def test_preview_unknown_action(self):
        response = call("actions", "actions.preview", action="moonwalk")
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "action.not_found"
        assert "jab" in error["details"]["available"]

    def test_poses(self):
        assert call("actions", "poses.list").json()["result"]["count"] == 29
        result = call("actions", "poses.preview", pose="guard").json()["result"]
        assert set(result["pose"]["boneTransforms"]) == {
            "upperArm-left", "forearm-left", "upperArm-right", "forearm-right"}
        assert len(result["bones"]) == 14
        assert call("actions", "poses.preview", pose="nope").status_code == 404


class TestFigureTools:
    def test_create_list_get_delete(self):
        created = call("figures", "figures.create", name="hero", x=-50, facing="right", color="#ff6b6b")
        assert created.status_code == 200
        assert created.json()["result"]["figure"]["color"] == "#ff6b6b"

        assert call("figures", "figures.create", name="hero").status_code == 409
        assert call("figures", "figures.list").json()["result"]["count"] == 1
        assert call("figures", "figures.get", name="hero").json()["result"]["figure"]["x"] == -50
        assert call("figures", "figures.delete", name="hero").json()["result"] == {"deleted": "hero"}
        assert call("figures", "figures.get", name="hero").status_code == 404
        assert call("figures", "figures.delete", name="hero").status_code == 404

    def test_default_color(self):
        figure = call("figures", "figures.create", name="A").json()["result"]["figure"]
        assert figure["color"] == "#00d9ff"
        assert figure["facing"] == "right"

    def test_perform_returns_placed_bones(self):
        call("figures", "figures.create", name="hero", x=100)
        result = call("figures", "figures.perform", name="hero", action="jab", t=0.4).json()["result"]
        bones = result["bones"]
        assert len(bones) == 14
        # Spine root sits on the figure's position.
        assert bones["spine"]["world_x"] == pytest.approx(100)

    def test_perform_errors(self):
        assert call("figures", "figures.perform", name="ghost", action="jab").status_code == 404
        call("figures", "figures.create", name="hero")
        response = call("figures", "figures.perform", name="hero", action="moonwalk")
        assert response.status_code == 404
        assert response.json()["error"]["resource_kind"] == "action"
        assert call("figures", "figures.perform", name="hero", action="jab", t=2).status_code == 400


class TestSequenceTools:
    def _cast(self):
        call("figures", "figures.create", name="A", x=-60)
        call("figures", "figures.create", name="B", x=60, facing="left")

    def test_validate_beat(self):
        self._cast()
        ok = call("sequences", "sequences.validate_beat", time=0.5, actor="A", action="jab", target="B")
        assert ok.json()["result"] == {"valid": True, "errors": []}
        bad = call("sequences", "sequences.validate_beat", time=-1, actor="Z", action="moonwalk", target="Q")
        result = bad.json()["result"]
        assert not result["valid"]
        assert len(result["errors"]) == 4

    def test_compose_get_list_delete(self):
        self._cast()
        response = call("sequences", "sequences.compose", name="bout", figures=["A", "B"], beats=[
            {"time": 0.4, "actor": "B", "action": "hook", "target": "A"},
            {"time": 0.0, "actor": "A", "action": "jab", "target": "B"},
        ])
        assert response.status_code == 200
        result = response.json()["result"]
        assert [b["action"] for b in result["sequence"]["beats"]] == ["jab", "hook"]
        assert result["duration"] == pytest.approx(0.85)

        assert call("sequences", "sequences.get", name="bout").json()["result"]["duration"] == pytest.approx(0.85)
        listing = call("sequences", "sequences.list").json()["result"]
        assert listing["sequences"] == [{"name": "bout", "figure_count": 2, "beat_count": 2}]
        assert call("sequences", "sequences.compose", name="bout", figures=["A"]).status_code == 409
        assert call("sequences", "sequences.delete", name="bout").status_code == 200
        assert call("sequences", "sequences.get", name="bout").status_code == 404

    def test_compose_rejects_bad_input(self):
        self._cast()
        missing = call("sequences", "sequences.compose", name="s", figures=["A", "Z"])
        assert missing.status_code == 404
        assert missing.json()["error"]["code"] == "figure.not_found"

        invalid = call("sequences", "sequences.compose", name="s", figures=["A"], beats=[
            {"time": 0, "actor": "B", "action": "jab"},
            {"time": 0.2, "actor": "A", "action": "moonwalk"},
        ])
        assert invalid.status_code == 400
        errors = invalid.json()["error"]["details"]["errors"]
        assert errors[0].startswith("Beat 0:") and errors[1].startswith("Beat 1:")
        assert not get_state().has_sequence("s")

    def test_sample_and_snapshot(self):
        sample = call("sequences", "sequences.sample").json()["result"]
        assert sample["duration"] == pytest.approx(1.4)
        assert get_state().has_figure("A") and get_state().has_figure("B")

        snapshot = call("sequences", "sequences.snapshot", name="sample_fight", time=5).json()["result"]
        assert snapshot["time"] == pytest.approx(1.4)
        assert set(snapshot["figures"]) == {"A", "B"}
        # B faces left: its bones mirror around x=60.
        assert snapshot["figures"]["B"]["spine"]["world_x"] == pytest.approx(60)
        assert call("sequences", "sequences.sample").status_code == 409

    def test_snapshot_is_repeatable(self):
        call("sequences", "sequences.sample")
        first = call("sequences", "sequences.snapshot", name="sample_fight", time=0.7).json()["result"]
        call("sequences", "sequences.snapshot", name="sample_fight", time=1.3)
        again = call("sequences", "sequences.snapshot", name="sample_fight", time=0.7).json()["result"]
        assert first["figures"] == again["figures"]

    def test_export_inline_and_to_file(self, tmp_path, monkeypatch):
        call("sequences", "sequences.sample")
        inline = call("sequences", "sequences.export", name="sample_fight").json()["result"]
        assert inline["export"]["version"] == "1.0.0"
        assert [f["name"] for f in inline["export"]["figures"]] == ["A", "B"]
        assert "path" not in inline

        monkeypatch.delenv("CHOREO_EXPORT_DIR", raising=False)
        assert call("sequences", "sequences.export", name="sample_fight", filename="x.json").status_code == 400

        monkeypatch.setenv("CHOREO_EXPORT_DIR", str(tmp_path))
        written = call("sequences", "sequences.export", name="sample_fight", filename="fight.json").json()["result"]
        assert (tmp_path / "fight.json").exists()
        assert written["path"].endswith("fight.json")

    def test_clear_state(self):
        call("sequences", "sequences.sample")
        result = call("sequences", "state.clear").json()["result"]
        assert result == {"cleared": {"figures": 2, "sequences": 1}}
        assert get_state().stats() == {"figures": 0, "sequences": 0}


def test_tool_calls_are_logged_with_request_id():
    events = []
    set_event_logger(events.append)
    try:
        client.post(
            "/tools/call",
            json={"tool_id": "figures", "scope_name": "figures.list", "arguments": {}},
            headers={"X-Request-Id": "req-123"},
        )
    finally:
        set_event_logger(None)
    assert events[-1].event_type == "tool.called"
    assert events[-1].subject_name == "figures.figures.list"
    assert events[-1].request_id == "req-123"
