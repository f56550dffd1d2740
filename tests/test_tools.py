import json

import pytest

from futarchy402.adapters import ToolFormat, get_tools, run_tool_call
from futarchy402.client import Futarchy402Client
from futarchy402.tools import ALL_TOOLS, ToolNames, execute_tool

API = "https://test-api.example.com"

EXPECTED_NAMES = [
    "futarchy_list_polls",
    "futarchy_get_poll",
    "futarchy_get_position",
    "futarchy_vote",
    "futarchy_get_stats",
    "futarchy_get_my_wallet",
]


@pytest.fixture
def client():
    return Futarchy402Client(api_base_url=API)


class TestDefinitions:
    def test_all_tools(self):
        assert [t.name for t in ALL_TOOLS] == EXPECTED_NAMES

    def test_vote_requires_poll_and_side(self):
        vote = next(t for t in ALL_TOOLS if t.name == ToolNames.VOTE)
        assert tuple(vote.required) == ("poll_id", "side")
        assert vote.parameters["side"].enum == ("yes", "no")


class TestRendering:
    def test_openai(self):
        tools = get_tools(ToolFormat.OPENAI)
        assert [t["function"]["name"] for t in tools] == EXPECTED_NAMES
        vote = tools[3]
        assert vote["type"] == "function"
        params = vote["function"]["parameters"]
        assert params["type"] == "object"
        assert params["required"] == ["poll_id", "side"]
        assert params["properties"]["side"]["enum"] == ["yes", "no"]
        assert params["properties"]["slippage"]["default"] == 0.05

    def test_anthropic(self):
        tools = get_tools("anthropic")
        vote = tools[3]
        assert set(vote) == {"name", "description", "input_schema"}
        assert vote["input_schema"]["required"] == ["poll_id", "side"]
        assert "default" not in vote["input_schema"]["properties"]["slippage"]

    def test_mcp(self):
        tools = get_tools(ToolFormat.MCP)
        assert [t["name"] for t in tools] == EXPECTED_NAMES
        assert tools[4]["inputSchema"] == {"type": "object", "properties": {}, "required": []}

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            get_tools("langchain")

    def test_rendered_tools_are_json(self):
        for fmt in ToolFormat:
            json.dumps(get_tools(fmt))


class TestExecuteTool:
    def test_unknown_tool(self, client):
        with pytest.raises(ValueError, match="Unknown tool: nope"):
            execute_tool("nope", {}, client)

    def test_missing_parameter(self, client):
        with pytest.raises(ValueError, match="Missing required parameter: poll_id"):
            execute_tool(ToolNames.GET_POLL, {}, client)

    @pytest.mark.parametrize("poll_id", [7, ["p1"], {"id": "p1"}])
    def test_non_string_parameter(self, http, client, poll_id):
        with pytest.raises(ValueError, match="poll_id must be a string"):
            execute_tool(ToolNames.GET_POLL, {"poll_id": poll_id}, client)
        assert http.calls == []

    def test_list_polls_defaults(self, http, client):
        http.respond(200, {"polls": [], "pagination": {}})
        execute_tool(ToolNames.LIST_POLLS, {"status": "open"}, client)
        assert http.calls[0].params == {"status": "open", "limit": 20, "offset": 0}

    def test_get_my_wallet(self, monkeypatch, voter, private_key, client):
        monkeypatch.setenv("WALLET_PRIVATE_KEY", private_key)
        assert execute_tool(ToolNames.GET_MY_WALLET, {}, client) == {
            "public_key": str(voter.pubkey()),
            "network": "solana-devnet",
        }

    def test_vote_returns_plain_dict(self, http, client, private_key):
        http.respond(403, {"error": "Already voted"})
        result = execute_tool(
            ToolNames.VOTE, {"poll_id": "p1", "side": "no", "wallet_private_key": private_key}, client
        )
        assert result["success"] is False
        assert result["error_kind"] == "duplicate_vote"
        assert result["status_code"] == 403
        assert http.calls[0].params == {"side": "no", "slippage": 0.05}


class TestRunToolCall:
    def test_openai_returns_json_string(self, http, client):
        http.respond(200, {"active_polls": 1, "total_projects": 1, "total_proposals": 1})
        out = run_tool_call("openai", ToolNames.GET_STATS, "{}", client)
        assert isinstance(out, str)
        assert json.loads(out)["active_polls"] == 1

    def test_openai_empty_arguments(self, http, client):
        http.respond(200, {"active_polls": 0})
        assert json.loads(run_tool_call(ToolFormat.OPENAI, ToolNames.GET_STATS, "", client)) == {"active_polls": 0}

    def test_anthropic_returns_dict(self, http, client):
        http.respond(200, {"id": "p1"})
        assert run_tool_call("anthropic", ToolNames.GET_POLL, {"poll_id": "p1"}, client) == {"id": "p1"}

    def test_errors_come_back_as_results(self, http, client):
        http.respond(404, {"error": "Poll not found"})
        out = run_tool_call("anthropic", ToolNames.GET_POLL, {"poll_id": "nope"}, client)
        assert out == {"error": "Poll not found: nope"}

    def test_invalid_arguments(self, client):
        out = run_tool_call("anthropic", ToolNames.GET_POLL, "{not json", client)
        assert out["error"].startswith("Invalid tool arguments")
        out = run_tool_call("anthropic", ToolNames.GET_POLL, "[1]", client)
        assert out["error"].startswith("Invalid tool arguments")

    def test_missing_wallet_is_reported(self, client):
        out = run_tool_call("anthropic", ToolNames.GET_MY_WALLET, None, client)
        assert "WALLET_PRIVATE_KEY" in out["error"]

    def test_invalid_slippage_is_reported(self, http, client, private_key):
        out = run_tool_call(
            "anthropic",
            ToolNames.VOTE,
            {"poll_id": "p1", "side": "yes", "slippage": 2, "wallet_private_key": private_key},
            client,
        )
        assert "error" in out
        assert http.calls == []

    def test_mcp_success(self, http, client):
        http.respond(200, {"active_polls": 2})
        out = run_tool_call("mcp", ToolNames.GET_STATS, {}, client)
        assert out["isError"] is False
        assert out["content"][0]["type"] == "text"
        assert json.loads(out["content"][0]["text"]) == {"active_polls": 2}

    def test_mcp_error(self, client):
        out = run_tool_call("mcp", "nope", {}, client)
        assert out["isError"] is True
        assert json.loads(out["content"][0]["text"]) == {"error": "Unknown tool: nope"}

    def test_non_string_argument_is_reported(self, http, client):
        out = json.loads(run_tool_call(ToolFormat.OPENAI, ToolNames.GET_POLL, '{"poll_id": 7}', client))
        assert out == {"error": "Parameter poll_id must be a string, got int"}
        assert http.calls == []
