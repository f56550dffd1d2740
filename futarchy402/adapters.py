"""
Render the canonical tool definitions for each agent runtime, and run their tool calls.

The set of formats is fixed, so it's an enum with one renderer per member
rather than a class per framework. Tool calls go through
tools.execute_tool(); errors come back as {"error": ...} so the model
sees them instead of the agent loop crashing.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from futarchy402.client import Futarchy402Client
from futarchy402.errors import Futarchy402Error
from futarchy402.tools import ALL_TOOLS, ToolDefinition, ToolParameter, execute_tool

logger = logging.getLogger(__name__)


class ToolFormat(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    MCP = "mcp"


def _parameter_schema(param: ToolParameter, with_default: bool) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": param.type, "description": param.description}
    if param.enum:
        schema["enum"] = list(param.enum)
    if with_default and param.default is not None:
        schema["default"] = param.default
    return schema


def _input_schema(tool: ToolDefinition, with_default: bool = False) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: _parameter_schema(p, with_default) for name, p in tool.parameters.items()},
        "required": list(tool.required),
    }


def _render_openai(tool: ToolDefinition) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": _input_schema(tool, with_default=True),
        },
    }


def _render_anthropic(tool: ToolDefinition) -> Dict[str, Any]:
    return {"name": tool.name, "description": tool.description, "input_schema": _input_schema(tool)}


def _render_mcp(tool: ToolDefinition) -> Dict[str, Any]:
    return {"name": tool.name, "description": tool.description, "inputSchema": _input_schema(tool)}


RENDERERS: Dict[ToolFormat, Callable[[ToolDefinition], Dict[str, Any]]] = {
    ToolFormat.OPENAI: _render_openai,
    ToolFormat.ANTHROPIC: _render_anthropic,
    ToolFormat.MCP: _render_mcp,
}


def render_tool(tool: ToolDefinition, fmt: Union[ToolFormat, str]) -> Dict[str, Any]:
    return RENDERERS[ToolFormat(fmt)](tool)


def get_tools(fmt: Union[ToolFormat, str]) -> List[Dict[str, Any]]:
    """All Futarchy402 tools in the given format."""
    return [render_tool(t, fmt) for t in ALL_TOOLS]


def _parse_arguments(arguments: Union[str, Dict[str, Any], None]) -> Dict[str, Any]:
    if isinstance(arguments, str):
        arguments = json.loads(arguments) if arguments.strip() else {}
    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise ValueError("arguments must be a JSON object")
    return arguments


def _run(name: str, args: Dict[str, Any], client: Optional[Futarchy402Client]) -> Any:
    try:
        return execute_tool(name, args, client)
    except (Futarchy402Error, ValueError) as e:
        logger.warning("Tool %s failed: %s", name, e)
        return {"error": str(e) or "Unknown error"}


def run_tool_call(
    fmt: Union[ToolFormat, str],
    name: str,
    arguments: Union[str, Dict[str, Any], None],
    client: Optional[Futarchy402Client] = None,
) -> Any:
    """
    Execute a tool call in the shape each runtime expects back.

    OPENAI: arguments is the JSON string from the model; returns a JSON string.
    ANTHROPIC: arguments is the tool_use input dict; returns the result dict.
    MCP: returns a CallToolResult dict ({content: [text], isError}).
    """
    fmt = ToolFormat(fmt)
    try:
        args = _parse_arguments(arguments)
    except ValueError as e:
        result: Any = {"error": f"Invalid tool arguments: {e}"}
    else:
        result = _run(name, args, client)

    if fmt is ToolFormat.OPENAI:
        return json.dumps(result, indent=2, default=str)
    if fmt is ToolFormat.MCP:
        is_error = isinstance(result, dict) and "error" in result and len(result) == 1
        return {
            "content": [{"type": "text", "text": json.dumps(result, indent=2, default=str)}],
            "isError": is_error,
        }
    return result
