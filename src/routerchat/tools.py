"""
Tool System - the only way the model can affect the machine.

The model cannot touch files or run commands except by emitting a tool
call that the registry dispatches to one of four executors. Tool
failures of any kind, including an unknown tool name or undecodable
arguments, come back as text results; they never abort the exchange.
"""

import functools
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from routerchat import executors
from routerchat.confirm import Confirmer
from routerchat.types import ToolCall, ToolResult

logger = logging.getLogger(__name__)


class ToolHandler(Protocol):
    """Protocol for tool handler functions."""
    def __call__(self, **kwargs: Any) -> str: ...


@dataclass(frozen=True)
class ToolParameter:
    """One named parameter in a tool's advertised schema."""
    name: str
    type: str
    description: str
    required: bool = True


@dataclass
class Tool:
    """
    Definition of a tool the model can use.

    A tool has:
    - name: Unique identifier
    - description: What the tool does (shown to the model)
    - parameters: Ordered parameter list, rendered as JSON Schema
    - handler: Function that executes the tool
    """
    name: str
    description: str
    parameters: list[ToolParameter]
    handler: ToolHandler

    def to_openai_schema(self) -> dict[str, Any]:
        """Convert to OpenAI tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        p.name: {"type": p.type, "description": p.description}
                        for p in self.parameters
                    },
                    "required": [p.name for p in self.parameters if p.required],
                },
            },
        }

    def execute(self, arguments: dict[str, Any]) -> str:
        """Run the handler with the declared arguments; errors become text."""
        missing = [p.name for p in self.parameters if p.required and p.name not in arguments]
        if missing:
            return f"Error: invalid arguments for {self.name}: missing {', '.join(missing)}"

        known = {p.name for p in self.parameters}
        ignored = sorted(set(arguments) - known)
        if ignored:
            logger.debug(f"Ignoring undeclared arguments for {self.name}: {ignored}")
        kwargs = {k: v for k, v in arguments.items() if k in known and v is not None}

        try:
            return str(self.handler(**kwargs))
        except Exception as e:
            logger.error(f"Tool {self.name} failed: {e}")
            return f"Error: {self.name} failed: {e}"


@dataclass
class ToolRegistry:
    """
    Registry of available tools, in advertisement order.

    The registry is the controlled interface through which the model
    can affect the world. Only tools registered here can be called.
    """

    _tools: dict[str, Tool] = field(default_factory=dict)

    def register(self, tool: Tool) -> None:
        """Register a tool."""
        if tool.name in self._tools:
            logger.warning(f"Overwriting existing tool: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def dispatch(self, name: str, arguments: dict[str, Any]) -> str:
        """Route decoded arguments to the named tool."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Model requested unknown tool: {name}")
            return f"Error: unknown tool: {name}"

        logger.info(f"Executing tool: {name}")
        return tool.execute(arguments)

    def execute(self, tool_call: ToolCall) -> ToolResult:
        """
        Execute a tool call.

        The arguments string is decoded here, as its own JSON document.
        """
        if tool_call.name not in self._tools:
            return ToolResult(tool_call_id=tool_call.id, content=self.dispatch(tool_call.name, {}))

        try:
            arguments = tool_call.parse_arguments()
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning(f"Undecodable arguments for {tool_call.name}: {e}")
            return ToolResult(
                tool_call_id=tool_call.id,
                content=f"Error: invalid arguments for {tool_call.name}: {e}",
            )

        return ToolResult(tool_call_id=tool_call.id, content=self.dispatch(tool_call.name, arguments))

    def get_schemas(self) -> list[dict[str, Any]]:
        """Get OpenAI-format schemas for all registered tools."""
        return [tool.to_openai_schema() for tool in self._tools.values()]

    @property
    def tool_names(self) -> list[str]:
        """List of registered tool names."""
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


def create_default_tools(confirmer: Confirmer) -> ToolRegistry:
    """
    Create the registry of the four local tools.

    Registration order is the order tools are advertised to the model:
    bash, read_file, write_file, edit_file.
    """
    registry = ToolRegistry()

    registry.register(Tool(
        name="bash",
        description=(
            "Execute a bash command. Use this to run shell commands, "
            "compile code, run tests, and other terminal operations."
        ),
        parameters=[
            ToolParameter("command", "string", "The bash command to execute"),
        ],
        handler=functools.partial(executors.run_bash, confirmer=confirmer),
    ))

    registry.register(Tool(
        name="read_file",
        description=(
            "Read the contents of a file. Returns lines with line numbers. "
            "Use this instead of bash cat/head/tail."
        ),
        parameters=[
            ToolParameter("file_path", "string", "Path to the file to read"),
            ToolParameter("offset", "integer", "1-indexed line number to start from (optional)", required=False),
            ToolParameter("limit", "integer", "Maximum number of lines to read (optional)", required=False),
        ],
        handler=executors.read_file,
    ))

    registry.register(Tool(
        name="write_file",
        description=(
            "Write content to a file. Creates parent directories if needed. "
            "Use this instead of bash echo/cat with redirects."
        ),
        parameters=[
            ToolParameter("file_path", "string", "Path to the file to write"),
            ToolParameter("content", "string", "The content to write to the file"),
        ],
        handler=functools.partial(executors.write_file, confirmer=confirmer),
    ))

    registry.register(Tool(
        name="edit_file",
        description=(
            "Make a targeted edit to a file by replacing an exact string. "
            "The old_string must appear exactly once in the file. "
            "Use this instead of bash sed."
        ),
        parameters=[
            ToolParameter("file_path", "string", "Path to the file to edit"),
            ToolParameter("old_string", "string", "The exact string to find and replace (must be unique)"),
            ToolParameter("new_string", "string", "The replacement string"),
        ],
        handler=functools.partial(executors.edit_file, confirmer=confirmer),
    ))

    return registry
