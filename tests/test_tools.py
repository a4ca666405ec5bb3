"""
Tests for ToolRegistry - the only way the model affects the machine.

These tests verify that dispatch never raises: unknown tools, bad
arguments and failing handlers all come back as text results.
"""

import json
from pathlib import Path

from routerchat.tools import Tool, ToolParameter, ToolRegistry, create_default_tools
from routerchat.types import ToolCall


class NeverAsked:
    """Confirmer for tests that must not reach an approval prompt."""

    def confirm(self, description: str) -> bool:
        raise AssertionError(f"unexpected confirmation prompt: {description}")


class AlwaysYes:
    def __init__(self) -> None:
        self.prompts: list[str] = []

    def confirm(self, description: str) -> bool:
        self.prompts.append(description)
        return True


def call(name: str, arguments: dict | str, call_id: str = "call_1") -> ToolCall:
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return ToolCall(id=call_id, name=name, arguments=arguments)


class TestToolDefinition:
    """Test tool definition and schema generation."""

    def test_tool_to_openai_schema(self) -> None:
        tool = Tool(
            name="test_tool",
            description="A test tool",
            parameters=[
                ToolParameter("arg1", "string", "First"),
                ToolParameter("arg2", "integer", "Second", required=False),
            ],
            handler=lambda arg1, arg2=0: f"Got: {arg1}",
        )

        assert tool.to_openai_schema() == {
            "type": "function",
            "function": {
                "name": "test_tool",
                "description": "A test tool",
                "parameters": {
                    "type": "object",
                    "properties": {
                        "arg1": {"type": "string", "description": "First"},
                        "arg2": {"type": "integer", "description": "Second"},
                    },
                    "required": ["arg1"],
                },
            },
        }

    def test_execution_failure_is_captured(self) -> None:
        def failing_handler(**kwargs: object) -> str:
            raise ValueError("Something went wrong")

        tool = Tool(name="failing", description="Always fails", parameters=[], handler=failing_handler)

        result = tool.execute({})

        assert result.startswith("Error:")
        assert "Something went wrong" in result

    def test_missing_required_argument(self) -> None:
        tool = Tool(
            name="echo",
            description="Echo",
            parameters=[ToolParameter("text", "string", "Text")],
            handler=lambda text: text,
        )
        assert tool.execute({}) == "Error: invalid arguments for echo: missing text"

    def test_undeclared_arguments_ignored(self) -> None:
        tool = Tool(
            name="echo",
            description="Echo",
            parameters=[ToolParameter("text", "string", "Text")],
            handler=lambda text: text,
        )
        assert tool.execute({"text": "hi", "extra": 1}) == "hi"


class TestDefaultTools:
    """Tests for the four advertised tools."""

    def test_advertised_in_fixed_order(self) -> None:
        registry = create_default_tools(NeverAsked())
        names = [schema["function"]["name"] for schema in registry.get_schemas()]
        assert names == ["bash", "read_file", "write_file", "edit_file"]

    def test_bash_schema(self) -> None:
        schema = create_default_tools(NeverAsked()).get_schemas()[0]
        assert schema == {
            "type": "function",
            "function": {
                "name": "bash",
                "description": (
                    "Execute a bash command. Use this to run shell commands, "
                    "compile code, run tests, and other terminal operations."
                ),
                "parameters": {
                    "type": "object",
                    "properties": {
                        "command": {"type": "string", "description": "The bash command to execute"},
                    },
                    "required": ["command"],
                },
            },
        }

    def test_parameter_requirements(self) -> None:
        schemas = {s["function"]["name"]: s["function"]["parameters"]
                   for s in create_default_tools(NeverAsked()).get_schemas()}

        assert schemas["read_file"]["required"] == ["file_path"]
        assert list(schemas["read_file"]["properties"]) == ["file_path", "offset", "limit"]
        assert schemas["read_file"]["properties"]["offset"]["type"] == "integer"
        assert schemas["write_file"]["required"] == ["file_path", "content"]
        assert schemas["edit_file"]["required"] == ["file_path", "old_string", "new_string"]

    def test_schemas_are_stable(self) -> None:
        registry = create_default_tools(NeverAsked())
        assert registry.get_schemas() == registry.get_schemas()


class TestToolRegistry:
    """Test dispatch through the registry."""

    def test_unknown_tool(self) -> None:
        registry = create_default_tools(NeverAsked())

        result = registry.execute(call("frobnicate", {}, call_id="call_9"))

        assert result.tool_call_id == "call_9"
        assert result.content == "Error: unknown tool: frobnicate"

    def test_undecodable_arguments(self) -> None:
        registry = create_default_tools(NeverAsked())

        result = registry.execute(call("bash", "{\"command\": "))

        assert result.content.startswith("Error: invalid arguments for bash:")

    def test_missing_required_argument(self) -> None:
        registry = create_default_tools(NeverAsked())
        result = registry.execute(call("write_file", {"file_path": "/tmp/x"}))
        assert result.content == "Error: invalid arguments for write_file: missing content"

    def test_read_file_never_prompts(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("alpha\nbeta\n")
        registry = create_default_tools(NeverAsked())

        result = registry.execute(call("read_file", {"file_path": str(path), "offset": 2}))

        assert result.content == "     2\tbeta\n"

    def test_read_file_null_optional_arguments(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("alpha\n")
        registry = create_default_tools(NeverAsked())

        result = registry.execute(call("read_file", {"file_path": str(path), "offset": None, "limit": None}))

        assert result.content == "     1\talpha\n"

    def test_bad_offset_type_is_reported(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_text("alpha\n")
        registry = create_default_tools(NeverAsked())

        result = registry.execute(call("read_file", {"file_path": str(path), "offset": "first"}))

        assert result.content.startswith("Error:")

    def test_write_file_goes_through_confirmer(self, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        confirmer = AlwaysYes()
        registry = create_default_tools(confirmer)

        result = registry.execute(call("write_file", {"file_path": str(path), "content": "hi"}))

        assert result.content == f"Wrote 2 bytes to {path}"
        assert len(confirmer.prompts) == 1

    def test_register_and_contains(self) -> None:
        registry = ToolRegistry()
        registry.register(Tool(name="noop", description="", parameters=[], handler=lambda: "ok"))

        assert "noop" in registry
        assert len(registry) == 1
        assert registry.tool_names == ["noop"]
        assert registry.dispatch("noop", {}) == "ok"
