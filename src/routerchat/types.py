"""
Core types for the chat agent.

These types are the values that flow between the conversation, the wire
codec and the agent loop. Domain messages are immutable; the wire-level
transcript the loop builds is plain dicts (see protocol.py).
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Message roles in the conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class StopReason(str, Enum):
    """Why the model stopped generating."""
    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"


@dataclass(frozen=True)
class Message:
    """A single domain message: a role and its text."""
    role: Role
    content: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to OpenAI API format."""
        return {"role": Role(self.role).value, "content": self.content}


@dataclass(frozen=True)
class ToolCall:
    """
    A request from the model to execute a tool.

    ``arguments`` is kept exactly as the model sent it: a JSON document
    encoded inside a string. It is only decoded when the tool is
    dispatched, so a malformed payload can be reported back to the model.
    """
    id: str
    name: str
    arguments: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ToolCall":
        """Create from an entry of a wire ``tool_calls`` array."""
        function = data.get("function") or {}
        arguments = function.get("arguments", "")
        if arguments is None:
            arguments = ""
        return cls(
            id=str(data.get("id", "")),
            name=str(function.get("name", "")),
            arguments=arguments if isinstance(arguments, str) else json.dumps(arguments),
        )

    def parse_arguments(self) -> dict[str, Any]:
        """Decode the arguments string as a second, independent JSON document."""
        if not self.arguments.strip():
            return {}
        parsed = json.loads(self.arguments)
        if not isinstance(parsed, dict):
            raise ValueError(f"arguments must be a JSON object, got {type(parsed).__name__}")
        return parsed

    def summary(self) -> str:
        """One display line for this call."""
        return f"[Tool call] {self.name}: {self.arguments}\n"


@dataclass(frozen=True)
class ToolResult:
    """
    The textual outcome of a tool call.

    Failures are not a separate channel: they are descriptive text in
    ``content`` that the model reads like any other result.
    """
    tool_call_id: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": Role.TOOL.value,
            "tool_call_id": self.tool_call_id,
            "content": self.content,
        }


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting reported by the API."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenUsage":
        return cls(
            prompt_tokens=int(data.get("prompt_tokens") or 0),
            completion_tokens=int(data.get("completion_tokens") or 0),
            total_tokens=int(data.get("total_tokens") or 0),
        )

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


@dataclass(frozen=True)
class ChatResponse:
    """
    The final result of one exchange.

    ``text`` is either the assistant's answer or, for a response that
    only requested tools, a one-line-per-call summary of those requests.
    """
    text: str
    usage: TokenUsage | None = None
    stop_reason: StopReason | str | None = None
