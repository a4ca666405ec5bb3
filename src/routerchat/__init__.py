"""
routerchat - a terminal chat agent with local tools.

The model talks to an OpenAI-compatible chat-completion endpoint and may
ask to run four local tools: bash, read_file, write_file and edit_file.
Every tool that changes the machine is shown to the operator first and
runs only on an explicit yes.
"""

__version__ = "0.1.0"

from routerchat.agent_loop import AgentLoop
from routerchat.client import ChatClient
from routerchat.config import ClientConfig, LoopConfig
from routerchat.confirm import Confirmer, TerminalConfirmer, is_affirmative
from routerchat.conversation import Conversation
from routerchat.errors import (
    AgentLoopExceeded,
    APIError,
    ConfigError,
    LLMError,
    MalformedResponse,
    NoContent,
    ProtocolError,
    RouterChatError,
    TransportError,
)
from routerchat.llm import LLMClient
from routerchat.tools import Tool, ToolParameter, ToolRegistry, create_default_tools
from routerchat.types import ChatResponse, Message, Role, StopReason, TokenUsage, ToolCall, ToolResult

__all__ = [
    "AgentLoop",
    "ChatClient",
    "ClientConfig",
    "LoopConfig",
    "Confirmer",
    "TerminalConfirmer",
    "is_affirmative",
    "Conversation",
    "RouterChatError",
    "ConfigError",
    "LLMError",
    "TransportError",
    "APIError",
    "ProtocolError",
    "MalformedResponse",
    "NoContent",
    "AgentLoopExceeded",
    "LLMClient",
    "Tool",
    "ToolParameter",
    "ToolRegistry",
    "create_default_tools",
    "ChatResponse",
    "Message",
    "Role",
    "StopReason",
    "TokenUsage",
    "ToolCall",
    "ToolResult",
]
