"""
ChatClient - the top-level entry point.

Wires configuration, transport, tool registry and agent loop together.
Callers own the Conversation; ``send_message`` reads it and returns the
model's final answer without modifying it.
"""

import logging
from typing import Any, TextIO

import httpx

from routerchat import protocol
from routerchat.agent_loop import AgentLoop
from routerchat.config import ClientConfig, LoopConfig
from routerchat.confirm import Confirmer, TerminalConfirmer
from routerchat.conversation import Conversation
from routerchat.llm import LLMClient
from routerchat.tools import create_default_tools
from routerchat.types import ChatResponse

logger = logging.getLogger(__name__)


class ChatClient:
    """Chat client with local tools behind an approval gate."""

    def __init__(
        self,
        config: ClientConfig,
        confirmer: Confirmer | None = None,
        loop_config: LoopConfig | None = None,
        transport: httpx.BaseTransport | None = None,
        echo: TextIO | None = None,
        debug_comms: bool = False,
    ) -> None:
        self.config = config.validate()
        self.registry = create_default_tools(confirmer or TerminalConfirmer())
        self.llm_client = LLMClient(config, transport=transport, debug_comms=debug_comms)
        self.agent_loop = AgentLoop(
            self.llm_client,
            self.registry,
            config,
            loop_config=loop_config,
            echo=echo,
        )

    @property
    def model(self) -> str:
        return self.config.model

    def build_request(self, conversation: Conversation) -> dict[str, Any]:
        """The request body a single-shot send of this conversation would use."""
        return protocol.build_request(conversation, self.registry.get_schemas(), self.config)

    def send_message(self, conversation: Conversation) -> ChatResponse:
        """Run one exchange and return the final answer."""
        logger.debug(f"Sending conversation with {conversation.message_count} message(s) to {self.model}")
        return self.agent_loop.send_message(conversation)

    def close(self) -> None:
        self.llm_client.close()

    def __enter__(self) -> "ChatClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
