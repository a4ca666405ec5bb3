"""
AgentLoop - the request/response/tool-execution cycle.

One call to ``send_message`` is one exchange:
1. Build a fresh wire transcript from the caller's Conversation
2. Send it, with the tool schemas, to the model
3. If the model asked for tools: append its message verbatim, run each
   call through the registry, append one tool result per call, goto 2
4. If the model answered with text: return it as a ChatResponse
5. If it returned neither: nudge it with a user message, goto 2
6. After max_iterations round trips without an answer, fail

The transcript belongs to a single exchange. It is never written back
to the Conversation, so tool turns are visible to the model within the
exchange and forgotten afterwards.
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import Any, Protocol, TextIO

from routerchat import protocol
from routerchat.config import ClientConfig, LoopConfig
from routerchat.conversation import Conversation
from routerchat.errors import AgentLoopExceeded
from routerchat.tools import ToolRegistry
from routerchat.types import ChatResponse

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Sends one request body, returns one decoded response body."""
    def post(self, payload: dict[str, Any]) -> dict[str, Any]: ...


@dataclass
class AgentState:
    """Working state of one exchange."""
    messages: list[dict[str, Any]] = field(default_factory=list)
    iteration: int = 0
    tool_call_count: int = 0
    nudge_count: int = 0


class AgentLoop:
    """
    Drives one exchange against the model.

    Tool output is echoed to ``echo`` (stderr by default) so the operator
    sees what the model will see.
    """

    def __init__(
        self,
        llm_client: Transport,
        registry: ToolRegistry,
        config: ClientConfig,
        loop_config: LoopConfig | None = None,
        echo: TextIO | None = None,
    ):
        self.llm_client = llm_client
        self.registry = registry
        self.config = config
        self.loop_config = loop_config or LoopConfig()
        self._echo = echo

    def send_message(self, conversation: Conversation) -> ChatResponse:
        """
        Run one exchange to a final answer.

        Raises:
            LLMError: transport, HTTP or response-format failure
            AgentLoopExceeded: no answer within max_iterations round trips
        """
        state = AgentState(
            messages=protocol.convert_messages(conversation, self.config.system_prompt),
        )
        tools = self.registry.get_schemas()

        while state.iteration < self.loop_config.max_iterations:
            state.iteration += 1
            logger.info(f"Agent iteration {state.iteration}/{self.loop_config.max_iterations}")

            payload = protocol.build_payload(state.messages, tools, self.config)
            data = self.llm_client.post(payload)
            message = protocol.response_message(data)

            tool_calls = protocol.extract_tool_calls(message)
            if tool_calls:
                # The model must see its own request on the next turn.
                state.messages.append(message)
                for tool_call in tool_calls:
                    state.tool_call_count += 1
                    logger.debug(f"Tool call {tool_call.id}: {tool_call.name} {tool_call.arguments}")
                    result = self.registry.execute(tool_call)
                    self._echo_output(result.content)
                    state.messages.append(protocol.tool_result_message(result))
                continue

            if protocol.has_text(message):
                response = protocol.parse_response(data)
                logger.info(
                    f"Exchange finished after {state.iteration} iteration(s), "
                    f"{state.tool_call_count} tool call(s), {state.nudge_count} nudge(s)"
                )
                return response

            logger.warning("Model returned neither tool calls nor text; nudging")
            if "content" in message:
                state.messages.append(message)
            state.messages.append(protocol.nudge_message())
            state.nudge_count += 1

        logger.error(
            f"No final answer after {state.iteration} iterations "
            f"({state.tool_call_count} tool call(s), {state.nudge_count} nudge(s))"
        )
        raise AgentLoopExceeded(self.loop_config.max_iterations)

    def _echo_output(self, output: str) -> None:
        stream = self._echo or sys.stderr
        stream.write(output + "\n")
        stream.flush()
