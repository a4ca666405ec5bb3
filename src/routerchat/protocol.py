"""
Protocol codec for the chat-completion wire format.

Translates between the domain Conversation and the OpenAI-style JSON the
endpoint speaks: building request payloads, pulling the top choice out of
a response, extracting tool calls, and turning a final response into a
ChatResponse. Nothing here performs I/O.

The wire transcript is a list of plain dicts. Assistant messages that
requested tools are kept exactly as the endpoint returned them so the
model sees its own request on the next turn.
"""

import logging
from typing import Any

from routerchat.config import ClientConfig
from routerchat.conversation import Conversation
from routerchat.errors import MalformedResponse, NoContent, ProtocolError
from routerchat.types import ChatResponse, Role, StopReason, TokenUsage, ToolCall, ToolResult

logger = logging.getLogger(__name__)

NUDGE_TEXT = "Please use your tools or respond with text."

_STOP_REASONS = {
    "stop": StopReason.END_TURN,
    "length": StopReason.MAX_TOKENS,
    "content_filter": StopReason.STOP_SEQUENCE,
}


def resolve_system_prompt(conversation: Conversation, override: str | None = None) -> str | None:
    """The configured prompt wins over the conversation's own."""
    if override is not None:
        return override
    return conversation.system_prompt


def convert_messages(conversation: Conversation, system_prompt: str | None = None) -> list[dict[str, Any]]:
    """Map a conversation to a fresh wire transcript."""
    messages: list[dict[str, Any]] = []
    prompt = resolve_system_prompt(conversation, system_prompt)
    if prompt is not None:
        messages.append({"role": Role.SYSTEM.value, "content": prompt})
    messages.extend(msg.to_dict() for msg in conversation.messages)
    return messages


def build_payload(
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    config: ClientConfig,
) -> dict[str, Any]:
    """Assemble a request body around an existing transcript."""
    payload: dict[str, Any] = {
        "model": config.model,
        "max_tokens": config.max_tokens,
        "messages": messages,
    }
    if config.temperature is not None:
        payload["temperature"] = config.temperature
    payload["tools"] = tools
    return payload


def build_request(
    conversation: Conversation,
    tools: list[dict[str, Any]],
    config: ClientConfig,
) -> dict[str, Any]:
    """Build a complete request body for a conversation."""
    return build_payload(convert_messages(conversation, config.system_prompt), tools, config)


def response_message(data: Any) -> dict[str, Any]:
    """Return the message of the top choice, or raise."""
    if not isinstance(data, dict):
        raise ProtocolError(f"Failed to parse API response: expected an object, got {type(data).__name__}")

    choices = data.get("choices")
    if not choices:
        raise MalformedResponse("Response missing choices array")
    if not isinstance(choices, list) or not isinstance(choices[0], dict):
        raise ProtocolError("Failed to parse API response: choices must be a list of objects")

    message = choices[0].get("message")
    if not isinstance(message, dict):
        raise ProtocolError("Failed to parse API response: choice has no message")
    return message


def extract_tool_calls(message: dict[str, Any]) -> list[ToolCall]:
    """
    Get the structured tool calls from an assistant message.

    An absent, null or empty ``tool_calls`` field yields an empty list:
    that response is handled as a text response.
    """
    raw_calls = message.get("tool_calls")
    if not raw_calls:
        return []
    if not isinstance(raw_calls, list):
        raise ProtocolError("Failed to parse API response: tool_calls must be a list")

    calls = []
    for raw in raw_calls:
        if not isinstance(raw, dict):
            raise ProtocolError("Failed to parse API response: tool call must be an object")
        if not isinstance(raw.get("function"), dict):
            raise ProtocolError("Failed to parse API response: tool call function must be an object")
        calls.append(ToolCall.from_dict(raw))
    return calls


def has_text(message: dict[str, Any]) -> bool:
    """True when the message carries non-empty text content."""
    content = message.get("content")
    return isinstance(content, str) and content != ""


def map_stop_reason(finish_reason: str | None) -> StopReason | str | None:
    """Map an API finish_reason to a StopReason; unknown reasons pass through."""
    if finish_reason is None:
        return None
    return _STOP_REASONS.get(finish_reason, finish_reason)


def parse_usage(data: dict[str, Any]) -> TokenUsage | None:
    usage = data.get("usage")
    if not isinstance(usage, dict):
        return None
    try:
        return TokenUsage.from_dict(usage)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"Failed to parse API response: bad usage field: {e}") from e


def parse_response(data: Any) -> ChatResponse:
    """
    Parse a full API response into a ChatResponse.

    Tool-call responses are summarised as one ``[Tool call] name: args``
    line per call. Otherwise the text content is returned; a null or
    missing content raises NoContent.
    """
    message = response_message(data)
    usage = parse_usage(data)
    stop_reason = map_stop_reason(data["choices"][0].get("finish_reason"))

    tool_calls = extract_tool_calls(message)
    if tool_calls:
        display = "".join(call.summary() for call in tool_calls)
        return ChatResponse(text=display, usage=usage, stop_reason=stop_reason)

    content = message.get("content")
    if content is None:
        raise NoContent("Response contains no text content")
    if not isinstance(content, str):
        raise ProtocolError(f"Failed to parse API response: content must be a string, got {type(content).__name__}")

    return ChatResponse(text=content, usage=usage, stop_reason=stop_reason)


def tool_result_message(result: ToolResult) -> dict[str, Any]:
    """The transcript entry for one executed tool call."""
    return result.to_dict()


def nudge_message() -> dict[str, Any]:
    """Synthetic user turn asking the model for tools or text."""
    return {"role": Role.USER.value, "content": NUDGE_TEXT}
