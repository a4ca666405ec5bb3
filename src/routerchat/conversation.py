"""
Conversation - the caller-owned chat history.

A conversation is an optional system prompt plus an ordered list of
domain messages. The agent loop only reads it: tool-call turns made during
an exchange live in the loop's own transcript and are never written back
here, so only user input and final answers accumulate.
"""

from dataclasses import dataclass, field

from routerchat.types import Message, Role


@dataclass
class Conversation:
    """An append-only chat history."""

    system_prompt: str | None = None
    messages: list[Message] = field(default_factory=list)

    def add_message(self, message: Message) -> Message:
        """Append a message to the conversation."""
        if Role(message.role) == Role.TOOL:
            raise ValueError("tool messages belong to the agent transcript, not the conversation")
        self.messages.append(message)
        return message

    def add_user_message(self, content: str) -> Message:
        """Append a user message to the conversation."""
        return self.add_message(Message(role=Role.USER, content=content))

    def add_assistant_message(self, content: str) -> Message:
        """Append an assistant message to the conversation."""
        return self.add_message(Message(role=Role.ASSISTANT, content=content))

    def pop_message(self) -> Message:
        """Remove and return the most recent message."""
        return self.messages.pop()

    def get_messages(self) -> list[Message]:
        """Get a copy of all messages in the conversation."""
        return list(self.messages)

    def clear(self) -> None:
        """Drop all messages, keeping the system prompt."""
        self.messages.clear()

    @property
    def message_count(self) -> int:
        """Number of messages in the conversation."""
        return len(self.messages)

    def __len__(self) -> int:
        return len(self.messages)

    @property
    def is_empty(self) -> bool:
        return not self.messages
