"""
Exception hierarchy.

Anything fatal to an exchange is raised out of ``send_message``. Tool
failures never appear here: they are returned to the model as text.
"""


class RouterChatError(Exception):
    """Base class for all routerchat errors."""
    pass


class ConfigError(RouterChatError):
    """Missing or invalid configuration."""
    pass


class LLMError(RouterChatError):
    """Error from the LLM endpoint that ends the current exchange."""
    pass


class TransportError(LLMError):
    """The request never produced an HTTP response (connect, DNS, timeout)."""
    pass


class APIError(LLMError):
    """The endpoint answered with a non-200 status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"API error ({status_code}): {message}")
        self.status_code = status_code
        self.api_message = message


class ProtocolError(LLMError):
    """The response body could not be understood."""
    pass


class MalformedResponse(ProtocolError):
    """The response carries no ``choices`` entry."""
    pass


class NoContent(ProtocolError):
    """The top choice has neither tool calls nor text."""
    pass


class AgentLoopExceeded(RouterChatError):
    """The model did not produce a final answer within the iteration budget."""

    def __init__(self, iterations: int) -> None:
        super().__init__(f"Agent loop exceeded {iterations} iterations")
        self.iterations = iterations
