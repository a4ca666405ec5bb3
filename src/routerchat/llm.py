"""
LLM Client - transport to an OpenAI-compatible chat-completion endpoint.

The client POSTs one JSON request to ``<base_url>/chat/completions`` and
returns the decoded JSON body. It does not interpret the body beyond
checking that it is JSON; that is the codec's job (protocol.py).

There is no retry: a transport or HTTP failure ends the exchange and is
reported to the caller.
"""

import json
import logging
from typing import Any

import httpx

from routerchat.config import ClientConfig
from routerchat.errors import APIError, ProtocolError, TransportError

logger = logging.getLogger(__name__)

CHAT_COMPLETIONS_PATH = "/chat/completions"

# Default timeout configuration (in seconds)
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_WRITE_TIMEOUT = 10.0
DEFAULT_POOL_TIMEOUT = 10.0


class LLMClient:
    """
    Synchronous client for an OpenAI-compatible chat endpoint.

    ``transport`` is passed straight to httpx; tests use it to supply an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.BaseTransport | None = None,
        debug_comms: bool = False,
    ) -> None:
        self.config = config
        self.debug_comms = debug_comms

        # Use layered timeouts for better control
        timeout = httpx.Timeout(
            connect=DEFAULT_CONNECT_TIMEOUT,
            read=config.timeout,
            write=DEFAULT_WRITE_TIMEOUT,
            pool=DEFAULT_POOL_TIMEOUT,
        )

        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def post(self, payload: dict[str, Any]) -> dict[str, Any]:
        """
        Send one chat completion request.

        Returns:
            The decoded JSON response body.

        Raises:
            TransportError: the request failed before a response arrived
            APIError: the endpoint returned a non-200 status
            ProtocolError: the body was not a JSON object
        """
        self._debug_json("request", payload)
        logger.debug(f"Sending chat request with {len(payload.get('messages', []))} messages")

        try:
            response = self._client.post(CHAT_COMPLETIONS_PATH, json=payload)
        except httpx.RequestError as e:
            logger.error(f"Request error: {e}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            message = _api_error_message(response)
            logger.error(f"HTTP error: {response.status_code} - {message}")
            raise APIError(response.status_code, message)

        try:
            data = response.json()
        except ValueError as e:
            raise ProtocolError(f"Failed to parse response JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProtocolError(f"Failed to parse response JSON: expected an object, got {type(data).__name__}")

        self._debug_json("response", data)
        return data

    def _debug_json(self, label: str, data: dict[str, Any]) -> None:
        if self.debug_comms:
            logger.debug(f"=== {label} ===\n{json.dumps(data, indent=2)}")

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "LLMClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def _api_error_message(response: httpx.Response) -> str:
    """Prefer the API's ``error.message``; fall back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return response.text
