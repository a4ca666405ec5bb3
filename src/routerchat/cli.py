"""
Command line interface for routerchat.

With a prompt argument, runs one exchange and prints the answer.
Without one, starts an interactive session:

  /clear   - forget the conversation so far
  /usage   - show token usage for this session
  /quit    - exit (as does end of input)
"""

import argparse
import logging
import sys

from routerchat import __version__
from routerchat.client import ChatClient
from routerchat.config import ClientConfig, LoopConfig
from routerchat.conversation import Conversation
from routerchat.errors import ConfigError, RouterChatError
from routerchat.types import TokenUsage

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routerchat",
        description="Chat with an LLM that can run local tools (with your approval).",
    )
    parser.add_argument("prompt", nargs="?", help="Send one message and exit")
    parser.add_argument("--model", help="Model id (default: $ROUTERCHAT_MODEL)")
    parser.add_argument("--max-tokens", type=int, help="Maximum tokens per response")
    parser.add_argument("--temperature", type=float, help="Sampling temperature")
    parser.add_argument("--system", help="System prompt")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--debug-comms", action="store_true", help="Log full request/response JSON")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> ClientConfig:
    """Environment configuration with command line overrides applied."""
    config = ClientConfig.from_env()
    if args.model:
        config.model = args.model
    if args.max_tokens is not None:
        config.max_tokens = args.max_tokens
    if args.temperature is not None:
        config.temperature = args.temperature
    if args.system is not None:
        config.system_prompt = args.system
    return config.validate()


class ChatSession:
    """Interactive read-send-print loop over one Conversation."""

    def __init__(self, client: ChatClient, stdin=None, stdout=None):
        self.client = client
        self.conversation = Conversation()
        self.usage = TokenUsage()
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def ask(self, text: str) -> bool:
        """Send one user message; returns False if the exchange failed."""
        self.conversation.add_user_message(text)
        try:
            response = self.client.send_message(self.conversation)
        except RouterChatError as e:
            # A failed exchange leaves no trace in the history.
            self.conversation.pop_message()
            print(f"Error: {e}", file=self._stdout)
            return False

        self.conversation.add_assistant_message(response.text)
        if response.usage:
            self.usage = self.usage + response.usage
        print(response.text, file=self._stdout)
        return True

    def run(self) -> int:
        print(f"routerchat {__version__} ({self.client.model}). /quit to exit.", file=self._stdout)
        while True:
            self._stdout.write("> ")
            self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                print(file=self._stdout)
                return 0

            text = line.strip()
            if not text:
                continue
            if text == "/quit":
                return 0
            if text == "/clear":
                self.conversation.clear()
                print("Conversation cleared.", file=self._stdout)
                continue
            if text == "/usage":
                print(
                    f"prompt: {self.usage.prompt_tokens}  "
                    f"completion: {self.usage.completion_tokens}  "
                    f"total: {self.usage.total_tokens}",
                    file=self._stdout,
                )
                continue

            self.ask(text)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.debug_comms) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args)
        loop_config = LoopConfig.from_env()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logger.debug(f"Using model {config.model} at {config.base_url}")

    with ChatClient(config, loop_config=loop_config, debug_comms=args.debug_comms) as client:
        session = ChatSession(client)
        try:
            if args.prompt:
                return 0 if session.ask(args.prompt) else 1
            return session.run()
        except KeyboardInterrupt:
            print(file=sys.stderr)
            return 130


if __name__ == "__main__":
    sys.exit(main())
