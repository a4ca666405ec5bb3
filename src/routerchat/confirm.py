"""
Human permission gate.

Every mutating tool asks the operator before acting. The decision itself
is a pure function of the line typed (``is_affirmative``); reading the
line is a separate, injectable capability so executors can be driven
without a terminal.
"""

import logging
import sys
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)

PROMPT_SUFFIX = "\n[y/n]> "


def is_affirmative(answer: str | None) -> bool:
    """A line approves iff it is non-empty and starts with 'y' or 'Y'."""
    return bool(answer) and answer[0] in ("y", "Y")


class Confirmer(Protocol):
    """Anything that can put a yes/no question to the operator."""
    def confirm(self, description: str) -> bool: ...


class TerminalConfirmer:
    """
    Ask on the terminal: print the pending action, read one line.

    The question goes to stderr so that stdout carries only answers.
    End of input counts as a denial.
    """

    def __init__(self, input_stream: TextIO | None = None, output_stream: TextIO | None = None) -> None:
        self._input = input_stream
        self._output = output_stream

    def confirm(self, description: str) -> bool:
        output = self._output or sys.stderr
        input_stream = self._input or sys.stdin

        output.write(description + PROMPT_SUFFIX)
        output.flush()

        answer = input_stream.readline().rstrip("\r\n")
        approved = is_affirmative(answer)
        if not approved:
            logger.info("Operator declined pending action")
        return approved
