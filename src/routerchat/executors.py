"""
Executors for the four local tools.

Each executor performs its effect and returns text for the model. Errors
are returned as ``"Error: ..."`` strings, never raised, so the model can
read what went wrong and try something else. Mutating executors ask the
confirmer first; read_file never asks.
"""

import io
import logging
import shutil
import subprocess
from pathlib import Path

from routerchat.confirm import Confirmer

logger = logging.getLogger(__name__)

MAX_OUTPUT_CHARS = 100_000
TRUNCATION_MARKER = "\n... [truncated at 100KB]"
READ_CHUNK_CHARS = 4096


def run_bash(command: str, *, confirmer: Confirmer) -> str:
    """Run a shell command after approval, stderr merged into stdout."""
    if not confirmer.confirm(f"\n[tool] bash: {command}"):
        logger.warning("bash command skipped by user")
        return "Command skipped by user"

    try:
        process = subprocess.Popen(
            command,
            shell=True,
            executable=shutil.which("bash"),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
        )
    except OSError as e:
        logger.error(f"Failed to start shell: {e}")
        return "Error: failed to execute command"

    logger.info(f"Running: {command}")
    output = ""
    truncated = False
    # newline="" keeps \r\n and bare \r exactly as the command wrote them.
    with io.TextIOWrapper(process.stdout, encoding="utf-8", errors="replace", newline="") as stream:
        for chunk in iter(lambda: stream.read(READ_CHUNK_CHARS), ""):
            output += chunk
            if len(output) > MAX_OUTPUT_CHARS:
                output = output[:MAX_OUTPUT_CHARS] + TRUNCATION_MARKER
                truncated = True
                break
    return_code = process.wait()

    if truncated:
        logger.warning(f"bash output truncated at {MAX_OUTPUT_CHARS} characters")
    # A signal-terminated process reports -N; show it the way a shell would.
    if return_code < 0:
        return_code = 128 - return_code
    return f"{output}\n[exit code: {return_code}]"


def read_file(file_path: str, offset: int = 1, limit: int | None = None) -> str:
    """Return numbered lines from a file, starting at 1-indexed ``offset``."""
    offset = int(offset) if offset is not None else 1
    limit = int(limit) if limit is not None else None

    try:
        handle = open(file_path, encoding="utf-8", errors="replace", newline="\n")
    except OSError:
        return f"Error: Cannot open file: {file_path}"

    result = ""
    lines_read = 0
    try:
        with handle:
            for line_num, line in enumerate(handle, start=1):
                if line_num < offset:
                    continue
                if limit is not None and lines_read >= limit:
                    break
                text = line.removesuffix("\n")
                result += f"{line_num:>6}\t{text}\n"
                lines_read += 1
                if len(result) > MAX_OUTPUT_CHARS:
                    result += TRUNCATION_MARKER
                    break
    except OSError:
        return f"Error: Cannot open file: {file_path}"

    if not result:
        return "File is empty or offset is past end"
    return result


def write_file(file_path: str, content: str, *, confirmer: Confirmer) -> str:
    """Write ``content`` to a file after approval, creating parent directories."""
    size = len(content.encode("utf-8"))
    if not confirmer.confirm(f"\n[tool] write_file: {file_path} ({size} bytes)"):
        logger.warning(f"write to {file_path} skipped by user")
        return "Write skipped by user"

    parent = Path(file_path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        return f"Error: Cannot create directory: {parent}"

    try:
        handle = open(file_path, "w", encoding="utf-8", newline="")
    except OSError:
        return f"Error: Cannot open file for writing: {file_path}"

    try:
        with handle:
            handle.write(content)
    except OSError:
        return "Error: Write failed"

    logger.info(f"Wrote {size} bytes to {file_path}")
    return f"Wrote {size} bytes to {file_path}"


def edit_file(file_path: str, old_string: str, new_string: str, *, confirmer: Confirmer) -> str:
    """
    Replace the single occurrence of ``old_string`` after approval.

    The occurrence count is checked before the operator is asked, so only
    edits that can be applied unambiguously are ever offered for approval.
    """
    try:
        with open(file_path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            contents = handle.read()
    except OSError:
        return f"Error: Cannot open file: {file_path}"

    if not old_string:
        return "Error: old_string must not be empty"

    count = contents.count(old_string)
    if count == 0:
        return f"Error: old_string not found in {file_path}"
    if count > 1:
        return f"Error: old_string is not unique in {file_path} (found {count} occurrences)"

    preview = (
        f"\n[tool] edit_file: {file_path}"
        f"\n--- old ---\n{old_string}"
        f"\n--- new ---\n{new_string}"
    )
    if not confirmer.confirm(preview):
        logger.warning(f"edit of {file_path} skipped by user")
        return "Edit skipped by user"

    updated = contents.replace(old_string, new_string, 1)

    try:
        handle = open(file_path, "w", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError:
        return f"Error: Cannot write file: {file_path}"

    try:
        with handle:
            handle.write(updated)
    except OSError:
        return "Error: Write failed"

    logger.info(f"Applied edit to {file_path}")
    return f"Applied edit to {file_path}"
