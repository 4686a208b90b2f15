"""External editor handoff.

Hides how the conversation reaches the user's editor: it is written to a
temporary file owned by this operation alone, the editor runs attached to
the terminal, and the file is removed once the editor exits, whatever
happened.
"""

import logging
import os
import shlex
import subprocess
import tempfile

from ..config import DEFAULT_EDITOR
from .formatting import strip_ansi

logger = logging.getLogger(__name__)


def editor_command(editor: str | None = None) -> list[str]:
    """Split the editor setting ($EDITOR, then vim) into an argv list."""
    value = editor or os.getenv("EDITOR") or DEFAULT_EDITOR
    return shlex.split(value)


def open_in_editor(transcript: str, editor: str | None = None) -> int:
    """Open the plain transcript in the external editor and wait for it.

    The editor inherits the process's standard streams, so callers running
    a full-screen UI must release the terminal first.

    Args:
        transcript: Conversation text, possibly ANSI-highlighted
        editor: Editor command (default: $EDITOR or vim)

    Returns:
        The editor's exit code

    Raises:
        OSError: If the temp file cannot be written or the editor cannot start
    """
    fd, path = tempfile.mkstemp(prefix="gail-", suffix=".md")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(strip_ansi(transcript))

        command = [*editor_command(editor), path]
        logger.info("Launching editor: %s", command[0])
        completed = subprocess.run(command, check=False)
        if completed.returncode != 0:
            logger.warning("Editor exited with code %d", completed.returncode)
        return completed.returncode
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
