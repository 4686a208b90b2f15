"""Conversation persistence.

Hides where transcripts are written and how files are named. Each save
writes the whole plain-text transcript to a new timestamped file; the
directory is only ever appended to.
"""

import logging
import re
from datetime import datetime
from pathlib import Path

from .formatting import strip_ansi

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 40

_SPEAKER_PREFIX = re.compile(r"^\s*\w+:\s*")
_UNSAFE_CHARS = re.compile(r"[^a-z0-9]+")


def title_fragment(transcript: str) -> str:
    """Derive a filename-safe excerpt from the first transcript line."""
    first_line = next((line for line in transcript.splitlines() if line.strip()), "")
    first_line = _SPEAKER_PREFIX.sub("", first_line, count=1)
    slug = _UNSAFE_CHARS.sub("-", first_line.lower()).strip("-")
    return slug[:TITLE_MAX_LENGTH].rstrip("-")


def conversation_filename(transcript: str, now: datetime) -> str:
    stamp = now.strftime("%Y-%m-%d-%H-%M-%S")
    title = title_fragment(transcript)
    if title:
        return f"conversation_{stamp}_{title}.txt"
    return f"conversation_{stamp}.txt"


def save_conversation(
    transcript: str,
    history_dir: Path,
    now: datetime | None = None,
) -> Path:
    """Write a transcript, stripped of terminal escapes, into history_dir.

    Args:
        transcript: Conversation text, possibly ANSI-highlighted
        history_dir: Target directory, created if missing
        now: Timestamp for the file name (default: current time)

    Returns:
        Path of the written file

    Raises:
        OSError: If the directory or file cannot be written
    """
    plain = strip_ansi(transcript)
    history_dir.mkdir(parents=True, exist_ok=True)

    path = history_dir / conversation_filename(plain, now or datetime.now())
    path.write_text(plain, encoding="utf-8")
    logger.info("Conversation saved: %s", path)
    return path
