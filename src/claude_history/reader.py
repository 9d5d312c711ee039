"""Size-bounded reading of append-only log files.

Conversation logs grow without limit. Files above the byte budget are
reduced to their first and last halves, each cut back to whole lines, so
the start of a conversation and its most recent turns both survive.
"""

import asyncio
import logging
from pathlib import Path

from .config import MAX_CONVERSATION_BYTES, READ_OVERLAP_BYTES

logger = logging.getLogger(__name__)


def read_bounded(
    path: Path,
    max_bytes: int = MAX_CONVERSATION_BYTES,
    overlap: int = READ_OVERLAP_BYTES,
) -> str:
    """Return the text of ``path``, or a line-aligned head + tail excerpt.

    Returns an empty string if the file cannot be read.
    """
    path = Path(path)
    try:
        size = path.stat().st_size
        half = max_bytes // 2
        head_end = half + overlap
        tail_start = size - half - overlap

        # Small files, and files whose head and tail regions would overlap,
        # are read whole.
        if size <= max_bytes or tail_start <= head_end:
            return path.read_bytes().decode("utf-8", errors="replace")

        with path.open("rb") as f:
            head = f.read(head_end)
            f.seek(tail_start)
            tail = f.read()
    except FileNotFoundError:
        logger.debug("File not found: %s", path)
        return ""
    except OSError as e:
        logger.warning("Failed to read %s: %s", path, e)
        return ""

    # A newline byte never occurs inside a multi-byte UTF-8 sequence, so
    # cutting on it always leaves complete characters.
    last_newline = head.rfind(b"\n")
    head = head[:last_newline] if last_newline != -1 else b""
    first_newline = tail.find(b"\n")
    tail = tail[first_newline + 1:] if first_newline != -1 else b""

    logger.debug(
        "Read %s as excerpt: %d of %d bytes", path, len(head) + len(tail), size,
    )
    return (
        head.decode("utf-8", errors="replace")
        + "\n"
        + tail.decode("utf-8", errors="replace")
    )


async def aread_bounded(
    path: Path,
    max_bytes: int = MAX_CONVERSATION_BYTES,
    overlap: int = READ_OVERLAP_BYTES,
) -> str:
    """Async variant of :func:`read_bounded` that reads in a worker thread."""
    return await asyncio.to_thread(read_bounded, path, max_bytes, overlap)
