"""Newline-delimited JSON decoding."""

import json
import logging
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errors a record factory may raise for a line that decodes but has the wrong shape.
_FACTORY_ERRORS = (TypeError, ValueError, KeyError, AttributeError)


def parse_jsonl(text: str, factory: Optional[Callable[[Any], T]] = None) -> list[T]:
    """Decode each non-empty line of ``text`` as an independent JSON record.

    Lines that fail to decode, or that ``factory`` rejects, are dropped.
    One bad line never aborts the rest of the file.
    """
    records = []
    skipped = 0

    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            skipped += 1
            continue

        if factory is not None:
            try:
                record = factory(record)
            except _FACTORY_ERRORS:
                skipped += 1
                continue

        records.append(record)

    if skipped:
        logger.debug("Skipped %d malformed JSONL line(s)", skipped)

    return records
