"""
Durable storage of the decay schedule.

File format (one tracked vessel per line):
    <vessel-id> = <universal time of next decay>

Blank lines and `//` comments are ignored. A missing file is the normal first-run case.
Values that do not parse as finite floats are reported per key as malformed and left out
of the record, so one bad line never hides the others.
"""
from __future__ import annotations

import logging
import math
import os
import tempfile
from dataclasses import dataclass, field
from typing import Dict, Mapping

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_NOT_FOUND = "not_found"
STATUS_CORRUPT = "corrupt"


@dataclass
class LoadResult:
    status: str
    record: Dict[str, float] = field(default_factory=dict)
    malformed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK


def _parse_timestamp(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite timestamp {raw!r}")
    return value


def parse_record(text: str) -> LoadResult:
    record: Dict[str, float] = {}
    malformed: Dict[str, str] = {}
    content_lines = 0
    keyed_lines = 0

    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("//"):
            continue
        content_lines += 1
        if "=" not in line:
            logger.warning("Ignoring line %d without '=' in decay record", lineno)
            continue
        key, raw = (part.strip() for part in line.split("=", 1))
        if not key:
            logger.warning("Ignoring line %d with empty key in decay record", lineno)
            continue
        keyed_lines += 1
        if key in record or key in malformed:
            logger.warning("Duplicate key %s on line %d; keeping the first value", key, lineno)
            continue
        try:
            record[key] = _parse_timestamp(raw)
        except ValueError:
            malformed[key] = raw
            logger.warning("Malformed timestamp %r for %s", raw, key)

    if content_lines and not keyed_lines:
        return LoadResult(STATUS_CORRUPT)
    return LoadResult(STATUS_OK, record, malformed)


def load_record(path: str) -> LoadResult:
    """
    Load a persisted schedule. Never raises: absence and unreadable files come back as
    NOT_FOUND / CORRUPT with an empty record.
    """
    if not os.path.exists(path):
        logger.info("No decay record at %s (first run for this save?)", path)
        return LoadResult(STATUS_NOT_FOUND)
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Decay record %s unreadable, starting fresh: %s", path, e)
        return LoadResult(STATUS_CORRUPT)

    result = parse_record(text)
    if result.status == STATUS_CORRUPT:
        logger.warning("Decay record %s has no usable entries, starting fresh", path)
    else:
        logger.info("Loaded %d decay timestamps from %s (%d malformed)",
                    len(result.record), path, len(result.malformed))
    return result


def format_record(record: Mapping[str, float]) -> str:
    return "".join(f"{key} = {float(value)!r}\n" for key, value in record.items())


def save_record(path: str, record: Mapping[str, float]) -> bool:
    """
    Write the full schedule. The new content goes to a temp file in the same directory
    and is renamed over the old one, so a crash leaves either file intact.
    Returns False (after logging) on any I/O failure.
    """
    tmp_path = None
    try:
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".decay-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(format_record(record))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        logger.warning("Failed to write decay record %s: %s", path, e)
        return False
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_path)
    logger.info("Saved %d decay timestamps to %s", len(record), path)
    return True
