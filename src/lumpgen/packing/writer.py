"""Lump file writer.

Lumps are fully encoded in memory before anything reaches disk; the writer
only creates parent directories and emits the bytes, reporting the size.
"""

from __future__ import annotations
from pathlib import Path

from ..logging import get_logger
from ..reporting import TaskStatus, get_reporter
from .errors import io_error

__all__ = ["write_lump"]


def write_lump(lump_name: str, data: bytes, output_path: Path) -> int:
    """Write ``data`` to ``output_path``. Returns total bytes written."""
    logger = get_logger()
    rep = get_reporter()
    task_id = f"write.{lump_name.lower()}"
    rep.start_task(task_id, f"Write {lump_name}", total=1)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("wb") as f:
            written = f.write(data)
    except OSError as e:
        rep.end_task(task_id, TaskStatus.FAILED)
        raise io_error(
            f"Cannot write {lump_name} lump to {output_path}", output_path, e
        ) from e
    rep.advance(task_id, current_item=output_path.name)
    rep.end_task(task_id, bytes=written)
    logger.debug("Wrote %s: %s (%d bytes)", lump_name, output_path, written)
    return written
