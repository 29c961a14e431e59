"""Directory manifest (wadinfo) generation.

The output is the input manifest copied byte for byte, followed by a
``[flats]`` and a ``[patches]`` section listing names in graph order, which
is the same order PNAMES is indexed in.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from .graph import TextureGraph
from .logging import get_logger
from .packing.errors import io_error

__all__ = ["wadinfo_sections", "write_wadinfo"]


def wadinfo_sections(graph: TextureGraph) -> str:
    lines: List[str] = ["[flats]"]
    lines.extend(f.name for f in graph.flats)
    lines.append("[patches]")
    lines.extend(p.name for p in graph.patches)
    return "\n".join(lines) + "\n"


def write_wadinfo(src: Path, dst: Path, graph: TextureGraph) -> int:
    """Copy ``src`` to ``dst`` and append the flat/patch listings.

    Returns total bytes written.
    """
    logger = get_logger()
    try:
        base = src.read_bytes()
    except OSError as e:
        raise io_error(f"Cannot read manifest {src}", src, e) from e
    # Keep the first appended header on its own line.
    sep = b"\n" if base and not base.endswith(b"\n") else b""
    data = base + sep + wadinfo_sections(graph).encode("ascii")
    try:
        dst.parent.mkdir(parents=True, exist_ok=True)
        dst.write_bytes(data)
    except OSError as e:
        raise io_error(f"Cannot write manifest {dst}", dst, e) from e
    logger.debug(
        "Copied %s to %s (+%d flats, +%d patches)",
        src.name,
        dst.name,
        len(graph.flats),
        len(graph.patches),
    )
    return len(data)
