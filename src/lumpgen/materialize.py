"""Asset materialization: hard links from material files into category dirs.

Each flat and each patch gets ``<category_dir>/<name>.png`` linked to its
material's source file. An existing destination is removed and relinked, so
repeated runs converge on the same result. Two entities sharing a material
produce two links.
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence, Tuple

from .graph import Material
from .logging import get_logger
from .packing.constants import MATERIAL_SUFFIX
from .packing.errors import io_error
from .reporting import task, get_reporter

__all__ = ["link_path", "materialize", "materialize_all"]


def link_path(category_dir: Path, entity_name: str) -> Path:
    return category_dir / f"{entity_name}{MATERIAL_SUFFIX}"


def materialize(
    entity_name: str,
    material: Material,
    category_dir: Path,
    material_dir: Path,
) -> Path:
    """Refresh the hard link for ``entity_name``. Returns the link path."""
    source = material_dir / material.file
    dest = link_path(category_dir, entity_name)
    # Already the source itself, or a live link to it.
    if dest.exists() and source.exists() and os.path.samefile(dest, source):
        return dest
    try:
        dest.unlink(missing_ok=True)
    except OSError as e:
        raise io_error(f"Cannot remove stale link {dest}", dest, e) from e
    try:
        dest.hardlink_to(source)
    except OSError as e:
        raise io_error(
            f"Cannot link {entity_name} to material {material.name} ({source})",
            source,
            e,
        ) from e
    return dest


def materialize_all(
    task_id: str,
    label: str,
    entries: Sequence[Tuple[str, Material]],
    category_dir: Path,
    material_dir: Path,
    *,
    jobs: int = 1,
) -> List[Path]:
    """Materialize ``entries`` (name, material) in order into ``category_dir``.

    With ``jobs > 1`` links are created on a thread pool; results keep the
    input order and the first failure propagates.
    """
    logger = get_logger()
    rep = get_reporter()
    try:
        category_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise io_error(
            f"Cannot create directory {category_dir}", category_dir, e
        ) from e
    links: List[Path] = []
    with task(task_id, label, total=len(entries)):
        if jobs > 1 and len(entries) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as pool:
                futures = [
                    pool.submit(materialize, name, mat, category_dir, material_dir)
                    for name, mat in entries
                ]
                for (name, _), fut in zip(entries, futures):
                    links.append(fut.result())
                    rep.advance(task_id, current_item=name)
        else:
            for name, mat in entries:
                links.append(materialize(name, mat, category_dir, material_dir))
                rep.advance(task_id, current_item=name)
    logger.debug("Linked %d assets into %s", len(links), category_dir)
    return links
