"""Build manifest generation for lumpgen.

The manifest is an optional JSON artifact summarising one build. It is
only produced when explicitly requested by the caller / CLI flag.

Contents:
- Per-lump file name, size, crc32 and sha256
- Patch index map (PNAMES order) with materials and transform tags
- TEXTURE1 offset table
- Flat list with materials
- Credits: license tag and provenance of every material
- Name collisions that were allowed through
"""

from __future__ import annotations

from pathlib import Path
import hashlib
import json
import zlib
from typing import Any

from .graph import TextureGraph
from .packing.packers import texture1_offsets
from .packing.errors import io_error

__all__ = ["build_manifest", "manifest_dict", "lump_digest"]


def lump_digest(name: str, path: Path, data: bytes) -> dict[str, Any]:
    return {
        "name": name,
        "file": path.name,
        "size": len(data),
        "crc32": f"{zlib.crc32(data) & 0xFFFFFFFF:08x}",
        "sha256": hashlib.sha256(data).hexdigest(),
    }


def manifest_dict(
    graph: TextureGraph,
    *,
    lumps: list[dict[str, Any]] | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    offsets = texture1_offsets(graph.textures)
    d: dict[str, Any] = {
        "version": 1,
        "counts": {
            "materials": len(graph.materials),
            "flats": len(graph.flats),
            "patches": len(graph.patches),
            "textures": len(graph.textures),
        },
        "lumps": lumps or [],
        "flats": [
            {"name": f.name, "material": f.material.name} for f in graph.flats
        ],
        "patches": [
            {
                "name": p.name,
                "index": p.index,
                "material": p.material.name,
                "transforms": list(p.transforms),
            }
            for p in graph.patches
        ],
        "textures": [
            {
                "name": t.name,
                "offset": off,
                "width": t.width,
                "height": t.height,
                "patches": len(t.placements),
            }
            for t, off in zip(graph.textures, offsets)
        ],
        "credits": [
            {
                "material": m.name,
                "file": m.file,
                "spdx": m.spdx,
                "source": m.source,
            }
            for m in graph.materials
        ],
    }
    if warnings:
        d["warnings"] = warnings
    return d


def build_manifest(
    graph: TextureGraph,
    output_path: Path,
    *,
    lumps: list[dict[str, Any]] | None = None,
    warnings: list[str] | None = None,
) -> Path:
    data = manifest_dict(graph, lumps=lumps, warnings=warnings)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
    except OSError as e:
        raise io_error(f"Cannot write manifest {output_path}", output_path, e) from e
    return output_path
