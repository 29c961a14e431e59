"""Decoders for PNAMES and TEXTURE1 lumps.

Public functions:
- parse_pnames(data) -> list[str]
- parse_texture1(data) -> list[TextureRecord]
- inspect_lumps(pnames_path, texture1_path) -> dict
- validate_lumps(info) -> list[str]
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List
import struct

from .constants import (
    LUMP_COUNT_SIZE,
    LUMP_NAME_SIZE,
    LUMP_OFFSET_SIZE,
    TEXTURE_HEADER_SIZE,
    TEXTURE_PATCH_SIZE,
)
from .errors import E_LUMP_FORMAT, LumpFormatError
from .layout import unpack_lump_name

__all__ = [
    "PatchRecord",
    "TextureRecord",
    "parse_pnames",
    "parse_texture1",
    "inspect_lumps",
    "validate_lumps",
]


@dataclass(slots=True)
class PatchRecord:
    x: int
    y: int
    patch_index: int


@dataclass(slots=True)
class TextureRecord:
    offset: int
    name: str
    flags: int
    hscale: int
    vscale: int
    width: int
    height: int
    patches: List[PatchRecord] = field(default_factory=list)

    @property
    def size(self) -> int:
        return TEXTURE_HEADER_SIZE + TEXTURE_PATCH_SIZE * len(self.patches)


def _read_exact(data: bytes, offset: int, size: int, label: str) -> bytes:
    end = offset + size
    if end > len(data):
        raise LumpFormatError(
            E_LUMP_FORMAT,
            f"Out of range read for {label}: {offset}+{size}>{len(data)}",
        )
    return data[offset:end]


def parse_pnames(data: bytes) -> List[str]:
    (count,) = struct.unpack("<I", _read_exact(data, 0, 4, "PNAMES count"))
    names: List[str] = []
    for i in range(count):
        off = LUMP_COUNT_SIZE + i * LUMP_NAME_SIZE
        names.append(
            unpack_lump_name(
                _read_exact(data, off, LUMP_NAME_SIZE, f"PNAMES[{i}]")
            )
        )
    return names


def parse_texture1(data: bytes) -> List[TextureRecord]:
    (count,) = struct.unpack("<I", _read_exact(data, 0, 4, "TEXTURE1 count"))
    raw_offsets = _read_exact(
        data, LUMP_COUNT_SIZE, LUMP_OFFSET_SIZE * count, "TEXTURE1 offsets"
    )
    offsets = struct.unpack(f"<{count}I", raw_offsets)
    textures: List[TextureRecord] = []
    for i, offset in enumerate(offsets):
        header = _read_exact(
            data, offset, TEXTURE_HEADER_SIZE, f"TEXTURE1[{i}] header"
        )
        flags, hscale, vscale, width, height, _obsolete, npatches = (
            struct.unpack_from("<HBBHHIH", header, LUMP_NAME_SIZE)
        )
        rec = TextureRecord(
            offset=offset,
            name=unpack_lump_name(header[:LUMP_NAME_SIZE]),
            flags=flags,
            hscale=hscale,
            vscale=vscale,
            width=width,
            height=height,
        )
        pos = offset + TEXTURE_HEADER_SIZE
        for j in range(npatches):
            raw = _read_exact(
                data, pos, TEXTURE_PATCH_SIZE, f"TEXTURE1[{i}].patches[{j}]"
            )
            x, y, patch_index, _stepdir, _colormap = struct.unpack(
                "<hhHHH", raw
            )
            rec.patches.append(PatchRecord(x, y, patch_index))
            pos += TEXTURE_PATCH_SIZE
        textures.append(rec)
    return textures


def inspect_lumps(pnames_path: str | Path, texture1_path: str | Path) -> Dict[str, Any]:
    pnames_data = Path(pnames_path).read_bytes()
    texture1_data = Path(texture1_path).read_bytes()
    names = parse_pnames(pnames_data)
    textures = parse_texture1(texture1_data)
    out_textures = []
    for t in textures:
        d = asdict(t)
        for p in d["patches"]:
            idx = p["patch_index"]
            p["patch"] = names[idx] if idx < len(names) else None
        out_textures.append(d)
    return {
        "pnames": {"size": len(pnames_data), "names": names},
        "texture1": {"size": len(texture1_data), "textures": out_textures},
    }


def validate_lumps(info: Dict[str, Any]) -> List[str]:
    """Structural coherence checks over an :func:`inspect_lumps` result."""
    issues: List[str] = []
    names = info["pnames"]["names"]
    textures = info["texture1"]["textures"]
    expected = LUMP_COUNT_SIZE + LUMP_OFFSET_SIZE * len(textures)
    for t in textures:
        if t["offset"] != expected:
            issues.append(
                f"texture {t['name']} at offset {t['offset']}, expected {expected}"
            )
        expected = t["offset"] + TEXTURE_HEADER_SIZE + TEXTURE_PATCH_SIZE * len(
            t["patches"]
        )
        for p in t["patches"]:
            if p["patch_index"] >= len(names):
                issues.append(
                    f"texture {t['name']} references patch index {p['patch_index']} outside PNAMES ({len(names)})"
                )
    if expected != info["texture1"]["size"]:
        issues.append(
            f"TEXTURE1 size {info['texture1']['size']} != end of last record {expected}"
        )
    return issues
