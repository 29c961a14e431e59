"""Pure binary packing functions for the PNAMES and TEXTURE1 lumps.

All functions are side-effect free and validate sizes.
"""

from __future__ import annotations

import math
import struct
from typing import List, Optional, Sequence

from ..graph import Texture, TextureGraph
from .constants import (
    DEFAULT_SCALE_BYTE,
    LUMP_COUNT_SIZE,
    LUMP_OFFSET_SIZE,
    SCALE_UNIT,
    TEXTURE_HEADER_SIZE,
    TEXTURE_PATCH_SIZE,
)
from .errors import E_INTERNAL, E_LUMP_FORMAT, LumpFormatError
from .layout import pack_lump_name

__all__ = [
    "scale_byte",
    "pack_pnames",
    "pack_texture_header",
    "pack_texture_patch",
    "pack_texture_record",
    "texture_record_size",
    "texture1_offsets",
    "pack_texture1",
]


def scale_byte(factor: Optional[float]) -> int:
    """Fixed point scale byte for ``factor`` (``None`` means 1.0)."""
    if factor is None:
        return DEFAULT_SCALE_BYTE
    value = math.floor(factor * SCALE_UNIT + 0.5)
    if not 0 <= value <= 0xFF:
        raise LumpFormatError(
            E_LUMP_FORMAT, f"Scale factor {factor!r} does not fit in a byte"
        )
    return value


def pack_pnames(graph: TextureGraph) -> bytes:
    out = bytearray(struct.pack("<I", len(graph.patches)))
    for i, patch in enumerate(graph.patches):
        if patch.index != i:
            raise LumpFormatError(
                E_INTERNAL,
                f"Patch {patch.name} has index {patch.index} at position {i}",
            )
        out += pack_lump_name(patch.name)
    return bytes(out)


def pack_texture_header(texture: Texture) -> bytes:
    out = (
        pack_lump_name(texture.name)
        + struct.pack("<H", 0)  # flags
        + struct.pack(
            "<BB", scale_byte(texture.hscale), scale_byte(texture.vscale)
        )
        + struct.pack("<HH", texture.width, texture.height)
        + struct.pack("<I", 0)  # column directory, obsolete
        + struct.pack("<H", len(texture.placements))
    )
    if len(out) != TEXTURE_HEADER_SIZE:
        raise LumpFormatError(
            E_LUMP_FORMAT, f"Texture header size mismatch: {len(out)}"
        )
    return out


def pack_texture_patch(x: int, y: int, patch_index: int) -> bytes:
    # stepdir and colormap are unused and written as zero.
    return struct.pack("<hhHHH", x, y, patch_index, 0, 0)


def pack_texture_record(texture: Texture, graph: TextureGraph) -> bytes:
    out = bytearray(pack_texture_header(texture))
    for patch, x, y in graph.placements(texture):
        out += pack_texture_patch(x, y, patch.index)
    expected = texture_record_size(texture)
    if len(out) != expected:
        raise LumpFormatError(
            E_LUMP_FORMAT,
            f"Texture {texture.name} record size mismatch: {len(out)} != {expected}",
        )
    return bytes(out)


def texture_record_size(texture: Texture) -> int:
    return TEXTURE_HEADER_SIZE + TEXTURE_PATCH_SIZE * len(texture.placements)


def texture1_offsets(textures: Sequence[Texture]) -> List[int]:
    """Absolute offset of every texture record from the start of the lump."""
    cursor = LUMP_COUNT_SIZE + LUMP_OFFSET_SIZE * len(textures)
    offsets: List[int] = []
    for t in textures:
        offsets.append(cursor)
        cursor += texture_record_size(t)
    return offsets


def pack_texture1(graph: TextureGraph) -> bytes:
    textures = graph.textures
    records = [pack_texture_record(t, graph) for t in textures]
    offsets = texture1_offsets(textures)
    out = bytearray(struct.pack("<I", len(textures)))
    out += struct.pack(f"<{len(offsets)}I", *offsets)
    for offset, record in zip(offsets, records):
        if len(out) != offset:
            raise LumpFormatError(
                E_INTERNAL,
                f"TEXTURE1 record at {len(out)} but offset table says {offset}",
            )
        out += record
    return bytes(out)
