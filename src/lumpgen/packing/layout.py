"""Low-level layout helpers (name packing)."""

from __future__ import annotations

from .constants import LUMP_NAME_SIZE

__all__ = ["pack_lump_name", "unpack_lump_name"]


def pack_lump_name(name: str, size: int = LUMP_NAME_SIZE) -> bytes:
    """Uppercase ``name`` and zero pad or truncate it to ``size`` bytes."""
    name_bytes = name.upper().encode("ascii")[:size]
    return name_bytes + b"\x00" * (size - len(name_bytes))


def unpack_lump_name(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")
