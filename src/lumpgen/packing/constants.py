"""Binary layout constants for the PNAMES and TEXTURE1 lumps."""

from __future__ import annotations

# Lump entry names are fixed-width, zero padded ASCII.
LUMP_NAME_SIZE = 8

# Patch indices are stored as u16 in TEXTURE1 patch records.
MAX_PATCHES = 0x10000
MAX_PATCHES_PER_TEXTURE = 0xFFFF

# 8 name + 2 flags + 1 hscale + 1 vscale + 2 width + 2 height
# + 4 column directory + 2 patch count
TEXTURE_HEADER_SIZE = 22
# i16 x + i16 y + u16 patch + 4 reserved
TEXTURE_PATCH_SIZE = 10

LUMP_COUNT_SIZE = 4
LUMP_OFFSET_SIZE = 4

# Scale bytes are fixed point with 3 fractional bits (8 == 1.0).
SCALE_UNIT = 8
DEFAULT_SCALE_BYTE = SCALE_UNIT

U16_MAX = 0xFFFF
I16_MIN = -0x8000
I16_MAX = 0x7FFF

PNAMES_LUMP = "PNAMES"
TEXTURE1_LUMP = "TEXTURE1"

# Materialized flats and patches are linked as <dir>/<name>.png.
MATERIAL_SUFFIX = ".png"
