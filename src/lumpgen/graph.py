"""Resolved texture graph.

:func:`resolve` turns a raw :class:`~lumpgen.spec.models.TexSpec` into an
immutable :class:`TextureGraph`. Patches are stored once, in declaration
order, in ``TextureGraph.patches``; a texture placement refers to a patch
by its position in that tuple. The position *is* the patch's lump index, so
a :class:`Patch` never exists without its index and nothing has to be
assigned after construction.

Resolution is all-or-nothing: the first dangling material or patch name
raises :class:`~lumpgen.packing.errors.ResolutionError` and no graph is
returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .logging import get_logger
from .packing.constants import MAX_PATCHES
from .packing.errors import (
    E_CAPACITY,
    E_NAME_COLLISION,
    CapacityError,
    NameCollisionError,
    missing_material,
    missing_patch,
)
from .packing.layout import pack_lump_name
from .spec.models import TexSpec

__all__ = [
    "Material",
    "Flat",
    "Patch",
    "Placement",
    "Texture",
    "NameCollision",
    "TextureGraph",
    "resolve",
    "find_name_collisions",
]


@dataclass(frozen=True, slots=True)
class Material:
    name: str
    file: str
    spdx: str
    source: str


@dataclass(frozen=True, slots=True)
class Flat:
    name: str
    material: Material


@dataclass(frozen=True, slots=True)
class Patch:
    name: str
    material: Material
    index: int
    transforms: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Placement:
    patch: int  # handle into TextureGraph.patches
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Texture:
    name: str
    width: int
    height: int
    placements: Tuple[Placement, ...] = ()
    hscale: Optional[float] = None
    vscale: Optional[float] = None


@dataclass(frozen=True, slots=True)
class NameCollision:
    kind: str
    lump_name: bytes
    names: Tuple[str, ...]

    def describe(self) -> str:
        shown = self.lump_name.rstrip(b"\x00").decode("ascii")
        return f"{self.kind} names {', '.join(self.names)} all encode as {shown!r}"


@dataclass(frozen=True, slots=True)
class TextureGraph:
    materials: Tuple[Material, ...] = ()
    flats: Tuple[Flat, ...] = ()
    patches: Tuple[Patch, ...] = ()
    textures: Tuple[Texture, ...] = ()
    collisions: Tuple[NameCollision, ...] = field(default=())

    def patch(self, handle: int) -> Patch:
        return self.patches[handle]

    def placements(self, texture: Texture) -> Iterator[Tuple[Patch, int, int]]:
        for p in texture.placements:
            yield self.patches[p.patch], p.x, p.y

    def patch_index_map(self) -> Dict[str, int]:
        return {p.name: p.index for p in self.patches}


def find_name_collisions(
    kind: str, names: Sequence[str]
) -> List[NameCollision]:
    """Group ``names`` that encode to the same 8-byte lump name."""
    by_lump: Dict[bytes, List[str]] = {}
    for name in names:
        by_lump.setdefault(pack_lump_name(name), []).append(name)
    return [
        NameCollision(kind, lump, tuple(group))
        for lump, group in by_lump.items()
        if len(group) > 1
    ]


def resolve(spec: TexSpec, *, allow_name_collisions: bool = False) -> TextureGraph:
    logger = get_logger()
    materials: Dict[str, Material] = {
        name: Material(name=name, file=m.file, spdx=m.spdx, source=m.source)
        for name, m in spec.mats.items()
    }

    flats: List[Flat] = []
    for name, f in spec.flats.items():
        mat = materials.get(f.mat)
        if mat is None:
            raise missing_material(f.mat, f"flat {name}")
        flats.append(Flat(name=name, material=mat))

    if len(spec.patches) > MAX_PATCHES:
        raise CapacityError(
            code=E_CAPACITY,
            message=f"Too many patches: {len(spec.patches)} > {MAX_PATCHES}",
            context={"count": len(spec.patches), "limit": MAX_PATCHES},
        )
    patches: List[Patch] = []
    handles: Dict[str, int] = {}
    for name, p in spec.patches.items():
        mat = materials.get(p.mat)
        if mat is None:
            raise missing_material(p.mat, f"patch {name}")
        handles[name] = len(patches)
        patches.append(
            Patch(
                name=name,
                material=mat,
                index=len(patches),
                transforms=tuple(p.transforms),
            )
        )

    textures: List[Texture] = []
    for name, t in spec.textures.items():
        placements: List[Placement] = []
        for ref in t.patches:
            handle = handles.get(ref.patch)
            if handle is None:
                raise missing_patch(ref.patch, f"texture {name}")
            placements.append(Placement(handle, ref.x, ref.y))
        hscale, vscale = t.scale if t.scale is not None else (None, None)
        textures.append(
            Texture(
                name=name,
                width=t.width,
                height=t.height,
                placements=tuple(placements),
                hscale=hscale,
                vscale=vscale,
            )
        )

    collisions = (
        find_name_collisions("flat", [f.name for f in flats])
        + find_name_collisions("patch", [p.name for p in patches])
        + find_name_collisions("texture", [t.name for t in textures])
    )
    if collisions and not allow_name_collisions:
        raise NameCollisionError(
            code=E_NAME_COLLISION,
            message="Lump name collision: "
            + "; ".join(c.describe() for c in collisions),
            context={"collisions": [c.describe() for c in collisions]},
        )
    for c in collisions:
        logger.warning("Lump name collision: %s", c.describe())

    return TextureGraph(
        materials=tuple(materials.values()),
        flats=tuple(flats),
        patches=tuple(patches),
        textures=tuple(textures),
        collisions=tuple(collisions),
    )
