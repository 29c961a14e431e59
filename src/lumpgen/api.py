"""High-level API for lumpgen.

``build_textures`` runs the whole texture pipeline:

1. load and validate the spec, resolve it into a :class:`TextureGraph`
   (patch indices are fixed here),
2. encode PNAMES and TEXTURE1 in memory,
3. write the wadinfo manifest, refresh flat and patch hard links, write
   both lumps (and the optional JSON build manifest).

Every spec, resolution, capacity or collision error surfaces in steps 1-2,
before the first file is touched. Step 3 is not transactional: a failure
part way leaves earlier outputs updated and later ones stale, and a rerun
converges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Union

from .graph import TextureGraph, resolve
from .logging import get_logger, section
from .manifest import build_manifest, lump_digest
from .materialize import materialize_all
from .packing.constants import PNAMES_LUMP, TEXTURE1_LUMP
from .packing.inspector import inspect_lumps as _inspect_lumps_impl
from .packing.inspector import validate_lumps as _validate_lumps_impl
from .packing.packers import pack_pnames, pack_texture1
from .packing.writer import write_lump
from .reporting import get_reporter, task
from .spec.loader import load_spec_stream
from .spec.models import TexSpec
from .wadinfo import write_wadinfo

__all__ = [
    "BuildOptions",
    "BuildResult",
    "EncodedLumps",
    "load_graph",
    "encode_lumps",
    "build_textures",
    "validate_spec_stream",
    "inspect_lumps",
    "validate_lumps",
]


@dataclass(slots=True)
class BuildOptions:
    pnames_path: Path
    texture1_path: Path
    patch_dir: Path
    flat_dir: Path
    wadinfo_in: Path
    wadinfo_out: Path
    material_dir: Path
    # Optional path; when provided a JSON build manifest is emitted
    manifest_path: Path | None = None
    # Downgrade 8-byte lump name collisions from errors to warnings
    allow_name_collisions: bool = False
    # Worker threads for hard link creation (1 = sequential)
    jobs: int = 1


@dataclass(slots=True)
class EncodedLumps:
    pnames: bytes
    texture1: bytes


@dataclass(slots=True)
class BuildResult:
    graph: TextureGraph
    pnames_bytes: int
    texture1_bytes: int
    wadinfo_bytes: int
    links: list[Path] = field(default_factory=list)
    manifest_path: Path | None = None


def load_graph(
    spec_stream: Union[IO[str], IO[bytes], str],
    *,
    allow_name_collisions: bool = False,
) -> TextureGraph:
    rep = get_reporter()
    with task("spec.load", "Load spec"):
        spec: TexSpec = load_spec_stream(spec_stream)
    counts = spec.counts()
    rep.status(
        "Spec summary: "
        + " ".join(f"{k}={v}" for k, v in counts.items())
    )
    with task("graph.resolve", "Resolve graph"):
        graph = resolve(spec, allow_name_collisions=allow_name_collisions)
    placements = sum(len(t.placements) for t in graph.textures)
    rep.status(
        "Graph summary: "
        + f"patches={len(graph.patches)} textures={len(graph.textures)} "
        + f"placements={placements} collisions={len(graph.collisions)}"
    )
    return graph


def encode_lumps(graph: TextureGraph) -> EncodedLumps:
    rep = get_reporter()
    with task("encode.pnames", f"Encode {PNAMES_LUMP}"):
        pnames = pack_pnames(graph)
    with task("encode.texture1", f"Encode {TEXTURE1_LUMP}"):
        texture1 = pack_texture1(graph)
    rep.status(
        "Lump summary: "
        + f"pnames={len(pnames)} texture1={len(texture1)}"
    )
    return EncodedLumps(pnames=pnames, texture1=texture1)


def build_textures(
    options: BuildOptions, spec_stream: Union[IO[str], IO[bytes], str]
) -> BuildResult:
    logger = get_logger()
    rep = get_reporter()
    graph = load_graph(
        spec_stream, allow_name_collisions=options.allow_name_collisions
    )
    lumps = encode_lumps(graph)

    with section("Write outputs"):
        with task("wadinfo", "Write wadinfo"):
            wadinfo_bytes = write_wadinfo(
                options.wadinfo_in, options.wadinfo_out, graph
            )
        links = materialize_all(
            "materialize.flats",
            "Link flats",
            [(f.name, f.material) for f in graph.flats],
            options.flat_dir,
            options.material_dir,
            jobs=options.jobs,
        )
        links += materialize_all(
            "materialize.patches",
            "Link patches",
            [(p.name, p.material) for p in graph.patches],
            options.patch_dir,
            options.material_dir,
            jobs=options.jobs,
        )
        pnames_bytes = write_lump(PNAMES_LUMP, lumps.pnames, options.pnames_path)
        texture1_bytes = write_lump(
            TEXTURE1_LUMP, lumps.texture1, options.texture1_path
        )

    if options.manifest_path is not None:
        with task("manifest.emit", "Emit manifest"):
            build_manifest(
                graph,
                options.manifest_path,
                lumps=[
                    lump_digest(PNAMES_LUMP, options.pnames_path, lumps.pnames),
                    lump_digest(
                        TEXTURE1_LUMP, options.texture1_path, lumps.texture1
                    ),
                ],
                warnings=[c.describe() for c in graph.collisions] or None,
            )
        logger.info("Emitted manifest: %s", options.manifest_path.name)

    logger.info(
        "Built %s: %s (%d bytes), %s: %s (%d bytes)",
        PNAMES_LUMP,
        options.pnames_path.name,
        pnames_bytes,
        TEXTURE1_LUMP,
        options.texture1_path.name,
        texture1_bytes,
    )
    rep.status(
        "Build summary: "
        + f"flats={len(graph.flats)} patches={len(graph.patches)} "
        + f"textures={len(graph.textures)} links={len(links)}"
    )
    return BuildResult(
        graph=graph,
        pnames_bytes=pnames_bytes,
        texture1_bytes=texture1_bytes,
        wadinfo_bytes=wadinfo_bytes,
        links=links,
        manifest_path=options.manifest_path,
    )


def validate_spec_stream(
    spec_stream: Union[IO[str], IO[bytes], str],
    *,
    allow_name_collisions: bool = False,
) -> TextureGraph:
    """Load, validate and resolve a spec, and encode it without writing."""
    graph = load_graph(spec_stream, allow_name_collisions=allow_name_collisions)
    encode_lumps(graph)
    return graph


def inspect_lumps(pnames_path: str | Path, texture1_path: str | Path) -> dict[str, Any]:
    return _inspect_lumps_impl(pnames_path, texture1_path)


def validate_lumps(info: dict[str, Any]) -> list[str]:
    return _validate_lumps_impl(info)
