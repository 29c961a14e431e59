"""Shared fixtures/builders for lumpgen tests."""

from __future__ import annotations

import copy
from pathlib import Path

import yaml

from lumpgen.api import BuildOptions

EXAMPLE_SPEC = {
    "mats": {
        "brick1": {"file": "brick1.png", "spdx": "CC0-1.0", "source": "own work"},
    },
    "flats": {},
    "patches": {"BRICK1A": {"mat": "brick1"}},
    "textures": {
        "WALL01": {"size": [64, 128], "patches": [["BRICK1A", 0, 0]]},
    },
}

MULTI_SPEC = {
    "mats": {
        "stone": {"file": "stone.png", "spdx": "CC0-1.0", "source": "scan"},
        "metal": {"file": "sub/metal.png", "spdx": "CC-BY-4.0", "source": "photo"},
    },
    "flats": {
        "FLOOR0_1": {"mat": "stone"},
        "CEIL1_1": {"mat": "metal"},
    },
    # Declared out of alphabetical order on purpose.
    "patches": {
        "ZSTONE": {"mat": "stone", "transforms": ["flip_h"]},
        "AMETAL": {"mat": "metal"},
        "MSTONE": {"mat": "stone"},
    },
    "textures": {
        "STONE2": {
            "size": [128, 64],
            "scale": [0.5, 2.0],
            "patches": [["ZSTONE", 0, 0], ["MSTONE", 64, 0], ["ZSTONE", -8, 32]],
        },
        "METAL": {"size": [64, 64], "patches": [["AMETAL", 0, 0]]},
        "EMPTY": {"size": [8, 8], "patches": []},
    },
}


def spec(base: dict = MULTI_SPEC) -> dict:
    return copy.deepcopy(base)


def spec_yaml(data: dict) -> str:
    return yaml.safe_dump(data, sort_keys=False)


def write_materials(material_dir: Path, data: dict) -> None:
    for name, m in data["mats"].items():
        p = material_dir / m["file"]
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(f"PNG:{name}".encode("ascii"))


def make_options(tmp_path: Path, data: dict, **overrides) -> BuildOptions:
    material_dir = tmp_path / "materials"
    write_materials(material_dir, data)
    wadinfo_in = tmp_path / "wadinfo.base.txt"
    wadinfo_in.write_text("[lumps]\nplaypal\ncolormap\n")
    opts = BuildOptions(
        pnames_path=tmp_path / "out" / "PNAMES.lmp",
        texture1_path=tmp_path / "out" / "TEXTURE1.lmp",
        patch_dir=tmp_path / "patches",
        flat_dir=tmp_path / "flats",
        wadinfo_in=wadinfo_in,
        wadinfo_out=tmp_path / "out" / "wadinfo.txt",
        material_dir=material_dir,
    )
    for k, v in overrides.items():
        setattr(opts, k, v)
    return opts


def output_paths(opts: BuildOptions) -> list[Path]:
    return [opts.pnames_path, opts.texture1_path, opts.wadinfo_out]
