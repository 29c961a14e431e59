"""Schema validation and spec loading failures."""

import io

import pytest

from lumpgen.packing.errors import E_PARSE, E_SCHEMA, SpecificationError
from lumpgen.spec.loader import load_spec, load_spec_stream
from lumpgen.spec.validator import run_validation_pipeline
from spec_helper import spec, spec_yaml


def _codes(errors):
    return {e.code for e in errors}


def _paths(errors):
    return {e.path for e in errors}


def test_valid_spec_has_no_errors():
    assert run_validation_pipeline(spec()) == []


def test_section_must_be_mapping():
    errs = run_validation_pipeline({"patches": [1, 2]})
    assert _codes(errs) == {"E_TYPE"}
    assert _paths(errs) == {"patches"}


def test_material_missing_file():
    data = spec()
    del data["mats"]["stone"]["file"]
    errs = run_validation_pipeline(data)
    assert "E_FIELD" in _codes(errs)
    assert "mats.stone.file" in _paths(errs)


def test_texture_size_out_of_range():
    data = spec()
    data["textures"]["METAL"]["size"] = [65536, -1]
    errs = run_validation_pipeline(data)
    assert _codes(errs) == {"E_RANGE"}
    assert len(errs) == 2


def test_texture_offset_out_of_i16_range():
    data = spec()
    data["textures"]["METAL"]["patches"] = [["AMETAL", 32768, 0]]
    errs = run_validation_pipeline(data)
    assert _codes(errs) == {"E_RANGE"}
    assert _paths(errs) == {"textures.METAL.patches[0]"}


def test_malformed_placement():
    data = spec()
    data["textures"]["METAL"]["patches"] = [["AMETAL", 0]]
    assert "E_FIELD" in _codes(run_validation_pipeline(data))


def test_scale_shape_and_range():
    data = spec()
    data["textures"]["METAL"]["scale"] = [1.0]
    assert "E_FIELD" in _codes(run_validation_pipeline(data))
    data["textures"]["METAL"]["scale"] = [40.0, 1.0]
    assert "E_RANGE" in _codes(run_validation_pipeline(data))
    data["textures"]["METAL"]["scale"] = ["big", 1.0]
    assert "E_TYPE" in _codes(run_validation_pipeline(data))


def test_non_ascii_name():
    data = spec()
    data["patches"]["ZSTÖNE"] = {"mat": "stone"}
    assert "E_NAME" in _codes(run_validation_pipeline(data))


def test_bool_is_not_an_integer():
    data = spec()
    data["textures"]["METAL"]["size"] = [True, 64]
    assert "E_RANGE" in _codes(run_validation_pipeline(data))


def test_transforms_must_be_strings():
    data = spec()
    data["patches"]["AMETAL"]["transforms"] = ["ok", 3]
    assert "patches.AMETAL.transforms[1]" in _paths(run_validation_pipeline(data))


def test_loader_collects_schema_errors():
    data = spec()
    data["textures"]["METAL"]["size"] = [1]
    data["flats"]["CEIL1_1"] = {}
    with pytest.raises(SpecificationError) as ei:
        load_spec_stream(spec_yaml(data))
    assert ei.value.code == E_SCHEMA
    assert len(ei.value.context["errors"]) == 2


def test_loader_rejects_malformed_yaml():
    with pytest.raises(SpecificationError) as ei:
        load_spec_stream(io.StringIO("mats: [unclosed"))
    assert ei.value.code == E_PARSE


def test_loader_rejects_non_mapping_root():
    with pytest.raises(SpecificationError) as ei:
        load_spec_stream("- a\n- b\n")
    assert ei.value.code == E_PARSE


def test_loader_keeps_declaration_order_and_defaults(tmp_path):
    path = tmp_path / "textures.yaml"
    path.write_text(spec_yaml(spec()))
    ts = load_spec(path)
    assert list(ts.patches) == ["ZSTONE", "AMETAL", "MSTONE"]
    assert list(ts.textures) == ["STONE2", "METAL", "EMPTY"]
    assert ts.patches["AMETAL"].transforms == []
    assert ts.textures["METAL"].scale is None
    assert ts.textures["STONE2"].scale == (0.5, 2.0)
    assert ts.textures["STONE2"].patches[2].x == -8


def test_loader_accepts_json():
    ts = load_spec_stream('{"mats": {}, "flats": null, "patches": {}, "textures": {}}')
    assert ts.counts() == {"mats": 0, "flats": 0, "patches": 0, "textures": 0}


def test_load_spec_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_spec(tmp_path / "missing.yaml")


def test_loader_rejects_duplicate_keys():
    text = (
        "mats:\n"
        "  m: {file: m.png, spdx: CC0-1.0, source: x}\n"
        "patches:\n"
        "  P1: {mat: m}\n"
        "  P2: {mat: m}\n"
        "  P1: {mat: m}\n"
    )
    with pytest.raises(SpecificationError) as ei:
        load_spec_stream(text)
    assert ei.value.code == E_PARSE
    assert "duplicate key 'P1'" in ei.value.message
    assert "line 6" in ei.value.message


def test_same_key_in_different_mappings_is_allowed():
    text = (
        "mats:\n"
        "  P1: {file: m.png, spdx: CC0-1.0, source: x}\n"
        "patches:\n"
        "  P1: {mat: P1}\n"
    )
    ts = load_spec_stream(text)
    assert list(ts.patches) == ["P1"]
