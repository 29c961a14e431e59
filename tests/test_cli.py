import json

from lumpgen.cli import build_parser, main
from lumpgen.packing.inspector import parse_pnames
from spec_helper import make_options, spec, spec_yaml


def _argv(opts, spec_path):
    return [
        "-r",
        "silent",
        "textures",
        str(opts.pnames_path),
        str(opts.texture1_path),
        str(opts.patch_dir),
        str(opts.flat_dir),
        str(opts.wadinfo_in),
        str(opts.wadinfo_out),
        str(opts.material_dir),
        "--spec",
        str(spec_path),
    ]


def test_parser_positional_order(tmp_path):
    args = build_parser().parse_args(
        ["textures", "P", "T", "pd", "fd", "wi", "wo", "md", "-j", "2"]
    )
    assert [
        str(args.pnames),
        str(args.texture1),
        str(args.patch_dir),
        str(args.flat_dir),
        str(args.wadinfo_in),
        str(args.wadinfo_out),
        str(args.material_dir),
    ] == ["P", "T", "pd", "fd", "wi", "wo", "md"]
    assert args.jobs == 2
    assert args.spec is None


def test_textures_command(tmp_path):
    data = spec()
    opts = make_options(tmp_path, data)
    spec_path = tmp_path / "textures.yaml"
    spec_path.write_text(spec_yaml(data))
    assert main(_argv(opts, spec_path)) == 0
    assert parse_pnames(opts.pnames_path.read_bytes()) == ["ZSTONE", "AMETAL", "MSTONE"]


def test_textures_command_reads_stdin(tmp_path, monkeypatch):
    import io

    data = spec()
    opts = make_options(tmp_path, data)
    argv = _argv(opts, "unused")[:-2]
    monkeypatch.setattr("sys.stdin", io.StringIO(spec_yaml(data)))
    assert main(argv) == 0
    assert opts.texture1_path.exists()


def test_textures_command_failure_exit_code(tmp_path, capsys):
    data = spec()
    data["textures"]["METAL"]["patches"] = [["MISSING1", 0, 0]]
    opts = make_options(tmp_path, data)
    spec_path = tmp_path / "textures.yaml"
    spec_path.write_text(spec_yaml(data))
    argv = _argv(opts, spec_path)
    argv[1] = "plain"
    assert main(argv) == 1
    err = capsys.readouterr().err
    assert "E_MISSING_PATCH" in err
    assert "MISSING1" in err
    assert not opts.pnames_path.exists()


def test_missing_spec_file_exit_code(tmp_path):
    opts = make_options(tmp_path, spec())
    assert main(_argv(opts, tmp_path / "nope.yaml")) == 1


def test_validate_command(tmp_path):
    spec_path = tmp_path / "textures.yaml"
    spec_path.write_text(spec_yaml(spec()))
    assert main(["-r", "silent", "validate", "--spec", str(spec_path)]) == 0


def test_inspect_command(tmp_path, capsys):
    data = spec()
    opts = make_options(tmp_path, data)
    spec_path = tmp_path / "textures.yaml"
    spec_path.write_text(spec_yaml(data))
    assert main(_argv(opts, spec_path)) == 0
    capsys.readouterr()
    rc = main(
        ["-r", "silent", "inspect", str(opts.pnames_path), str(opts.texture1_path)]
    )
    assert rc == 0
    info = json.loads(capsys.readouterr().out)
    stone2 = info["texture1"]["textures"][0]
    assert stone2["name"] == "STONE2"
    assert [p["patch"] for p in stone2["patches"]] == ["ZSTONE", "MSTONE", "ZSTONE"]


def test_inspect_reports_bad_index(tmp_path, capsys):
    pnames = tmp_path / "PNAMES.lmp"
    pnames.write_bytes(b"\x00\x00\x00\x00")
    texture1 = tmp_path / "TEXTURE1.lmp"
    # One texture with one patch pointing at index 5.
    texture1.write_bytes(
        bytes.fromhex("01000000" "08000000")
        + b"WALL\x00\x00\x00\x00"
        + bytes.fromhex("0000" "0808" "0100" "0100" "00000000" "0100")
        + bytes.fromhex("0000" "0000" "0500" "00000000")
    )
    assert main(["-r", "silent", "inspect", str(pnames), str(texture1)]) == 1
