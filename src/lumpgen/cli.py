"""Command line interface for lumpgen."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    BuildOptions,
    build_textures,
    inspect_lumps,
    validate_lumps,
    validate_spec_stream,
)
from .logging import configure_logging, step
from .packing.errors import LumpGenError
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _open_spec(args: argparse.Namespace):
    if args.spec is None:
        return sys.stdin
    return args.spec.open("r", encoding="utf-8")


def _textures_cmd(args: argparse.Namespace) -> int:
    opts = BuildOptions(
        pnames_path=args.pnames,
        texture1_path=args.texture1,
        patch_dir=args.patch_dir,
        flat_dir=args.flat_dir,
        wadinfo_in=args.wadinfo_in,
        wadinfo_out=args.wadinfo_out,
        material_dir=args.material_dir,
        manifest_path=args.emit_manifest,
        allow_name_collisions=args.allow_name_collisions,
        jobs=args.jobs,
    )
    stream = _open_spec(args)
    try:
        build_textures(opts, stream)
    finally:
        if stream is not sys.stdin:
            stream.close()
    return 0


def _validate_cmd(args: argparse.Namespace) -> int:
    step("validating spec")
    stream = _open_spec(args)
    try:
        validate_spec_stream(
            stream, allow_name_collisions=args.allow_name_collisions
        )
    finally:
        if stream is not sys.stdin:
            stream.close()
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    step("inspecting lumps")
    info = inspect_lumps(args.pnames, args.texture1)
    issues = validate_lumps(info)
    rep = get_reporter()
    rep.flush()
    for issue in issues:
        rep.warning(issue)
    rep.status(
        "Inspect summary: "
        + f"patches={len(info['pnames']['names'])} "
        + f"textures={len(info['texture1']['textures'])} issues={len(issues)}"
    )
    print(json.dumps(info, indent=2, sort_keys=True))
    return 1 if issues else 0


def _add_spec_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--spec",
        type=Path,
        default=None,
        help="Read the texture spec from PATH instead of stdin",
    )
    p.add_argument(
        "--allow-name-collisions",
        dest="allow_name_collisions",
        action="store_true",
        help="Warn instead of failing when names collide after 8-byte truncation",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="lumpgen",
        description="Build PNAMES/TEXTURE1 lumps and asset links from a texture spec",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    t = sub.add_parser(
        "textures",
        help="Encode PNAMES and TEXTURE1, link flats/patches, extend wadinfo",
    )
    t.add_argument("pnames", type=Path, help="PNAMES output path")
    t.add_argument("texture1", type=Path, help="TEXTURE1 output path")
    t.add_argument("patch_dir", type=Path, help="Directory for patch links")
    t.add_argument("flat_dir", type=Path, help="Directory for flat links")
    t.add_argument("wadinfo_in", type=Path, help="Input wadinfo manifest")
    t.add_argument("wadinfo_out", type=Path, help="Output wadinfo manifest")
    t.add_argument(
        "material_dir", type=Path, help="Base directory of material files"
    )
    _add_spec_args(t)
    t.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write a JSON build manifest",
    )
    t.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=1,
        help="Worker threads for creating links (default 1)",
    )
    t.set_defaults(func=_textures_cmd)

    v = sub.add_parser(
        "validate", help="Load, resolve and encode a spec without writing"
    )
    _add_spec_args(v)
    v.set_defaults(func=_validate_cmd)

    i = sub.add_parser("inspect", help="Decode a PNAMES/TEXTURE1 pair as JSON")
    i.add_argument("pnames", type=Path)
    i.add_argument("texture1", type=Path)
    i.set_defaults(func=_inspect_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich without a TTY falls back to plain
        set_reporter(PlainReporter())


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    if getattr(args, "jobs", 1) < 1:
        parser.error("--jobs must be at least 1")
    try:
        return args.func(args)
    except LumpGenError as e:
        rep = get_reporter()
        rep.flush()
        rep.error(str(e))
        return 1
    except OSError as e:
        rep = get_reporter()
        rep.flush()
        rep.error(f"{e.filename or ''}: {e.strerror or e}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
