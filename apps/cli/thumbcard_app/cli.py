"""CLI entrypoints for composing thumbnail cards, sampling colors, and diagnostics."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

from thumbcard_compositor import (
    CompositionRequest,
    CompositorError,
    FontResolver,
    compose_many,
    compose_thumbnail,
    composite_background,
    decode_image,
    new_canvas,
    sample_dominant_color,
    to_data_url,
)
from thumbcard_core import (
    DiagnosticsExporter,
    build_doctor_payload,
    configure_logging,
    get_logger,
    load_config,
    save_config,
)


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _fail(stage: str, message: str, width: int | None = None, height: int | None = None) -> int:
    get_logger().error(
        "%s failed: %s",
        stage,
        message,
        extra={"event": "command_failed", "stage": stage, "width": width, "height": height},
    )
    print(
        json.dumps({"success": False, "stage": stage, "error": message, "width": width, "height": height}),
        file=sys.stderr,
    )
    return 2


def _fail_compositor(exc: CompositorError) -> int:
    return _fail(exc.stage, exc.message, exc.width, exc.height)


def _read_image(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ValueError(f"could not read image {path}: {exc.strerror or exc}") from exc


def _output_size(args: argparse.Namespace, cfg) -> tuple[int, int]:
    width = args.width if args.width is not None else cfg.output.width
    height = args.height if args.height is not None else cfg.output.height
    return width, height


def _default_output(image: Path, out_dir: Path | None = None) -> Path:
    return (out_dir or image.parent) / f"{image.stem}-portrait.png"


def cmd_compose(args: argparse.Namespace) -> int:
    cfg = load_config()
    width, height = _output_size(args, cfg)
    provider = args.provider if args.provider is not None else cfg.render.provider_fallback

    try:
        request = CompositionRequest(
            image=_read_image(Path(args.image)),
            title=args.title,
            provider=provider,
            width=width,
            height=height,
        )
    except ValueError as exc:
        return _fail("input", str(exc), width, height)

    try:
        fonts = FontResolver(title_font=cfg.fonts.title_font, provider_font=cfg.fonts.provider_font)
        png = compose_thumbnail(request, fonts=fonts)
    except CompositorError as exc:
        return _fail_compositor(exc)

    if args.data_url:
        print(to_data_url(png))
        return 0

    out = Path(args.out) if args.out else _default_output(Path(args.image))
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(png)
    _print_json({"success": True, "output": str(out), "width": width, "height": height, "bytes": len(png)})
    return 0


def _load_manifest(path: Path) -> list[dict]:
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"could not read manifest {path}: {exc.strerror or exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"manifest {path} is not valid JSON: {exc}") from exc

    if not isinstance(entries, list):
        raise ValueError("manifest must be a JSON list of jobs")
    for n, entry in enumerate(entries):
        if not isinstance(entry, dict) or "image" not in entry or "title" not in entry:
            raise ValueError(f"manifest job {n} needs an image and a title")
    return entries


def cmd_batch(args: argparse.Namespace) -> int:
    cfg = load_config()
    width, height = _output_size(args, cfg)
    max_workers = args.max_workers if args.max_workers is not None else cfg.render.max_workers
    manifest = Path(args.manifest)
    out_dir = Path(args.out_dir) if args.out_dir else None

    requests: list[CompositionRequest] = []
    outputs: list[Path] = []
    try:
        for entry in _load_manifest(manifest):
            # Relative image paths resolve against the manifest's directory.
            image = manifest.parent / str(entry["image"])
            provider = entry.get("provider")
            requests.append(
                CompositionRequest(
                    image=_read_image(image),
                    title=str(entry["title"]),
                    provider=cfg.render.provider_fallback if provider is None else str(provider),
                    width=width,
                    height=height,
                )
            )
            outputs.append(_default_output(image, out_dir))
    except ValueError as exc:
        return _fail("input", str(exc), width, height)

    try:
        fonts = FontResolver(title_font=cfg.fonts.title_font, provider_font=cfg.fonts.provider_font)
        pngs = compose_many(requests, max_workers=max_workers, fonts=fonts)
    except CompositorError as exc:
        return _fail_compositor(exc)

    for out, png in zip(outputs, pngs):
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(png)
    _print_json(
        {
            "success": True,
            "outputs": [str(out) for out in outputs],
            "width": width,
            "height": height,
            "max_workers": max_workers,
        }
    )
    return 0


def cmd_sample_color(args: argparse.Namespace) -> int:
    cfg = load_config()
    width, height = _output_size(args, cfg)

    try:
        data = _read_image(Path(args.image))
    except ValueError as exc:
        return _fail("input", str(exc), width, height)

    try:
        source = decode_image(data, width, height)
        canvas = new_canvas(width, height)
        composite_background(canvas, source)
    except CompositorError as exc:
        return _fail_compositor(exc)

    color = sample_dominant_color(canvas)
    _print_json({"r": color.r, "g": color.g, "b": color.b, "css": color.css()})
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg)

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def cmd_config_show(_args: argparse.Namespace) -> int:
    _print_json(asdict(load_config()))
    return 0


def cmd_config_set(args: argparse.Namespace) -> int:
    cfg = load_config()
    if args.width is not None:
        cfg.output.width = args.width
    if args.height is not None:
        cfg.output.height = args.height
    if args.title_font is not None:
        cfg.fonts.title_font = args.title_font or None
    if args.provider_font is not None:
        cfg.fonts.provider_font = args.provider_font or None
    if args.max_workers is not None:
        cfg.render.max_workers = args.max_workers
    if args.keep_log_files is not None:
        cfg.diagnostics.keep_log_files = args.keep_log_files
    path = save_config(cfg)
    _print_json({"saved": str(path), "config": asdict(load_config(path))})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thumbcard", description="Vertical thumbnail card compositor")
    sub = parser.add_subparsers(dest="command", required=True)

    compose_cmd = sub.add_parser("compose", help="Composite an image, title, and provider into a card")
    compose_cmd.add_argument("--image", required=True, help="Path to the source image")
    compose_cmd.add_argument("--title", required=True)
    compose_cmd.add_argument("--provider", default=None, help="Provider line (defaults to the configured fallback)")
    compose_cmd.add_argument("--width", type=int, default=None)
    compose_cmd.add_argument("--height", type=int, default=None)
    compose_cmd.add_argument("--out", default=None, help="Output PNG path")
    compose_cmd.add_argument("--data-url", action="store_true", help="Print a PNG data URL instead of writing a file")
    compose_cmd.set_defaults(func=cmd_compose)

    batch_cmd = sub.add_parser("batch", help="Compose every job in a JSON manifest on a worker pool")
    batch_cmd.add_argument("--manifest", required=True, help='JSON list of {"image", "title", "provider"} jobs')
    batch_cmd.add_argument("--out-dir", default=None, help="Directory for the cards (defaults to each image's folder)")
    batch_cmd.add_argument("--width", type=int, default=None)
    batch_cmd.add_argument("--height", type=int, default=None)
    batch_cmd.add_argument("--max-workers", type=int, default=None, help="Overrides render.max_workers")
    batch_cmd.set_defaults(func=cmd_batch)

    sample_cmd = sub.add_parser("sample-color", help="Print the theme color sampled after cover fit")
    sample_cmd.add_argument("--image", required=True)
    sample_cmd.add_argument("--width", type=int, default=None)
    sample_cmd.add_argument("--height", type=int, default=None)
    sample_cmd.set_defaults(func=cmd_sample_color)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics and resolved fonts")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    config_cmd = sub.add_parser("config", help="Show or change saved settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print current settings")
    show_cmd.set_defaults(func=cmd_config_show)
    set_cmd = config_sub.add_parser("set", help="Update settings")
    set_cmd.add_argument("--width", type=int, default=None)
    set_cmd.add_argument("--height", type=int, default=None)
    set_cmd.add_argument("--title-font", default=None, help="Font file for the title; empty string clears it")
    set_cmd.add_argument("--provider-font", default=None, help="Font file for the provider line; empty string clears it")
    set_cmd.add_argument("--max-workers", type=int, default=None, help="Worker threads for batch")
    set_cmd.add_argument("--keep-log-files", type=int, default=None, help="Rotated log files to keep")
    set_cmd.set_defaults(func=cmd_config_set)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
