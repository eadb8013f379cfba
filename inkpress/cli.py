"""
Command-line entry point for inkpress.

Usage:
    python -m inkpress.cli preview input.pdf --page 3 --out-dir previews/
    python -m inkpress.cli convert input.pdf --resolution 300 --bias -10

Behavior:
    - `preview` writes one PNG per grid cell (`preview_r{res}_b{bias}.png`)
      so the user can pick settings before converting.
    - `convert` writes the black-and-white PDF (default `<stem>_bw.pdf`) and
      logs per-page progress. The first Ctrl-C stops after the current page;
      no partial output file is written.
    - Defaults come from inkpress.config (environment); flags override them.
    - Exits non-zero with a short message on any ConversionError.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import signal
import threading
from typing import List, Optional, Sequence

from inkpress.config import ConversionConfig, load_conversion_config
from inkpress.conversion.assembler import PillowPdfAssembler
from inkpress.conversion.converter import DocumentConverter
from inkpress.conversion.ports import ConversionError, ConversionProgress, ConversionSettings
from inkpress.conversion.preview import generate_preview_matrix
from inkpress.imaging.pdf_renderer import PdfRasterizer

LOG = logging.getLogger("inkpress.cli")

PREVIEW_FILE_PATTERN = "preview_r{resolution}_b{bias}.png"


def _build_parser(cfg: ConversionConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inkpress", description="Convert PDF pages to black and white for e-ink")
    sub = parser.add_subparsers(dest="command", required=True)

    def _common(p: argparse.ArgumentParser) -> None:
        p.add_argument("pdf", type=Path, help="Source PDF file")
        p.add_argument("--resolution", type=int, default=cfg.resolution, help="Render resolution in DPI")
        p.add_argument("--bias", type=int, default=cfg.threshold_bias, help="Signed offset added to the Otsu threshold")

    preview = sub.add_parser("preview", help="Render a 3x3 grid of settings for one page")
    _common(preview)
    preview.add_argument("--page", type=int, default=cfg.preview_page, help="1-based page to preview")
    preview.add_argument("--out-dir", type=Path, default=Path("."), help="Directory for preview PNGs")

    convert = sub.add_parser("convert", help="Convert the whole document")
    _common(convert)
    convert.add_argument("--output", type=Path, default=None, help="Output PDF (default: <stem>_bw.pdf)")
    return parser


def _open_rasterizer(path: Path, cfg: ConversionConfig) -> PdfRasterizer:
    return PdfRasterizer(path.read_bytes(), page_limit=cfg.page_limit)


def run_preview(args: argparse.Namespace, cfg: ConversionConfig) -> List[Path]:
    settings = ConversionSettings(resolution=args.resolution, threshold_bias=args.bias)
    with _open_rasterizer(args.pdf, cfg) as rasterizer:
        candidates = generate_preview_matrix(rasterizer, page_number=args.page, settings=settings)
    args.out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for candidate in candidates:
        name = PREVIEW_FILE_PATTERN.format(resolution=candidate.resolution, bias=candidate.threshold_bias)
        path = args.out_dir / name
        path.write_bytes(candidate.image.data)
        written.append(path)
    LOG.info("inkpress.cli.preview_written count=%s dir=%s", len(written), args.out_dir)
    return written


def run_convert(args: argparse.Namespace, cfg: ConversionConfig) -> Path:
    settings = ConversionSettings(resolution=args.resolution, threshold_bias=args.bias)
    output = args.output or args.pdf.with_name(f"{args.pdf.stem}_bw.pdf")
    stop = threading.Event()

    def _on_sigint(_signum, _frame) -> None:
        if stop.is_set():
            raise KeyboardInterrupt
        LOG.warning("inkpress.cli.cancel_requested finishing current page")
        stop.set()

    def _on_progress(progress: ConversionProgress) -> None:
        LOG.info(
            "inkpress.cli.progress page=%s/%s (%.0f%%)",
            progress.pages_completed,
            progress.pages_total,
            progress.fraction * 100,
        )

    previous = signal.signal(signal.SIGINT, _on_sigint)
    try:
        with _open_rasterizer(args.pdf, cfg) as rasterizer:
            converter = DocumentConverter(
                rasterizer=rasterizer,
                assembler=PillowPdfAssembler(resolution=settings.resolution),
                settings=settings,
            )
            document = converter.run(on_progress=_on_progress, should_cancel=stop.is_set)
    finally:
        signal.signal(signal.SIGINT, previous)

    output.write_bytes(document)
    LOG.info("inkpress.cli.convert_written path=%s bytes=%s", output, len(document))
    return output


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entrypoint."""
    try:
        cfg = load_conversion_config()
    except ValueError as exc:
        raise SystemExit(f"invalid configuration: {exc}")
    logging.basicConfig(level=cfg.log_level, format="%(levelname)s:%(name)s:%(message)s")
    args = _build_parser(cfg).parse_args(argv)
    try:
        if args.command == "preview":
            run_preview(args, cfg)
        else:
            run_convert(args, cfg)
    except ConversionError as exc:
        LOG.error("inkpress.cli.failed command=%s error_type=%s", args.command, type(exc).__name__)
        raise SystemExit(f"{args.command} failed: {exc}")
    except OSError as exc:
        raise SystemExit(f"{args.command} failed: {exc}")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual entry point
    raise SystemExit(main())
