#!/usr/bin/env python3
import argparse
import json
from pathlib import Path

from PIL import Image

from attendance_figure.errors import ExportError
from attendance_figure.figure import DPI, HEIGHT_IN, WIDTH_IN
from attendance_figure.log import configure_logging, get_logger

logger = get_logger(__name__)


def read_dpi(img):
    dpi = img.info.get("dpi")
    if not dpi:
        return None
    return float(dpi[0]), float(dpi[1])


def analyze_image(path):
    """Pixel size, resolution, physical size, colour mode and compression of a raster."""
    with Image.open(path) as img:
        width_px, height_px = img.size
        dpi = read_dpi(img)
        mode = img.mode
        compression = img.info.get("compression")
    return {
        "width_px": width_px,
        "height_px": height_px,
        "dpi": dpi,
        "width_in": width_px / dpi[0] if dpi else None,
        "height_in": height_px / dpi[1] if dpi else None,
        "mode": mode,
        "compression": compression,
    }


def check_export(path, width_in=WIDTH_IN, height_in=HEIGHT_IN, dpi=DPI):
    """Raise ExportError unless ``path`` is ``width_in`` x ``height_in`` inches at ``dpi``."""
    with Image.open(path) as img:
        size = img.size
        file_dpi = read_dpi(img)
    expected = (int(round(width_in * dpi)), int(round(height_in * dpi)))
    if size != expected:
        raise ExportError(f"{path}: {size[0]}x{size[1]} px, expected {expected[0]}x{expected[1]}")
    if file_dpi is None or any(abs(d - dpi) > 0.5 for d in file_dpi):
        raise ExportError(f"{path}: resolution {file_dpi}, expected {dpi} dpi")
    logger.info(f"{path}: {size[0]}x{size[1]} px at {dpi} dpi")
    return {"width_px": size[0], "height_px": size[1], "dpi": file_dpi}


def format_inches(info):
    if info["width_in"] is None:
        return "size in inches unknown"
    return f"{info['width_in']:.2f} x {info['height_in']:.2f} in"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Report pixel size, resolution and physical size of rendered figures.")
    parser.add_argument("images", type=Path, nargs="+")
    parser.add_argument("--output", type=Path, default=None,
                        help="Write the per-image report to this JSON file.")
    parser.add_argument("--check", action="store_true",
                        help=f"Fail unless every image is {WIDTH_IN} x {HEIGHT_IN} in at {DPI} dpi.")
    parser.add_argument("--log-level", type=str, default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    stats = {}
    for path in args.images:
        if args.check:
            check_export(path)
        stats[str(path)] = analyze_image(path)

    if args.output:
        args.output.write_text(json.dumps(stats, indent=2))
    for name, info in stats.items():
        print(f"{name}: {info['width_px']}x{info['height_px']} px, dpi={info['dpi']}, "
              f"{format_inches(info)}, compression={info['compression']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
