#!/usr/bin/env python3
import argparse
from pathlib import Path

from attendance_figure.data import TRENDLESS_STATE, load_restaurants
from attendance_figure.figure import DEFAULT_OUTPUT, DPI, HEIGHT_IN, WIDTH_IN, render_attendance_figure
from attendance_figure.inspect_figure import check_export
from attendance_figure.log import configure_logging, get_logger

logger = get_logger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render the three-panel restaurant attendance figure.")
    parser.add_argument("--data", type=str, default=None,
                        help="CSV path or URL of the restaurant table (default: bundled sample).")
    parser.add_argument("--output", type=Path, default=Path(DEFAULT_OUTPUT))
    parser.add_argument("--exclude-state", type=str, default=TRENDLESS_STATE,
                        help="State drawn without a trend line; pass an empty string to fit every state.")
    parser.add_argument("--summary-csv", type=Path, default=None,
                        help="Also write the per-(state, BYOB) mean/SE table to this CSV.")
    parser.add_argument("--verify", action="store_true",
                        help="Re-open the written TIFF and check its size and resolution.")
    parser.add_argument("--log-level", type=str, default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    df = load_restaurants(args.data)
    exclude = (args.exclude_state,) if args.exclude_state else ()
    result = render_attendance_figure(df, args.output, exclude_state=exclude)

    if args.summary_csv:
        args.summary_csv.parent.mkdir(parents=True, exist_ok=True)
        result["summary"].to_csv(args.summary_csv, index=False)
        logger.info(f"wrote summary table to {args.summary_csv}")

    if args.verify:
        check_export(result["output"])

    print(f"Wrote {result['output']} ({WIDTH_IN} x {HEIGHT_IN} in at {DPI} dpi) "
          f"from {len(df)} restaurants; trend lines for {', '.join(result['trends'])}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
