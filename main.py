"""Asset optimizer CLI entry point.

Usage:
    asset-optimize                              # Optimize ./ in place
    asset-optimize path/to/app --quality 70     # Custom quality
    asset-optimize --include "assets/**" --exclude "**/splash.png"
    asset-optimize --save                       # Keep originals as *.orig.*
    asset-optimize --check                      # Exit 1 if anything needs work
"""

import argparse
import asyncio
import sys

from assets.engine import is_project_optimized, optimize_project
from config import settings
from exceptions import AssetOptimizeError
from optimizers.router import COMPRESSORS, get_compressor
from schemas import OptimizationOptions
from utils.formatting import format_size
from utils.logging import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asset-optimize",
        description="Compress PNG and JPEG assets, skipping content already optimized",
    )
    parser.add_argument("project_root", nargs="?", default="./", help="Project directory (default: ./)")
    parser.add_argument(
        "--quality",
        type=int,
        default=None,
        help=f"Compression quality passed to the compressor (default: {settings.default_quality})",
    )
    parser.add_argument("--include", help="Only optimize assets matching this glob")
    parser.add_argument("--exclude", help="Skip assets matching this glob")
    parser.add_argument("--save", action="store_true", help="Keep originals next to optimized files (*.orig.*)")
    parser.add_argument(
        "--compressor",
        choices=sorted(COMPRESSORS),
        default=None,
        help=f"Compression backend (default: {settings.compressor})",
    )
    parser.add_argument("--check", action="store_true", help="Only report whether assets are optimized")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    return parser


def options_from_args(args: argparse.Namespace) -> OptimizationOptions:
    kwargs = {"include": args.include, "exclude": args.exclude, "save": args.save}
    if args.quality is not None:
        kwargs["quality"] = args.quality
    return OptimizationOptions(**kwargs)


async def _run(args: argparse.Namespace) -> int:
    logger = get_logger("main")
    options = options_from_args(args)

    if args.check:
        optimized = await is_project_optimized(args.project_root, options)
        logger.info("Assets are optimized." if optimized else "Some assets can be optimized.")
        return 0 if optimized else 1

    summary = await optimize_project(
        args.project_root,
        options,
        compressor=get_compressor(args.compressor),
    )
    if summary.aborted:
        return 1

    logger.info(
        f"Checked {summary.files_checked} files, skipped {summary.files_skipped}, "
        f"saved {format_size(summary.total_saved)}.",
        extra={
            "context": {
                "files_checked": summary.files_checked,
                "files_skipped": summary.files_skipped,
                "total_saved": summary.total_saved,
            }
        },
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_format="json" if args.json_logs else None)
    logger = get_logger("main")

    try:
        return asyncio.run(_run(args))
    except AssetOptimizeError as e:
        logger.error(e.message, extra={"context": {"error": e.error_code, **e.details}})
        return 1


if __name__ == "__main__":
    sys.exit(main())
