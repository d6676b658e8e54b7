"""
Main entry point for dfraw_parser.
Usage: python -m dfraw_parser --raws-dir <df>/data/vanilla --out raws.json
"""

import argparse
import codecs
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .raws import RawsService
from .settings import AppSettings, ConfigError
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="dfraw-parser",
        description="Parse Dwarf Fortress raw files into JSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dfraw-parser --raws-dir "C:/Games/Dwarf Fortress/data/vanilla" --out creatures.json
  dfraw-parser --raws-dir raw/objects --format jsonl --encoding cp437

Options not given on the command line come from the stored settings profile.
""",
    )
    parser.add_argument("--raws-dir", action="append", default=[], metavar="PATH",
                        help="Raw directory or file to parse (repeatable)")
    parser.add_argument("--out", type=Path, default=None,
                        help="Output file (default: stored output path)")
    parser.add_argument("--format", choices=["json", "jsonl"], default=None,
                        help="Output layout (default: stored format)")
    parser.add_argument("--pretty", action="store_true",
                        help="Indent JSON array output")
    parser.add_argument("--no-copy-from", action="store_true",
                        help="Do not resolve COPY_TAGS_FROM references")
    parser.add_argument("--workers", type=int, default=None,
                        help="Number of parser threads")
    parser.add_argument("--encoding", default=None,
                        help="Encoding of the raw files (e.g. utf-8, cp437)")
    parser.add_argument("--profile", default="default",
                        help="Settings profile to use")
    parser.add_argument("--settings-file", type=Path, default=None,
                        help="INI file to use instead of the platform settings store")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug messages to the console")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _raws_dirs(args: argparse.Namespace, settings: AppSettings) -> List[Path]:
    """Pick raw directories from the command line, falling back to settings."""
    if args.raws_dir:
        raws_dirs = [Path(p) for p in args.raws_dir]
        missing = [str(p) for p in raws_dirs if not p.exists()]
        if missing:
            raise ConfigError(f"Raws directory does not exist: {', '.join(missing)}")
        return raws_dirs

    raws_dirs = settings.raws_dirs
    if not raws_dirs:
        raise ConfigError("No raws directories given; use --raws-dir or set paths/raws_dirs")
    return raws_dirs


def _check_overrides(args: argparse.Namespace) -> None:
    """Reject command line values the parser cannot use."""
    if args.workers is not None and args.workers < 1:
        raise ConfigError(f"Worker count must be positive: {args.workers}")
    if args.encoding:
        try:
            codecs.lookup(args.encoding)
        except LookupError:
            raise ConfigError(f"Unknown encoding: {args.encoding}") from None


def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(f"{__name__}.main")
    try:
        settings = AppSettings(profile=args.profile, settings_file=args.settings_file)
        setup_logging(settings, console_level="DEBUG" if args.verbose else None)

        logger.info(f"Starting dfraw_parser {__version__}")
        logger.info(f"Configuration loaded from {settings.get_settings_file_path()}")

        validation = settings.validate(check_raws_dirs=not args.raws_dir)
        for warning in validation.warnings:
            logger.warning(f"  {warning}")
        if not validation.is_valid:
            logger.error("Configuration validation failed:")
            for error in validation.errors:
                logger.error(f"  {error}")
            return 1

        _check_overrides(args)
        raws_dirs = _raws_dirs(args, settings)

        service = RawsService(
            raws_dirs,
            settings=settings,
            encoding=args.encoding,
            max_workers=args.workers,
            apply_copy_from=False if args.no_copy_from else None,
        )
        for raws_dir in raws_dirs:
            settings.add_recent_raws_dir(raws_dir.resolve())
        if settings.is_first_run:
            settings.set_first_run_complete()

        output_path = service.export(
            args.out or settings.output_path,
            args.format or settings.output_format,
            pretty=args.pretty,
        )
        logger.info(
            f"Exported {len(service.get_records())} records from "
            f"{len(service.raw_files)} files to {output_path}"
        )
        if service.failed_files:
            logger.warning(f"Skipped {len(service.failed_files)} unreadable files")
        return 0

    except ConfigError as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.exception("Unhandled exception in main")
        return 1


if __name__ == "__main__":
    sys.exit(main())
