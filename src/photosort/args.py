"""
Argument parsing logic for PhotoSort.
"""

import argparse
from pathlib import Path

from photosort.models import AppConfig, colorize, colors


def get_version_string(cfg: AppConfig) -> str:
    """Build the text printed by --version."""
    date_str = f" ({cfg.script_date})" if cfg.script_date else ""
    author_str = f" by {cfg.script_author}" if cfg.script_author else ""
    return f"{cfg.script_name} {cfg.script_version}{date_str}{author_str}"


def build_parser(defaults: AppConfig) -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        prog="photosort",
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Copy photos into a year/month/day folder tree by their capture date.\n"
        "The date is read from embedded EXIF/XMP metadata, falling back to the file "
        "modification time.\n"
        f"Requires {colorize('ExifTool', colors.green)} command-line tool and "
        f"{colorize('PyExifTool', colors.green)} Python library.",
        epilog=f"Example: {colorize('photosort', colors.green)} -s ~/DCIM -t ~/Pictures/Sorted",
    )
    parser.add_argument(
        "-s",
        "--source-dir",
        dest="source_dir",
        type=Path,
        required=True,
        metavar="DIR",
        help="Directory to read photos from (searched recursively)",
    )
    parser.add_argument(
        "-t",
        "--target-dir",
        dest="target_dir",
        type=Path,
        required=True,
        metavar="DIR",
        help="Root of the sorted year/month/day tree",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=get_version_string(defaults),
        help="Print version and exit",
    )
    return parser


def get_config(argv: list[str] | None = None) -> AppConfig:
    """Parse command line arguments and return the AppConfig object."""
    defaults = AppConfig()
    args = build_parser(defaults).parse_args(argv)

    return AppConfig(
        source_dir=args.source_dir.expanduser().resolve(),
        target_dir=args.target_dir.expanduser().resolve(),
        start_time=defaults.start_time,
    )
