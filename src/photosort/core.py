#!/usr/bin/env python3
"""
Copy photos into a year/month/day tree by their capture date.
Requires: ExifTool command-line tool and PyExifTool Python library.
"""

import os
import subprocess
import sys
from pathlib import Path

import exiftool

from photosort.args import get_config
from photosort.extract import TimestampExtractor, TimestampResolver, TimestampUnavailableError
from photosort.models import (
    AppConfig,
    PathGenerator,
    PlacementOutcome,
    Summary,
    TimestampSource,
    colorize,
    colors,
)
from photosort.place import FilePlacer
from photosort.print import (
    print_fallback,
    print_file_list_info,
    print_footer,
    print_header,
    print_process_file,
    printe,
)


def check_exiftool_availability() -> None:
    """Check if ExifTool command-line tool is available."""
    try:
        subprocess.run(["exiftool", "-ver"], capture_output=True, check=True)
    except (subprocess.SubprocessError, FileNotFoundError):
        print("\033[0;31mExifTool command-line tool is not installed or not in PATH.\033[0m")
        print("Please download and install it from: \033[0;36mhttps://exiftool.org/\033[0m")
        sys.exit(1)


def check_conditions(cfg: AppConfig) -> None:
    """Check if all conditions are met to run the script."""
    check_exiftool_availability()

    if not cfg.source_dir.is_dir():
        printe(
            f"The source directory '{colorize(str(cfg.source_dir), colors.cyan)}' does not exist or is not a directory.",
            1,
        )

    if not os.access(cfg.source_dir, os.R_OK | os.X_OK):
        printe(
            f"The source directory '{colorize(str(cfg.source_dir), colors.cyan)}' is not readable.",
            1,
        )

    try:
        cfg.target_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        printe(
            f"The target directory '{colorize(str(cfg.target_dir), colors.cyan)}' cannot be created: {e}",
            1,
        )

    if not os.access(cfg.target_dir, os.W_OK):
        printe(
            f"The target directory '{colorize(str(cfg.target_dir), colors.cyan)}' is not writable.",
            1,
        )


def get_file_list(directory: Path, exclude: Path | None, summary: Summary) -> list[Path]:
    """
    Recursively list files under directory, sorted by path.

    The exclude subtree (the target, when it lives inside the source) is
    not descended into. Unreadable directories count as scan errors.
    """
    files: list[Path] = []

    def on_error(error: OSError) -> None:
        print(f"{colorize('Error', colors.red)} while scanning: {error}")
        summary.mark_scan_error()

    for root, dirs, names in os.walk(directory, onerror=on_error):
        root_path = Path(root)
        if exclude is not None:
            dirs[:] = [d for d in dirs if (root_path / d) != exclude]
        files.extend(root_path / name for name in names)

    return sorted(files, key=lambda x: str(x).lower())


def sort_file(
    path: Path, cfg: AppConfig, resolver: TimestampResolver, placer: FilePlacer, summary: Summary
) -> PlacementOutcome:
    """Resolve, build and place one file; never raises for per-file errors."""
    try:
        timestamp = resolver.resolve(path)
    except TimestampUnavailableError as e:
        return PlacementOutcome.failed(str(e))

    if timestamp.source is TimestampSource.MTIME and timestamp.fallback_reason is not None:
        summary.mark_fallback(path, timestamp.fallback_reason, timestamp.fallback_detail)
        print_fallback(path, timestamp, cfg)

    destination = PathGenerator(cfg).generate_path(timestamp, path)
    return placer.place(path, destination)


def process_files(files: list[Path], cfg: AppConfig, summary: Summary) -> None:
    """Sort every file, folding each outcome into the summary."""
    print(f"{colorize('Copying files:', colors.yellow)}")

    placer = FilePlacer()
    with exiftool.ExifToolHelper() as et:
        resolver = TimestampResolver(TimestampExtractor(et, cfg))
        for file in files:
            outcome = sort_file(file, cfg, resolver, placer, summary)
            summary.record(file, outcome)
            print_process_file(file, outcome, cfg)

    if not files:
        print(f"{cfg.indent}No files were processed.")


def main() -> None:
    """Main function to run the sorting process."""
    cfg = get_config()
    check_conditions(cfg)
    print_header(cfg)

    summary = Summary()
    exclude = cfg.target_dir if cfg.target_dir.is_relative_to(cfg.source_dir) else None
    files = get_file_list(cfg.source_dir, exclude, summary)
    print_file_list_info(len(files), summary.scan_error_count, cfg)

    process_files(files, cfg, summary)

    print_footer(summary, cfg)


if __name__ == "__main__":
    main()
