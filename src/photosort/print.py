"""
Output logic for PhotoSort.
"""

import sys
import time
from pathlib import Path

from photosort.models import (
    AppConfig,
    CaptureTimestamp,
    PlacementOutcome,
    PlacementStatus,
    Summary,
    colorize,
    colors,
)

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def get_elapsed_time(start_time: float) -> tuple[str, str]:
    """Get elapsed time since script start."""
    elapsed_time = (time.time() - start_time) * 1000
    time_factor = "ms" if elapsed_time < 1000 else "s"
    elapsed_time = elapsed_time / 1000 if elapsed_time >= 1000 else elapsed_time
    return f"{elapsed_time:.2f}", time_factor


def get_human_size(size: int) -> str:
    """Format a byte count with a decimal unit, e.g. 181.9 KB."""
    value = float(size)
    for unit in SIZE_UNITS:
        if value < 1000 or unit == SIZE_UNITS[-1]:
            break
        value /= 1000
    return f"{int(value)} {unit}" if unit == "B" else f"{value:.1f} {unit}"


def printe(message: str, exit_code: int = 1) -> None:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg, file=sys.stderr if exit_code else sys.stdout)
    sys.exit(exit_code)


def print_header(cfg: AppConfig) -> None:
    """Print program name and the directories in use."""
    print(
        f"{colorize('Photo Sorter', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    print(f"{colorize('Settings:', colors.yellow)}")
    print(f"{cfg.indent}Source: {colorize(str(cfg.source_dir), colors.cyan)}")
    print(f"{cfg.indent}Target: {colorize(str(cfg.target_dir), colors.cyan)}")
    print(f"{cfg.indent}Layout: {colorize('YYYY/MonthName/D/FileName.Ext', colors.cyan)}")


def print_file_list_info(file_count: int, scan_errors: int, cfg: AppConfig) -> None:
    """Print how many files were found in the source tree."""
    print(f"{colorize('Folder info:', colors.yellow)}")
    print(f"{cfg.indent}Files found: {colorize(str(file_count), colors.cyan)}")
    if scan_errors:
        print(f"{cfg.indent}Scan errors: {colorize(str(scan_errors), colors.red)}")


def print_fallback(source: Path, timestamp: CaptureTimestamp, cfg: AppConfig) -> None:
    """Warn that a file is sorted by its modification time."""
    reason = timestamp.fallback_reason.value if timestamp.fallback_reason else "unknown"
    if timestamp.fallback_detail:
        reason = f"{reason}: {timestamp.fallback_detail}"
    print(
        f"{cfg.indent}{colorize('Warning', colors.yellow)}: no capture date in "
        f"{colorize(str(source), colors.cyan)} ({reason}), using file modified time."
    )


def print_process_file(source: Path, outcome: PlacementOutcome, cfg: AppConfig) -> None:
    """Print one line describing what happened to a file."""
    arr = colorize("→", colors.yellow)
    src = colorize(str(source), colors.cyan)
    if outcome.status is PlacementStatus.COPIED:
        dst = colorize(str(outcome.destination), colors.cyan)
        print(f"{cfg.indent}{colorize('Copied', colors.green)} {src} {arr} {dst}")
    elif outcome.status is PlacementStatus.SKIPPED:
        dst = colorize(str(outcome.destination), colors.cyan)
        print(f"{cfg.indent}{colorize('Skipped', colors.cyan)} {src} (already present at {dst})")
    else:
        print(f"{cfg.indent}{colorize('Failed', colors.red)} {src}: {colorize(outcome.reason, colors.red)}")


def print_footer(summary: Summary, cfg: AppConfig) -> None:
    """Print the summary of a completed run."""
    time_elapsed, time_factor = get_elapsed_time(cfg.start_time)
    print(f"{colorize('Summary:', colors.yellow)}")
    print(
        f"{cfg.indent}Copied files: {summary.copied_count} "
        f"({get_human_size(summary.copied_bytes)})"
    )
    print(f"{cfg.indent}Skipped files (already present): {summary.skipped_count}")

    if summary.collision_files:
        print(
            f"{cfg.indent}{colorize('Name collisions', colors.red)} "
            f"(a different file with the same name and date is at the target, not copied):"
        )
        for path in summary.collision_files:
            print(f"{cfg.indent}{cfg.indent}{colorize(str(path), colors.cyan)}")

    if summary.fallback_files:
        print(
            f"{cfg.indent}{colorize('Sorted by modified time', colors.yellow)}: "
            f"{len(summary.fallback_files)}"
        )
        for path, reason, detail in summary.fallback_files:
            text = f"{reason.value}: {detail}" if detail else reason.value
            print(f"{cfg.indent}{cfg.indent}{colorize(str(path), colors.cyan)}: {text}")

    if summary.scan_error_count:
        print(
            f"{cfg.indent}{colorize('Failed', colors.red)} to scan "
            f"{summary.scan_error_count} directories."
        )

    if summary.failed_files:
        print(f"{cfg.indent}{colorize('Failed', colors.red)} to copy {summary.failed_count} files:")
        for path, reason in summary.failed_files:
            print(
                f"{cfg.indent}{cfg.indent}{colorize(str(path), colors.cyan)}: {colorize(reason, colors.red)}"
            )

    print(f"{cfg.indent}Completed in: {colorize(time_elapsed, colors.cyan)} {time_factor}.")
