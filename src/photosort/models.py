import datetime
import enum
import time
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/photosort/models.py
    """
    try:
        pyproject_path = Path(__file__).parents[2] / "pyproject.toml"

        if not pyproject_path.is_file():
            return {}

        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version directly from pyproject.toml [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_date() -> str:
    """Get date directly from pyproject.toml [tool.photosort] section."""
    data = _get_pyproject_data()
    return str(data.get("tool", {}).get("photosort", {}).get("date", ""))


def _get_script_name() -> str:
    """Get project name from [project]."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "photosort"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


# English names regardless of the process locale
MONTH_NAMES: tuple[str, ...] = (
    "",
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


def get_normalized_extension(path: Path) -> str:
    """
    Extract and normalize file extension from path.

    Args:
        path: Path object to extract extension from

    Returns:
        Lowercase extension without leading dot
    """
    return path.suffix.lstrip(".").lower()


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Settings
    exif_date_tags: tuple[str, ...] = (
        "EXIF:DateTimeOriginal",
        "XMP:DateTimeOriginal",
    )
    metadata_groups: tuple[str, ...] = ("EXIF", "XMP", "IPTC", "MakerNotes")
    container_extensions: dict[str, str] = field(
        default_factory=lambda: {
            "jpg": "jpeg",
            "jpeg": "jpeg",
            "jpe": "jpeg",
            "png": "png",
            "tif": "tiff",
            "tiff": "tiff",
        }
    )

    # Formatting
    indent: str = "    "

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_date: str = field(default_factory=_get_script_date)
    script_author: str = field(default_factory=_get_script_author)

    # Runtime state
    start_time: float = field(default_factory=time.time)
    source_dir: Path = field(default_factory=Path.cwd)
    target_dir: Path = field(default_factory=Path.cwd)


class ContainerType(enum.Enum):
    """Image container formats that may carry an embedded capture date."""

    JPEG = "jpeg"
    PNG = "png"
    TIFF = "tiff"
    UNSUPPORTED = "unsupported"


class ExtractError(enum.Enum):
    """Reasons an embedded capture date could not be read."""

    UNSUPPORTED_FORMAT = "unsupported format"
    NO_METADATA = "no embedded metadata"
    TAG_MISSING = "original date/time tag missing"
    MALFORMED_VALUE = "malformed date/time value"
    IO_ERROR = "read error"


class TimestampSource(enum.Enum):
    METADATA = "metadata"
    MTIME = "mtime"


@dataclass(frozen=True)
class CaptureTimestamp:
    """A resolved capture date and where it came from."""

    value: datetime.datetime
    source: TimestampSource = TimestampSource.METADATA
    fallback_reason: ExtractError | None = None
    fallback_detail: str = ""

    @property
    def year(self) -> int:
        return self.value.year

    @property
    def month(self) -> int:
        return self.value.month

    @property
    def day(self) -> int:
        return self.value.day


@dataclass(frozen=True)
class ExtractResult:
    """
    Outcome of reading the embedded capture date.

    Holds either a timestamp or an ExtractError; failures are data,
    not exceptions, so callers pick a fallback with or_else().
    """

    timestamp: CaptureTimestamp | None = None
    error: ExtractError | None = None
    detail: str = ""

    def __post_init__(self) -> None:
        if (self.timestamp is None) == (self.error is None):
            raise ValueError("ExtractResult needs exactly one of timestamp or error")

    @classmethod
    def success(cls, value: datetime.datetime) -> "ExtractResult":
        return cls(timestamp=CaptureTimestamp(value))

    @classmethod
    def failure(cls, error: ExtractError, detail: str = "") -> "ExtractResult":
        return cls(error=error, detail=detail)

    @property
    def ok(self) -> bool:
        return self.timestamp is not None

    def or_else(
        self, fallback: Callable[[ExtractError, str], CaptureTimestamp]
    ) -> CaptureTimestamp:
        """
        Return the extracted timestamp, or on failure the result of
        fallback(error, detail).
        """
        if self.timestamp is not None:
            return self.timestamp
        return fallback(self.error, self.detail)


class PlacementStatus(enum.Enum):
    COPIED = "copied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PlacementOutcome:
    """Result of placing one source file at its destination."""

    status: PlacementStatus
    destination: Path | None = None
    reason: str = ""
    size: int = 0

    @classmethod
    def copied(cls, destination: Path, size: int) -> "PlacementOutcome":
        return cls(PlacementStatus.COPIED, destination, size=size)

    @classmethod
    def skipped(cls, destination: Path) -> "PlacementOutcome":
        return cls(PlacementStatus.SKIPPED, destination)

    @classmethod
    def failed(cls, reason: str, destination: Path | None = None) -> "PlacementOutcome":
        return cls(PlacementStatus.FAILED, destination, reason=reason)


class PathGenerator:
    """
    Generates destination paths for sorted files.

    Layout: <target>/<year>/<MonthName>/<day>/<filename>
    """

    def __init__(self, config: AppConfig):
        """
        Initialize PathGenerator with configuration.

        Args:
            config: Application configuration
        """
        self.cfg = config

    @staticmethod
    def generate_subdir(timestamp: CaptureTimestamp) -> Path:
        """
        Generate the date partition for a timestamp.

        Args:
            timestamp: Resolved capture timestamp

        Returns:
            Relative path year/MonthName/day, day without zero padding
        """
        return Path(str(timestamp.year), MONTH_NAMES[timestamp.month], str(timestamp.day))

    @classmethod
    def build(cls, target_root: Path, timestamp: CaptureTimestamp, filename: str) -> Path:
        """
        Build the destination path for a file.

        Args:
            target_root: Root of the sorted tree
            timestamp: Resolved capture timestamp
            filename: Original file name (base name only)

        Returns:
            Destination file path under target_root
        """
        return target_root / cls.generate_subdir(timestamp) / Path(filename).name

    def generate_path(self, timestamp: CaptureTimestamp, source: Path) -> Path:
        """Destination for a source file under the configured target directory."""
        return self.build(self.cfg.target_dir, timestamp, source.name)


@dataclass
class Summary:
    """Per-run counters and the files worth reporting."""

    copied_count: int = 0
    copied_bytes: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    scan_error_count: int = 0
    collision_files: list[Path] = field(default_factory=list)
    fallback_files: list[tuple[Path, ExtractError, str]] = field(default_factory=list)
    failed_files: list[tuple[Path, str]] = field(default_factory=list)

    def mark_copied(self, size: int) -> None:
        self.copied_count += 1
        self.copied_bytes += size

    def mark_skipped(self, source: Path, destination: Path | None) -> None:
        """
        Count a skip; a destination whose size differs from the source is
        a distinct file with the same name and date, kept as a collision.
        """
        self.skipped_count += 1
        if destination is None:
            return
        try:
            if source.stat().st_size != destination.stat().st_size:
                self.collision_files.append(source)
        except OSError:
            self.collision_files.append(source)

    def mark_failed(self, source: Path, reason: str) -> None:
        self.failed_count += 1
        self.failed_files.append((source, reason))

    def mark_fallback(self, source: Path, reason: ExtractError, detail: str = "") -> None:
        self.fallback_files.append((source, reason, detail))

    def mark_scan_error(self) -> None:
        self.scan_error_count += 1

    def record(self, source: Path, outcome: PlacementOutcome) -> None:
        """Fold a placement outcome into the counters."""
        if outcome.status is PlacementStatus.COPIED:
            self.mark_copied(outcome.size)
        elif outcome.status is PlacementStatus.SKIPPED:
            self.mark_skipped(source, outcome.destination)
        else:
            self.mark_failed(source, outcome.reason)
