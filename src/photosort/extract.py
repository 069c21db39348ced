"""
Capture date resolution for PhotoSort.

TimestampExtractor reads the embedded original date/time through an
ExifTool session; TimestampResolver falls back to the file's mtime.
"""

import datetime
import os
from pathlib import Path
from typing import Any

from exiftool.exceptions import ExifToolException

from photosort.models import (
    AppConfig,
    CaptureTimestamp,
    ContainerType,
    ExtractError,
    ExtractResult,
    TimestampSource,
    get_normalized_extension,
)

# Leading bytes of each supported container
SIGNATURES: tuple[tuple[bytes, ContainerType], ...] = (
    (b"\xff\xd8\xff", ContainerType.JPEG),
    (b"\x89PNG\r\n\x1a\n", ContainerType.PNG),
    (b"II*\x00", ContainerType.TIFF),
    (b"MM\x00*", ContainerType.TIFF),
)
HEADER_SIZE = 8


class TimestampUnavailableError(Exception):
    """Neither embedded metadata nor the filesystem yielded a timestamp."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Cannot read modification time of '{path}': {reason}")
        self.path = path
        self.reason = reason


def sniff_container(path: Path, cfg: AppConfig) -> ContainerType:
    """
    Detect the container type from the file header, then the extension.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, "rb") as f:
        header = f.read(HEADER_SIZE)

    for signature, container in SIGNATURES:
        if header.startswith(signature):
            return container

    name = cfg.container_extensions.get(get_normalized_extension(path))
    return ContainerType(name) if name else ContainerType.UNSUPPORTED


def describe_error(error: Exception) -> str:
    """Error text, followed by ExifTool's own stderr message when it gave one."""
    stderr = str(getattr(error, "stderr", "") or "").strip()
    return f"{error} ({stderr})" if stderr else str(error)


def parse_exif_datetime(value: Any) -> datetime.datetime | None:
    """
    Parse an EXIF/XMP date string such as '2022:01:09 10:30:00'.

    Dash separated dates and a 'T' separator are accepted; sub-seconds
    and zone offsets after the seconds field are ignored.
    """
    date_str = str(value).strip()

    # Validate minimum length to avoid index errors
    if len(date_str) < 19:
        return None

    # YYYY:MM:DD HH:MM:SS -> YYYY-MM-DD HH:MM:SS
    if date_str[4:5] == ":" and date_str[7:8] == ":":
        date_str = date_str.replace(":", "-", 2)
    date_str = date_str[:10] + " " + date_str[11:19]

    try:
        return datetime.datetime.strptime(date_str, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None


class TimestampExtractor:
    """Reads the original capture date embedded in jpeg, png and tiff files."""

    def __init__(self, reader: Any, config: AppConfig):
        """
        Args:
            reader: Open ExifToolHelper session (or anything with get_metadata)
            config: Application configuration
        """
        self.reader = reader
        self.cfg = config

    def extract(self, path: Path) -> ExtractResult:
        try:
            container = sniff_container(path, self.cfg)
        except OSError as e:
            return ExtractResult.failure(ExtractError.IO_ERROR, str(e))

        if container is ContainerType.UNSUPPORTED:
            return ExtractResult.failure(ExtractError.UNSUPPORTED_FORMAT)

        try:
            data = self.reader.get_metadata(str(path))
        except (ExifToolException, OSError, ValueError) as e:
            return ExtractResult.failure(ExtractError.IO_ERROR, describe_error(e))

        metadata = data[0] if data else {}
        return self.parse_metadata(metadata)

    def parse_metadata(self, metadata: dict[str, Any]) -> ExtractResult:
        """Pick the original date/time out of an ExifTool tag dictionary."""
        groups = {key.split(":", 1)[0] for key in metadata if ":" in key}
        if not groups.intersection(self.cfg.metadata_groups):
            return ExtractResult.failure(ExtractError.NO_METADATA)

        malformed = ""
        for tag in self.cfg.exif_date_tags:
            if tag not in metadata:
                continue
            parsed = parse_exif_datetime(metadata[tag])
            if parsed is not None:
                return ExtractResult.success(parsed)
            malformed = f"{tag}={metadata[tag]!r}"

        if malformed:
            return ExtractResult.failure(ExtractError.MALFORMED_VALUE, malformed)
        return ExtractResult.failure(ExtractError.TAG_MISSING)


class TimestampResolver:
    """Best available capture date: embedded metadata, else mtime."""

    def __init__(self, extractor: TimestampExtractor):
        self.extractor = extractor

    def resolve(self, path: Path) -> CaptureTimestamp:
        """
        Resolve the capture timestamp of a file.

        Raises:
            TimestampUnavailableError: If the fallback stat call fails
        """
        return self.extractor.extract(path).or_else(
            lambda error, detail: self.from_mtime(path, error, detail)
        )

    @staticmethod
    def from_mtime(path: Path, reason: ExtractError, detail: str = "") -> CaptureTimestamp:
        try:
            mtime = os.stat(path).st_mtime
        except OSError as e:
            raise TimestampUnavailableError(path, e.strerror or str(e)) from e
        return CaptureTimestamp(
            datetime.datetime.fromtimestamp(mtime),
            source=TimestampSource.MTIME,
            fallback_reason=reason,
            fallback_detail=detail,
        )
