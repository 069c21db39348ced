"""
Copy logic for PhotoSort.
"""

import errno
import os
import shutil
import tempfile
from pathlib import Path

from photosort.models import PlacementOutcome

# errno values meaning the filesystem cannot hard link
NO_LINK_ERRNOS = {errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EXDEV, errno.EMLINK}


class FilePlacer:
    """
    Copies a source file to its destination unless something is already there.

    The copy is written to a hidden temporary file next to the destination
    and published with an atomic create-if-absent, so a crash or a concurrent
    writer never leaves a partial file under the final name.
    """

    temp_prefix = ".photosort-"
    temp_suffix = ".part"

    def place(self, source: Path, destination: Path) -> PlacementOutcome:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            return PlacementOutcome.failed(
                f"Cannot create directory '{destination.parent}': a file is in the way.",
                destination,
            )
        except PermissionError:
            return PlacementOutcome.failed(
                f"Permission denied: cannot create directory '{destination.parent}'.",
                destination,
            )
        except OSError as e:
            return PlacementOutcome.failed(
                f"Error creating directory '{destination.parent}': {e}", destination
            )

        if os.path.lexists(destination):
            return PlacementOutcome.skipped(destination)

        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=self.temp_prefix, suffix=self.temp_suffix, dir=destination.parent
            )
        except OSError as e:
            return PlacementOutcome.failed(f"Cannot write to '{destination.parent}': {e}", destination)
        os.close(fd)
        temp_path = Path(temp_name)

        try:
            shutil.copy2(source, temp_path)
            size = temp_path.stat().st_size
            if not self._publish(temp_path, destination):
                return PlacementOutcome.skipped(destination)
        except FileNotFoundError:
            return PlacementOutcome.failed("Source file no longer exists.", destination)
        except PermissionError as e:
            return PlacementOutcome.failed(f"Permission denied: {e}", destination)
        except OSError as e:
            return PlacementOutcome.failed(f"File system error: {e}", destination)
        finally:
            temp_path.unlink(missing_ok=True)

        return PlacementOutcome.copied(destination, size)

    @staticmethod
    def _publish(temp_path: Path, destination: Path) -> bool:
        """
        Give the finished copy its final name.

        Returns:
            False if another file took the destination first
        """
        try:
            os.link(temp_path, destination)
            return True
        except FileExistsError:
            return False
        except OSError as e:
            if e.errno not in NO_LINK_ERRNOS:
                raise

        # No hard links on this filesystem
        if os.path.lexists(destination):
            return False
        os.replace(temp_path, destination)
        return True
