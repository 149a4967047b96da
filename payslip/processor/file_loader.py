from pathlib import Path

from payslip.processor.exceptions import UploadTooLargeError


class FileLoader:
    """Reads a payslip document from disk, refusing oversized files."""

    def __init__(self, max_bytes: int) -> None:
        self._max_bytes = max_bytes

    def load(self, path: Path) -> bytes:
        """Read document bytes from disk.

        Raises:
            FileNotFoundError: if the file does not exist.
            UploadTooLargeError: if the file exceeds the configured limit.
        """
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        size = path.stat().st_size
        if size > self._max_bytes:
            raise UploadTooLargeError(f"{path} has {size} bytes (max {self._max_bytes})")
        return path.read_bytes()
