from paperlens.config import settings
from paperlens.core.exceptions import FileTooLargeError

BYTES_PER_MB = 1024 * 1024


def check_file_size(size_bytes: int, max_mb: int | None = None) -> None:
    """Raise FileTooLargeError before any parsing when the payload is oversize."""
    max_mb = max_mb or settings.max_file_size_mb
    if size_bytes > max_mb * BYTES_PER_MB:
        raise FileTooLargeError(size_mb=size_bytes / BYTES_PER_MB, max_mb=max_mb)
