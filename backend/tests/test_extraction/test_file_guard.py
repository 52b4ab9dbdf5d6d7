import pytest

from paperlens.core.exceptions import FileTooLargeError
from paperlens.services.extraction.file_guard import BYTES_PER_MB, check_file_size


class TestFileGuard:
    def test_accepts_limit_exactly(self):
        check_file_size(100 * BYTES_PER_MB)

    def test_rejects_one_byte_over(self):
        with pytest.raises(FileTooLargeError) as exc_info:
            check_file_size(100 * BYTES_PER_MB + 1)
        assert exc_info.value.status_code == 413
        assert "exceeds maximum 100MB" in exc_info.value.message

    def test_custom_limit(self):
        with pytest.raises(FileTooLargeError):
            check_file_size(2 * BYTES_PER_MB, max_mb=1)

    def test_empty_payload_passes_guard(self):
        check_file_size(0)
