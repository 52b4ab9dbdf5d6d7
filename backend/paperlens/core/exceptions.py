class PaperLensError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str = "An error occurred", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class FileTooLargeError(PaperLensError):
    def __init__(self, size_mb: float, max_mb: int):
        self.size_mb = size_mb
        self.max_mb = max_mb
        super().__init__(
            f"File size {size_mb:.1f}MB exceeds maximum {max_mb}MB",
            status_code=413,
        )


class UnsupportedFileTypeError(PaperLensError):
    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type}", status_code=400)


class LoadError(PaperLensError):
    """The binary could not be opened: corrupt, encrypted or not a PDF."""

    def __init__(self, message: str = "Failed to load document"):
        super().__init__(message, status_code=422)


class MetadataError(PaperLensError):
    def __init__(self, message: str = "Failed to read embedded metadata"):
        super().__init__(message, status_code=500)


class PageExtractionError(PaperLensError):
    def __init__(self, page_number: int, cause: Exception):
        self.page_number = page_number
        self.cause = cause
        super().__init__(f"Page {page_number} extraction failed: {cause}", status_code=500)


class BatchJoinError(PaperLensError):
    def __init__(self, page_numbers: list[int], cause: Exception):
        self.page_numbers = page_numbers
        self.cause = cause
        super().__init__(
            f"Batch for pages {page_numbers[0]}-{page_numbers[-1]} failed: {cause}",
            status_code=500,
        )


class ExtractionTimeoutError(PaperLensError):
    def __init__(self, timeout_seconds: float):
        super().__init__(
            f"Extraction exceeded the {timeout_seconds:g}s time budget",
            status_code=504,
        )
