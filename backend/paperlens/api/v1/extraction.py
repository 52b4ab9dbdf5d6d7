from fastapi import APIRouter, File, UploadFile

from paperlens.core.logging import get_logger
from paperlens.schemas.common import ErrorResponse
from paperlens.schemas.extraction import ExtractionResponse
from paperlens.services.extraction.factory import ExtractorFactory
from paperlens.services.extraction.file_guard import check_file_size

router = APIRouter(prefix="/extract", tags=["Extraction"])
logger = get_logger(__name__)


@router.post(
    "",
    response_model=ExtractionResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def extract_document(file: UploadFile = File(...)):
    """Extract text, metadata and structure from an uploaded PDF.

    Unsupported types and oversize uploads are rejected up front; every
    other failure comes back as a 200 with ``status == "fallback"``.
    """
    extractor = ExtractorFactory.get_extractor(file.content_type or "application/octet-stream")

    # Cheap rejection from the declared size before reading the body
    if file.size is not None:
        check_file_size(file.size)

    content = await file.read()
    check_file_size(len(content))

    filename = file.filename or "unnamed.pdf"
    logger.info(f"Extracting {filename} ({len(content)} bytes)")
    result = await extractor.aextract(content, filename, len(content))

    return ExtractionResponse.from_result(result)
