from fastapi import APIRouter

from paperlens.config import settings
from paperlens.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="healthy", service="paperlens", version=settings.app_version)
