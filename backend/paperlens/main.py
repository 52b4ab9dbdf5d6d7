from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from paperlens.config import settings
from paperlens.core.exceptions import PaperLensError
from paperlens.core.logging import get_logger, setup_logging
from paperlens.core.middleware import CorrelationIDMiddleware, RequestLoggingMiddleware
from paperlens.api.v1.router import api_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.app_name}")
    yield
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="PDF ingestion: text, per-page text, metadata and structural profile",
    lifespan=lifespan,
)

# Middleware stack, last added runs outermost
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.exception_handler(PaperLensError)
async def paperlens_exception_handler(request: Request, exc: PaperLensError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "status_code": exc.status_code},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "status_code": 500},
    )


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for load balancers and container orchestration."""
    return {"status": "healthy", "version": settings.app_version}
