# wrkr/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wrkr.api.v1.router import api_router
from wrkr.core.catalog import Catalogs
from wrkr.core.config import settings
from wrkr.core.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: a catalog problem aborts startup
    logger.info("Starting Wrkr API")
    app.state.catalogs = Catalogs.load(
        policy_path=settings.POLICY_PATH,
        repo_root=settings.REPO_ROOT,
    )

    yield

    # Shutdown
    logger.info("Shutting down Wrkr API")


app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=("/api/docs" if settings.ENVIRONMENT == "development" else None),
    redoc_url=("/api/redoc" if settings.ENVIRONMENT == "development" else None),
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.exception("Unhandled exception while handling request", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
