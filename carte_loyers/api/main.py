# carte_loyers/api/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from carte_loyers.api.config.settings import settings
from carte_loyers.api.dependencies.services import get_fetcher
from carte_loyers.api.middleware import LoggingMiddleware
from carte_loyers.api.routes import geocodage as geocodage_routes
from carte_loyers.api.routes import health as health_routes
from carte_loyers.api.routes import loyers as loyers_routes
from carte_loyers.api.routes import metrics as metrics_routes
from carte_loyers.api.routes import simulation as simulation_routes
from carte_loyers.api.utils.exception_handlers import (
    carte_loyers_exception_handler, general_exception_handler,
    http_exception_handler, validation_exception_handler)
from carte_loyers.api.utils.exceptions import CarteLoyersException
from carte_loyers.api.utils.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Fermeture du client HTTP partagé (data.gouv, geo.api)
    await get_fetcher().aclose()


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Carte des loyers et simulation de cash-flow locatif",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


@app.get("/")
async def root():
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "running",
    }


@app.get("/liveness")
async def liveness():
    return {"status": "ok"}


@app.get("/readiness")
async def readiness():
    return {"status": "ready"}


app.include_router(
    health_routes.router, prefix=f"{settings.API_V1_STR}/health", tags=["Health"]
)
app.include_router(
    loyers_routes.router, prefix=f"{settings.API_V1_STR}/loyers", tags=["Loyers"]
)
app.include_router(
    geocodage_routes.router,
    prefix=f"{settings.API_V1_STR}/geocodage",
    tags=["Géocodage"],
)
app.include_router(simulation_routes.router, prefix=settings.API_V1_STR)

if settings.METRICS_ENABLED:
    app.include_router(metrics_routes.router, tags=["Monitoring"])

app.add_exception_handler(
    CarteLoyersException, carte_loyers_exception_handler  # type: ignore[arg-type]
)
app.add_exception_handler(
    StarletteHTTPException, http_exception_handler  # type: ignore[arg-type]
)
app.add_exception_handler(
    RequestValidationError, validation_exception_handler  # type: ignore[arg-type]
)
app.add_exception_handler(
    Exception, general_exception_handler  # type: ignore[arg-type]
)

logger.info(f"🚀 {settings.PROJECT_NAME} {settings.VERSION} prêt")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "carte_loyers.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
