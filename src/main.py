import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.config import get_settings
from src.api.router import api_router
from src.api.health import router as health_router
from src.llm.openrouter import close_shared_client
from src.schemas.common import ErrorResponse

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application...")
    if not settings.openrouter_api_key:
        logger.warning("OPENROUTER_API_KEY is not set; LLM calls will be rejected")

    yield
    # Shutdown
    logger.info("Shutting down application...")
    await close_shared_client()  # Clean up HTTP connection pool


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="OT client-intake backend: pillar assessment analysis and note generation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies get the same envelope as every other failure."""
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning(f"Invalid request to {request.url.path}: {details}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=f"Invalid request: {details}").model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "app": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
    }
