import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.ghost import ghost
from app.api.api import api_router
from app.api.endpoints import health

# Logging Configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize Ghost Admin client
    try:
        ghost.get_client()
        logger.info("Ghost Admin API client initialized.")
    except Exception as e:
        logger.error(f"Failed to initialize Ghost Admin API client: {e}")
    yield
    await ghost.close()

app = FastAPI(
    title=settings.PROJECT_NAME,
    lifespan=lifespan
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response

# Malformed bodies get the same envelope as domain errors, without echoing input
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected malformed request to {request.url.path}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body"},
    )

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal Server Error"},
    )

# Include Router
app.include_router(api_router, prefix="/api")
app.include_router(health.router)

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running"}
