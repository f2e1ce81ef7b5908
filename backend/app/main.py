"""Main FastAPI application."""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import auth, public, users
from app.config import get_settings
from app.database import init_db
from app.utils.exceptions import AppException, InvalidInputError
from app.utils.logger import logger

STATIC_DIR = Path(__file__).parent / "static"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="LinkFolio API",
    description="Generate and manage portfolio websites from LinkedIn profiles",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render domain errors as {"error", "message"}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.error}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed requests as InvalidInput."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"][1:]) or "body"
        problems.append(f"{field}: {error['msg']}")
    return await app_exception_handler(request, InvalidInputError("; ".join(problems) or None))


# Include routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(public.router)

app.mount("/app", StaticFiles(directory=STATIC_DIR, html=True), name="spa")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "LinkFolio API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
