"""RSVP Manager API."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from app.commerce.client import OrderGateway
from app.core.config import settings
from app.core.database import create_db_and_tables
from app.core.exceptions import AppError
from app.core.security import IdentityVerifier
from app.core.static import ClientFiles
from app.routes import events, orders, rsvps

# Configure logging
log_config = {}
if settings.log_file:
    log_path = Path(settings.log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_config["filename"] = str(log_path)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    **log_config,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup
    logger.info("Starting RSVP Manager")
    create_db_and_tables()
    app.state.identity_verifier = IdentityVerifier.from_settings(settings)
    app.state.order_gateway = OrderGateway.from_settings(settings)
    yield
    # Shutdown
    await app.state.order_gateway.aclose()
    logger.info("RSVP Manager shut down")


app = FastAPI(
    title=settings.app_name,
    description="Events, RSVPs and validated ticket orders for the RSVP web client",
    version="0.1.0",
    lifespan=lifespan,
)

origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request.", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Store failure on {request.method} {request.url.path}")
    message = str(exc) if settings.expose_error_details else "Internal server error."
    return JSONResponse(status_code=500, content={"message": message})


# Include routers
app.include_router(events.router, prefix="/api")
app.include_router(rsvps.router, prefix="/api")
app.include_router(orders.router, prefix="/api")


@app.get("/api/", response_class=PlainTextResponse)
async def api_root():
    """Liveness check for the API."""
    return "API works"


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Serve the built web client last so API routes take precedence
static_dir = Path(settings.static_dir)
if settings.environment != "dev" and static_dir.is_dir():
    app.mount("/", ClientFiles(directory=static_dir, html=True), name="client")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
