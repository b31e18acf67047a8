import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ALLOWED_ORIGINS, LOG_LEVEL
from .errors import TripVoteError

# Import all models first to ensure SQLAlchemy metadata is properly initialized
from .models.db import Base, engine
from .models.auth_models import User
from .models_geo import Destination
from .models_vote import Vote
from .models_audit import AuditLog

# Import routers after models
from .api.auth import router as auth_router
from .api.destinations import router as destinations_router
from .api.votes import router as votes_router

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TripVote API")

# Error codes for framework-raised HTTP errors (unknown route, wrong method)
HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}

# CORS middleware must be added before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def make_cors_response(request: Request, status_code: int, content: dict):
    """JSONResponse that keeps CORS headers on error paths."""
    headers = {}
    origin = request.headers.get("origin")
    if origin and origin in ALLOWED_ORIGINS:
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
        }
    return JSONResponse(status_code=status_code, content=content, headers=headers)

@app.exception_handler(TripVoteError)
async def tripvote_exception_handler(request: Request, exc: TripVoteError):
    """Client errors raised by the services: expected outcomes, not faults."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.detail}")
    return make_cors_response(
        request,
        exc.status_code,
        {"success": False, "detail": exc.detail, "code": exc.code}
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors (422) with CORS headers."""
    logger.warning(f"Validation error: {exc.errors()}")
    return make_cors_response(
        request,
        422,
        {"success": False, "detail": jsonable_errors(exc), "code": "validation_error"}
    )

def jsonable_errors(exc: RequestValidationError):
    # ctx may hold exception instances that JSON cannot encode
    return [
        {k: v for k, v in err.items() if k in ("type", "loc", "msg")}
        for err in exc.errors()
    ]

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return make_cors_response(
        request,
        exc.status_code,
        {"success": False, "detail": exc.detail, "code": HTTP_ERROR_CODES.get(exc.status_code, "http_error")}
    )

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return make_cors_response(
        request,
        500,
        {"success": False, "detail": "Internal server error.", "code": "server_fault"}
    )

@app.get("/health")
def health():
    return {"ok": True, "origins": ALLOWED_ORIGINS}

app.include_router(auth_router)
app.include_router(destinations_router)
app.include_router(votes_router)
