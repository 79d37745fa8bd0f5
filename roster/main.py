"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roster.api.v1 import router as v1_router
from roster.core.config import settings
from roster.services.errors import (
    DuplicateEmail,
    Forbidden,
    InvalidPassword,
    NotFound,
    PasswordHashError,
    PasswordResetError,
    RoleExists,
    RosterError,
    SessionMismatch,
    Unauthorized,
)

# Most specific first; RosterError itself falls through to 500.
ERROR_STATUS: tuple[tuple[type[RosterError], int], ...] = (
    (Unauthorized, status.HTTP_401_UNAUTHORIZED),
    (SessionMismatch, status.HTTP_409_CONFLICT),
    (Forbidden, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (RoleExists, status.HTTP_409_CONFLICT),
    (DuplicateEmail, status.HTTP_409_CONFLICT),
    (InvalidPassword, status.HTTP_422_UNPROCESSABLE_CONTENT),
    (PasswordHashError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (PasswordResetError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)

app = FastAPI(
    title="Roster API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(RosterError)
async def handle_roster_error(_: Request, exc: RosterError) -> JSONResponse:
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code = code
            break
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(status_code=status_code, content={"detail": exc.message}, headers=headers)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Roster API"}
