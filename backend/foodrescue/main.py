# foodrescue/main.py
import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from foodrescue.core.config import settings
from foodrescue.core.errors import RescueError
from foodrescue.core.logging import configure_logging, get_logger
from foodrescue.routers import auth, donors, pickups, stats

logger = get_logger(__name__)

# besides "missing", error types that mean "left blank" when the input is empty
_BLANK_ERRORS = {"string_too_short"}


def _is_blank(error) -> bool:
    if error.get("type") == "missing":
        return True
    return error.get("type") in _BLANK_ERRORS and not str(error.get("input") or "").strip()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    if settings.use_mongo:
        from foodrescue.core.db import get_client, get_db
        from foodrescue.core.indexes import ensure_indexes
        await ensure_indexes(get_db())
        logger.info("MongoDB ready (%s)", settings.mongo_db)
    else:
        logger.info("Using in-memory store")

    yield

    if settings.use_mongo:
        get_client().close()


def _humanize(name) -> str:
    # pickupTimeWindow -> pickup time window
    return re.sub(r"(?<!^)(?=[A-Z])", " ", str(name)).lower()


def validation_message(errors) -> str:
    if any(_is_blank(e) for e in errors):
        return "Missing required fields"
    loc = [p for p in errors[0].get("loc", ()) if isinstance(p, str) and p not in ("body", "query", "path")]
    return f"Invalid {_humanize(loc[-1])}" if loc else "Invalid request"


# --- Create app FIRST ---
app = FastAPI(lifespan=lifespan, title="Food Rescue API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------- Error rendering: always {"message": ...} ----------------
@app.exception_handler(RescueError)
async def _rescue_error(request: Request, exc: RescueError):
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    # the rejected input may be a non-finite float, which JSON cannot carry
    details = [{k: v for k, v in e.items() if k not in ("input", "ctx")} for e in errors]
    return JSONResponse(
        {"message": validation_message(errors), "errors": jsonable_encoder(details)},
        status_code=400,
    )


@app.exception_handler(PyMongoError)
async def _store_error(request: Request, exc: PyMongoError):
    logger.exception("Database operation failed on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Operation failed. Please try again."}, status_code=503)

# ---------------- Include routers ----------------
app.include_router(auth.router)       # /api/auth
app.include_router(donors.router)     # /api/donors
app.include_router(pickups.router)    # /api/pickup-requests
app.include_router(stats.router)      # /api/stats


# Health
@app.get("/health")
def health():
    return {"ok": True}
