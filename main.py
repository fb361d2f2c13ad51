"""Main FastAPI application"""
import logging
import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorClient

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from config import (
    CORS_ORIGINS,
    DB_NAME,
    DEFAULT_RATE_LIMIT,
    EXPENSE_STORE,
    EXPENSES_COLLECTION,
    LOG_LEVEL,
    MONGODB_URI,
    RATE_LIMIT_ENABLED,
)
from routes import router as api_router
from stores.memory import InMemoryExpenseStore
from stores.mongo import MongoExpenseStore

# --- Unified Logging Configuration with Rich ---
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            # RichHandler renders time and level itself
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "level": "DEBUG",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
            "markup": False,
        },
    },
    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "": { # Root logger for our application
            "handlers": ["default"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)

logger = logging.getLogger(__name__)

if EXPENSE_STORE == "mongo" and not MONGODB_URI:
    logger.error("MONGODB_URI environment variable not set! Database connection will fail.")

# Application state to hold the store and its client
app_state = {}

# --- Rate Limiter Setup ---
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[DEFAULT_RATE_LIMIT],
    enabled=RATE_LIMIT_ENABLED,
)


async def open_expense_store():
    """Builds the configured store. Returns None if MongoDB cannot be reached."""
    if EXPENSE_STORE == "memory":
        logger.info("Using in-memory expense store. Data will not survive a restart.")
        return InMemoryExpenseStore()

    logger.info(f"Connecting to MongoDB database '{DB_NAME}'...")
    client = AsyncIOMotorClient(MONGODB_URI)
    try:
        await client.admin.command('ping')
        logger.info("MongoDB ping successful.")
        store = MongoExpenseStore(client[DB_NAME].get_collection(EXPENSES_COLLECTION))
        await store.ensure_indexes()
        logger.info(f"Successfully connected to MongoDB database: {DB_NAME}")
        return store
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        client.close()
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_state["expense_store"] = await open_expense_store()

    yield # Application runs here

    store = app_state.pop("expense_store", None)
    if store is not None:
        logger.info(f"Closing {store.name} expense store...")
        await store.close()


app = FastAPI(
    title="Expense Ledger API",
    description="API for recording, querying and summarizing personal expenses.",
    version="0.1.0",
    lifespan=lifespan
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reports malformed input as a 400 listing each offending field."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error["loc"] if part not in ("body", "query", "path", "header")]
        errors.append({
            "field": ".".join(location),
            "message": error["msg"],
            "type": error["type"],
        })
    logger.info(f"Validation failed for {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"errors": errors})


# --- Add Middleware (Order Matters) ---
# 1. Rate Limiter Middleware
app.add_middleware(SlowAPIMiddleware)
# 2. CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(
    api_router,
    prefix="/api",
    tags=["api"],
)


# Make app state accessible via middleware
@app.middleware("http")
async def add_app_state_to_request(request: Request, call_next):
    """Adds the expense store to the request state."""
    request.state.expense_store = app_state.get("expense_store")
    response = await call_next(request)
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
