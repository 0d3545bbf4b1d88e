import logging
import json
import time
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from oneoften.core.database import engine, Base
from oneoften.core.config import settings
from oneoften.core.limiter import limiter
from oneoften.routes import auth, bets, stats

# Configure structured JSON logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(message)s",
)
logger = logging.getLogger(__name__)

# Optional record attributes copied into the JSON line when present
_EXTRA_FIELDS = (
    "player_id",
    "settlement_id",
    "stake",
    "chosen_number",
    "drawn_number",
    "bet_result",
    "login",
    "request_path",
    "response_time",
)


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
        }
        for field in _EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


# Apply JSON formatter to root logger
handler = logging.StreamHandler()
handler.setFormatter(JSONFormatter())
logging.getLogger().handlers = [handler]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting One-of-Ten API")
    if settings.ENVIRONMENT.lower() in {"development", "dev", "testing", "test"}:
        Base.metadata.create_all(bind=engine)
    else:
        logger.info(
            "Skipping schema auto-creation in non-dev environment; run migrations instead"
        )
    yield
    logger.info("Shutting down One-of-Ten API")


app = FastAPI(
    title="One-of-Ten API",
    description="Guess a digit from 0 to 9 and win nine times your stake",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting — per-IP throttle on auth endpoints
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware — origins driven by CORS_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time

    log_record = logging.LogRecord(
        name="api",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg=f"{request.method} {request.url.path}",
        args=(),
        exc_info=None,
    )
    log_record.request_path = str(request.url.path)
    log_record.response_time = f"{process_time:.3f}s"

    logger.handle(log_record)

    return response


# Include routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(bets.router, prefix="/bets", tags=["Bets"])
app.include_router(stats.router, prefix="/stats", tags=["Statistics"])


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "oneoften-api",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT,
    }


@app.get("/ready")
async def readiness_check():
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "service": "oneoften-api",
            "environment": settings.ENVIRONMENT,
        }
    except Exception:
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
