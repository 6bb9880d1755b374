"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.routes import trainer
from api.session import purge_expired_sessions
from config import config

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

RATE_LIMIT = f"{config.rate_limit.requests_per_minute}/minute"

# Seconds between sweeps of expired in-memory sessions
SESSION_SWEEP_SECONDS = 60

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[RATE_LIMIT],
)


async def sweep_sessions() -> None:
    while True:
        await asyncio.sleep(SESSION_SWEEP_SECONDS)
        await purge_expired_sessions()


@asynccontextmanager
async def lifespan(app: FastAPI):
    task = asyncio.create_task(sweep_sessions())
    try:
        yield
    finally:
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task


app = FastAPI(
    title="Count Trainer",
    description="Blackjack card counting trainer API",
    version="0.1.0",
    debug=config.debug,
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logging.getLogger(__name__).warning("Rate limit hit by %s", get_remote_address(request))
    return JSONResponse(status_code=429, content={"detail": f"Rate limit exceeded: {exc.detail}"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)

app.include_router(trainer.router, prefix="/api/trainer", tags=["trainer"])


@app.get("/api/health")
@limiter.limit(RATE_LIMIT)
async def health_check(request: Request) -> dict[str, str]:
    return {"status": "healthy"}


def run() -> None:
    """Serve the API with uvicorn (the ``count-trainer`` command)."""
    import uvicorn

    uvicorn.run("api.main:app", host=config.host, port=config.port, reload=config.debug)
