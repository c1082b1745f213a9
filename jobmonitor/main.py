"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobmonitor.api import router as api_router
from jobmonitor.api.errors import register_exception_handlers
from jobmonitor.core.config import settings
from jobmonitor.core.database import SessionLocal
from jobmonitor.core.logging_config import configure_logging
from jobmonitor.core.policy import default_policy
from jobmonitor.core.request_auth import RequestAuthenticator
from jobmonitor.core.tokens import TokenCodec
from jobmonitor.middleware.security import SecurityMiddleware
from jobmonitor.services.token_sweep import run_periodic_token_sweep
from jobmonitor.services.users import seed_demo_users

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Security components, built once; a bad signing key fails here, at startup.
token_codec = TokenCodec.from_settings(settings)
authorization_policy = default_policy(settings.API_PREFIX)
request_authenticator = RequestAuthenticator(token_codec)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.SEED_DEMO_USERS and settings.APP_ENV == "dev":
        db = SessionLocal()
        try:
            seed_demo_users(db)
        finally:
            db.close()

    sweep_task: asyncio.Task | None = None
    if settings.TOKEN_SWEEP_ENABLED and settings.TOKEN_SWEEP_INTERVAL_MINUTES > 0:
        sweep_task = asyncio.create_task(run_periodic_token_sweep(SessionLocal, settings))

    logger.info("Job Monitor API started (env=%s)", settings.APP_ENV)
    yield

    if sweep_task is not None:
        sweep_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweep_task
    logger.info("Job Monitor API stopped")


app = FastAPI(
    title="Job Monitor API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)
app.state.token_codec = token_codec
app.state.authorization_policy = authorization_policy

register_exception_handlers(app)

# Added first so CORS (added last, outermost) answers preflight requests before it.
app.add_middleware(
    SecurityMiddleware,
    authenticator=request_authenticator,
    policy=authorization_policy,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Job Monitor API"}
