"""Housekeeping: delete refresh tokens that can no longer be used (expired or revoked)."""

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import or_
from sqlalchemy.orm import Session

from jobmonitor.models import RefreshToken

if TYPE_CHECKING:
    from jobmonitor.core.config import Settings

logger = logging.getLogger(__name__)


def run_token_sweep(session: Session, settings: "Settings", now: datetime | None = None) -> int:
    """
    Delete refresh tokens with expires_at < now or revoked = true; return the count.

    Only rows the validity check already rejects are touched, so this may run alongside
    live traffic. Idempotent: safe to run repeatedly.
    """
    if not settings.TOKEN_SWEEP_ENABLED:
        logger.info("Token sweep is disabled (TOKEN_SWEEP_ENABLED=false); skipping.")
        return 0

    cutoff = now or datetime.now(UTC)
    deleted_count = (
        session.query(RefreshToken)
        .filter(or_(RefreshToken.expires_at < cutoff, RefreshToken.revoked.is_(True)))
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted_count > 0:
        logger.info(
            "Token sweep: cutoff=%s, refresh_tokens_deleted=%s",
            cutoff.isoformat(),
            deleted_count,
        )
    return deleted_count


def sweep_once(session_factory: Callable[[], Session], settings: "Settings") -> int:
    """Run one sweep in its own session; errors are logged and reported as 0 deleted."""
    session = session_factory()
    try:
        return run_token_sweep(session, settings)
    except Exception:
        session.rollback()
        logger.exception("Token sweep failed")
        return 0
    finally:
        session.close()


async def run_periodic_token_sweep(
    session_factory: Callable[[], Session],
    settings: "Settings",
) -> None:
    """Sweep every TOKEN_SWEEP_INTERVAL_MINUTES until cancelled (started by the app lifespan)."""
    interval = settings.TOKEN_SWEEP_INTERVAL_MINUTES * 60
    logger.info("Periodic token sweep started (every %s minutes)", settings.TOKEN_SWEEP_INTERVAL_MINUTES)
    while True:
        await asyncio.sleep(interval)
        await asyncio.to_thread(sweep_once, session_factory, settings)
