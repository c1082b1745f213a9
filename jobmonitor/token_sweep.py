"""
CLI entrypoint for the refresh-token sweep. Run from cron, e.g.:

  python -m jobmonitor.token_sweep

Or hourly: 0 * * * * cd /path/to/jobmonitor && .venv/bin/python -m jobmonitor.token_sweep
"""

import logging
import sys

from jobmonitor.core.config import get_settings
from jobmonitor.core.database import SessionLocal
from jobmonitor.core.logging_config import configure_logging
from jobmonitor.services.token_sweep import run_token_sweep

logger = logging.getLogger(__name__)


def main() -> int:
    """Run one sweep: delete expired and revoked refresh tokens."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        deleted = run_token_sweep(db, settings)
        logger.info("Token sweep completed: refresh_tokens_deleted=%s", deleted)
        return 0
    except Exception as e:
        logger.exception("Token sweep failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
