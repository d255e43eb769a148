"""Apply alembic migrations to the draft store configured by DATABASE_URL."""
import logging
import subprocess
import sys

from app.core.config import settings
from app.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("run_migrations")


if __name__ == "__main__":
    logger.info("Running migrations against %s", settings.DATABASE_URL.split("@")[-1])
    try:
        subprocess.run([sys.executable, "-m", "alembic", "upgrade", "head"], check=True)
        logger.info("Database migration completed")
    except subprocess.CalledProcessError as e:
        logger.error(f"Migration failed: {e}")
        sys.exit(e.returncode)
