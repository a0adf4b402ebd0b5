"""Create the Solo Stage schema on the configured database."""
import logging

from solo_stage.core.settings import settings
from solo_stage.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    init_db()
    logger.info("Database initialized at %s", settings.database_url)
