import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import structlog

from stayhub.db.engine import SessionLocal, engine
from stayhub.db.schema import init_db
from stayhub.logging_config import setup_logging
from stayhub.seed import seed_demo_data

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    """
    Create the schema on DATABASE_URL and load the demo marketplace dataset.

    Only useful against a persistent database; the default in-memory store
    is gone when this script exits.
    """
    logger.info("demo_seed_starting")
    try:
        init_db(engine)
        with SessionLocal() as session:
            loaded = seed_demo_data(session)
        logger.info("demo_seed_finished", loaded=loaded)
    except Exception:
        logger.exception("demo_seed_failed")
        raise


if __name__ == "__main__":
    main()
