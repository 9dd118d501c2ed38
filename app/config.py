import logging
import os

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./room_booking.db")
SKIP_DB_INIT = os.getenv("SKIP_DB_INIT") == "1"
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "1").lower() in {"1", "true", "yes"}
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
