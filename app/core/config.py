import logging
import os

DATABASE_URL = os.getenv("ELIB_DB", "sqlite:///./elibrary.db")
LOG_LEVEL = os.getenv("ELIB_LOG", "INFO")
DEFAULT_RENTAL_DAYS = int(os.getenv("ELIB_DEFAULT_RENTAL_DAYS", "7"))

logging.basicConfig(level=LOG_LEVEL,
                    format="%(asctime)s %(levelname)s %(name)s - %(message)s")
logger = logging.getLogger("elibrary")
