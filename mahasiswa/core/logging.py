# mahasiswa/core/logging.py
import logging
import sys

from mahasiswa.core.config import settings


def setup_logging(level: str = None):
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )
    return logging.getLogger("mahasiswa")


logger = setup_logging()
