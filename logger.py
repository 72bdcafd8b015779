import logging

from settings import settings

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format=LOG_FORMAT,
)

# pymongo logs every heartbeat and pool event at DEBUG/INFO.
logging.getLogger("pymongo").setLevel(logging.WARNING)


def get_logger(name: str):
    return logging.getLogger(name)
