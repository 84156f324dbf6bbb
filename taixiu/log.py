import logging

from taixiu.config import settings

FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str | None = None):
    logging.basicConfig(level=(level or settings.log_level).upper(), format=FORMAT)
