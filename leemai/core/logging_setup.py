import logging
import sys

from leemai.core.config import settings


def setup_logging(log_file: str = settings.log_file):
    """Configures logging to write to the console and, if set, a file."""
    handlers = [logging.StreamHandler(sys.stdout)]
    # Serverless-Dateisysteme sind meist read-only, daher nur auf Wunsch.
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
    logging.getLogger("uvicorn").handlers = []  # Avoid double logging if uvicorn sets its own
    logging.getLogger("uvicorn").propagate = True
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
