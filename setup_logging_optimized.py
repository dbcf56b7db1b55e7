import logging
import os


def setup_logging(level: str = None) -> None:
    """Minimal logging setup shared by the pipeline and the API.

    - Sets root logger level (LOG_LEVEL env wins when no level is passed)
    - Ensures a basic StreamHandler is attached once
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    try:
        root.setLevel(getattr(logging, level.upper()))
    except AttributeError:
        root.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
