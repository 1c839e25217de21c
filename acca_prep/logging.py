import logging
import structlog
from acca_prep.config import settings


def configure_logging(level: str = None, json_output: bool = None) -> None:
    """
    Configure structlog for application-wide logging.

    Initialises stdlib logging at the configured level and routes structlog
    through it with ISO timestamps. Console rendering by default, JSON lines
    when `log_json` is enabled.
    """
    level = (level or settings.log_level).upper()
    json_output = settings.log_json if json_output is None else json_output

    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="%(message)s")
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def get_logger(name: str = None):
    return structlog.get_logger(name)
