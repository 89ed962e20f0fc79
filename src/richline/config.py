import logging
import os
import sys
from typing import Optional

import structlog
from pydantic import BaseModel


class Settings(BaseModel):
    # Validate every produced document (slow, meant for development builds)
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            debug=os.environ.get("RICHLINE_DEBUG", "").lower() in ("1", "true", "yes", "on"),
            log_level=os.environ.get("RICHLINE_LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()


def configure_logging(level: Optional[str] = None):
    """
    Sends all log output to stderr as JSON.
    Stdout is reserved for command output (and for the MCP stdio protocol).
    """
    level = level or settings.log_level
    logging.basicConfig(stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
