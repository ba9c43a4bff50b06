"""Singleton logging configuration.

setup_logging() configures the root logger once per process and quiets
chatty third-party loggers. Safe to call from both the CLI and the
FastAPI app; the second call is a no-op.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Third-party loggers to suppress to WARNING
_SUPPRESSED_LOGGERS = (
    "httpx",
    "httpcore",
    "uvicorn.access",
    "watchfiles",
)

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger and suppress noisy third-party loggers.

    Idempotent: second call is a no-op.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return
    _configured = True

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def set_level(level: str) -> None:
    """Change the root level after setup (e.g. from Settings or --verbose)."""
    logging.getLogger().setLevel(getattr(logging, level.upper()))
