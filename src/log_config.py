"""
Environment configuration for applications embedding the log writer.

Reads a .env file (if any) and the process environment:
- LOG_WRITER_PATH: default file opened by open_from_env()
- LOG_LEVEL: level for this package's diagnostic logging
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from log_utils import LogWriterError
from log_writer import LogWriter

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Validate LOG_LEVEL
if not hasattr(logging, LOG_LEVEL):
    LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def setup_logging(level: str = None) -> None:
    """Configure console logging for the writer's diagnostics."""
    name = (level or LOG_LEVEL).upper()
    if not hasattr(logging, name):
        name = "INFO"
    logging.basicConfig(
        level=getattr(logging, name),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )


def open_from_env(env_var: str = "LOG_WRITER_PATH", default: Optional[str] = None) -> LogWriter:
    """Open a LogWriter on the path named by env_var.

    The variable is read at call time, so changes made after import are
    honored. Falls back to default; raises LogWriterError when neither
    yields a non-empty path.
    """
    path = os.getenv(env_var) or default
    if not path:
        raise LogWriterError(f"{env_var} is not set and no default path was given")
    logger.info(f"Opening log writer from {env_var}: {path}")
    return LogWriter(path)
