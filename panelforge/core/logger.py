"""Console and file logging for panelforge.

Every module logger lives under the ``panelforge`` package logger. Module
loggers carry a Rich console handler fixed at INFO and no level of their own,
so the package logger decides what reaches the log file.
"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

console = Console()

PACKAGE_LOGGER = "panelforge"
LOG_DIR = Path.home() / ".panelforge"
LOG_FILE = LOG_DIR / "panelforge.log"
FALLBACK_LOG_FILE = Path("/tmp/panelforge.log")
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_file_logging_configured = False


def _package_logger() -> logging.Logger:
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.level == logging.NOTSET:
        package_logger.setLevel(logging.INFO)
    return package_logger


def _resolve_log_file(log_file: Optional[str]) -> Path:
    """Create the log directory, falling back to /tmp when it is not writable."""
    target = Path(log_file) if log_file else LOG_FILE
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        target = FALLBACK_LOG_FILE
        target.parent.mkdir(parents=True, exist_ok=True)
    return target


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Send panelforge log records to a file, once per process.

    Args:
        log_file: Path to log file (defaults to ~/.panelforge/panelforge.log)
        verbose: Record debug messages as well
    """
    global _file_logging_configured

    if _file_logging_configured:
        return

    target = _resolve_log_file(log_file)
    level = logging.DEBUG if verbose else logging.INFO

    file_handler = logging.FileHandler(target)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    package_logger = _package_logger()
    package_logger.addHandler(file_handler)
    package_logger.setLevel(level)

    _file_logging_configured = True

    package_logger.info(f"panelforge logging initialized: {target}")


def get_logger(name: str) -> logging.Logger:
    """Module logger with a Rich console handler.

    File output is enabled separately via setup_file_logging().
    """
    _package_logger()
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    return logger
