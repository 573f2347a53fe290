import faulthandler
import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .utils import get_log_dir

LOG_FILE_NAME = "quickplay.log"
LOG_MAX_BYTES = 1_000_000
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_FAULT_FILE = None


def setup_app_logging(log_dir: Path | None = None, level: int = logging.INFO) -> Path:
    """Send log records and crash reports to a rotating file.

    Calling this again with the same directory leaves the existing handler in
    place and returns the same path.
    """
    log_path = Path(log_dir if log_dir is not None else get_log_dir()) / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if _find_file_handler(root, log_path) is not None:
        return log_path

    handler = RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.captureWarnings(True)
    _enable_fault_handler(log_path)
    _install_exception_hooks()
    logging.info("Logging to %s (python %s, %s)", log_path, sys.version.split()[0], sys.platform)
    return log_path


def _find_file_handler(logger: logging.Logger, log_path: Path):
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_path:
            return handler
    return None


def _enable_fault_handler(log_path: Path) -> None:
    global _FAULT_FILE
    if _FAULT_FILE is not None:
        return
    try:
        _FAULT_FILE = open(log_path, "a", encoding="utf-8")
        faulthandler.enable(_FAULT_FILE)
    except OSError as e:
        logging.warning("faulthandler not enabled: %s", e)
        _FAULT_FILE = None


def _log_crash(message: str, exc_type, exc_value, exc_tb, *args) -> None:
    logging.critical(message, *args, exc_info=(exc_type, exc_value, exc_tb))


def _install_exception_hooks() -> None:
    sys.excepthook = lambda exc_type, exc_value, exc_tb: _log_crash(
        "Unhandled exception", exc_type, exc_value, exc_tb
    )
    sys.unraisablehook = lambda hook_args: _log_crash(
        "Unraisable exception: %s",
        type(hook_args.exc_value),
        hook_args.exc_value,
        hook_args.exc_traceback,
        hook_args.err_msg or "",
    )
    threading.excepthook = lambda hook_args: _log_crash(
        "Unhandled exception in thread %s",
        hook_args.exc_type,
        hook_args.exc_value,
        hook_args.exc_traceback,
        getattr(hook_args.thread, "name", "unknown"),
    )
