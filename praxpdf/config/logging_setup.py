# praxpdf/config/logging_setup.py
"""
Logging configuration for applications embedding PraxPDF.

Log file location: ~/.praxpdf/logs/praxpdf.log (append mode, UTF-8)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_FILE_NAME = "praxpdf.log"


def get_default_logs_dir() -> Path:
    """Get default log directory in user's home directory"""
    return Path.home() / ".praxpdf" / "logs"


def setup_logging(logs_dir: Optional[Path] = None):
    """Configure logging to console and file.

    Falls back to console-only logging when the log directory or file
    cannot be created.

    Args:
        logs_dir: Directory for the log file (default: ~/.praxpdf/logs)

    Returns:
        tuple: (console_handler, file_handler) to keep references alive.
        file_handler is None in console-only mode.
    """
    logs_dir = logs_dir if logs_dir is not None else get_default_logs_dir()
    log_file_path = logs_dir / LOG_FILE_NAME

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))

    file_handler = None
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    except OSError as e:
        print(f"[WARNING] Failed to create log file {log_file_path}: {e}", file=sys.stderr)
        file_handler = None

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Remove existing handlers that might interfere
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)

    logging.getLogger('praxpdf').setLevel(logging.DEBUG)
    # pypdf logs every repaired xref entry
    logging.getLogger('pypdf').setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    if file_handler:
        logger.info("Log file: %s", log_file_path)
    else:
        logger.info("Logging to console only")

    return console_handler, file_handler
