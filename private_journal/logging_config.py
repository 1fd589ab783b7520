"""
Logging configuration for the private journal.

Suppress verbose library output by default. Log output goes to stderr or
files only: stdout carries the MCP stdio protocol.
"""

import logging
import os
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Set environment variables BEFORE the model libraries are imported
if not os.environ.get("PRIVATE_JOURNAL_VERBOSE"):
    os.environ.setdefault("HF_HUB_DISABLE_PROGRESS_BARS", "1")
    os.environ.setdefault("TRANSFORMERS_VERBOSITY", "error")
    os.environ.setdefault("TOKENIZERS_PARALLELISM", "false")
    os.environ.setdefault("HF_HUB_DISABLE_TELEMETRY", "1")

_LIBRARY_LOGGERS = ("transformers", "sentence_transformers", "huggingface_hub", "torch")

OPS_LOG_FILENAME = "journal-ops.log"


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging to suppress verbose library output.

    This silences HuggingFace progress bars, model loading messages and
    library warnings.

    Args:
        quiet: If True, suppress verbose output. If False, show everything.
    """
    if quiet:
        os.environ["HF_HUB_DISABLE_PROGRESS_BARS"] = "1"
        os.environ["TRANSFORMERS_VERBOSITY"] = "error"
        os.environ["TOKENIZERS_PARALLELISM"] = "false"

        warnings.filterwarnings("ignore")

        for name in _LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.ERROR)
    else:
        warnings.filterwarnings("default")
        for name in _LIBRARY_LOGGERS:
            logging.getLogger(name).setLevel(logging.NOTSET)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    os.environ.pop("HF_HUB_DISABLE_PROGRESS_BARS", None)
    os.environ.pop("TRANSFORMERS_VERBOSITY", None)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    for name in ("private_journal", *_LIBRARY_LOGGERS):
        logging.getLogger(name).setLevel(logging.DEBUG)


def configure_ops_log(journal_path):
    """Configure a persistent operations log for a journal.

    Writes to {journal_path}/journal-ops.log using a rotating file handler
    (1MB max, 3 backups). Always active regardless of verbosity.
    Returns the handler so it can be removed on close(), or None if the
    log file cannot be opened.
    """
    log_path = Path(journal_path) / OPS_LOG_FILENAME
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    journal_logger = logging.getLogger("private_journal")
    journal_logger.addHandler(handler)
    # Let INFO through even in quiet mode
    if journal_logger.level == logging.NOTSET or journal_logger.level > logging.INFO:
        journal_logger.setLevel(logging.INFO)

    return handler
