"""Logging setup and timing helpers for DropMetrics.

The pipeline modules only emit records through ``logging.getLogger``; handlers
are attached here, by the CLI, so loading a dataset never touches the disk.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Dict, Optional

from .config import PipelineConfig


ROOT_LOGGER_NAME = "dropmetrics"
SYSTEM_FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"


def _safe_add_file_handler(logger: logging.Logger, path: Path, level: int) -> None:
    try:
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(logging.Formatter(SYSTEM_FMT, datefmt=DATE_FMT))
        logger.addHandler(fh)
    except OSError as exc:
        # Keep console logging when the file cannot be opened
        logger.warning("[WARNING] Failed to attach file handler %s (%s)", str(path), exc)


def setup_logging(config: Optional[PipelineConfig] = None) -> logging.Logger:
    """Configure the ``dropmetrics`` logger with console and optional file handlers.

    - Console: always
    - File: ``logging.logs_dir / logging.file_name`` when ``logs_dir`` is set
    - Level: ``logging.level`` (INFO by default)
    """

    cfg = (config or PipelineConfig()).logging
    level = getattr(logging, cfg.level)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    # Reset handlers to avoid duplication across repeated initializations
    logger.handlers = []

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(SYSTEM_FMT, datefmt=DATE_FMT))
    logger.addHandler(sh)

    if cfg.logs_dir:
        logs_dir = Path(cfg.logs_dir).expanduser().resolve()
        logs_dir.mkdir(parents=True, exist_ok=True)
        _safe_add_file_handler(logger, logs_dir / cfg.file_name, level)
        logger.debug("Logging initialised. Logs will be written to %s", logs_dir / cfg.file_name)
    return logger


def start_phase_timer(phase_name: str) -> float:
    """Start a timer for a pipeline stage and return the perf counter."""
    return time.perf_counter()


def end_phase_timer(phase_name: str, start_time: float, timing_dict: Dict[str, float], logger: logging.Logger) -> float:
    """End timer, record to ``timing_dict`` and log the duration."""
    elapsed = time.perf_counter() - float(start_time)
    timing_dict[phase_name] = float(elapsed)
    logger.info("Stage %s completed in %.2f seconds", phase_name, elapsed)
    return elapsed


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_warning(logger: logging.Logger, message: str):
    logger.warning("[WARNING] %s", message)
