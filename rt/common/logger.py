import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from rt.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attaches the handler built by `factory` unless a handler with the same name is already on the logger, so repeated
# get_logger() calls never double up output.
def _attach(logger: logging.Logger, handler_name: str, level, fmt, factory):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return None
    handler = factory()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return handler

def get_logger(
        name = "rentaltimer",
        level = logging.INFO,
        log_dir: Path | None = None,
        max_bytes = 5 * 1024 * 1024,
        backup_count = 5,
        persistent = True,
        console = False,
        historical_debugs: int = 10
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Size-rotated log that survives across runs
    if persistent:
        _attach(logger, f"{name}:persistent", level, fmt, lambda: RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))

    # Latest-only log, overwritten each run
    _attach(logger, f"{name}:latest", level, fmt, lambda: logging.FileHandler(
        filename=log_dir / "latest.log",
        mode="w",
        encoding="utf-8",
    ))

    # One full DEBUG log per run, keeping only the newest `historical_debugs` of them
    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        added = _attach(logger, f"{name}:historical_debug", logging.DEBUG, fmt, lambda: logging.FileHandler(
            filename=debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log",
            encoding="utf-8",
        ))
        if added is not None:
            runs = sorted(debug_dir.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
            for run in runs[historical_debugs:]:
                try: run.unlink()
                except OSError: pass

    if console:
        _attach(logger, f"{name}:console", level, fmt, logging.StreamHandler)

    return logger

log = get_logger(
    level=logging.DEBUG,
    console=os.getenv("RENTALTIMER_CONSOLE_LOG", "") not in ("", "0"),
    historical_debugs=10,
)
log.info("=== INITIALIZED NEW SESSION ===")
