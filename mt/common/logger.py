import logging
import os
from pathlib import Path
from logging.handlers import RotatingFileHandler
from mt.common.setup import PATHS
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment switches for the app logger: a level name (DEBUG, INFO, WARNING...) and whether to echo to the console.
LEVEL_ENV_VAR = "MULTITIMER_LOG_LEVEL"
CONSOLE_ENV_VAR = "MULTITIMER_LOG_CONSOLE"
_TRUTHY = {"1", "true", "yes", "on"}

# Reads a log level name from the environment. Unknown names fall back to the default instead of erroring.
def level_from_env(default=logging.DEBUG, var=LEVEL_ENV_VAR):
    raw = os.getenv(var, "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default

def env_flag(var, default=False):
    raw = os.getenv(var)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY

# Attaches the handler under the given name, unless a handler with that name is already attached. Returns whether
# anything was added, so calling get_logger() repeatedly never stacks duplicates.
def _attach(logger, handler_name, make_handler, level, fmt):
    if any(h.get_name() == handler_name for h in logger.handlers):
        return False
    handler = make_handler()
    handler.setLevel(level)
    handler.setFormatter(fmt)
    handler.set_name(handler_name)
    logger.addHandler(handler)
    return True

# Builds (or fetches, if already configured) the named app logger. File handlers open lazily, so nothing is written
# until the first record actually gets logged.
def get_logger(
        name = "multitimer",
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
    logger.setLevel(min(level, logging.DEBUG) if historical_debugs > 0 else level)

    log_dir = log_dir or PATHS.logs
    log_dir.mkdir(parents=True,exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    # Rotating log that survives across runs
    if persistent:
        _attach(logger, f"{name}:persistent", lambda: RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        ), level, fmt)

    # Latest-only log, overwritten each run
    _attach(logger, f"{name}:latest", lambda: logging.FileHandler(
        filename=log_dir / "latest.log", mode="w", encoding="utf-8", delay=True,
    ), level, fmt)

    # Full debug log per run, keeping only the newest few runs
    if historical_debugs > 0:
        debug_dir = log_dir / "debug"
        debug_dir.mkdir(parents=True,exist_ok=True)
        run_path = debug_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        added = _attach(logger, f"{name}:historical_debug", lambda: logging.FileHandler(
            filename=run_path, encoding="utf-8", delay=True,
        ), logging.DEBUG, fmt)
        if added:
            runs = sorted(debug_dir.glob(f"{name}_*.log"),key=lambda p: p.stat().st_mtime,reverse=True)
            for run in runs[historical_debugs:]:
                try: run.unlink()
                except OSError: pass

    if console:
        _attach(logger, f"{name}:console", logging.StreamHandler, level, fmt)

    return logger

log = get_logger(level=level_from_env(), console=env_flag(CONSOLE_ENV_VAR), historical_debugs=10)
