import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from sw.common.setup import PATHS

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEBUG_RUN_DIR = "debug"


#region === Handler helpers ===

def _has_handler(logger, handler_name):
    return any(h.get_name() == handler_name for h in logger.handlers)

# Names, levels and formats the handler, then hangs it on the logger
def _attach(logger, handler, handler_name, level, fmt):
    handler.set_name(handler_name)
    handler.setLevel(level)
    handler.setFormatter(fmt)
    logger.addHandler(handler)

# Deletes all but the `keep` newest per-run debug logs of this logger
def _prune_debug_runs(run_dir, name, keep):
    runs = sorted(run_dir.glob(f"{name}_*.log"), key=lambda p: p.stat().st_mtime, reverse=True)
    for stale in runs[keep:]:
        try:
            stale.unlink()
        except OSError:
            logging.getLogger(name).debug(f"Could not remove old debug log '{stale}'")

#endregion === Handler helpers ===

#region === Logger setup ===

# Builds (or re-uses) the named logger. Handlers are keyed by "<name>:<role>", so calling this twice for the same
# name never duplicates output. Roles:
#   persistent - <name>.log, rotated by size, kept across runs
#   latest     - latest.log, truncated every run
#   debug      - debug/<name>_<timestamp>.log, everything at DEBUG for this run only
#   console    - stderr, off unless asked for
def get_logger(
        name = "stopwatch",
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

    log_dir = Path(log_dir or PATHS.logs)
    log_dir.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    if persistent and not _has_handler(logger, f"{name}:persistent"):
        rotating = RotatingFileHandler(log_dir / f"{name}.log", maxBytes=max_bytes,
                                       backupCount=backup_count, encoding="utf-8")
        _attach(logger, rotating, f"{name}:persistent", level, fmt)

    if not _has_handler(logger, f"{name}:latest"):
        _attach(logger, logging.FileHandler(log_dir / "latest.log", mode="w", encoding="utf-8"),
                f"{name}:latest", level, fmt)

    if historical_debugs > 0 and not _has_handler(logger, f"{name}:debug"):
        run_dir = log_dir / DEBUG_RUN_DIR
        run_dir.mkdir(parents=True, exist_ok=True)
        run_file = run_dir / f"{name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
        _attach(logger, logging.FileHandler(run_file, encoding="utf-8"),
                f"{name}:debug", logging.DEBUG, fmt)
        _prune_debug_runs(run_dir, name, historical_debugs)

    if console and not _has_handler(logger, f"{name}:console"):
        _attach(logger, logging.StreamHandler(), f"{name}:console", level, fmt)

    return logger

#endregion === Logger setup ===

log = get_logger(level=logging.DEBUG, console=False, historical_debugs=10)
log.info("=== Stopwatch session started ===")
