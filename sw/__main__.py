import sys
from sw.common.logger import log
from sw.common.setup import PATHS


# Entry point for `python -m sw` and the `stopwatch` script. Qt is only imported once logging is up, so a broken
# PySide6 install still leaves a traceback in latest.log.
def run() -> None:
    log.debug(f"Using data directory '{PATHS.data}'")
    try:
        from sw.ui.app import main
        main()
    except SystemExit:
        raise
    except Exception:
        log.exception("Stopwatch crashed, exiting")
        sys.exit(1)

if __name__ == "__main__":
    run()
