import sys
from mt.common.logger import log
from mt.ui.app import main

# Entry point for `python -m mt` and the `multitimer` console script
def run() -> None:
    try:
        log.info("=== INITIALIZED NEW SESSION ===")
        main()
    except SystemExit:
        raise
    except Exception:
        # Full stack trace, always
        log.exception("Uncaught exception in entrypoint, exiting")
        sys.exit(1)

if __name__ == "__main__":
    run()
