import sys
from rt.common.logger import log
from rt.common.setup import assert_running_from_install_root, PATHS
from rt.ui.app import main

# Entry point for `python -m rt` and the `rentaltimer` script
def run() -> None:
    try:
        assert_running_from_install_root(PATHS.root / "rentaltimer.exe")
        main()
    except SystemExit:
        raise
    except Exception:
        # Full stack trace, always
        log.exception("Uncaught exception in entrypoint, exiting")
        sys.exit(1)

if __name__ == "__main__":
    run()
