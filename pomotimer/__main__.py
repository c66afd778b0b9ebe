"""Allow running PomoTimer as a module: python -m pomotimer."""

import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import PomoTimerApp
from .log import get_logger, setup_logging


def main() -> None:
    parser = argparse.ArgumentParser(prog="pomotimer")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="log debug output to the console as well",
    )
    args, qt_args = parser.parse_known_args()

    setup_logging(
        logging.DEBUG if args.verbose else logging.INFO,
        console=args.verbose,
    )
    log = get_logger()

    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName("PomoTimer")
    app.setOrganizationName("PomoTimer")
    app.setQuitOnLastWindowClosed(False)

    timer_app = PomoTimerApp()
    timer_app.show()
    log.info("PomoTimer ready")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
