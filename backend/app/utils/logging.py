import logging
import sys

ROOT_LOGGER = "catalog"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single stdout handler to the "catalog" logger tree.
    Safe to call more than once (tests build several apps per process).
    """
    log = logging.getLogger(ROOT_LOGGER)
    log.setLevel(level.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
        log.addHandler(h)
    return log
