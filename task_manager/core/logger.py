import logging
import sys

LOGGER_NAME = "task_manager"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str = "INFO") -> None:
    """
    Attach one stderr handler to the app logger.
    Safe to call more than once (app factory runs per test).
    """
    logger.setLevel(level.upper())
    logger.propagate = False

    if any(getattr(h, "_task_manager", False) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler._task_manager = True
    logger.addHandler(handler)
