import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"


def setup_logging(level=logging.INFO, jax_level=logging.WARNING):
    """
    Send log records to stdout.

    Replaces any handlers on the root logger. JAX logs compilation details at
    INFO/DEBUG, so its logger gets its own, usually quieter, level.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)
    logging.getLogger("jax").setLevel(jax_level)
    logging.getLogger(__name__).debug(
        "Logging configured (level=%s, jax=%s).",
        logging.getLevelName(level), logging.getLevelName(jax_level),
    )
