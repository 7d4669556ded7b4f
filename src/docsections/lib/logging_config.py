"""Logging setup for docsections.

All modules obtain their logger through get_logger() so that records land
under the ``docsections`` namespace and pick up the handler installed by
setup_logging().
"""

import logging
import sys

ROOT_LOGGER_NAME = "docsections"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output while parsing PDFs or calling OCR
_NOISY_LOGGERS = ("pdfminer", "httpx", "httpcore", "urllib3", "google")


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the docsections namespace.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance. Names outside the package are re-rooted so that the
        package handler still applies.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the docsections root logger.

    Safe to call more than once; the previous handler is replaced.

    Args:
        verbose: Log at DEBUG level and keep third-party debug output
        quiet: Only log warnings and errors (ignored when verbose is set)
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    third_party_level = logging.DEBUG if verbose else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
