"""
Logging setup for scripts and interactive runs.
"""

import logging
import sys

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(verbose: bool = False, very_verbose: bool = False) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    INFO goes to stdout when verbose, DEBUG when very verbose, and only
    warnings (to stderr) otherwise.
    """
    logger = logging.getLogger('rocketphase')

    if verbose:
        logger.setLevel(logging.INFO)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.INFO)
    elif very_verbose:
        logger.setLevel(logging.DEBUG)
        ch = logging.StreamHandler(stream=sys.stdout)
        ch.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)
        ch = logging.StreamHandler(stream=sys.stderr)
        ch.setLevel(logging.WARNING)

    # Create formatter for message output
    formatter = logging.Formatter(FORMAT)

    # Replace any handler from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger
