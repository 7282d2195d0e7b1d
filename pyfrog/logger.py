"""
Logging configuration for pyfrog
"""
import logging
import sys

def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure logging for a frog growth project.

    Parameters
    ----------
    level : int
        Logging level (default: logging.INFO)
    log_file : str, optional
        Path to log file. If None, logs only to console.

    Returns
    -------
    logger : logging.Logger
        Configured logger instance

    Examples
    --------
    >>> from pyfrog.logger import setup_logging
    >>> logger = setup_logging(level=logging.DEBUG)
    >>> logger.info("Extracting captures...")
    """
    logger = logging.getLogger('pyfrog')
    logger.setLevel(level)

    # Remove existing handlers so repeated runs don't double log
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

# Default logger
logger = logging.getLogger('pyfrog')
