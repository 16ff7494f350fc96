import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> None:
    """
    Configures the root logger.

    Args:
        log_file (str): Path of a log file to write to (overwritten each run).
                        When None, records go to stderr.
        level (int): Root logging level.
    """
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        logging.basicConfig(filename=log_file, filemode="w", level=level, format=LOG_FORMAT, force=True)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    logging.getLogger(__name__).debug("Logging initialized.")
