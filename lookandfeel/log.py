"""
Logging and terminal output shared by every installer step.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

# --- Global Constants ---
LOG_FILE = Path.home() / ".lookandfeel.log"
LOGGER_NAME = "LookAndFeel"

logger = logging.getLogger(LOGGER_NAME)
console = Console()


# --- Logging Setup ---
def setup_logging(log_file: Optional[Path] = LOG_FILE, verbose: bool = False) -> logging.Logger:
    """Attach the file log and the rich terminal handler to the installer logger."""
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    rich_handler = RichHandler(console=console, show_path=False, markup=False)
    rich_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.addHandler(rich_handler)

    logger.propagate = False
    return logger
