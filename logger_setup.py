# Module for setting up logging
import logging
import sys
import os
import constants


def setup_logging(log_file, level=constants.DEFAULT_LOG_LEVEL):
    """Sets up logging to console and file."""
    log_formatter = logging.Formatter(constants.LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers so repeated calls don't duplicate output
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # File handler
    try:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(log_formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        # Make failure to open log file fatal
        print(f"Error: Could not set up file logging to {log_file}: {e}", file=sys.stderr)
        sys.exit(1)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG; keep it quiet unless asked for
    if root_logger.level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)

    logging.info(f"Logging setup complete (level {logging.getLevelName(root_logger.level)}).")
