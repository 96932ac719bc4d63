import logging
import os

LOGGER_NAME = "trade_journal"
LOG_FILE_NAME = "journal.log"

def get_journal_logger(log_dir: str = "logs"):
    """
    Returns the configured logger for CLI activity.
    Logs to <log_dir>/journal.log and is unbuffered (flushed immediately).
    """
    logger = logging.getLogger(LOGGER_NAME)
    
    # Avoid adding handlers multiple times
    if logger.hasHandlers():
        return logger

    os.makedirs(log_dir, exist_ok=True)
    logger.setLevel(logging.INFO)
    
    # File Handler
    file_handler = logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME), mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    
    # Simple Format: Timestamp - Actor - Message
    formatter = logging.Formatter('%(asctime)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    file_handler.setFormatter(formatter)
    
    logger.addHandler(file_handler)
    logger.propagate = False # Do not propagate to root logger (avoid stdout)
    
    return logger

def log_event(actor: str, message: str, log_dir: str = "logs"):
    """
    Helper to log an event in a consistent format.
    Actors: USER, BOT, SYSTEM
    """
    logger = get_journal_logger(log_dir)
    logger.info(f"[{actor}] {message}")
    
    for handler in logger.handlers:
        handler.flush()
