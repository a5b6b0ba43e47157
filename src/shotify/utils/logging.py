import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import colorlog

from shotify.config.settings import settings

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'blue',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Route every logger through the root: colored records on the console and
    plain ones in a timestamped file under `log_dir` (settings.log_dir by
    default). Earlier root handlers are replaced. Returns the log file path.
    """
    if log_dir is None:
        settings.ensure_directories_exist()
        log_dir = settings.log_dir
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / f"shotify_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    # .log files can't handle colors
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)-8s - %(message)s'
    ))

    console_handler = colorlog.StreamHandler()
    console_handler.setFormatter(colorlog.ColoredFormatter(
        "%(green)s%(asctime)s%(reset)s - %(purple)s%(name)s - "
        "%(log_color)s%(levelname)s%(reset)s - %(message)s",
        log_colors=LOG_COLORS,
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []
    for handler in (file_handler, console_handler):
        handler.setLevel(level)
        root_logger.addHandler(handler)
    return log_file


def setup_logger(
    video_id: str,
    log_dir: Optional[Union[str, Path]] = None,
    level: int = logging.INFO,
    max_bytes: int = 1024 * 1024,  # 1MB
    backup_count: int = 5,
) -> logging.LoggerAdapter:
    """
    Logger for one tracking session. Every record carries the video id, and
    with `log_dir` set the session also gets its own rotating log file.
    """
    logger = logging.getLogger(f"shotify.game.{video_id}")
    logger.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - Game %(video_id)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Prevent adding handlers multiple times
    if log_dir is not None and not logger.handlers:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path / f"game_{video_id}.log",
            maxBytes=max_bytes,
            backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logging.LoggerAdapter(logger, {"video_id": video_id})
