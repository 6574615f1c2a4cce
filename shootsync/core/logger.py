"""Logger configuration for shootsync.

Engine modules log f-string messages with a leading tag, e.g.
"[RECONCILE] Starting reconciliation ...". The sinks configured here move
that tag into its own column so reconcile, schedule and page length events
can be grepped apart in the log file.
"""

import re
import sys
from pathlib import Path

from loguru import logger

from shootsync.config.settings import settings

_TAG_PATTERN = re.compile(r"^\[([A-Z_]+)\]\s*")
_UNTAGGED = "-"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[tag]: <11}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[tag]: <11} | {name}:{function}:{line} - {message}"


def split_tag(message: str) -> tuple[str, str]:
    """Split "[TAG] text" into ("TAG", "text"). Untagged messages get "-"."""
    match = _TAG_PATTERN.match(message)
    if match is None:
        return _UNTAGGED, message
    return match.group(1), message[match.end() :]


def _tag_patcher(record) -> None:
    tag, message = split_tag(record["message"])
    record["extra"].setdefault("tag", tag)
    record["message"] = message


def setup_logger(
    level: str | None = None,
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Configure loguru with a console sink and an optional rotating file sink.

    Args:
        level: Logging level, defaults to settings.log_level
        log_file: Log file path, defaults to settings.log_file (console only when unset)
        rotation: Log rotation size (e.g., "10 MB", "1 day")
        retention: Log retention period (e.g., "7 days", "1 month")
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.configure(patcher=_tag_patcher)

    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
        )

    logger.info(f"[SCHEDULE] Logger initialized with level={level}, file={log_file or 'none'}")
