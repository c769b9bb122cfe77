import logging
import sys
from typing import Union


class EmojiFormatter(logging.Formatter):
    """Prefixes each log line with an emoji for its level."""

    LEVEL_EMOJIS = {
        logging.DEBUG: "🐛",
        logging.INFO: "✅",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
        logging.CRITICAL: "💥",
    }

    def format(self, record):
        s = super().format(record)
        emoji = self.LEVEL_EMOJIS.get(record.levelno, "")
        return f"{emoji} {s}"


def setup_logging(level: Union[int, str] = logging.INFO):
    """
    Configures the root logger with the EmojiFormatter on stderr.
    Call once at the entry point; stdout stays free for command output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(EmojiFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    # Avoid duplicate lines when called twice
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.WARNING))
