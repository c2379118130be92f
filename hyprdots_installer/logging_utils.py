from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FILENAME = "install_script.log"

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

_MARKERS = {
    logging.DEBUG: ("\033[0;34m", "[.]"),
    logging.INFO: ("\033[0;34m", "[*]"),
    SUCCESS: ("\033[0;32m", "[+]"),
    logging.WARNING: ("\033[1;33m", "[!]"),
    logging.ERROR: ("\033[0;31m", "[!]"),
    logging.CRITICAL: ("\033[0;31m", "[!]"),
}
_RESET = "\033[0m"


class MarkerFormatter(logging.Formatter):
    """Console formatter printing `[*] message` style lines."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__(fmt="%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        color, marker = _MARKERS.get(record.levelno, ("", "[*]"))
        if self.color:
            marker = f"{color}{marker}{_RESET}"
        return f"{marker} {super().format(record)}"


def success(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(SUCCESS, msg, *args)


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    The run log is append-only: every run adds to the same file so earlier
    runs stay available for troubleshooting.

    Notes:
    - The log normally lives next to the dotfiles (the source dir). When that
      location is read-only we fall back to a file in the working directory,
      while still *reporting* the intended path in state/logs.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_hyprdots_configured", False):
        return getattr(logger, "_hyprdots_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        chosen_path = log_path
    except OSError:
        # Fall back to a writable location.
        fallback = str(Path.cwd() / LOG_FILENAME)
        file_handler = logging.FileHandler(fallback, mode="a", encoding="utf-8")
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(MarkerFormatter(color=sys.stdout.isatty()))
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_hyprdots_configured", True)
    setattr(logger, "_hyprdots_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
