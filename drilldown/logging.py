from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path


def _resolve_log_dir(settings: object) -> Path:
    """Resolve the log directory.

    - If DRILLDOWN_LOG_DIR is absolute, use it directly.
    - Otherwise, treat it as relative to the current working directory.
    """

    raw = getattr(settings, "DRILLDOWN_LOG_DIR", Path("_logs"))
    p = raw if isinstance(raw, Path) else Path(str(raw))
    if p.is_absolute():
        return p
    return Path.cwd() / p


def setup_logging(settings: object) -> Path:
    """Configure Python logging to write to a rotating diagnostic log file.

    Returns the resolved log file path.

    Rotation:
      - Daily rotation at midnight.
      - Keep the last `DRILLDOWN_LOG_BACKUP_COUNT` rotated files.

    Notes:
      - Console output is off unless DRILLDOWN_LOG_CONSOLE is set; the TUI
        owns the terminal.
      - This function is safe to call multiple times (it resets handlers).
    """

    log_dir = _resolve_log_dir(settings)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "drilldown.log"

    level_name = str(getattr(settings, "DRILLDOWN_LOG_LEVEL", "INFO") or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    file_handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, int(getattr(settings, "DRILLDOWN_LOG_BACKUP_COUNT", 14) or 0)),
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt))

    # Reset root handlers so we don't duplicate logs on repeated starts.
    root = logging.getLogger()
    for handler in root.handlers:
        if isinstance(handler, TimedRotatingFileHandler):
            handler.close()
    root.handlers = []
    root.setLevel(level)
    root.addHandler(file_handler)

    console = bool(getattr(settings, "DRILLDOWN_LOG_CONSOLE", False))
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(console_handler)

    logging.getLogger("drilldown").info(
        "drilldown logging enabled (file=%s, level=%s, console=%s)",
        os.fspath(log_file),
        level_name,
        console,
    )

    return log_file
