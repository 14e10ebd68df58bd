"""
Logging configuration for the Todo RPC API.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger.  Every module logs through
``logging.getLogger(__name__)`` so records end up namespaced under
``todo_rpc_api``; procedure failures are logged by the router and
internal errors always carry their traceback even when the response
sent to the caller hides it.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger once.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of a file that receives a copy of every record.  Resolved
        relative to the current working directory.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.getLogger("todo_rpc_api").setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        # Already configured (tests, uvicorn or a second create_app call).
        return
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
