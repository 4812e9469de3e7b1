from __future__ import annotations

import logging


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a console handler.
    No-op when handlers are already attached (gunicorn, pytest, repeated create_app()).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
