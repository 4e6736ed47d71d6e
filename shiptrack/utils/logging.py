"""Logging helpers for the shiptrack site.

Every module takes ``LOG = get_logger("shiptrack.<area>")``. Those loggers
are children of the ``shiptrack`` logger, which owns the single stream
handler, so media host failures, shipment API errors, removal dispatches
and admin sign-ins all end up in one ``[shiptrack]`` prefixed stream at
the level from ``SHIPTRACK_LOG_LEVEL``.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from shiptrack import config as app_config

ROOT_NAME = "shiptrack"
LOG_FORMAT = "[shiptrack] %(asctime)s %(levelname)s %(name)s %(message)s"

_LOCK = threading.Lock()
_ROOT: Optional[logging.Logger] = None


def _root_logger() -> logging.Logger:
    global _ROOT
    if _ROOT is not None:
        return _ROOT
    with _LOCK:
        if _ROOT is None:
            logger = logging.getLogger(ROOT_NAME)
            logger.setLevel(getattr(logging, app_config.log_level_name(), logging.INFO))
            if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
                handler = logging.StreamHandler()
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                logger.addHandler(handler)
            logger.propagate = False
            _ROOT = logger
    return _ROOT


def get_logger(name: str = ROOT_NAME) -> logging.Logger:
    root = _root_logger()
    if name == ROOT_NAME:
        return root
    if not name.startswith(ROOT_NAME + "."):
        name = f"{ROOT_NAME}.{name}"
    return logging.getLogger(name)


__all__ = ["get_logger"]
