# path: src/beam_sfd/services/logging_setup.py
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_logging(
    log_dir: Optional[str] = "logs",
    log_name: str = "beam_sfd.log",
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Logger del paquete ("beam_sfd"): archivo rotativo + consola.
    log_dir=None => solo consola (útil en tests / contenedores).
    """
    logger = logging.getLogger("beam_sfd")
    logger.setLevel(level)

    # Evitar duplicar handlers si se llama más de una vez
    if logger.handlers:
        return logger

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    )

    log_path = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, log_name)
        fh = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    logger.info("Logging inicializado. Archivo: %s", log_path or "-")
    return logger
