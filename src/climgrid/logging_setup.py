"""Root logger configuration for applications using climgrid.

Library modules only create ``logging.getLogger(__name__)`` loggers; this
helper is for scripts and notebooks that want climgrid's progress messages
on the console and, optionally, in a log file.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from climgrid.schemas import InternalConfig

__all__ = ['setup_logging']

logger = logging.getLogger(__name__)


def setup_logging(config: "InternalConfig") -> logging.Logger:
    """Configure the root logger from ``config.logging``.

    Existing root handlers are replaced by a console handler and, when
    ``config.logging.file`` is set, a file handler.

    Parameters
    ----------
    config : InternalConfig
        Resolved configuration.

    Returns
    -------
    logging.Logger
        The configured root logger.
    """
    log_level = getattr(logging, config.logging.level, logging.INFO)

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear existing handlers and add new ones
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    logger.info("Logging: level=%s, file=%s", config.logging.level, config.logging.file)
    return root
