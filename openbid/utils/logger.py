"""
Logging for openbid.

Loggers form one tree under ``openbid``:

    openbid.storage.*            key-value backends and transactions
    openbid.ledger               bid ledger writes
    openbid.contract             contract entry points
    openbid.contract.<address>   one hosted auction (see contract_logger)
    openbid.host.*               bank and App

Console output is colored and goes to stderr so that command output on
stdout (JSON status, balances) stays parseable. A plain-text file log
under ``log_dir`` is optional.
"""

import logging
import sys
from pathlib import Path
from typing import IO, Optional

import colorlog

ROOT_LOGGER = "openbid"
LOG_FILE_NAME = "openbid.log"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
FILE_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


class OpenBidLogger:
    """Owns the handlers of the ``openbid`` logger tree"""

    _initialized = False
    _log_file: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[str] = None,
        log_to_file: bool = False,
        stream: Optional[IO[str]] = None,
    ):
        """
        Attach handlers to the ``openbid`` logger. No-op once set up.

        Args:
            level: Logging level for the whole tree
            log_dir: Directory for the log file. If None, uses ./logs
            log_to_file: Whether to also write to ``log_dir/openbid.log``
            stream: Console stream, stderr by default
        """
        if cls._initialized:
            return

        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(level)
        root.handlers.clear()

        console = colorlog.StreamHandler(stream if stream is not None else sys.stderr)
        console.setLevel(level)
        console.setFormatter(
            colorlog.ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS)
        )
        root.addHandler(console)

        if log_to_file:
            directory = Path(log_dir) if log_dir else Path("logs")
            directory.mkdir(exist_ok=True, parents=True)
            cls._log_file = directory / LOG_FILE_NAME

            file_handler = logging.FileHandler(cls._log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            root.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def reset(cls):
        """Close and drop handlers; the next setup() starts from scratch."""
        root = logging.getLogger(ROOT_LOGGER)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        root.setLevel(logging.NOTSET)
        cls._initialized = False
        cls._log_file = None

    @classmethod
    def log_file(cls) -> Optional[Path]:
        """Path of the active log file, if file logging is on."""
        return cls._log_file

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific subsystem.

        Args:
            name: Dotted subsystem name (e.g., 'ledger', 'host.bank')

        Returns:
            Logger instance under ``openbid``
        """
        if not cls._initialized:
            cls.setup()

        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def get_logger(name: str) -> logging.Logger:
    return OpenBidLogger.get_logger(name)


def contract_logger(address: str) -> logging.Logger:
    """Logger for one hosted auction, a child of ``openbid.contract``."""
    return OpenBidLogger.get_logger(f"contract.{address}")


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
):
    """Setup logging configuration, replacing any earlier setup"""
    OpenBidLogger.reset()
    OpenBidLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)


def setup_from_config(config) -> None:
    """Apply the logging fields of a HostConfig."""
    setup_logging(
        level=config.log_level,
        log_dir=str(config.log_dir),
        log_to_file=config.log_to_file,
    )
