# file: utils/logger.py
"""
Start-up logging for applications that use lazy_services.

The resolver and factory registry log through ``logging`` under their
class names: service creation at INFO, cache hits at DEBUG, bad
definitions at ERROR and factory re-registration at WARNING. Call
``setup_logging(config_loader)`` once at start-up, before the first host
resolves a service, and those records go to stdout and
``<config dir>/logs/services.log``. Libraries that embed lazy_services can
skip this and configure logging their own way.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Protocol
import psutil

CONSOLE_HANDLER_NAME = "services_console_handler"
FILE_HANDLER_NAME = "services_file_handler"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(mem_rss_mb)4.1fMB] - %(message)s (%(filename)s:%(lineno)d)"


class ConfigLoader(Protocol):
    def get_config(self, filename: str) -> dict: ...
    def get_data_dir(self) -> Path: ...


class MemoryLogFilter(logging.Filter):
    """
    Injects current process memory (RSS) into log records.
    """
    def __init__(self):
        super().__init__()
        try:
            self.process = psutil.Process(os.getpid())
        except psutil.NoSuchProcess:
            self.process = None

    def filter(self, record):
        if self.process:
            try:
                record.mem_rss_mb = self.process.memory_info().rss / (1024 * 1024)
            except psutil.Error:
                record.mem_rss_mb = 0.0
        else:
            record.mem_rss_mb = 0.0
        return True


def _has_handler(logger: logging.Logger, name: str) -> bool:
    return any(h.get_name() == name for h in logger.handlers)


def setup_logging(config_loader: ConfigLoader, log_filename: str = "services.log") -> Path:
    """
    Configures the root logger from system_config.json -> "logging".

    Adds a console handler and a rotating file handler under
    ``<data dir>/logs``. Safe to call more than once. Returns the log file path.
    """
    log_config = config_loader.get_config("system_config.json").get("logging", {})
    log_level_str = log_config.get("level", "INFO")
    log_level = getattr(logging, str(log_level_str).upper(), logging.INFO)

    log_dir = config_loader.get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_filename

    log_format = logging.Formatter(LOG_FORMAT)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    memory_filter = MemoryLogFilter()

    # --- Console Handler ---
    if not _has_handler(logger, CONSOLE_HANDLER_NAME):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(log_format)
        console_handler.addFilter(memory_filter)
        logger.addHandler(console_handler)

    # --- Rotating File Handler ---
    if not _has_handler(logger, FILE_HANDLER_NAME):
        file_handler = RotatingFileHandler(
            log_file, maxBytes=5*1024*1024, backupCount=5, encoding='utf-8'
        )
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(log_format)
        file_handler.addFilter(memory_filter)
        logger.addHandler(file_handler)

    logging.info(f"Logging initialized at {log_level_str}, file: {log_file}")
    return log_file
