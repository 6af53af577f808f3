# logger.py
# Logging da aplicação e log de auditoria

import logging
import os
from datetime import datetime

from infrastructure.settings import LOG_LEVEL, AUDIT_LOG_DIR

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

AUDIT_LOGGER_NAME = "bizflow.audit"


class DailyFileHandler(logging.FileHandler):
    """Escreve em <dir>/<prefix>-YYYY-MM-DD.log, trocando de arquivo na virada do dia."""

    def __init__(self, directory: str, prefix: str):
        os.makedirs(directory, exist_ok=True)
        self.directory = directory
        self.prefix = prefix
        self.current_day = datetime.now().strftime("%Y-%m-%d")
        super().__init__(self._path_for(self.current_day), encoding="utf-8", delay=True)

    def _path_for(self, day: str) -> str:
        return os.path.join(self.directory, f"{self.prefix}-{day}.log")

    def emit(self, record: logging.LogRecord) -> None:
        day = datetime.now().strftime("%Y-%m-%d")
        if day != self.current_day:
            self.acquire()
            try:
                self.close()
                self.current_day = day
                self.baseFilename = os.path.abspath(self._path_for(day))
            finally:
                self.release()
        super().emit(record)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt=DATE_FORMAT)


def get_audit_logger(directory: str = AUDIT_LOG_DIR) -> logging.Logger:
    """Logger de auditoria: uma linha JSON por evento, sem propagar para o root."""
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    if not audit_logger.handlers:
        handler = DailyFileHandler(directory, "audit")
        handler.setFormatter(logging.Formatter("%(message)s"))
        audit_logger.addHandler(handler)
        audit_logger.setLevel(logging.INFO)
        audit_logger.propagate = False
    return audit_logger
