# utils/logging_factory.py

import logging
import os
from logging.handlers import TimedRotatingFileHandler


class LoggerFactory:
    @staticmethod
    def get_logger(name: str, nivel: int = logging.INFO) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(nivel)

        if not logger.handlers:
            formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

            # Console handler
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # File handler (solo si LOG_DIR está definido)
            log_dir = os.getenv("LOG_DIR")
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                file_handler = TimedRotatingFileHandler(
                    os.path.join(log_dir, f"{name}.log"),
                    when="midnight",
                    backupCount=10,
                    encoding="utf-8",
                )
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

        return logger


def get_logger(name: str) -> logging.Logger:
    return LoggerFactory.get_logger(name)
