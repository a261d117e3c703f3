"""
Настройка логирования приложения

- Всегда пишем в консоль (stdout)
- Если задан каталог логов, дополнительно пишем в файл с ротацией
- Если нет прав на запись в каталог, продолжаем только с консолью
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from orderdesk.core.config import Config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_NAME = "orderdesk.log"


def setup_logging(level: str | None = None, logs_dir: str | None = None) -> list[logging.Handler]:
    """
    Настройка root logger

    Args:
        level: Уровень логирования (по умолчанию Config.LOG_LEVEL)
        logs_dir: Каталог для файла логов (по умолчанию Config.LOGS_DIR)

    Returns:
        Список установленных обработчиков
    """
    log_formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)

    handlers: list[logging.Handler] = [console_handler]

    logs_dir = logs_dir or Config.LOGS_DIR
    if logs_dir:
        log_file_path = Path(logs_dir) / LOG_FILE_NAME
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                str(log_file_path),
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8",
            )
            file_handler.setFormatter(log_formatter)
            handlers.insert(0, file_handler)  # файл первым, затем консоль
        except (PermissionError, OSError) as e:
            sys.stderr.write(f"[logging] WARNING: cannot use file logging at {log_file_path}: {e}\n")

    log_level = getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=log_level, handlers=handlers, force=True)

    logging.getLogger("orderdesk").setLevel(log_level)
    # SQL-запросы выводим только при DATABASE_ECHO
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if Config.DATABASE_ECHO else logging.WARNING
    )

    if log_level == logging.DEBUG:
        logging.getLogger(__name__).info("DEBUG режим включен (LOG_LEVEL=DEBUG)")

    return handlers
