import logging
import os
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", directory: Optional[str] = None, file_prefix: str = "art_studio") -> Optional[str]:
    """
    Настраивает корневой логгер: вывод в консоль и, если задан каталог, в файл за текущий день.

    Args:
        level: уровень логирования (INFO, DEBUG, ...)
        directory: каталог для файлов логов; None отключает запись в файл
        file_prefix: префикс имени файла

    Returns:
        Optional[str]: путь к файлу лога или None
    """
    handlers = [logging.StreamHandler()]
    log_file = None

    if directory:
        os.makedirs(directory, exist_ok=True)
        log_date = datetime.now().strftime("%Y-%m-%d")
        log_file = os.path.join(directory, f"{file_prefix}_{log_date}.log")
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return log_file
