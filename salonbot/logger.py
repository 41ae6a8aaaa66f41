import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class LineLimitedFileHandler(logging.FileHandler):
    """Обнуляет файл лога, когда в нём набирается max_lines строк."""

    def __init__(self, filename: Path, max_lines: int = 1000) -> None:
        self.max_lines = max_lines
        filename.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(filename, "a", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._rotate_if_full()
        except OSError:
            # Контроль размера не должен ронять логирование
            self.handleError(record)
        super().emit(record)

    def _rotate_if_full(self) -> None:
        path = Path(self.baseFilename)
        if not path.exists():
            path.touch()
            return
        self.flush()
        with open(path, "r", encoding="utf-8") as f:
            line_count = sum(1 for _ in f)
        if line_count >= self.max_lines:
            self.stream.seek(0)
            self.stream.truncate(0)


def setup_logging(log_dir: Path, max_lines: int = 1000, console: bool = True) -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    info_handler = LineLimitedFileHandler(log_dir / "info.log", max_lines=max_lines)
    info_handler.setLevel(logging.INFO)
    handlers.append(info_handler)

    error_handler = LineLimitedFileHandler(log_dir / "errors.log", max_lines=max_lines)
    error_handler.setLevel(logging.ERROR)
    handlers.append(error_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(logging.INFO)
        handlers.append(stream_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    # aiogram пишет каждый апдейт в INFO, в файлы это не нужно
    logging.getLogger("aiogram.event").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
