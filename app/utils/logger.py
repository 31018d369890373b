import logging
import logging.handlers
import os
from datetime import datetime


class DailyFileHandler(logging.handlers.WatchedFileHandler):
    """
    Writes to <base>/<YYYY>/<MM>/log-<YYYY-MM-DD>.log and switches file when the day changes.
    """
    def __init__(self, base_log_dir, encoding="utf-8"):
        self.base_log_dir = base_log_dir
        self.current_date = datetime.now().strftime("%Y-%m-%d")
        super().__init__(self._path_for(self.current_date), encoding=encoding)

    def _path_for(self, day):
        year, month, _ = day.split("-")
        folder = os.path.join(self.base_log_dir, year, month)
        os.makedirs(folder, exist_ok=True)
        return os.path.join(folder, f"log-{day}.log")

    def emit(self, record):
        try:
            today = datetime.now().strftime("%Y-%m-%d")
            if today != self.current_date:
                if self.stream and not self.stream.closed:
                    self.stream.close()
                self.current_date = today
                self.baseFilename = self._path_for(today)
                self.stream = self._open()
            super().emit(record)
        except Exception:
            self.handleError(record)


def get_base_log_dir():
    """APP_LOG_DIR, or storage/logs next to the app package."""
    base_log_dir = os.environ.get("APP_LOG_DIR")
    if not base_log_dir:
        base_log_dir = os.path.abspath(
            os.path.join(os.path.dirname(__file__), "../../storage/logs")
        )
    return base_log_dir


Log = logging.getLogger("social_publisher")
Log.setLevel(os.environ.get("APP_LOG_LEVEL", "DEBUG").upper())

if not Log.handlers:
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    Log.addHandler(console_handler)

    file_handler = DailyFileHandler(get_base_log_dir())
    file_handler.setFormatter(formatter)
    Log.addHandler(file_handler)

__all__ = ["Log"]
