import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(dock)s] %(message)s"


class DockNameFilter(logging.Filter):
    def __init__(self, dock_name: str):
        super().__init__()
        self.dock_name = dock_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.dock = self.dock_name
        return True


def setup_logger(dock_name: str, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(f"dock_markers.{dock_name}")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(DockNameFilter(dock_name))
        logger.addHandler(handler)

    return logger


def add_file_handler(logger: logging.Logger, dock_name: str, log_path: str) -> logging.FileHandler:
    handler = logging.FileHandler(log_path)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(DockNameFilter(dock_name))
    logger.addHandler(handler)
    return handler
