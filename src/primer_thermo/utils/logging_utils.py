import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from tqdm import tqdm

# Default log directory
DEFAULT_LOG_DIR = Path("var/log")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TqdmStreamHandler(logging.StreamHandler):
    """
    Console handler that routes records through ``tqdm.write``.

    Writing through tqdm keeps an active progress bar (e.g. the DP span bar)
    on its own line instead of being torn by interleaved log output.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


def get_log_file_path(module_name: str, log_dir: Optional[Path] = None, include_timestamp: bool = True) -> Path:
    """
    Build a log file path for a logger name, creating the directory if needed.

    Parameters
    ----------
    module_name : str
        Dotted logger name (e.g. ``"primer_thermo.folding"``).
    log_dir : Optional[Path]
        Target directory. Defaults to ``DEFAULT_LOG_DIR``.
    include_timestamp : bool
        Append a ``YYYYmmdd_HHMMSS`` suffix so runs do not overwrite each other.

    Returns
    -------
    Path
        Full path of the log file.
    """
    log_dir = DEFAULT_LOG_DIR if log_dir is None else log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = module_name.replace(".", "_")
    if include_timestamp:
        safe_name = f"{safe_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"

    return log_dir / f"{safe_name}.log"


def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
    enable_tqdm: bool = True,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configure and return a logger with a console handler and an optional file handler.

    Existing handlers on the logger are removed first so repeated calls (e.g. from
    tests or a re-invoked CLI) never duplicate output.

    Parameters
    ----------
    name : str
        Logger name, typically a package or module ``__name__``.
    level : int
        Base level for the logger and its handlers.
    log_file : Optional[str]
        Explicit log file path. Takes precedence over ``enable_file_logging``.
    log_dir : Optional[Path]
        Directory for the generated log file when ``log_file`` is not given.
    enable_file_logging : bool
        Create a timestamped log file under ``log_dir`` when no ``log_file`` is given.
    enable_tqdm : bool
        Route console output through ``tqdm.write`` so progress bars stay intact.
    console_level, file_level : Optional[int]
        Per-handler level overrides.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler: logging.Handler = TqdmStreamHandler() if enable_tqdm else logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level if console_level is not None else level)
    logger.addHandler(console_handler)

    log_path: Optional[Path] = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir)

    if log_path is not None:
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level if file_level is not None else level)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {log_path}")

    return logger


def set_log_level(logger: logging.Logger, level: int) -> None:
    """Update the level of a logger and all of its handlers."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
