import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
WORKSPACE_LOG_DIR = Path(".shadow") / "logs"
WORKSPACE_LOG_FILE = "shadow-watch.log"


class LoggingConfig:
    """Singleton configuration class for logging settings."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._enabled = True
        return cls._instance

    @property
    def enabled(self) -> bool:
        """Get the current logging state."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        """Set the logging state."""
        self._enabled = bool(value)

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration to default state (useful for testing)."""
        cls._instance = None


class LogFilter(logging.Filter):
    """Filter that checks LoggingConfig to determine if logs should be shown."""

    def filter(self, record):
        """Only allow logs if logging is enabled in config."""
        return LoggingConfig().enabled


class ShadowWatchLogger:
    """Custom logger for centralized logging control."""

    _instance: Optional[logging.Logger] = None

    @classmethod
    def get_logger(cls, name: Optional[str] = None) -> logging.Logger:
        """
        Get or create a logger instance with proper configuration.

        Args:
            name: Optional name for the logger. If None, the package logger
                is returned.

        Returns:
            Configured logger instance
        """
        if cls._instance is None:
            logger = logging.getLogger("shadow_watch")
            logger.setLevel(logging.INFO)
            logger.propagate = False

            if not logger.handlers:
                handler = logging.StreamHandler()
                handler.setLevel(logging.INFO)
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                handler.addFilter(LogFilter())
                logger.addHandler(handler)

            cls._instance = logger

        if name:
            # Module names already carry the package prefix
            if name.startswith("shadow_watch."):
                name = name[len("shadow_watch."):]
            return cls._instance.getChild(name)

        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the logger (useful for testing)."""
        cls._instance = None


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Convenience function to get a logger instance.

    Args:
        name: Optional name for the logger, usually ``__name__``.

    Returns:
        Configured logger instance
    """
    return ShadowWatchLogger.get_logger(name)


def attach_workspace_log(workspace_root: Union[str, Path]) -> logging.FileHandler:
    """
    Mirror package logs into ``.shadow/logs/shadow-watch.log`` of a workspace.

    Args:
        workspace_root: Root directory of the analyzed workspace

    Returns:
        The file handler that was attached, for later detaching
    """
    log_dir = Path(workspace_root) / WORKSPACE_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_dir / WORKSPACE_LOG_FILE, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(LogFilter())

    get_logger().addHandler(handler)
    return handler


def detach_workspace_log(handler: logging.Handler) -> None:
    """Remove and close a handler added by attach_workspace_log."""
    get_logger().removeHandler(handler)
    handler.close()
