import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from logging import Logger

from snapgen.config.SnapshotConfig import LoggingConfig

# Nothing is read from disk at import time; snapshot() applies the loaded config.
_LOG_CFG: LoggingConfig = LoggingConfig()
_LOGGERS: list[Logger] = []


class ContextFilter(logging.Filter):
    """Guarantees record.context always exists (prevents type warnings)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = None
        return True


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for deterministic, parseable logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        if record.context:  # type: ignore[attr-defined]
            payload["context"] = record.context  # type: ignore[attr-defined]

        return json.dumps(payload, ensure_ascii=False, default=repr)


def _level(cfg: LoggingConfig) -> int:
    if cfg.debug_enabled:
        return logging.DEBUG
    return getattr(logging, cfg.level.upper(), logging.INFO)


def _apply(logger: Logger, cfg: LoggingConfig) -> None:
    logger.setLevel(_level(cfg))
    for handler in logger.handlers:
        handler.setFormatter(JsonFormatter() if cfg.json else logging.Formatter())


@lru_cache(None)
def get_logger(name: str = "snapgen") -> Logger:
    logger = logging.getLogger(name)
    _LOGGERS.append(logger)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.addFilter(ContextFilter())
        logger.addHandler(handler)

    _apply(logger, _LOG_CFG)
    return logger


def configure_logging(config: LoggingConfig) -> None:
    """Make config the active logging config for every snapgen logger."""
    global _LOG_CFG
    _LOG_CFG = config
    for logger in _LOGGERS:
        _apply(logger, config)


def debug_enabled_for(logger: Logger, config: LoggingConfig | None = None) -> bool:
    cfg = config or _LOG_CFG
    if not cfg.debug_enabled:
        return False
    if not cfg.debug_modules:
        return True
    return any(
        logger.name == module or logger.name.startswith(module + ".")
        for module in cfg.debug_modules
    )


def log_debug(logger: Logger, msg: str, **context):
    if not debug_enabled_for(logger):
        return
    logger.debug(msg, extra={"context": context})


def log_info(logger: Logger, msg: str, **context):
    logger.info(msg, extra={"context": context})


def log_warn(logger: Logger, msg: str, **context):
    logger.warning(msg, extra={"context": context})


def log_error(logger: Logger, msg: str, **context):
    logger.error(msg, extra={"context": context})
