import json
import logging
from datetime import datetime, timezone

PACKAGE_LOGGER = "ipgeo_tracker"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def configure_logging(level: str = "INFO") -> logging.Logger:
    logger = get_logger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def log_action(
    logger: logging.Logger,
    module: str,
    action: str,
    user_id: int | None,
    outcome: str,
    trace_id: str | None = None,
    level: int = logging.INFO,
) -> None:
    logger.log(
        level,
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": logging.getLevelName(level),
                "module": module,
                "action": action,
                "user_id": user_id,
                "trace_id": trace_id,
                "outcome": outcome,
            }
        ),
    )
