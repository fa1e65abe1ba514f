"""
Logging configuration.
"""

import json
import logging
import sys
from typing import Any, Dict, cast

from loguru import logger

from catalog.core.config import settings


class InterceptHandler(logging.Handler):
    """
    Intercept standard logging messages toward Loguru.
    """

    def emit(self, record: logging.LogRecord) -> None:
        logger_opt = logger.opt(depth=6, exception=record.exc_info)
        msg = record.getMessage()
        level: int = record.levelno

        if level >= logging.CRITICAL:
            logger_opt.critical(msg)
        elif level >= logging.ERROR:
            logger_opt.error(msg)
        elif level >= logging.WARNING:
            logger_opt.warning(msg)
        elif level >= logging.INFO:
            logger_opt.info(msg)
        else:
            logger_opt.debug(msg)


def serialize_record(record: Dict[str, Any]) -> str:
    """
    Custom serializer for Loguru logs.
    """
    try:
        subset = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "service": settings.PROJECT_NAME,
            "environment": settings.ENVIRONMENT,
        }

        if "name" in record:
            subset["module"] = record["name"]
        if "function" in record:
            subset["function"] = record["function"]
        if "line" in record:
            subset["line"] = record["line"]

        # entity/field context bound by the services
        if "extra" in record and isinstance(record["extra"], dict):
            for key, value in record["extra"].items():
                if not key.startswith("_"):
                    subset[key] = value

        if "exception" in record and record["exception"]:
            subset["exception"] = str(record["exception"])

        return json.dumps(subset)
    except Exception as e:
        # Fallback to simple format if JSON serialization fails
        return json.dumps(
            {
                "timestamp": (
                    record["time"].isoformat() if hasattr(record.get("time"), "isoformat") else str(record.get("time", ""))
                ),
                "level": "ERROR",
                "message": f"Error serializing log: {str(e)}",
                "original_message": str(record.get("message", "")),
                "service": settings.PROJECT_NAME,
                "environment": settings.ENVIRONMENT,
            }
        )


def configure_logging() -> None:
    """
    Configure loguru logger.
    """
    logger.remove()

    if settings.JSON_LOGS:
        logger.add(
            lambda msg: print(serialize_record(cast(Dict[str, Any], msg.record)), file=sys.stderr),
            level=settings.LOG_LEVEL,
            backtrace=True,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=settings.LOG_LEVEL,
            format="{time} | {level} | {message} | {extra}",
            backtrace=True,
            diagnose=False,
        )

    logging.getLogger().handlers = [InterceptHandler()]

    for logger_name in ["sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg"]:
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [InterceptHandler()]
        logging_logger.propagate = False

    logger.info("Logging configured successfully.")
