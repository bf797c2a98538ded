"""
Structured logging setup.
"""
import logging
import sys
import json
from datetime import datetime, timezone

from amazon_shopping.config import config


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        if hasattr(record, "extra"):
            log_data.update(record.extra)
        
        return json.dumps(log_data)


def setup_logger(level: str = None) -> logging.Logger:
    """Configure structured logging for the package logger."""
    logger = logging.getLogger("amazon_shopping")
    logger.setLevel((level or config.LOG_LEVEL).upper())
    
    # stdout is reserved for the MCP stdio protocol
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(StructuredFormatter())
    
    logger.handlers.clear()
    logger.addHandler(console_handler)
    logger.propagate = False
    
    return logger


# Global logger instance
logger = setup_logger()
