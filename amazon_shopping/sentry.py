"""
Sentry initialization for centralized error tracking.
Observes reality, never controls logic.
"""
import logging
from typing import Dict, Any

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.logging import LoggingIntegration

from amazon_shopping.config import config
from amazon_shopping.logger import logger


def initialize_sentry() -> bool:
    """Initialize Sentry SDK if DSN is configured."""
    if not config.has_sentry:
        logger.info("Sentry not configured, skipping initialization")
        return False
    
    try:
        sentry_sdk.init(
            dsn=config.SENTRY_DSN,
            environment=config.ENVIRONMENT,
            integrations=[
                AsyncioIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR)
            ],
            traces_sample_rate=0.1,
            send_default_pii=False,
            before_send=_enrich_sentry_event
        )
    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False
    
    logger.info("Sentry initialized for error tracking")
    return True


def _enrich_sentry_event(event: Dict[str, Any], hint: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with system context and group them by exception type."""
    event.setdefault("tags", {})
    event["tags"]["system"] = "amazon-shopping"
    event["tags"]["environment"] = config.ENVIRONMENT
    
    exceptions = event.get("exception", {}).get("values", [])
    if exceptions:
        exc = exceptions[0]
        event["fingerprint"] = [
            "{{ default }}",
            exc.get("type", "Unknown"),
            exc.get("module", "unknown")
        ]
    
    return event


def capture_provider_error(operation: str, error: Exception) -> None:
    """Report a failed search to Sentry."""
    if not config.has_sentry:
        return
    
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("operation", operation)
        scope.set_tag("error_type", type(error).__name__)
        scope.set_level("error")
        sentry_sdk.capture_exception(error)
