"""
Shared dependencies and application state for the FastAPI server.
The store, completion client, processor and rate limiter are initialized
once at startup and reused across requests.
"""
from __future__ import annotations

import logging
from typing import Optional

from config.settings import Settings, settings
from ingestion.processor import ResumeProcessor
from llm_clients.factory import create_llm_client_from_settings
from persistence.factory import create_store_from_settings
from security.rate_limiter import RateLimiter, create_rate_limiter

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Global singletons, populated during lifespan startup
# ---------------------------------------------------------------------------

_processor: Optional[ResumeProcessor] = None
_rate_limiter: Optional[RateLimiter] = None


def get_processor() -> ResumeProcessor:
    """FastAPI dependency: returns the initialized ResumeProcessor."""
    if _processor is None:
        raise RuntimeError("ResumeProcessor not initialized. Server may still be starting.")
    return _processor


def get_rate_limiter() -> Optional[RateLimiter]:
    """FastAPI dependency: returns the rate limiter, or None when disabled."""
    return _rate_limiter


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

def initialize_components(cfg: Optional[Settings] = None) -> None:
    """Initialize all components and store them as module-level singletons.
    Called once during FastAPI lifespan startup.
    """
    global _processor, _rate_limiter
    cfg = cfg or settings

    logger.info("Initializing resume parsing components...")

    # 1. Datastore + object storage
    store = create_store_from_settings(cfg)
    logger.info("Store ready: %s", cfg.STORE_PROVIDER)

    # 2. Completion client
    llm_client = create_llm_client_from_settings(cfg)
    logger.info("Completion client ready: %s (%s)", cfg.LLM_PROVIDER, llm_client.config.model_name)

    # 3. Processor
    _processor = ResumeProcessor.from_settings(store, llm_client, cfg)

    # 4. Rate limiter
    if cfg.RATE_LIMIT_ENABLED:
        _rate_limiter = create_rate_limiter(
            backend=cfg.RATE_LIMIT_BACKEND,
            limit=cfg.RATE_LIMIT_MAX_REQUESTS,
            window=cfg.RATE_LIMIT_WINDOW_SECONDS,
            redis_url=cfg.REDIS_URL,
        )
    else:
        _rate_limiter = None
        logger.warning("Rate limiting disabled")

    logger.info("All components initialized successfully")
