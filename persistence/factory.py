"""
Factory Pattern for persistence providers.
Each provider builds a StoreBundle (documents, profiles, storage).
"""
from typing import Callable, Dict, List, Optional
import logging

from config.settings import Settings, settings as default_settings
from persistence.base import StoreBundle
from persistence.implementations.memory import (
    InMemoryBlobStorage,
    InMemoryDocumentRepository,
    InMemoryProfileRepository,
)
from persistence.implementations.supabase_store import create_supabase_store

logger = logging.getLogger(__name__)

# Global registry of store providers
_STORE_REGISTRY: Dict[str, Callable[..., StoreBundle]] = {}


def register_store(name: str):
    """
    Decorator to register a store provider.

    Usage:
        @register_store("memory")
        def create_memory_store(**kwargs) -> StoreBundle:
            ...
    """
    def decorator(builder: Callable[..., StoreBundle]) -> Callable[..., StoreBundle]:
        if name in _STORE_REGISTRY:
            logger.warning(f"Store provider '{name}' is already registered. Overwriting.")
        _STORE_REGISTRY[name] = builder
        return builder

    return decorator


@register_store("memory")
def create_memory_store(**kwargs) -> StoreBundle:
    return StoreBundle(
        documents=InMemoryDocumentRepository(),
        profiles=InMemoryProfileRepository(),
        storage=InMemoryBlobStorage(),
    )


register_store("supabase")(create_supabase_store)


def create_store(provider: str, **kwargs) -> StoreBundle:
    """
    Factory function to create a store bundle by provider name.

    Raises:
        ValueError: If provider is not registered
    """
    if provider not in _STORE_REGISTRY:
        raise ValueError(
            f"Store provider '{provider}' not found. "
            f"Available providers: {list_stores()}"
        )
    bundle = _STORE_REGISTRY[provider](**kwargs)
    logger.info(f"Created store: {provider}")
    return bundle


def create_store_from_settings(cfg: Optional[Settings] = None) -> StoreBundle:
    cfg = cfg or default_settings
    if cfg.STORE_PROVIDER == "supabase":
        return create_store(
            "supabase",
            url=cfg.SUPABASE_URL,
            service_role_key=cfg.SUPABASE_SERVICE_ROLE_KEY,
            bucket=cfg.SUPABASE_BUCKET,
        )
    return create_store(cfg.STORE_PROVIDER)


def list_stores() -> List[str]:
    return sorted(_STORE_REGISTRY.keys())
