"""FastAPI dependencies shared by the routers."""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .engine import PreferenceCache, PreferenceExtractor
from .inference import AnthropicInference
from .store import SQLStore, Store

logger = logging.getLogger(__name__)

# Process-wide extractor; its cache is shared across requests
_preference_extractor: PreferenceExtractor | None = None


def get_store(db: Session = Depends(get_db)) -> Store:
    return SQLStore(db)


def build_preference_extractor() -> PreferenceExtractor:
    settings = get_settings()
    inference = None
    if settings.inference_enabled:
        inference = AnthropicInference(
            api_key=settings.anthropic_api_key,
            model=settings.preference_model,
            timeout=settings.inference_timeout_seconds,
        )
    else:
        logger.warning("ANTHROPIC_API_KEY not set, recommendations will not be personalized")
    return PreferenceExtractor(
        inference=inference,
        cache=PreferenceCache(ttl_seconds=settings.preference_cache_ttl_seconds),
    )


def get_preference_extractor() -> PreferenceExtractor:
    global _preference_extractor
    if _preference_extractor is None:
        _preference_extractor = build_preference_extractor()
    return _preference_extractor
