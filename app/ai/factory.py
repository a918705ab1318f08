import logging

from app.ai.config import AIConfig
from app.ai.providers.gemini_provider import GeminiProvider
from app.ai.types import SummarizerClient

logger = logging.getLogger(__name__)


def get_ai_client(cfg: AIConfig) -> SummarizerClient | None:
    if not cfg.api_key:
        logger.warning("gemini_api_key_missing summarization will return configuration errors")
        return None
    return GeminiProvider(api_key=cfg.api_key, model=cfg.model)
