from dataclasses import dataclass

from app.core.config import Settings


@dataclass(frozen=True)
class AIConfig:
    api_key: str | None
    model: str
    poll_interval_s: float
    poll_max_attempts: int


def load_ai_config(settings: Settings) -> AIConfig:
    api_key = (settings.gemini_api_key or "").strip() or None
    return AIConfig(
        api_key=api_key,
        model=settings.gemini_model.strip(),
        poll_interval_s=settings.gemini_poll_interval_s,
        poll_max_attempts=settings.gemini_poll_max_attempts,
    )
