"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    database_url: str
    google_api_key: str = ""
    openai_api_key: str = ""
    distance_service_url: str = "http://localhost:8080/distances"
    embedding_model: str = "text-embedding-3-small"
    chat_model: str = "gpt-4o-mini"
    port: int = 8080


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "")
    google_api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GOOGLE_DISTANCE_MATRIX_API_KEY", "")
    openai_api_key = os.getenv("OPENAI_API_KEY", "")
    distance_service_url = os.getenv("DISTANCE_SERVICE_URL", "http://localhost:8080/distances")
    embedding_model = os.getenv("OPENAI_EMBED_MODEL", "text-embedding-3-small")
    chat_model = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    port = int(os.getenv("PORT", "8080"))

    if not database_url:
        logger.warning("DATABASE_URL is not set; keyword and semantic searches will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; distance and Places lookups will fail.")
    if not openai_api_key:
        logger.warning("OPENAI_API_KEY is not configured; semantic and AI searches will be skipped.")

    return Settings(
        database_url=database_url,
        google_api_key=google_api_key,
        openai_api_key=openai_api_key,
        distance_service_url=distance_service_url,
        embedding_model=embedding_model,
        chat_model=chat_model,
        port=port,
    )
