"""OpenAI helpers for query embeddings and Places query generation."""

import json
import logging
from typing import List, Optional

from openai import OpenAI

from localsearch.core.config import Settings, get_settings
from localsearch.core.errors import BackendConfigurationMissing

logger = logging.getLogger(__name__)

QUERY_GENERATION_PROMPT = """You are a search query generator for Google Places API. Generate exactly {count} different search queries to find businesses that serve or offer what the user is looking for.

Requirements:
- Each query should be 2-4 words suitable for Google Places Text Search
- Focus on finding businesses that SERVE or OFFER the specific item/service the user wants
- Prioritize specific dish/service matches over general business types
- Ensure each query is DIFFERENT and will find DIFFERENT types of businesses"""


class OpenAIClient:
    """Thin wrapper around the OpenAI SDK used by the semantic and AI backends."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[OpenAI] = None) -> None:
        self._settings = settings or get_settings()
        if client is None:
            if not self._settings.openai_api_key:
                raise BackendConfigurationMissing("Please set OPENAI_API_KEY")
            client = OpenAI(api_key=self._settings.openai_api_key)
        self._client = client

    def embed(self, text: str) -> List[float]:
        response = self._client.embeddings.create(
            model=self._settings.embedding_model,
            input=text.strip(),
            encoding_format="float",
        )
        return list(response.data[0].embedding)

    def generate_search_queries(self, query: str, count: int) -> List[str]:
        """Ask the chat model for ``count`` short Places queries related to ``query``."""
        if count <= 0:
            return []

        tools = [
            {
                "type": "function",
                "function": {
                    "name": "generateSearchQueries",
                    "description": "Generate Google Places search queries to find businesses that serve/offer what user wants",
                    "parameters": {
                        "type": "object",
                        "properties": {
                            "queries": {
                                "type": "array",
                                "items": {"type": "string"},
                                "minItems": count,
                                "maxItems": count,
                            }
                        },
                        "required": ["queries"],
                    },
                },
            }
        ]
        completion = self._client.chat.completions.create(
            model=self._settings.chat_model,
            messages=[
                {"role": "system", "content": QUERY_GENERATION_PROMPT.format(count=count)},
                {"role": "user", "content": query},
            ],
            tools=tools,
            tool_choice={"type": "function", "function": {"name": "generateSearchQueries"}},
            temperature=0.3,
            max_tokens=200,
        )
        tool_calls = completion.choices[0].message.tool_calls or []
        if not tool_calls or tool_calls[0].function.name != "generateSearchQueries":
            logger.warning("Chat model returned no search queries for %r", query)
            return []

        try:
            queries = json.loads(tool_calls[0].function.arguments).get("queries") or []
        except ValueError:
            logger.warning("Unparseable tool arguments: %s", tool_calls[0].function.arguments[:200])
            return []
        return [q.strip() for q in queries if isinstance(q, str) and q.strip()][:count]
