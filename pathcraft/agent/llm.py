"""LLM provider configuration and the model client used for generation."""

from functools import lru_cache

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_openai import ChatOpenAI

from pathcraft.core.config import get_settings
from pathcraft.core.exceptions import ProviderError
from pathcraft.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def get_llm() -> ChatOpenAI:
    """Get configured LLM instance."""
    settings = get_settings()

    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.OPENAI_TEMPERATURE,
    }

    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(**kwargs)


class ModelClient:
    """Sends one prompt, returns one text completion.

    No retries and no timeout here; the caller owns both.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        self._llm = llm

    async def submit(self, prompt: str) -> str:
        try:
            resp = await self._llm.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error("Model call failed", error=str(e), exc_info=True)
            raise ProviderError(f"Model call failed: {e}") from e

        content = resp.content
        if not isinstance(content, str) or not content.strip():
            logger.error("Model returned no text", content_type=type(content).__name__)
            raise ProviderError("Model returned an empty or non-text completion")

        logger.debug("Model call completed", chars=len(content))
        return content


@lru_cache
def get_model_client() -> ModelClient:
    """Get the model client for FastAPI dependency injection."""
    return ModelClient(get_llm())
