# invisinsights/models/llm_factory.py

from typing import Dict
from abc import ABC, abstractmethod
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI
import logging
logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class LLMProvider(ABC):
    @abstractmethod
    def create_llm(self, model_name: str, **kwargs) -> BaseChatModel:
        """Create and return an LLM instance"""
        pass


class OpenAIProvider(LLMProvider):
    def create_llm(self, model_name: str, **kwargs) -> BaseChatModel:
        return ChatOpenAI(model=model_name, **kwargs)


class OpenRouterProvider(LLMProvider):
    """OpenRouter speaks the OpenAI chat-completions protocol"""

    def create_llm(self, model_name: str, api_key: str = None, referer: str = None,
                   title: str = None, **kwargs) -> BaseChatModel:
        if not api_key:
            raise ValueError("OPENROUTER_API_KEY not set")

        headers = {}
        if referer:
            headers["HTTP-Referer"] = referer
        if title:
            headers["X-Title"] = title

        logger.info(f"Creating OpenRouter model {model_name}")
        return ChatOpenAI(
            model=model_name,
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers=headers,
            **kwargs
        )


class LLMFactory:
    def __init__(self):
        self.providers: Dict[str, LLMProvider] = {
            "openai": OpenAIProvider(),
            "openrouter": OpenRouterProvider(),
        }

    def create_llm(self, provider: str, model_name: str, **kwargs) -> BaseChatModel:
        provider_lower = provider.lower()
        if provider_lower not in self.providers:
            raise ValueError(f"Unsupported provider: {provider}")

        return self.providers[provider_lower].create_llm(model_name, **kwargs)

    def from_settings(self, settings) -> BaseChatModel:
        """Build the reasoning-service model described by Settings"""
        kwargs = {"temperature": settings.llm_temperature, "top_p": settings.llm_top_p}
        if settings.llm_provider.lower() == "openrouter":
            kwargs.update(
                api_key=settings.openrouter_api_key,
                referer=settings.openrouter_http_referer,
                title=settings.openrouter_app_title
            )
        return self.create_llm(settings.llm_provider, settings.openrouter_model, **kwargs)
