"""Factory functions for creating LLM service instances."""

import logging
import os
from typing import Any

from dotenv import load_dotenv

from sheetrag.constants import (
    CLOUD_CHAT_MODELS,
    CLOUD_PROVIDER,
    DEFAULT_CHAT_MODELS,
    DEFAULT_OLLAMA_HOST,
    LOCAL_PROVIDER,
)
from sheetrag.llm.base import LLMService
from sheetrag.llm.gemini import GeminiService
from sheetrag.llm.ollama import OllamaService
from sheetrag.llm.parameters import PROVIDER_DEFAULTS

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_llm_service(config: dict | None = None) -> LLMService:
    """Factory function to create an LLM service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'provider': "local" or "cloud" (default: from LLM_SERVICE env, or "local")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Chat model name (default: from LLM_MODEL env, or family default)
                - 'embedding_model': Embedding model name (default: family default)
                - 'embedding_dimensions': Output dimensionality for cloud embeddings

    Returns:
        LLMService: An instance implementing the LLMService protocol.

    Raises:
        ValueError: If the provider family is unknown
    """
    if config is None:
        config = {}

    # Read provider from config, then env, then default to local
    provider = config.get("provider") or os.getenv("LLM_SERVICE", LOCAL_PROVIDER)
    model = config.get("model") or os.getenv("LLM_MODEL")
    embedding_model = config.get("embedding_model")

    if provider == LOCAL_PROVIDER:
        host = config.get("host") or os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)
        return OllamaService(
            host=host,
            model=model or DEFAULT_CHAT_MODELS[LOCAL_PROVIDER],
            embedding_model=embedding_model,
        )

    if provider == CLOUD_PROVIDER:
        return GeminiService(
            model=model or DEFAULT_CHAT_MODELS[CLOUD_PROVIDER],
            embedding_model=embedding_model,
            embedding_dimensions=config.get("embedding_dimensions"),
        )

    raise ValueError(f"Unsupported provider: {provider}")


def list_chat_models(host: str | None = None) -> list[dict[str, Any]]:
    """List selectable chat models of both provider families.

    Local models come from the Ollama server; when it cannot be reached only
    the cloud catalogue is returned.

    Args:
        host: Ollama host URL (default: from OLLAMA_HOST env)

    Returns:
        list[dict]: Models with id, name, description, provider and default parameters
    """
    host = host or os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST)
    models: list[dict[str, Any]] = []

    try:
        service = OllamaService(host=host, model=DEFAULT_CHAT_MODELS[LOCAL_PROVIDER])
        for model in service.list_models():
            model["provider"] = LOCAL_PROVIDER
            model["parameters"] = dict(PROVIDER_DEFAULTS[LOCAL_PROVIDER])
            models.append(model)
    except Exception as e:
        logger.warning(f"⚠️ Could not list local models from {host}: {e}")

    for model_id in CLOUD_CHAT_MODELS:
        models.append(
            {
                "id": model_id,
                "name": model_id.replace("-", " ").title(),
                "description": "Google Gemini model",
                "provider": CLOUD_PROVIDER,
                "parameters": dict(PROVIDER_DEFAULTS[CLOUD_PROVIDER]),
            }
        )

    return models
