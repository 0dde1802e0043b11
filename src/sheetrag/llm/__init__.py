"""LLM service abstraction layer for sheetrag.

This package provides one capability interface for two provider families:
- OllamaService: local models via Ollama
- GeminiService: cloud models via the Google Gemini API

Both implement the LLMService protocol ({embed, complete}); a provider is
chosen once, when a document's parameters are resolved.

Usage:
    from sheetrag.llm import get_llm_service, resolve_parameters

    parameters = resolve_parameters("local", {"temperature": 0.3})
    service = get_llm_service({"provider": "local", "model": "llama3.2"})
"""

from sheetrag.llm.base import LLMService
from sheetrag.llm.factory import get_llm_service, list_chat_models
from sheetrag.llm.gemini import GeminiService
from sheetrag.llm.ollama import OllamaService
from sheetrag.llm.parameters import ModelParameters, resolve_parameters, switch_provider

__all__ = [
    "LLMService",
    "ModelParameters",
    "OllamaService",
    "GeminiService",
    "get_llm_service",
    "list_chat_models",
    "resolve_parameters",
    "switch_provider",
]
