"""Ollama (local) LLM service implementation."""

import logging
from typing import Any

import ollama

from sheetrag.constants import (
    LOCAL_CONTEXT_WINDOW,
    LOCAL_EMBEDDING_OPTIONS,
    LOCAL_PROVIDER,
    get_embedding_model,
)
from sheetrag.llm.parameters import ModelParameters

logger = logging.getLogger(__name__)

# Fixed sampling knobs applied to every local completion
LOCAL_GENERATION_OPTIONS: dict[str, Any] = {
    "top_k": 30,
    "repeat_penalty": 1.2,
    "frequency_penalty": 0.5,
    "presence_penalty": 0.5,
    "stop": ["</answer>"],
}


class OllamaService:
    """Ollama LLM service implementation.

    This service uses the Ollama API to embed texts and generate answers with
    models running on a local Ollama server.
    """

    def __init__(self, host: str, model: str, embedding_model: str | None = None) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: The chat model name to use (e.g., "llama3.2")
            embedding_model: Embedding model name. If None, uses EMBEDDING_MODEL env
                             var or the local default.
        """
        self.host = host
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model(LOCAL_PROVIDER)
        logger.info(
            f"🤖 Initializing OllamaService: host={host}, model={model}, "
            f"embedding_model={self.embedding_model}"
        )
        # Configure the Ollama client with the specified host
        self.client = ollama.Client(host=host)

    def _build_options(self, parameters: ModelParameters) -> dict[str, Any]:
        """Translate resolved parameters into Ollama request options."""
        options: dict[str, Any] = {
            "temperature": parameters.temperature,
            "top_p": parameters.top_p,
            "num_predict": parameters.max_tokens,
            "num_ctx": LOCAL_CONTEXT_WINDOW,
            **LOCAL_GENERATION_OPTIONS,
        }
        if parameters.num_thread is not None:
            options["num_thread"] = parameters.num_thread
        if parameters.num_gpu is not None:
            options["num_gpu"] = parameters.num_gpu
        if parameters.batch_size is not None:
            options["num_batch"] = parameters.batch_size
        return options

    async def complete(
        self, system_prompt: str, user_prompt: str, parameters: ModelParameters
    ) -> str:
        """Generate an answer using Ollama.

        Args:
            system_prompt: Instructions for the model
            user_prompt: The user's message
            parameters: Sampling parameters; json_output requests JSON-formatted output

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"  System prompt: {system_prompt[:100]}...")
        logger.debug(f"  User prompt: {user_prompt[:100]}...")

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        chat_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "options": self._build_options(parameters),
        }
        if parameters.json_output:
            chat_kwargs["format"] = "json"

        try:
            response = self.client.chat(**chat_kwargs)
            content = response.message.content or ""
            logger.info(f"✅ Response generated: {len(content)} characters")
            return content
        except Exception as e:
            logger.error(f"❌ Ollama API error: {e}", exc_info=True)
            raise

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts using Ollama.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: List of embedding vectors
        """
        if not texts:
            return []

        response = self.client.embed(
            model=self.embedding_model, input=texts, options=dict(LOCAL_EMBEDDING_OPTIONS)
        )
        embeddings = [list(vector) for vector in response["embeddings"]]

        logger.info(f"✅ Generated {len(embeddings)} embeddings with {self.embedding_model}")
        return embeddings

    def list_models(self) -> list[dict[str, Any]]:
        """List chat models installed on the Ollama server (embedding models excluded).

        Returns:
            list[dict]: Models with id, name and size description
        """
        response = self.client.list()
        models = []
        for model in response.models:
            name = model.model or ""
            if "embed" in name:
                continue
            models.append(
                {
                    "id": name,
                    "name": name.replace(":latest", ""),
                    "description": f"Size: {model.size}",
                }
            )
        return models
