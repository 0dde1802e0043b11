"""Base protocol for LLM provider services."""

from typing import Protocol

from sheetrag.llm.parameters import ModelParameters


class LLMService(Protocol):
    """Protocol defining the interface for LLM providers.

    A provider is chosen once, when a document's parameters are resolved, and
    offers both capabilities the pipeline needs: embedding texts and
    completing a system/user prompt pair.
    """

    model: str
    embedding_model: str

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: One embedding vector per text, in input order
        """
        ...

    async def complete(
        self, system_prompt: str, user_prompt: str, parameters: ModelParameters
    ) -> str:
        """Generate a completion for a system/user prompt pair.

        Args:
            system_prompt: Instructions for the model
            user_prompt: The user's message
            parameters: Sampling parameters for this call

        Returns:
            str: The generated text (may be empty)
        """
        ...
