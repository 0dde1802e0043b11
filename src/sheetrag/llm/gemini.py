"""Google Gemini (cloud) LLM service implementation."""

import logging

from google import genai

from sheetrag.constants import CLOUD_PROVIDER, get_embedding_model
from sheetrag.llm.parameters import ModelParameters

logger = logging.getLogger(__name__)

# Maximum number of texts per embed_content request
EMBED_BATCH_SIZE = 100


class GeminiService:
    """Google Gemini LLM service implementation.

    This service uses the Google Gemini API to embed texts and generate answers.
    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(
        self,
        model: str,
        embedding_model: str | None = None,
        embedding_dimensions: int | None = None,
    ) -> None:
        """Initialize the Gemini service.

        Args:
            model: The model name to use (e.g., "gemini-2.5-flash")
            embedding_model: Embedding model name. If None, uses EMBEDDING_MODEL env
                             var or the cloud default.
            embedding_dimensions: Optional output dimensionality for embeddings
        """
        self.model = model
        self.embedding_model = embedding_model or get_embedding_model(CLOUD_PROVIDER)
        self.embedding_dimensions = embedding_dimensions
        logger.info(
            f"🤖 Initializing GeminiService: model={model}, "
            f"embedding_model={self.embedding_model}"
        )
        # The client gets the API key from the GEMINI_API_KEY environment variable
        self.client = genai.Client()

    async def complete(
        self, system_prompt: str, user_prompt: str, parameters: ModelParameters
    ) -> str:
        """Generate an answer using Gemini.

        Only temperature, top_p and max_tokens are sent; local-only knobs are ignored.

        Args:
            system_prompt: Instructions for the model, sent as the system instruction
            user_prompt: The user's message
            parameters: Sampling parameters for this call

        Returns:
            str: The generated response content from the model.
        """
        logger.info(f"🗣️  Generating response with {self.model}")
        logger.debug(f"  User prompt: {user_prompt[:100]}...")

        try:
            config = genai.types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=parameters.temperature,
                top_p=parameters.top_p,
                max_output_tokens=parameters.max_tokens,
            )
            response = self.client.models.generate_content(
                model=self.model, contents=user_prompt, config=config
            )

            content = response.text or ""
            logger.info(f"✅ Response generated: {len(content)} characters")
            return content
        except Exception as e:
            logger.error(f"❌ Gemini API error: {e}", exc_info=True)
            raise

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a list of texts using Gemini.

        Args:
            texts: List of text strings to embed

        Returns:
            list[list[float]]: List of embedding vectors
        """
        config = None
        if self.embedding_dimensions:
            config = genai.types.EmbedContentConfig(
                output_dimensionality=self.embedding_dimensions
            )

        embeddings: list[list[float]] = []
        for start in range(0, len(texts), EMBED_BATCH_SIZE):
            batch = texts[start : start + EMBED_BATCH_SIZE]
            try:
                response = self.client.models.embed_content(
                    model=self.embedding_model, contents=batch, config=config
                )
                embeddings.extend(list(embedding.values) for embedding in response.embeddings)
            except Exception as e:
                logger.error(f"❌ Gemini embedding error: {e}", exc_info=True)
                raise

        logger.info(f"✅ Generated {len(embeddings)} embeddings with {self.embedding_model}")
        return embeddings
