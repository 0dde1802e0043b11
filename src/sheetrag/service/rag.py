"""Retrieval-augmented answering over one spreadsheet's vector store.

The orchestrator embeds the question, retrieves the closest chunks, folds
them into a fixed data-analyst system prompt and asks the generation
provider. Every provider failure is turned into a fixed user-facing string;
``answer`` never raises.
"""

import logging

from sheetrag.constants import DEFAULT_MAX_CONCURRENCY, get_min_relevance_score
from sheetrag.llm.base import LLMService
from sheetrag.llm.parameters import ModelParameters
from sheetrag.service.vectorstore import InMemoryVectorStore, SearchResult, retrieval_width

logger = logging.getLogger(__name__)

NO_RELEVANT_DATA = "No relevant data found in the dataset."
RETRIEVAL_ERROR = "Error accessing the relevant data."
EMPTY_ANSWER_APOLOGY = (
    "I apologize, but I couldn't find enough relevant information to answer your "
    "question accurately. Could you please rephrase or provide more context?"
)
PROCESSING_ERROR = (
    "I encountered an error while processing your request. This might be due to the "
    "complexity of the query or data limitations. Could you try simplifying your question?"
)

SYSTEM_PROMPT = """You are a precise data analyst specialized in analyzing Excel data.
Your primary task is to provide accurate numerical analysis and counts based on the data.

Guidelines for Data Analysis:
1. Always analyze ALL matching records in the dataset
2. When counting or analyzing data:
   - Consider the entire dataset
   - Double-check your calculations
   - Include the total number of records analyzed
3. For status or category counts:
   - List all unique values found
   - Provide exact counts for each
4. Format numbers using Indonesian locale
5. Always mention the total records analyzed
6. Provide specific row references when applicable

Current Data Context:
{context}

Remember:
- Be extremely precise with numbers
- Analyze ALL instances, not just the first few
- Verify calculations multiple times
- Consider the entire dataset
- State if data appears incomplete or inconsistent"""


def format_context(results: list[SearchResult]) -> str:
    """Format retrieved chunks into the context string for the LLM.

    Args:
        results: Retrieved chunks, best first

    Returns:
        Context string headed by the dataset's total record count
    """
    if not results:
        return NO_RELEVANT_DATA

    total_rows = results[0].chunk.metadata.get("total_rows", 0)
    body = "\n\n".join(result.chunk.content for result in results)
    return f"Total Records in Dataset: {total_rows}\n\nRelevant Data:\n{body}"


def build_system_prompt(context: str) -> str:
    """Interpolate a context string into the analyst system prompt."""
    return SYSTEM_PROMPT.replace("{context}", context)


class RAGOrchestrator:
    """Answers questions about one spreadsheet from its vector store."""

    def __init__(
        self,
        store: InMemoryVectorStore,
        llm: LLMService,
        parameters: ModelParameters,
        min_score: float | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Vector store built from the document's rows
            llm: Provider used both to embed the question and to generate the answer
            parameters: Sampling parameters for generation
            min_score: Similarity floor (default: RELEVANCE_SCORE_FLOOR env or 0.7)
            max_concurrency: Upper bound on scoring worker threads
        """
        self.store = store
        self.llm = llm
        self.parameters = parameters
        self.min_score = get_min_relevance_score() if min_score is None else min_score
        self.max_concurrency = max_concurrency

    def retrieve(self, question: str) -> list[SearchResult]:
        """Embed the question and search the store.

        Retrieves min(max(ceil(0.2 * chunks), 20), 100) chunks at most, so
        questions about small sheets see every relevant chunk.
        """
        k = retrieval_width(len(self.store))
        query_embedding = self.llm.embed([question])[0]
        return self.store.similarity_search(
            query_embedding, k=k, min_score=self.min_score, max_concurrency=self.max_concurrency
        )

    def build_context(self, question: str) -> str:
        """Retrieve chunks for a question and format them, tolerating retrieval errors."""
        try:
            results = self.retrieve(question)
        except Exception as e:
            logger.error(f"❌ Retrieval failed: {e}", exc_info=True)
            return RETRIEVAL_ERROR

        logger.info(f"🔍 Retrieved {len(results)} of {len(self.store)} chunks")
        return format_context(results)

    async def answer(self, question: str) -> str:
        """Answer a question about the spreadsheet.

        Args:
            question: The user's question, sent verbatim as the human message

        Returns:
            str: The model's answer, or one of the fixed fallback messages
        """
        try:
            context = self.build_context(question)
            system_prompt = build_system_prompt(context)

            logger.info(f"🤖 Asking {getattr(self.llm, 'model', 'LLM')}: '{question[:100]}'")
            response = await self.llm.complete(system_prompt, question, self.parameters)

            if not response or not response.strip():
                logger.warning("⚠️ Model returned an empty answer")
                return EMPTY_ANSWER_APOLOGY
            return response
        except Exception as e:
            logger.error(f"❌ Error generating answer: {e}", exc_info=True)
            return PROCESSING_ERROR
