"""Tests for the LLM provider services."""

import os
from unittest.mock import MagicMock, patch

import pytest

from sheetrag.llm import (
    GeminiService,
    OllamaService,
    get_llm_service,
    list_chat_models,
    resolve_parameters,
)
from sheetrag.llm.ollama import LOCAL_GENERATION_OPTIONS


def chat_response(content):
    """Build an Ollama ChatResponse-like object."""
    mock_message = MagicMock()
    mock_message.content = content
    mock_response = MagicMock()
    mock_response.message = mock_message
    return mock_response


class TestOllamaService:
    """Tests for OllamaService class."""

    @pytest.mark.asyncio
    async def test_complete_success(self):
        """Test a system/user prompt pair is sent with local options."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(return_value=chat_response("Ada 3 baris."))

        response = await service.complete("system", "Berapa baris?", resolve_parameters("local"))

        assert response == "Ada 3 baris."
        kwargs = service.client.chat.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "Berapa baris?"},
        ]
        assert "format" not in kwargs

    @pytest.mark.asyncio
    async def test_complete_options(self):
        """Test parameters map onto Ollama option names."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(return_value=chat_response("ok"))

        params = resolve_parameters("local", {"temperature": 0.2, "max_tokens": 100})
        await service.complete("system", "user", params)

        options = service.client.chat.call_args.kwargs["options"]
        assert options["temperature"] == 0.2
        assert options["top_p"] == 0.9
        assert options["num_predict"] == 100
        assert options["num_ctx"] == 16384
        assert options["num_thread"] == 8
        assert options["num_gpu"] == 1
        assert options["num_batch"] == 512
        for key, value in LOCAL_GENERATION_OPTIONS.items():
            assert options[key] == value

    @pytest.mark.asyncio
    async def test_complete_json_output(self):
        """Test json_output requests JSON-formatted output."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(return_value=chat_response("{}"))

        await service.complete("s", "u", resolve_parameters("local", {"json_output": True}))

        assert service.client.chat.call_args.kwargs["format"] == "json"

    @pytest.mark.asyncio
    async def test_complete_none_content(self):
        """Test a missing message body becomes an empty string."""
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(return_value=chat_response(None))

        assert await service.complete("s", "u", resolve_parameters("local")) == ""

    @pytest.mark.asyncio
    async def test_complete_error_propagates(self):
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.chat = MagicMock(side_effect=ConnectionError("refused"))

        with pytest.raises(ConnectionError):
            await service.complete("s", "u", resolve_parameters("local"))

    def test_embed_batches_texts(self):
        """Test all texts are embedded in one request."""
        service = OllamaService(
            host="http://test:11434", model="test-model", embedding_model="nomic-embed-text"
        )
        service.client.embed = MagicMock(return_value={"embeddings": [[0.1, 0.2], [0.3, 0.4]]})

        embeddings = service.embed(["Row 1:", "Row 2:"])

        assert embeddings == [[0.1, 0.2], [0.3, 0.4]]
        kwargs = service.client.embed.call_args.kwargs
        assert kwargs["model"] == "nomic-embed-text"
        assert kwargs["input"] == ["Row 1:", "Row 2:"]
        assert kwargs["options"] == {"num_gpu": 1, "num_thread": 8, "num_ctx": 16384}

    def test_embed_empty(self):
        service = OllamaService(host="http://test:11434", model="test-model")
        service.client.embed = MagicMock()

        assert service.embed([]) == []
        service.client.embed.assert_not_called()

    def test_embedding_model_from_env(self):
        with patch.dict(os.environ, {"EMBEDDING_MODEL": "mxbai-embed-large"}):
            service = OllamaService(host="http://test:11434", model="test-model")
        assert service.embedding_model == "mxbai-embed-large"

    def test_list_models_skips_embedding_models(self):
        """Test embedding models are not offered as chat models."""
        service = OllamaService(host="http://test:11434", model="test-model")
        chat_model = MagicMock(model="llama3.2:latest", size=2019393189)
        embed_model = MagicMock(model="nomic-embed-text:latest", size=274302450)
        service.client.list = MagicMock(return_value=MagicMock(models=[chat_model, embed_model]))

        models = service.list_models()

        assert models == [
            {"id": "llama3.2:latest", "name": "llama3.2", "description": "Size: 2019393189"}
        ]

    @pytest.mark.integration
    @pytest.mark.requires_ollama
    def test_embed_real_ollama(self, ollama_service):
        """Test generating embeddings with real Ollama service."""
        embeddings = ollama_service.embed(["Row 1:\nNama (text): Budi"])

        assert len(embeddings) == 1
        assert len(embeddings[0]) > 0


class TestGeminiService:
    """Tests for GeminiService class."""

    @pytest.mark.asyncio
    @patch("sheetrag.llm.gemini.genai.Client")
    async def test_complete_success(self, mock_client_class):
        """Test the system prompt is sent as the system instruction."""
        mock_client = MagicMock()
        mock_response = MagicMock()
        mock_response.text = "Total 3 baris."
        mock_client.models.generate_content.return_value = mock_response
        mock_client_class.return_value = mock_client

        service = GeminiService(model="gemini-2.5-flash")
        response = await service.complete("system", "Berapa?", resolve_parameters("cloud"))

        assert response == "Total 3 baris."
        kwargs = mock_client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "Berapa?"
        config = kwargs["config"]
        assert config.system_instruction == "system"
        assert config.temperature == 0.7
        assert config.top_p == 1.0
        assert config.max_output_tokens == 4096

    @pytest.mark.asyncio
    @patch("sheetrag.llm.gemini.genai.Client")
    async def test_complete_error(self, mock_client_class):
        mock_client = MagicMock()
        mock_client.models.generate_content.side_effect = RuntimeError("quota")
        mock_client_class.return_value = mock_client

        service = GeminiService(model="gemini-2.5-flash")
        with pytest.raises(RuntimeError, match="quota"):
            await service.complete("s", "u", resolve_parameters("cloud"))

    @patch("sheetrag.llm.gemini.EMBED_BATCH_SIZE", 2)
    @patch("sheetrag.llm.gemini.genai.Client")
    def test_embed_in_batches(self, mock_client_class):
        """Test texts are embedded in batches, keeping input order."""
        mock_client = MagicMock()

        def create_mock_response(*vectors):
            mock_response = MagicMock()
            mock_response.embeddings = [MagicMock(values=values) for values in vectors]
            return mock_response

        mock_client.models.embed_content.side_effect = [
            create_mock_response([0.1, 0.2], [0.3, 0.4]),
            create_mock_response([0.5, 0.6]),
        ]
        mock_client_class.return_value = mock_client

        service = GeminiService(model="gemini-2.5-flash", embedding_model="text-embedding-004")
        embeddings = service.embed(["text1", "text2", "text3"])

        assert embeddings == [[0.1, 0.2], [0.3, 0.4], [0.5, 0.6]]
        assert mock_client.models.embed_content.call_count == 2
        first_call = mock_client.models.embed_content.call_args_list[0].kwargs
        assert first_call["contents"] == ["text1", "text2"]
        assert first_call["config"] is None

    @patch("sheetrag.llm.gemini.genai.Client")
    def test_embed_output_dimensionality(self, mock_client_class):
        mock_client = MagicMock()
        mock_client.models.embed_content.return_value = MagicMock(
            embeddings=[MagicMock(values=[1.0, 0.0])]
        )
        mock_client_class.return_value = mock_client

        service = GeminiService(model="gemini-2.5-flash", embedding_dimensions=768)
        service.embed(["text"])

        config = mock_client.models.embed_content.call_args.kwargs["config"]
        assert config.output_dimensionality == 768


class TestGetLLMService:
    """Tests for get_llm_service factory function."""

    @patch("sheetrag.llm.factory.OllamaService")
    def test_creates_ollama_service_from_env(self, mock_ollama_class):
        """Test creating Ollama service from environment variables."""
        mock_service = MagicMock()
        mock_ollama_class.return_value = mock_service

        with patch.dict(
            os.environ,
            {"OLLAMA_HOST": "http://env-host:11434", "LLM_MODEL": "env-model", "LLM_SERVICE": "local"},
        ):
            service = get_llm_service()

        mock_ollama_class.assert_called_once_with(
            host="http://env-host:11434", model="env-model", embedding_model=None
        )
        assert service is mock_service

    @patch("sheetrag.llm.factory.OllamaService")
    def test_creates_ollama_service_with_custom_config(self, mock_ollama_class):
        config = {
            "provider": "local",
            "host": "http://custom:11434",
            "model": "custom-model",
            "embedding_model": "nomic-embed-text",
        }
        get_llm_service(config)

        mock_ollama_class.assert_called_once_with(
            host="http://custom:11434", model="custom-model", embedding_model="nomic-embed-text"
        )

    @patch("sheetrag.llm.factory.OllamaService")
    def test_uses_hardcoded_defaults_when_no_env(self, mock_ollama_class):
        """Test that hardcoded defaults are used when env vars are missing."""
        with patch.dict(os.environ, {}, clear=True):
            get_llm_service()

        mock_ollama_class.assert_called_once_with(
            host="http://localhost:11434", model="llama3.2", embedding_model=None
        )

    @patch("sheetrag.llm.factory.GeminiService")
    def test_creates_gemini_service(self, mock_gemini_class):
        with patch.dict(os.environ, {}, clear=True):
            get_llm_service({"provider": "cloud"})

        mock_gemini_class.assert_called_once_with(
            model="gemini-2.5-flash", embedding_model=None, embedding_dimensions=None
        )

    def test_raises_error_for_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider: unsupported"):
            get_llm_service({"provider": "unsupported"})


class TestListChatModels:
    """Tests for list_chat_models."""

    @patch("sheetrag.llm.factory.OllamaService")
    def test_combines_local_and_cloud_models(self, mock_ollama_class):
        mock_ollama_class.return_value.list_models.return_value = [
            {"id": "llama3.2:latest", "name": "llama3.2", "description": "Size: 1"}
        ]

        models = list_chat_models("http://test:11434")

        assert models[0]["id"] == "llama3.2:latest"
        assert models[0]["provider"] == "local"
        assert models[0]["parameters"]["num_thread"] == 8
        cloud = [m for m in models if m["provider"] == "cloud"]
        assert [m["id"] for m in cloud] == ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"]
        assert cloud[0]["parameters"]["max_tokens"] == 4096

    @patch("sheetrag.llm.factory.OllamaService")
    def test_ollama_unreachable(self, mock_ollama_class):
        """Test the cloud catalogue is still listed when Ollama is down."""
        mock_ollama_class.return_value.list_models.side_effect = ConnectionError("refused")

        models = list_chat_models("http://test:11434")

        assert models
        assert all(m["provider"] == "cloud" for m in models)
