from __future__ import annotations

from langchain_core.messages import AIMessage

from aiservice.config import Settings
from aiservice.llm.providers import OpenAIProvider, create_provider, is_provider_type
from aiservice.llm.schemas import GenerateCurlResult
from tests.conftest import FakeProvider


def test_unknown_provider_type_is_not_created() -> None:
    assert create_provider(Settings(AI_PROVIDER="unknown", OPENAI_API_KEY="sk-test")) is None
    assert not is_provider_type("anthropic")


def test_openai_without_api_key_is_not_created() -> None:
    assert create_provider(Settings(AI_PROVIDER="openai", OPENAI_API_KEY=None)) is None


def test_openai_provider_uses_configured_model() -> None:
    provider = create_provider(
        Settings(AI_PROVIDER="OpenAI", OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-4o")
    )

    assert isinstance(provider, OpenAIProvider)
    assert provider.model_name == "gpt-4o"
    assert provider.model.model_name == "gpt-4o"
    assert provider.embeddings is not None


def test_model_with_output_parser_forces_schema_tool() -> None:
    provider = OpenAIProvider(api_key="sk-test", model_name="gpt-4o-mini")

    bound = provider.model_with_output_parser(GenerateCurlResult)

    tools = bound.kwargs["tools"]
    assert [t["function"]["name"] for t in tools] == ["GenerateCurlResult"]
    assert "curl" in tools[0]["function"]["parameters"]["properties"]


def test_map_response_flattens_text_parts() -> None:
    provider = FakeProvider()

    assert provider.map_response(AIMessage(content="plain")) == "plain"
    assert provider.map_response(
        AIMessage(content=[{"type": "text", "text": "a"}, {"type": "image_url", "image_url": {}}, "b"])
    ) == "ab"
