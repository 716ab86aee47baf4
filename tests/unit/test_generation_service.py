import pytest

from models.provider_models import Capability, ProviderError
from services.dispatcher import Dispatcher
from services.generation import GenerationService
from services.registry import ProviderRegistry
from tests.fixtures.mock_clients import FakeAdapter


@pytest.fixture
def service(fake_adapters, gemini_descriptor, openai_descriptor, stability_descriptor):
    registry = ProviderRegistry([gemini_descriptor, openai_descriptor, stability_descriptor])
    return GenerationService(Dispatcher(registry, adapters=fake_adapters, enable_cache=False))


@pytest.mark.anyio
async def test_generate_code_wraps_prompt_and_lowers_temperature(service, fake_adapters):
    """Given a code request, the dispatched prompt should carry the language requirements."""
    result = await service.generate_code("reverses a string", "Rust")

    call = fake_adapters["gemini"].calls[0]
    assert result.provider_name == "gemini"
    assert call["capability"] == Capability.CODE
    assert call["payload"].prompt.startswith("Write Rust code that: reverses a string")
    assert "- Use best practices for Rust" in call["payload"].prompt
    assert call["payload"].options["temperature"] == 0.2


@pytest.mark.anyio
async def test_generate_code_keeps_explicit_temperature(service, fake_adapters):
    await service.generate_code("adds numbers", "Go", {"temperature": 0.9})

    assert fake_adapters["gemini"].calls[0]["payload"].options["temperature"] == 0.9


@pytest.mark.anyio
async def test_explain_code_uses_text_capability(service, fake_adapters):
    await service.explain_code("print('hi')", "python")

    call = fake_adapters["gemini"].calls[0]
    assert call["capability"] == Capability.TEXT
    assert call["payload"].prompt.startswith("Explain this python code:\n\nprint('hi')")


@pytest.mark.anyio
async def test_chat_passes_only_conversation_turns(service, fake_adapters):
    history = [
        {"id": "1", "role": "user", "content": "Hi", "timestamp": "t"},
        {"id": "2", "role": "assistant", "content": "Hello", "timestamp": "t"},
        {"id": "3", "role": "system", "content": "ignored", "timestamp": "t"},
    ]

    await service.chat("How are you?", history)

    payload = fake_adapters["gemini"].calls[0]["payload"]
    assert payload.prompt == "How are you?"
    assert payload.history == [
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
    ]


@pytest.mark.anyio
async def test_generate_image_prefers_stability(service, fake_adapters):
    result = await service.generate_image("a castle", {"size": "512x512"})

    assert result.provider_name == "stability"
    assert fake_adapters["openai"].call_count == 0


@pytest.mark.parametrize("model, expected_provider, expected_model", [
    ("gpt-3.5-turbo", "openai", "gpt-3.5-turbo"),
    ("gpt-4", "openai", "gpt-4"),
    ("gemini-pro", "gemini", "gemini-pro"),
    ("llama-70b", "openai", "gpt-4"),
    (None, "openai", "gpt-4"),
])
@pytest.mark.anyio
async def test_proxy_routes_model_to_provider(service, fake_adapters, model, expected_provider, expected_model):
    """Given a worker-style model name, proxy should call the owning provider with the mapped model."""
    result = await service.proxy("Hello", model)

    assert result.provider_name == expected_provider
    call = fake_adapters[expected_provider].calls[0]
    assert call["payload"].options == {"model": expected_model}


@pytest.mark.anyio
async def test_proxy_does_not_fall_back(gemini_descriptor, openai_descriptor):
    adapters = {"gemini": FakeAdapter("gemini"), "openai": FakeAdapter("openai", error="API error: 500 - down")}
    service = GenerationService(Dispatcher(ProviderRegistry([gemini_descriptor, openai_descriptor]), adapters=adapters))

    with pytest.raises(ProviderError, match="500 - down"):
        await service.proxy("Hello", "gpt-4")

    assert adapters["gemini"].call_count == 0


@pytest.mark.parametrize("text_type, opening", [
    ("article", "Write a comprehensive article about: tides"),
    ("summary", "Create a concise summary of: tides"),
    ("story", "Write a creative story about: tides"),
    ("poem", "Compose a poem about: tides"),
    ("email", "Write a professional email about: tides"),
])
@pytest.mark.anyio
async def test_generate_text_wraps_prompt_by_type(service, fake_adapters, text_type, opening):
    await service.generate_text("tides", text_type=text_type)

    assert fake_adapters["gemini"].calls[0]["payload"].prompt.startswith(opening)


@pytest.mark.anyio
async def test_generate_text_without_type_sends_prompt_unchanged(service, fake_adapters):
    await service.generate_text("tides")

    payload = fake_adapters["gemini"].calls[0]["payload"]
    assert payload.prompt == "tides"
    assert "temperature" not in payload.options


@pytest.mark.anyio
async def test_generate_summary_runs_cooler(service, fake_adapters):
    """Given a summary request without a temperature, 0.3 is used."""
    await service.generate_text("tides", text_type="summary")

    assert fake_adapters["gemini"].calls[0]["payload"].options["temperature"] == 0.3


@pytest.mark.anyio
async def test_generate_summary_keeps_explicit_temperature(service, fake_adapters):
    await service.generate_text("tides", {"temperature": 0.9}, text_type="summary")

    assert fake_adapters["gemini"].calls[0]["payload"].options["temperature"] == 0.9


@pytest.mark.anyio
async def test_generate_story_leaves_temperature_to_provider(service, fake_adapters):
    await service.generate_text("tides", text_type="story")

    assert "temperature" not in fake_adapters["gemini"].calls[0]["payload"].options
