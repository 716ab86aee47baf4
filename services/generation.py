"""
Generation service: capability-level operations built on the dispatcher.
Builds prompts and payloads for chat, text, image and code requests.
"""
from typing import Optional
from config import Config
from models.provider_models import Capability, GenerationPayload, GenerationResult
from services.dispatcher import Dispatcher, get_dispatcher
from utils.constants import CODE_EXPLANATION_PROMPT, CODE_GENERATION_PROMPT, TEXT_TYPE_PROMPTS


class GenerationService:
    """Service for dispatching generation requests by capability."""

    def __init__(self, dispatcher: Optional[Dispatcher] = None):
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher or get_dispatcher()

    async def chat(self, message: str, history: list[dict], options: Optional[dict] = None) -> GenerationResult:
        """
        Answer a chat message with the prior conversation as context.

        Args:
            message: New user message
            history: Prior turns as {"role", "content"} dicts, oldest first
            options: Free-form generation options
        """
        turns = [
            {"role": item["role"], "content": item["content"]}
            for item in history
            if item.get("role") in ("user", "assistant")
        ]
        payload = GenerationPayload(prompt=message, history=turns, options=dict(options or {}))
        return await self.dispatcher.dispatch(Capability.TEXT, payload)

    async def generate_text(
        self,
        prompt: str,
        options: Optional[dict] = None,
        text_type: Optional[str] = None
    ) -> GenerationResult:
        """
        Generate text, optionally shaped as an article, summary, story, poem or email.
        Summaries run cooler unless a temperature is given.
        """
        opts = dict(options or {})
        template = TEXT_TYPE_PROMPTS.get(text_type)
        if template:
            prompt = template.format(prompt=prompt)
        if text_type == "summary":
            opts.setdefault("temperature", Config.SUMMARY_TEMPERATURE)
        return await self.dispatcher.dispatch(Capability.TEXT, GenerationPayload(prompt=prompt, options=opts))

    async def generate_image(self, prompt: str, options: Optional[dict] = None) -> GenerationResult:
        payload = GenerationPayload(prompt=prompt, options=dict(options or {}))
        return await self.dispatcher.dispatch(Capability.IMAGE, payload)

    async def generate_code(self, prompt: str, language: str, options: Optional[dict] = None) -> GenerationResult:
        """Generate code; the prompt is wrapped with language-specific requirements."""
        opts = dict(options or {})
        opts.setdefault("temperature", Config.CODE_TEMPERATURE)
        enhanced = CODE_GENERATION_PROMPT.format(language=language, prompt=prompt)
        return await self.dispatcher.dispatch(Capability.CODE, GenerationPayload(prompt=enhanced, options=opts))

    async def explain_code(self, code: str, language: str, options: Optional[dict] = None) -> GenerationResult:
        prompt = CODE_EXPLANATION_PROMPT.format(language=language, code=code)
        return await self.dispatcher.dispatch(Capability.TEXT, GenerationPayload(prompt=prompt, options=dict(options or {})))

    async def proxy(self, prompt: str, model: Optional[str]) -> GenerationResult:
        """
        Single-provider call used by the worker-compatible /api endpoint.
        The requested model picks the provider; unknown models go to OpenAI gpt-4.
        """
        provider_name, provider_model = Config.resolve_proxy_model(model)
        payload = GenerationPayload(prompt=prompt, options={"model": provider_model})
        return await self.dispatcher.dispatch_to(provider_name, Capability.TEXT, payload)
