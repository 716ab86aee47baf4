"""
Provider adapters for Gemini, OpenAI and Stability AI.
Each adapter turns a GenerationPayload into one provider-specific HTTP POST and
parses the provider-specific JSON back into a GenerationResult.
"""
import httpx
from config import Config
from models.provider_models import (
    Capability,
    GenerationPayload,
    GenerationResult,
    ProviderDescriptor,
    ProviderError,
)
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ProviderAdapter:
    """Base adapter: shared HTTP call and error normalization."""

    name: str = ""

    async def generate(
        self,
        descriptor: ProviderDescriptor,
        capability: Capability,
        payload: GenerationPayload
    ) -> GenerationResult:
        """Run one generation against the provider. Raises ProviderError on any failure."""
        raise NotImplementedError

    async def _post(
        self,
        descriptor: ProviderDescriptor,
        url: str,
        body: dict,
        headers: dict | None = None,
        params: dict | None = None
    ) -> dict:
        """
        POST a JSON body and return the decoded JSON response.

        Raises:
            ProviderError: on network failure, non-2xx status or a non-JSON body
        """
        client = HTTPClientManager.get_provider_client()
        request_headers = {"Content-Type": "application/json"}
        if headers:
            request_headers.update(headers)

        try:
            response = await client.post(url, json=body, headers=request_headers, params=params)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ProviderError(descriptor.display_name, f"request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            detail = self._error_detail(response)
            raise ProviderError(
                descriptor.display_name,
                f"API error: {response.status_code} - {detail}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(descriptor.display_name, "response body is not valid JSON") from e

        if not isinstance(data, dict):
            raise ProviderError(descriptor.display_name, "response body is not a JSON object")
        return data

    @staticmethod
    def _error_detail(response) -> str:
        """Prefer the provider's error.message, fall back to the HTTP reason phrase."""
        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
            if data.get("message"):
                return str(data["message"])

        return getattr(response, "reason_phrase", "") or "unknown error"

    @staticmethod
    def _extract(descriptor: ProviderDescriptor, data: dict, *path):
        """Walk nested keys/indices, raising ProviderError if the shape is wrong or the value is null."""
        location = "".join(f"[{step!r}]" for step in path)
        node = data
        try:
            for step in path:
                node = node[step]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(descriptor.display_name, f"malformed response: missing {location}") from e

        if node is None:
            raise ProviderError(descriptor.display_name, f"malformed response: {location} is null")
        return node

    @staticmethod
    def _default_temperature(capability: Capability) -> float:
        if capability == Capability.CODE:
            return Config.CODE_TEMPERATURE
        return Config.DEFAULT_TEMPERATURE


class GeminiAdapter(ProviderAdapter):
    """Google Gemini generateContent API (text and code)."""

    name = "gemini"

    async def generate(self, descriptor, capability, payload):
        if capability == Capability.IMAGE:
            raise ProviderError(descriptor.display_name, "image generation is not supported")

        model = self._resolve_model(descriptor, payload)
        url = f"{descriptor.base_url}/models/{model}:generateContent"

        contents = [
            {
                "role": "model" if item.get("role") == "assistant" else "user",
                "parts": [{"text": item.get("content", "")}]
            }
            for item in payload.history
            if item.get("content")
        ]
        contents.append({"role": "user", "parts": [{"text": payload.prompt}]})

        body = {
            "contents": contents,
            "generationConfig": {
                "temperature": payload.option("temperature", self._default_temperature(capability)),
                "maxOutputTokens": payload.option("max_tokens", Config.DEFAULT_MAX_TOKENS),
            }
        }

        data = await self._post(descriptor, url, body, params={"key": descriptor.credential})
        text = self._extract(descriptor, data, "candidates", 0, "content", "parts", 0, "text")
        return GenerationResult(provider_name=descriptor.name, content=text, model=model)

    @staticmethod
    def _resolve_model(descriptor: ProviderDescriptor, payload: GenerationPayload) -> str:
        requested = payload.option("model")
        if requested and requested.startswith("gemini"):
            return requested
        return descriptor.models["text"]


class OpenAIAdapter(ProviderAdapter):
    """OpenAI chat completions (text and code) and image generations (DALL-E)."""

    name = "openai"
    # the only style values DALL-E 3 accepts
    IMAGE_STYLES = ("vivid", "natural")

    async def generate(self, descriptor, capability, payload):
        headers = {"Authorization": f"Bearer {descriptor.credential}"}
        if capability == Capability.IMAGE:
            return await self._generate_image(descriptor, payload, headers)
        return await self._generate_chat(descriptor, capability, payload, headers)

    async def _generate_chat(self, descriptor, capability, payload, headers) -> GenerationResult:
        requested = payload.option("model")
        model = requested if requested and not requested.startswith("gemini") else descriptor.models["chat"]

        messages = [
            {"role": "assistant" if item.get("role") == "assistant" else "user", "content": item.get("content", "")}
            for item in payload.history
            if item.get("content")
        ]
        messages.append({"role": "user", "content": payload.prompt})

        body = {
            "model": model,
            "messages": messages,
            "temperature": payload.option("temperature", self._default_temperature(capability)),
            "max_tokens": payload.option("max_tokens", Config.DEFAULT_MAX_TOKENS),
        }

        data = await self._post(descriptor, f"{descriptor.base_url}/chat/completions", body, headers=headers)
        text = self._extract(descriptor, data, "choices", 0, "message", "content")
        return GenerationResult(provider_name=descriptor.name, content=text, model=model)

    async def _generate_image(self, descriptor, payload, headers) -> GenerationResult:
        model = descriptor.models["image"]
        body = {
            "model": model,
            "prompt": payload.prompt,
            "n": 1,
            "size": payload.option("size", Config.DEFAULT_IMAGE_SIZE),
            "response_format": "b64_json",
        }
        style = payload.option("style")
        if style in self.IMAGE_STYLES:
            body["style"] = style

        data = await self._post(descriptor, f"{descriptor.base_url}/images/generations", body, headers=headers)
        b64 = self._extract(descriptor, data, "data", 0, "b64_json")
        return GenerationResult(provider_name=descriptor.name, url=f"data:image/png;base64,{b64}", model=model)


class StabilityAdapter(ProviderAdapter):
    """Stability AI text-to-image."""

    name = "stability"

    async def generate(self, descriptor, capability, payload):
        if capability != Capability.IMAGE:
            raise ProviderError(descriptor.display_name, f"{capability.value} generation is not supported")

        engine = payload.option("engine", descriptor.models["sdxl"])
        width, height = self._dimensions(payload)
        body = {
            "text_prompts": [{"text": payload.prompt, "weight": 1}],
            "cfg_scale": payload.option("cfg_scale", Config.DEFAULT_CFG_SCALE),
            "height": height,
            "width": width,
            "steps": payload.option("steps", Config.DEFAULT_STEPS),
            "samples": 1,
        }
        if payload.option("style"):
            body["style_preset"] = payload.option("style")
        headers = {
            "Authorization": f"Bearer {descriptor.credential}",
            "Accept": "application/json",
        }

        url = f"{descriptor.base_url}/generation/{engine}/text-to-image"
        data = await self._post(descriptor, url, body, headers=headers)
        b64 = self._extract(descriptor, data, "artifacts", 0, "base64")
        return GenerationResult(provider_name=descriptor.name, url=f"data:image/png;base64,{b64}", model=engine)

    @staticmethod
    def _dimensions(payload: GenerationPayload) -> tuple[int, int]:
        """Explicit width/height win; otherwise parse a 'WxH' size option."""
        width = payload.option("width")
        height = payload.option("height")
        size = payload.option("size")

        if (width is None or height is None) and size:
            try:
                size_w, size_h = (int(part) for part in size.lower().split("x", 1))
                width = width or size_w
                height = height or size_h
            except ValueError:
                app_logger.warning(f"Ignoring unparseable image size '{size}'")

        return width or Config.DEFAULT_IMAGE_WIDTH, height or Config.DEFAULT_IMAGE_HEIGHT


ADAPTERS: dict[str, ProviderAdapter] = {
    GeminiAdapter.name: GeminiAdapter(),
    OpenAIAdapter.name: OpenAIAdapter(),
    StabilityAdapter.name: StabilityAdapter(),
}
