"""
Provider registry: the static, priority-ordered list of generation providers.
"""
from typing import Iterable, Optional
from config import Config
from models.provider_models import Capability, ProviderDescriptor
from utils.logger import app_logger


class ProviderRegistry:
    """
    Holds provider descriptors built once at startup.
    Lower priority number = tried first; ties keep registration order.
    """

    def __init__(self, providers: Iterable[ProviderDescriptor]):
        self._providers: list[ProviderDescriptor] = list(providers)

        names = [
            f"{p.name}(p{p.priority}{'' if p.enabled else ', disabled'})"
            for p in self._providers
        ]
        app_logger.info(f"Provider registry initialized: {', '.join(names) or 'empty'}")

    @classmethod
    def from_config(cls) -> "ProviderRegistry":
        """Build the Gemini / OpenAI / Stability AI registry from Config."""
        return cls([
            ProviderDescriptor(
                name="gemini",
                display_name="Gemini",
                base_url=Config.GEMINI_BASE_URL,
                credential=Config.GEMINI_API_KEY,
                capabilities=frozenset({Capability.TEXT, Capability.CODE}),
                priority=Config.GEMINI_PRIORITY,
                models=dict(Config.GEMINI_MODELS),
            ),
            ProviderDescriptor(
                name="openai",
                display_name="OpenAI",
                base_url=Config.OPENAI_BASE_URL,
                credential=Config.OPENAI_API_KEY,
                capabilities=frozenset({Capability.TEXT, Capability.CODE, Capability.IMAGE}),
                priority=Config.OPENAI_PRIORITY,
                models=dict(Config.OPENAI_MODELS),
            ),
            ProviderDescriptor(
                name="stability",
                display_name="Stability AI",
                base_url=Config.STABILITY_BASE_URL,
                credential=Config.STABILITY_API_KEY,
                capabilities=frozenset({Capability.IMAGE}),
                priority=Config.STABILITY_PRIORITY,
                models=dict(Config.STABILITY_ENGINES),
            ),
        ])

    @property
    def providers(self) -> list[ProviderDescriptor]:
        return list(self._providers)

    def get(self, name: str) -> Optional[ProviderDescriptor]:
        """Get a specific provider by name."""
        for provider in self._providers:
            if provider.name == name:
                return provider
        return None

    def available(self, capability: Capability) -> list[ProviderDescriptor]:
        """Enabled providers offering capability, sorted ascending by priority."""
        eligible = [p for p in self._providers if p.enabled and p.supports(capability)]
        return sorted(eligible, key=lambda p: p.priority)

    def status(self) -> dict:
        """Per-provider enabled flag and capabilities, keyed by provider name."""
        return {
            p.name: {
                "name": p.display_name,
                "enabled": p.enabled,
                "capabilities": sorted(c.value for c in p.capabilities),
                "priority": p.priority,
            }
            for p in self._providers
        }

    def active_services(self) -> dict:
        """First provider that would serve each capability, or None."""
        result = {}
        for capability in Capability:
            candidates = self.available(capability)
            result[capability.value] = candidates[0].name if candidates else None
        return result
