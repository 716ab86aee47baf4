"""
Data models for provider dispatch.
Contains provider descriptors, capabilities, normalized results and errors.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Capability(str, Enum):
    """Kinds of generation a provider can serve."""
    TEXT = "text"
    IMAGE = "image"
    CODE = "code"


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Static description of one generation provider.
    Built once at startup from Config and never mutated.
    """
    name: str
    display_name: str
    base_url: str
    credential: str
    capabilities: frozenset
    priority: int
    models: dict = field(default_factory=dict)

    @property
    def enabled(self) -> bool:
        """A provider is usable only when it has a credential."""
        return bool(self.credential)

    def supports(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def __repr__(self) -> str:
        return f"<ProviderDescriptor name={self.name!r} priority={self.priority} enabled={self.enabled}>"


@dataclass
class GenerationPayload:
    """
    Provider-agnostic request: the prompt, optional prior turns and free-form options.
    History entries are {"role": "user"|"assistant", "content": str}.
    """
    prompt: str
    history: list = field(default_factory=list)
    options: dict = field(default_factory=dict)

    def option(self, key: str, default=None):
        """Return an option, falling back to default when absent or None."""
        value = self.options.get(key)
        return default if value is None else value


@dataclass
class GenerationResult:
    """Provider-agnostic result of a successful generation."""
    provider_name: str
    content: Optional[str] = None
    url: Optional[str] = None
    model: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"provider": self.provider_name, "model": self.model}
        if self.url is not None:
            data["url"] = self.url
        else:
            data["content"] = self.content
        return data


class ProviderError(Exception):
    """A single provider call failed (HTTP status, network, or malformed body)."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class AllProvidersFailedError(Exception):
    """No enabled provider produced a result for the requested capability."""

    def __init__(self, capability: Capability, errors: list[str]):
        self.capability = capability
        self.errors = errors
        summary = "; ".join(errors) if errors else "no providers enabled"
        super().__init__(f"No available {capability.value} generation API succeeded ({summary})")
