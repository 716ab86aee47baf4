"""
Dispatcher: priority-ordered fallback across generation providers.

For a capability, the dispatcher tries every enabled provider offering it in
ascending priority order, one HTTP call each, and returns the first success.
There are no retries, no backoff and no parallel fan-out.
"""
from typing import Optional
from config import Config
from models.provider_models import (
    AllProvidersFailedError,
    Capability,
    GenerationPayload,
    GenerationResult,
    ProviderError,
)
from services.providers import ADAPTERS, ProviderAdapter
from services.registry import ProviderRegistry
from utils.logger import app_logger


class Dispatcher:
    """Routes generation requests across the provider registry."""

    def __init__(
        self,
        registry: ProviderRegistry,
        adapters: Optional[dict[str, ProviderAdapter]] = None,
        enable_cache: Optional[bool] = None
    ):
        self.registry = registry
        self.adapters = adapters if adapters is not None else ADAPTERS
        self.enable_cache = Config.ENABLE_RESPONSE_CACHE if enable_cache is None else enable_cache
        self._cache: dict[tuple[str, str, str], GenerationResult] = {}

    async def dispatch(self, capability: Capability, payload: GenerationPayload) -> GenerationResult:
        """
        Try providers in priority order and return the first successful result.

        Args:
            capability: Requested capability
            payload: Provider-agnostic request

        Returns:
            Normalized result from the first provider that succeeded

        Raises:
            AllProvidersFailedError: no provider is enabled, or every one failed
        """
        providers = self.registry.available(capability)
        errors: list[str] = []

        if not providers:
            app_logger.error(f"No enabled providers for {capability.value} generation")
            raise AllProvidersFailedError(capability, errors)

        for descriptor in providers:
            cached = self._cache_get(descriptor.name, capability, payload)
            if cached is not None:
                app_logger.info(f"Cache HIT: {descriptor.name}/{capability.value} | '{payload.prompt[:50]}'")
                return cached

            adapter = self.adapters.get(descriptor.name)
            if adapter is None:
                errors.append(f"{descriptor.display_name}: no adapter registered")
                app_logger.warning(f"No adapter registered for provider '{descriptor.name}', skipping")
                continue

            app_logger.debug(f"Trying provider '{descriptor.name}' for {capability.value}")
            try:
                result = await adapter.generate(descriptor, capability, payload)
            except ProviderError as e:
                errors.append(str(e))
                app_logger.warning(f"{descriptor.display_name} failed, trying next API... ({e.message})")
                continue
            except Exception as e:
                errors.append(f"{descriptor.display_name}: unexpected error: {e}")
                app_logger.exception(f"{descriptor.display_name} raised unexpectedly, trying next API...")
                continue

            app_logger.info(f"Provider '{descriptor.name}' served {capability.value} request")
            self._cache_set(descriptor.name, capability, payload, result)
            return result

        error = AllProvidersFailedError(capability, errors)
        app_logger.error(str(error))
        raise error

    async def dispatch_to(
        self,
        provider_name: str,
        capability: Capability,
        payload: GenerationPayload
    ) -> GenerationResult:
        """
        Call one named provider with no fallback.

        Raises:
            ProviderError: provider unknown, disabled, lacking the capability, or failing
        """
        descriptor = self.registry.get(provider_name)
        if descriptor is None:
            raise ProviderError(provider_name, "unknown provider")
        if not descriptor.enabled:
            raise ProviderError(descriptor.display_name, "API key not configured")
        if not descriptor.supports(capability):
            raise ProviderError(descriptor.display_name, f"{capability.value} generation is not supported")

        adapter = self.adapters.get(descriptor.name)
        if adapter is None:
            raise ProviderError(descriptor.display_name, "no adapter registered")

        try:
            result = await adapter.generate(descriptor, capability, payload)
        except ProviderError:
            raise
        except Exception as e:
            app_logger.exception(f"{descriptor.display_name} raised unexpectedly")
            raise ProviderError(descriptor.display_name, f"unexpected error: {e}") from e

        app_logger.info(f"Provider '{descriptor.name}' served direct {capability.value} request")
        return result

    def clear_cache(self) -> None:
        self._cache.clear()

    def _cache_key(self, provider: str, capability: Capability, payload: GenerationPayload):
        # Responses that depend on prior turns are never cached
        if not self.enable_cache or payload.history:
            return None
        return provider, capability.value, payload.prompt

    def _cache_get(self, provider, capability, payload) -> Optional[GenerationResult]:
        key = self._cache_key(provider, capability, payload)
        return self._cache.get(key) if key else None

    def _cache_set(self, provider, capability, payload, result: GenerationResult) -> None:
        key = self._cache_key(provider, capability, payload)
        if key:
            self._cache[key] = result


_dispatcher: Optional[Dispatcher] = None


def get_dispatcher() -> Dispatcher:
    """Get the global dispatcher, building the registry from Config on first use."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = Dispatcher(ProviderRegistry.from_config())
    return _dispatcher
