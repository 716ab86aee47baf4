"""
Models package exports.
"""
from models.api_models import (
    GenerationOptions,
    ProxyRequest,
    ChatRequest,
    SaveConversationRequest,
    TextRequest,
    ImageRequest,
    CodeRequest,
    ExplainRequest,
)
from models.provider_models import (
    Capability,
    ProviderDescriptor,
    GenerationPayload,
    GenerationResult,
    ProviderError,
    AllProvidersFailedError,
)

__all__ = [
    'GenerationOptions',
    'ProxyRequest',
    'ChatRequest',
    'SaveConversationRequest',
    'TextRequest',
    'ImageRequest',
    'CodeRequest',
    'ExplainRequest',
    'Capability',
    'ProviderDescriptor',
    'GenerationPayload',
    'GenerationResult',
    'ProviderError',
    'AllProvidersFailedError',
]
