"""
AI Providers Module - Unified clients for multiple LLM providers.

Each provider has the same interface, making them interchangeable:
    response = await provider.generate(prompt, system_prompt=..., **kwargs)

The active provider is chosen by GENERATION_PROVIDER and built exactly once
at process start by build_provider(); it is then handed to the generation
loop explicitly (see app.main.create_app).
"""

from app.ai.providers.base import AIProvider, AIResponse, ProviderType, TokenUsage
from app.ai.providers.gemini import GeminiProvider
from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.anthropic_provider import AnthropicProvider


def build_provider(config) -> AIProvider:
    """
    Construct the configured generation provider.

    Args:
        config: Settings instance (see app.core.config)

    Returns:
        A ready AIProvider for config.GENERATION_PROVIDER
    """
    timeout = config.GENERATION_TIMEOUT_SECONDS
    name = config.GENERATION_PROVIDER

    if name == ProviderType.ANTHROPIC.value:
        return AnthropicProvider(
            api_key=config.ANTHROPIC_API_KEY,
            model=config.ANTHROPIC_MODEL,
            timeout=timeout,
        )
    if name == ProviderType.GEMINI.value:
        return GeminiProvider(
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            timeout=timeout,
        )
    return OpenAIProvider(
        api_key=config.OPENAI_API_KEY,
        model=config.OPENAI_MODEL,
        timeout=timeout,
    )


__all__ = [
    "AIProvider",
    "AIResponse",
    "ProviderType",
    "TokenUsage",
    "GeminiProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "build_provider",
]
