"""
Anthropic Provider - Claude as the page generator.

Selected with GENERATION_PROVIDER=anthropic. Claude takes the system
instruction as a top-level parameter and answers with a list of content
blocks; only text blocks make up the page.

API Documentation: https://docs.anthropic.com/en/api
"""

from typing import Any, Optional, Tuple

from anthropic import AsyncAnthropic

from app.ai.providers.base import AIProvider, ProviderType, TokenUsage


class AnthropicProvider(AIProvider):
    """
    Usage:
        provider = AnthropicProvider(api_key="...", model="claude-sonnet-4-5")
        response = await provider.generate(user_prompt, system_prompt=SYSTEM_PROMPT, max_tokens=8000)
    """

    provider_type = ProviderType.ANTHROPIC
    display_name = "Anthropic"

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5", timeout: Optional[float] = None):
        super().__init__(api_key=api_key, model=model, timeout=timeout)

    def _build_client(self) -> AsyncAnthropic:
        if self.timeout is None:
            return AsyncAnthropic(api_key=self.api_key)
        return AsyncAnthropic(api_key=self.api_key, timeout=self.timeout)

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[str, TokenUsage, Any]:
        params = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            params["system"] = system_prompt

        message = await self._client.messages.create(**params)

        text = "".join(getattr(block, "text", "") for block in message.content or [])
        reported = message.usage
        usage = TokenUsage(
            prompt_tokens=reported.input_tokens if reported else 0,
            completion_tokens=reported.output_tokens if reported else 0,
        )
        return text, usage, message
