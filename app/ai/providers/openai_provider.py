"""
OpenAI Provider - default page generator.

The page is requested through the Chat Completions API: the system
instruction goes in as a "system" message, the brief as a "user" message.

API Documentation: https://platform.openai.com/docs/api-reference
"""

from typing import Any, Optional, Tuple

from openai import AsyncOpenAI

from app.ai.providers.base import AIProvider, ProviderType, TokenUsage


class OpenAIProvider(AIProvider):
    """
    Usage:
        provider = OpenAIProvider(api_key="sk-...", model="gpt-4.1-mini", timeout=90)
        response = await provider.generate(user_prompt, system_prompt=SYSTEM_PROMPT)
    """

    provider_type = ProviderType.OPENAI
    display_name = "OpenAI"

    def __init__(self, api_key: str = "", model: str = "gpt-4.1-mini", timeout: Optional[float] = None):
        super().__init__(api_key=api_key, model=model, timeout=timeout)

    def _build_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[str, TokenUsage, Any]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        completion = await self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        text = completion.choices[0].message.content if completion.choices else ""
        reported = completion.usage
        usage = TokenUsage(
            prompt_tokens=reported.prompt_tokens if reported else 0,
            completion_tokens=reported.completion_tokens if reported else 0,
        )
        return text or "", usage, completion
