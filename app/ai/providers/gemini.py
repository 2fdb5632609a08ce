"""
Gemini Provider - Google's GenAI SDK.

Selected with GENERATION_PROVIDER=gemini. Uses the async surface of the
client (client.aio) so the event loop is never blocked.
"""

from typing import Any, Optional, Tuple

from google import genai
from google.genai import types

from app.ai.providers.base import AIProvider, ProviderType, TokenUsage


class GeminiProvider(AIProvider):
    provider_type = ProviderType.GEMINI
    display_name = "Gemini"

    def __init__(self, api_key: str = "", model: str = "gemini-2.5-flash", timeout: Optional[float] = None):
        super().__init__(api_key=api_key, model=model, timeout=timeout)

    def _build_client(self) -> genai.Client:
        http_options = None
        if self.timeout is not None:
            # HttpOptions.timeout is in milliseconds
            http_options = types.HttpOptions(timeout=int(self.timeout * 1000))
        return genai.Client(api_key=self.api_key, http_options=http_options)

    async def _complete(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
    ) -> Tuple[str, TokenUsage, Any]:
        result = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
                system_instruction=system_prompt,
            ),
        )
        return result.text or "", self._usage(result), result

    @staticmethod
    def _usage(result) -> TokenUsage:
        # usage_metadata is None when the API reports nothing
        meta = result.usage_metadata
        if meta is None:
            return TokenUsage()
        return TokenUsage(
            prompt_tokens=meta.prompt_token_count or 0,
            completion_tokens=meta.candidates_token_count or 0,
        )
