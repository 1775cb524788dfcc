"""
Claude-backed text generation.
"""

import anthropic

from stridecoach.errors import GenerationFailure


class AnthropicTextGenerator:
    """Generates free-form text using Claude AI."""

    def __init__(self, api_key, config, model=None, max_tokens=None, timeout=None):
        """
        Initialize the text generator.

        Args:
            api_key: Anthropic API key
            config: Full configuration dictionary
            model: Claude model to use (defaults to config value)
            max_tokens: Maximum tokens for response (defaults to config value)
            timeout: Client timeout in seconds (defaults to config value)
        """
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout or config['claude'].get('timeout', 120),
            max_retries=0,
        )
        self.model = model or config['claude']['model']
        self.max_tokens = max_tokens or config['claude']['max_tokens']

    async def generate(self, prompt, system=None, max_tokens=None):
        """
        Send one prompt and return the response text.

        Raises:
            GenerationFailure: on provider errors or an empty response
        """
        request = {
            "model": self.model,
            "max_tokens": max_tokens or self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": prompt
                }
            ],
        }
        if system:
            request["system"] = system

        try:
            message = await self.client.messages.create(**request)
        except anthropic.APIError as exc:
            raise GenerationFailure(f"Claude request failed: {exc}") from exc

        text = "".join(
            block.text for block in message.content if getattr(block, "type", "") == "text"
        ).strip()
        if not text:
            raise GenerationFailure("Claude returned an empty response")
        return text
