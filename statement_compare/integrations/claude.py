# statement_compare/integrations/claude.py

"""
Claude AI integration.

Uses Anthropic's Claude API to:
1. Detect which columns of each statement hold date, description, amount, etc.
2. Reconcile the two cleaned transaction lists
"""

import json
import logging
import re
from typing import Optional

from anthropic import APIError, AsyncAnthropic

from statement_compare.config import Settings, get_settings
from statement_compare.exceptions import FormatError, TransportError

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```json|```")


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fence markers and surrounding whitespace."""
    return _CODE_FENCE.sub("", text).strip()


def parse_json_reply(text: str) -> dict:
    """
    Parse a model reply as a JSON object.

    The reply may be wrapped in ```json ... ``` fences.

    Raises:
        FormatError: If the text is not a JSON object after stripping fences
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise FormatError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise FormatError(f"Expected a JSON object, got {type(data).__name__}")
    return data


class ClaudeInferenceClient:
    """InferenceClient backed by the Anthropic Messages API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncAnthropic] = None,
    ):
        self.settings = settings or get_settings()
        # One attempt per user action; the user re-triggers on failure
        self.client = client or AsyncAnthropic(
            api_key=self.settings.anthropic_api_key,
            max_retries=0,
        )
        self.model = self.settings.anthropic_model

    async def complete(self, prompt: str, max_tokens: int) -> str:
        """Send a single user message and return the reply text."""
        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as e:
            logger.error(f"Claude API error: {e}")
            raise TransportError(str(e)) from e

        for block in response.content:
            if getattr(block, "type", None) == "text":
                return block.text

        raise FormatError("Reply contained no text")

    async def infer(self, prompt: str, max_tokens: int) -> dict:
        text = await self.complete(prompt, max_tokens)
        return parse_json_reply(text)
