# statement_compare/integrations/base.py

from typing import Protocol


class InferenceClient(Protocol):
    """
    Anything that can answer a prompt with a JSON object.

    Implementations raise TransportError when the call fails and
    FormatError when the reply is not a JSON object.
    """

    async def infer(self, prompt: str, max_tokens: int) -> dict:
        ...
