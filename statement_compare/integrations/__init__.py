# statement_compare/integrations/__init__.py

from statement_compare.integrations import claude
from statement_compare.integrations.base import InferenceClient
from statement_compare.integrations.claude import ClaudeInferenceClient

__all__ = ["claude", "InferenceClient", "ClaudeInferenceClient"]
