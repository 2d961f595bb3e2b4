"""Generation backends for rendered prompts."""

from .runner import GenerationBackend, LLMError, LLMRunner

__all__ = ["GenerationBackend", "LLMError", "LLMRunner"]
