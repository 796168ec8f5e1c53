"""LLM client module."""

from .base import LLMClient, LLMResponse, tool_result_message
from .anthropic_client import AnthropicClient
from .openai_client import OpenAIClient
from .call_log import LLMCallLogger, LLMCallRecord, calculate_message_chars

__all__ = [
    "LLMClient",
    "LLMResponse",
    "tool_result_message",
    "AnthropicClient",
    "OpenAIClient",
    "LLMCallLogger",
    "LLMCallRecord",
    "calculate_message_chars",
]
