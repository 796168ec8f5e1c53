"""Base LLM client interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from dataclasses import dataclass, field


@dataclass
class LLMResponse:
    """Response from LLM.

    ``content`` holds Anthropic-style blocks: ``{"type": "text", "text": ...}``
    and ``{"type": "tool_use", "id": ..., "name": ..., "input": {...}}``.
    """

    content: list[dict]
    stop_reason: str
    usage: Optional[dict] = field(default=None)

    @property
    def text(self) -> str:
        """Concatenated text blocks."""
        return "".join(block.get("text", "") for block in self.content if block.get("type") == "text")

    @property
    def tool_calls(self) -> list[dict]:
        return [block for block in self.content if block.get("type") == "tool_use"]


class LLMClient(ABC):
    """Abstract base class for LLM clients."""

    provider: str = "unknown"

    @abstractmethod
    def create_message(
        self,
        messages: list[dict],
        system: str,
        tools: list[dict],
        max_tokens: int,
        model: str,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Create a message with the LLM."""
        pass


def tool_result_message(results: list[tuple[str, Any]]) -> dict:
    """User turn carrying the JSON results of executed tool calls."""
    return {
        "role": "user",
        "content": [
            {"type": "tool_result", "tool_use_id": tool_id, "content": content}
            for tool_id, content in results
        ],
    }
