"""Anthropic LLM client."""

import logging

import anthropic
from anthropic import Anthropic

from ..errors import UpstreamError
from .base import LLMClient, LLMResponse

logger = logging.getLogger(__name__)


class AnthropicClient(LLMClient):
    """Anthropic Claude client."""

    provider = "anthropic"

    def __init__(self, api_key: str, timeout: float = 60.0):
        # Retries are disabled: failures surface to the user immediately
        self.client = Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        # Tool names may not contain dots
        self._tool_name_map: dict[str, str] = {}

    def create_message(
        self,
        messages: list[dict],
        system: str,
        tools: list[dict],
        max_tokens: int,
        model: str,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Create a message with Claude."""
        kwargs = {
            "model": model,
            "max_tokens": max_tokens,
            "system": system,
            "messages": [self._convert_message(msg) for msg in messages],
            "temperature": temperature,
        }
        if tools:
            kwargs["tools"] = [self._convert_tool(tool) for tool in tools]

        try:
            response = self.client.messages.create(**kwargs)
        except anthropic.APIStatusError as e:
            logger.error(f"Anthropic returned {e.status_code}: {e.message}")
            raise UpstreamError(f"anthropic API error: {e.message}", e.status_code)
        except anthropic.APIError as e:
            raise UpstreamError(f"anthropic request failed: {e}")

        return LLMResponse(
            content=[self._block_to_dict(block) for block in response.content],
            stop_reason=response.stop_reason,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
        )

    def _convert_tool(self, tool: dict) -> dict:
        wire_name = tool["name"].replace(".", "_")
        self._tool_name_map[wire_name] = tool["name"]
        return {**tool, "name": wire_name}

    @staticmethod
    def _convert_message(msg: dict) -> dict:
        if isinstance(msg["content"], str):
            return msg
        content = [
            {**item, "name": item["name"].replace(".", "_")} if item.get("type") == "tool_use" else item
            for item in msg["content"]
        ]
        return {**msg, "content": content}

    def _block_to_dict(self, block) -> dict:
        if block.type == "tool_use":
            name = self._tool_name_map.get(block.name, block.name)
            return {"type": "tool_use", "id": block.id, "name": name, "input": block.input}
        if block.type == "text":
            return {"type": "text", "text": block.text}
        return {"type": block.type}
