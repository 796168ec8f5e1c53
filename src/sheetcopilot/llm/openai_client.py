"""OpenAI-compatible chat-completions client (OpenAI, OpenRouter)."""

import copy
import json
import logging
from typing import Optional

import httpx

from ..errors import UpstreamError
from .base import LLMClient, LLMResponse

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """Chat-completions HTTP API client."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        provider: str = "openai",
        extra_headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.provider = provider
        self.extra_headers = extra_headers or {}
        self._transport = transport
        # Map to convert between dot names (internal) and underscore names (wire)
        self._tool_name_map: dict[str, str] = {}  # underscore -> dot
        self._tool_name_reverse_map: dict[str, str] = {}  # dot -> underscore

    def create_message(
        self,
        messages: list[dict],
        system: str,
        tools: list[dict],
        max_tokens: int,
        model: str,
        temperature: float = 0.1,
    ) -> LLMResponse:
        """Create a message via the chat-completions endpoint."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            **self.extra_headers,
        }

        payload = {
            "model": model,
            "messages": self._convert_messages(messages, system),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        # Add tools if provided
        if tools:
            payload["tools"] = self._convert_tools(tools)

        url = f"{self.base_url}/chat/completions"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise UpstreamError(f"{self.provider} request timed out: {e}")
        except httpx.HTTPError as e:
            raise UpstreamError(f"{self.provider} request failed: {e}")

        if response.status_code != 200:
            message = self._error_message(response)
            logger.error(f"{self.provider} returned {response.status_code}: {message}")
            raise UpstreamError(f"{self.provider} API error: {message}", response.status_code)

        try:
            data = response.json()
        except ValueError:
            raise UpstreamError(f"{self.provider} returned a non-JSON response")

        return self._convert_response(data)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull ``error.message`` out of an error envelope."""
        try:
            body = response.json()
        except ValueError:
            return response.text or "Unknown error"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return "Unknown error"

    def _convert_messages(self, messages: list[dict], system: str) -> list[dict]:
        """Convert Anthropic-style messages to chat-completions format."""
        converted = []

        # Add system message at the start
        if system:
            converted.append({"role": "system", "content": system})

        for msg in messages:
            role = msg["role"]
            content = msg["content"]

            if isinstance(content, str):
                converted.append({"role": role, "content": content})
                continue

            # Complex content with tool calls/results
            text_parts = []
            tool_calls = []

            for item in content:
                if item.get("type") == "text":
                    text_parts.append(item.get("text", ""))
                elif item.get("type") == "tool_use":
                    # Convert dot names to underscore names when sending back
                    original_name = item.get("name")
                    wire_name = self._tool_name_reverse_map.get(original_name, original_name)
                    tool_calls.append(
                        {
                            "id": item.get("id"),
                            "type": "function",
                            "function": {
                                "name": wire_name,
                                "arguments": json.dumps(item.get("input", {})),
                            },
                        }
                    )
                elif item.get("type") == "tool_result":
                    # Tool results go in a separate message
                    converted.append(
                        {
                            "role": "tool",
                            "content": item.get("content", ""),
                            "tool_call_id": item.get("tool_use_id"),
                        }
                    )

            if text_parts or (role == "assistant" and tool_calls):
                msg_dict = {
                    "role": role,
                    "content": " ".join(text_parts) if text_parts else "",
                }
                if tool_calls:
                    msg_dict["tool_calls"] = tool_calls
                converted.append(msg_dict)

        return converted

    def _convert_tools(self, anthropic_tools: list[dict]) -> list[dict]:
        """Convert Anthropic tool format to chat-completions format."""
        converted = []

        for tool in anthropic_tools:
            # Function names may not contain dots
            original_name = tool.get("name")
            if not original_name:
                raise ValueError("Tool must have a 'name' field")

            wire_name = original_name.replace(".", "_")

            # Store mapping for reverse conversion
            self._tool_name_map[wire_name] = original_name
            self._tool_name_reverse_map[original_name] = wire_name

            converted.append(
                {
                    "type": "function",
                    "function": {
                        "name": wire_name,
                        "description": tool.get("description"),
                        "parameters": self._fix_array_parameters(tool.get("input_schema", {})),
                    },
                }
            )

        return converted

    def _fix_array_parameters(self, schema: dict) -> dict:
        """Add 'items' field to array-type parameters in the schema.

        The chat-completions API requires array parameters to specify their
        item type. Defaults to string items.
        """
        if not schema or "properties" not in schema:
            return schema

        fixed_schema = copy.deepcopy(schema)
        for prop_def in fixed_schema["properties"].values():
            if prop_def.get("type") == "array" and "items" not in prop_def:
                prop_def["items"] = {"type": "string"}

        return fixed_schema

    def _convert_response(self, data: dict) -> LLMResponse:
        """Convert a chat-completions response to our format."""
        try:
            choice = data["choices"][0]
            message = choice["message"]
        except (KeyError, IndexError, TypeError):
            raise UpstreamError(f"{self.provider} response has no choices")

        content = []

        if message.get("content"):
            content.append({"type": "text", "text": message["content"]})

        for tool_call in message.get("tool_calls") or []:
            # Convert underscore names back to dot names
            wire_name = tool_call["function"]["name"]
            try:
                arguments = json.loads(tool_call["function"].get("arguments") or "{}")
            except json.JSONDecodeError:
                raise UpstreamError(f"Malformed arguments for tool call '{wire_name}'")
            content.append(
                {
                    "type": "tool_use",
                    "id": tool_call["id"],
                    "name": self._tool_name_map.get(wire_name, wire_name),
                    "input": arguments,
                }
            )

        finish_reason = choice.get("finish_reason", "stop")
        stop_reason_map = {
            "tool_calls": "tool_use",
            "stop": "end_turn",
            "length": "max_tokens",
        }
        stop_reason = stop_reason_map.get(finish_reason, finish_reason)

        usage = None
        if "usage" in data:
            usage = {
                "input_tokens": data["usage"].get("prompt_tokens", 0),
                "output_tokens": data["usage"].get("completion_tokens", 0),
            }

        return LLMResponse(content=content, stop_reason=stop_reason, usage=usage)
