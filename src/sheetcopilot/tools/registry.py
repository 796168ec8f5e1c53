"""Tool registry for function-calling completions."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..sheets.models import GridSnapshot


@dataclass(frozen=True)
class ToolContext:
    """State a tool handler may read: the snapshot captured for this action."""

    snapshot: GridSnapshot


class ToolParameter(BaseModel):
    """Definition of a tool parameter."""

    name: str
    type: str
    description: str
    required: bool = True
    default: Any = None
    enum: Optional[list[str]] = None


class Tool(BaseModel):
    """A tool the model may call; the handler receives a ToolContext first."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    description: str
    parameters: list[ToolParameter] = Field(default_factory=list)
    handler: Optional[Callable] = Field(default=None, exclude=True)

    def to_anthropic_schema(self) -> dict:
        """Convert to Anthropic tool schema format."""
        properties = {}
        required = []

        for param in self.parameters:
            prop = {"type": param.type, "description": param.description}
            if param.enum:
                prop["enum"] = param.enum
            if param.default is not None:
                prop["default"] = param.default
            properties[param.name] = prop
            if param.required:
                required.append(param.name)

        return {
            "name": self.name,
            "description": self.description,
            "input_schema": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        }


class ToolRegistry:
    """Read-only mapping of tool name to tool, fixed at construction."""

    def __init__(self, tools: Iterable[Tool] = ()):
        tools_by_name = {}
        for tool in tools:
            if tool.name in tools_by_name:
                raise ValueError(f"Duplicate tool: {tool.name}")
            tools_by_name[tool.name] = tool
        self._tools = MappingProxyType(tools_by_name)

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        """List all registered tools."""
        return list(self._tools.values())

    def to_anthropic_tools(self) -> list[dict]:
        """Convert all tools to Anthropic format."""
        return [tool.to_anthropic_schema() for tool in self._tools.values()]

    def execute(self, tool_name: str, context: ToolContext, **kwargs) -> Any:
        """Execute a tool by name."""
        tool = self.get(tool_name)
        if not tool:
            raise ValueError(f"Unknown tool: {tool_name}")
        if not tool.handler:
            raise ValueError(f"Tool {tool_name} has no handler")
        return tool.handler(context, **kwargs)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
