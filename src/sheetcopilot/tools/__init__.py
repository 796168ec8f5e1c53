"""Tools the model can call in function-calling mode."""

from .registry import Tool, ToolContext, ToolParameter, ToolRegistry
from .selection import SELECTION_TOOLS, default_registry

__all__ = [
    "Tool",
    "ToolContext",
    "ToolParameter",
    "ToolRegistry",
    "SELECTION_TOOLS",
    "default_registry",
]
