"""Built-in tools.

Each tool module defines an input schema, an async handler and a
ToolDescriptor. The tools are demo implementations with no external calls.
"""

from shared.models import ToolDescriptor
from tools.calculator import calculator_tool
from tools.registry import ToolRegistry
from tools.string_ops import string_tool
from tools.weather import weather_tool


def get_default_tools() -> list[ToolDescriptor]:
    """All built-in tools, in the order they are offered to the model."""
    return [calculator_tool, weather_tool, string_tool]


def create_default_registry() -> ToolRegistry:
    return ToolRegistry(get_default_tools())


__all__ = [
    "ToolRegistry",
    "calculator_tool",
    "weather_tool",
    "string_tool",
    "get_default_tools",
    "create_default_registry",
]
