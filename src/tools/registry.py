"""Tool Registry.

Fixed, name-keyed collection of the tools a workflow exposes to the model.
Tools are supplied at construction and never change afterwards.
"""

from typing import Any, Iterable, Optional

from shared.logging import get_logger
from shared.models import ToolDescriptor

logger = get_logger(__name__)


class ToolRegistry:
    """
    Registry of tool descriptors keyed by name.

    Responsibilities:
    - Enforce unique tool names
    - Lookup tools by name
    - Format tool definitions for the model
    """

    def __init__(self, tools: Iterable[ToolDescriptor] = ()) -> None:
        """
        Build the registry from an ordered list of tools.

        Raises:
            ValueError: If two tools share a name
        """
        self._tools: dict[str, ToolDescriptor] = {}

        for tool in tools:
            self._register(tool)

    def _register(self, tool: ToolDescriptor) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug("Tool registered", tool=tool.name)

    def get(self, tool_name: str) -> Optional[ToolDescriptor]:
        """Get a tool by name, or None if it is not registered."""
        return self._tools.get(tool_name)

    def list_names(self) -> list[str]:
        """Tool names in registration order."""
        return list(self._tools)

    def get_tools_for_llm(self) -> list[dict[str, Any]]:
        """Tool definitions in OpenAI function-calling format."""
        return [tool.to_openai() for tool in self._tools.values()]

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
