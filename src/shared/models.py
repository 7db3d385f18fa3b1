"""Core data models for the tool-calling workflows.

This module defines the conversation, tool and model-response structures
shared by the gateway, the tool registry and the orchestration loop.
"""

import json
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.schema import validate_schema


ToolHandler = Callable[[dict[str, Any]], Awaitable[str]]


class ToolInputError(ValueError):
    """Tool arguments did not match the tool's input schema."""
    pass


class MessageRole(str, Enum):
    """Role of a message within a conversation."""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ToolCallRequest(BaseModel):
    """
    A model-issued request to invoke a named tool.

    ``id`` and ``name`` are optional because models occasionally emit
    malformed calls; the orchestrator skips those.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    arguments: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_well_formed(self) -> bool:
        return bool(self.id) and bool(self.name)

    def to_openai(self) -> dict[str, Any]:
        """Format as an OpenAI ``tool_calls`` entry."""
        return {
            "id": self.id,
            "type": "function",
            "function": {
                "name": self.name,
                "arguments": json.dumps(self.arguments),
            },
        }


class ToolResult(BaseModel):
    """Outcome of resolving one tool call: handler output or an error string."""
    call_id: str
    content: str


class ConversationMessage(BaseModel):
    """A single message in a conversation."""
    role: MessageRole
    content: Any = ""
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)
    tool_call_id: Optional[str] = None

    @classmethod
    def user(cls, content: str) -> "ConversationMessage":
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def system(cls, content: str) -> "ConversationMessage":
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def tool_result(cls, result: ToolResult) -> "ConversationMessage":
        return cls(
            role=MessageRole.TOOL,
            content=result.content,
            tool_call_id=result.call_id
        )


class ModelResponse(BaseModel):
    """
    Response from the model gateway.

    ``content`` keeps whatever shape the provider returned: a plain string,
    a list of fragments, some other structure, or None.
    """
    content: Any = None
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0

    def text(self) -> str:
        """Return the content flattened to a single string."""
        return flatten_content(self.content)

    def to_message(self) -> ConversationMessage:
        """Convert to an assistant message carrying the requested tool calls."""
        return ConversationMessage(
            role=MessageRole.ASSISTANT,
            content=self.content,
            tool_calls=list(self.tool_calls)
        )


def _json_text(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def flatten_content(content: Any) -> str:
    """
    Normalize model output content to a string.

    Strings pass through unchanged. A list of fragments is joined with
    newlines, each non-string fragment JSON-encoded. Anything else is
    JSON-encoded as a whole; a missing content becomes an empty string.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        return "\n".join(
            fragment if isinstance(fragment, str) else _json_text(fragment)
            for fragment in content
        )
    return _json_text(content)


class ToolDescriptor(BaseModel):
    """
    A tool the model can invoke.

    The handler receives the call's arguments as a dict and returns the
    text handed back to the model.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="Unique tool name")
    description: str = Field(..., description="Description shown to the model")
    input_schema: dict[str, Any] = Field(
        default_factory=dict,
        description="JSON Schema for the tool arguments"
    )
    handler: ToolHandler

    async def invoke(self, arguments: dict[str, Any]) -> str:
        """
        Validate arguments and run the handler.

        Keys the schema does not declare are dropped before validation.

        Raises:
            ToolInputError: If arguments do not match ``input_schema``
        """
        properties = self.input_schema.get("properties")
        if properties is not None and isinstance(arguments, dict):
            arguments = {k: v for k, v in arguments.items() if k in properties}

        is_valid, errors = validate_schema(arguments, self.input_schema)
        if not is_valid:
            raise ToolInputError(
                f"Invalid arguments for tool '{self.name}': {'; '.join(errors)}"
            )

        result = await self.handler(arguments)
        if isinstance(result, str):
            return result
        return _json_text(result)

    def to_openai(self) -> dict[str, Any]:
        """Format for OpenAI-style function calling."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.input_schema or {
                    "type": "object",
                    "properties": {},
                    "required": []
                }
            }
        }
