"""Shared models, configuration and logging for the tool-calling workflows."""

from shared.models import (
    ConversationMessage,
    MessageRole,
    ModelResponse,
    ToolCallRequest,
    ToolDescriptor,
    ToolInputError,
    ToolResult,
    flatten_content,
)
from shared.config import (
    MissingCredentialError,
    ModelConfig,
    Settings,
    get_api_key,
    get_settings,
)
from shared.logging import get_logger, setup_logging

__all__ = [
    "ConversationMessage",
    "MessageRole",
    "ModelResponse",
    "ToolCallRequest",
    "ToolDescriptor",
    "ToolInputError",
    "ToolResult",
    "flatten_content",
    "MissingCredentialError",
    "ModelConfig",
    "Settings",
    "get_api_key",
    "get_settings",
    "get_logger",
    "setup_logging",
]
