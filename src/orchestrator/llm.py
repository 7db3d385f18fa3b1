"""Model Gateway using LlamaIndex.

The gateway wraps a remote chat-completion API. It accepts the conversation
and the tool definitions, and returns text content and/or tool calls. It
never executes tools itself.

Providers:
- openrouter: OpenRouter's OpenAI-compatible endpoint
- mock: Scripted responses for tests and offline demos
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from shared.config import OpenRouterSettings, get_api_key
from shared.logging import get_logger
from shared.models import (
    ConversationMessage,
    MessageRole,
    ModelResponse,
    ToolCallRequest,
    flatten_content,
)

logger = get_logger(__name__)


class ModelGateway(ABC):
    """
    Abstract base class for model gateways.

    Gateway rules:
    - Receives the conversation and the tools the model may call
    - Returns either final content or structured tool calls
    - Failures are raised, never converted into content
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[ConversationMessage],
        tools: Optional[list[dict[str, Any]]] = None
    ) -> ModelResponse:
        """
        Generate a completion from the model.

        Args:
            messages: Conversation history
            tools: Available tools in OpenAI function format

        Returns:
            Model response with content and/or tool calls
        """
        pass


class OpenRouterGateway(ModelGateway):
    """OpenRouter gateway using LlamaIndex's OpenAI-compatible client."""

    def __init__(self, settings: OpenRouterSettings) -> None:
        """
        Raises:
            MissingCredentialError: If settings carry no API key
        """
        get_api_key(settings=settings)
        self.settings = settings
        self._llm = None

    def _get_llm(self):
        """Lazy initialization of LlamaIndex LLM."""
        if self._llm is None:
            from llama_index.llms.openai_like import OpenAILike

            self._llm = OpenAILike(
                model=self.settings.model,
                api_key=self.settings.api_key,
                api_base=self.settings.base_url,
                temperature=self.settings.temperature,
                context_window=self.settings.context_window,
                is_chat_model=True,
                is_function_calling_model=True,
                default_headers={
                    "HTTP-Referer": self.settings.http_referer,
                    "X-Title": self.settings.app_title,
                },
            )
        return self._llm

    def _convert_messages(self, messages: list[ConversationMessage]) -> list:
        """Convert internal messages to LlamaIndex format."""
        from llama_index.core.llms import ChatMessage, MessageRole as LlamaRole

        role_map = {
            MessageRole.USER: LlamaRole.USER,
            MessageRole.ASSISTANT: LlamaRole.ASSISTANT,
            MessageRole.SYSTEM: LlamaRole.SYSTEM,
            MessageRole.TOOL: LlamaRole.TOOL,
        }

        result = []
        for msg in messages:
            additional_kwargs: dict[str, Any] = {}
            if msg.tool_calls:
                additional_kwargs["tool_calls"] = [tc.to_openai() for tc in msg.tool_calls]
            if msg.tool_call_id:
                additional_kwargs["tool_call_id"] = msg.tool_call_id

            content = msg.content
            if content is not None and not isinstance(content, str):
                content = flatten_content(content)

            result.append(ChatMessage(
                role=role_map[msg.role],
                content=content,
                additional_kwargs=additional_kwargs,
            ))

        return result

    async def complete(
        self,
        messages: list[ConversationMessage],
        tools: Optional[list[dict[str, Any]]] = None
    ) -> ModelResponse:
        """Generate completion using OpenRouter."""
        llm = self._get_llm()
        chat_messages = self._convert_messages(messages)

        try:
            if tools:
                response = await llm.achat(chat_messages, tools=tools, tool_choice="auto")
            else:
                response = await llm.achat(chat_messages)

            selections = llm.get_tool_calls_from_response(
                response, error_on_no_tool_call=False
            ) if tools else []

            return ModelResponse(
                content=response.message.content if response.message else None,
                tool_calls=[
                    ToolCallRequest(
                        id=selection.tool_id,
                        name=selection.tool_name,
                        arguments=selection.tool_kwargs or {},
                    )
                    for selection in selections
                ],
            )

        except Exception as e:
            logger.error("Model completion failed", model=self.settings.model, error=str(e))
            raise


class MockModelGateway(ModelGateway):
    """
    Mock gateway for tests and offline runs.

    Returns queued responses in order; once the queue is empty it returns
    ``default_response`` (a plain text answer unless overridden).
    """

    def __init__(
        self,
        settings: Optional[OpenRouterSettings] = None,
        responses: Iterable[ModelResponse] = ()
    ) -> None:
        self.settings = settings
        self.call_history: list[dict[str, Any]] = []
        self._responses: list[ModelResponse] = list(responses)
        self.default_response = ModelResponse(content="This is a mock response.")

    def queue_response(self, response: ModelResponse) -> None:
        """Append a response to return on a later call."""
        self._responses.append(response)

    @property
    def call_count(self) -> int:
        return len(self.call_history)

    async def complete(
        self,
        messages: list[ConversationMessage],
        tools: Optional[list[dict[str, Any]]] = None
    ) -> ModelResponse:
        """Return the next scripted response."""
        self.call_history.append({
            "messages": [m.model_copy(deep=True) for m in messages],
            "tools": tools,
        })

        if self._responses:
            return self._responses.pop(0)
        return self.default_response


def create_model_gateway(settings: OpenRouterSettings) -> ModelGateway:
    """
    Factory function to create the configured model gateway.

    Raises:
        ValueError: If the provider is not supported
        MissingCredentialError: If the provider needs an API key and none is set
    """
    providers = {
        "openrouter": OpenRouterGateway,
        "mock": MockModelGateway,
    }

    provider_class = providers.get(settings.provider)
    if not provider_class:
        raise ValueError(
            f"Unsupported model provider: {settings.provider}. "
            f"Supported: {list(providers.keys())}"
        )

    logger.info("Creating model gateway", provider=settings.provider, model=settings.model)
    return provider_class(settings)
