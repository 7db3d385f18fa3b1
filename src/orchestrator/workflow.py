"""Workflow facades.

Each workflow builds its model gateway and tool registry once and reuses
them for every ``run`` call.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from shared.config import ModelConfig, OpenRouterSettings, resolve_openrouter_settings
from shared.logging import get_logger
from shared.models import ConversationMessage, ToolDescriptor
from orchestrator.llm import ModelGateway, create_model_gateway
from orchestrator.loop import (
    DEFAULT_MAX_ITERATIONS,
    OrchestrationResult,
    ParallelToolCallingOrchestrator,
    ToolCallingOrchestrator,
)
from tools import get_default_tools
from tools.registry import ToolRegistry

logger = get_logger(__name__)


SYSTEM_PROMPT = "You are a helpful assistant that provides clear and concise answers."
HUMAN_PROMPT = "Topic: {topic}\n\nQuestion: {question}"


class ToolWorkflowInput(BaseModel):
    """Input for the tool-calling workflows."""
    question: str = Field(..., description="Question for the model")


class WorkflowInput(BaseModel):
    """Input for the simple prompt workflow."""
    topic: str
    question: str


def _build_gateway(
    config: Optional[ModelConfig],
    gateway: Optional[ModelGateway],
    settings: Optional[OpenRouterSettings]
) -> ModelGateway:
    if gateway is not None:
        return gateway
    return create_model_gateway(resolve_openrouter_settings(config, settings))


class ToolCallingWorkflow:
    """
    Answers questions with the built-in tools, one tool call at a time.

    Raises ``MissingCredentialError`` at construction when no gateway is
    supplied and no API key is configured.
    """

    orchestrator_class: type[ToolCallingOrchestrator] = ToolCallingOrchestrator

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        gateway: Optional[ModelGateway] = None,
        tools: Optional[list[ToolDescriptor]] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        settings: Optional[OpenRouterSettings] = None
    ) -> None:
        self.gateway = _build_gateway(config, gateway, settings)
        self.registry = ToolRegistry(get_default_tools() if tools is None else tools)
        self.orchestrator = self.orchestrator_class(
            gateway=self.gateway,
            registry=self.registry,
            max_iterations=max_iterations
        )

    @staticmethod
    def _question(input: Union[ToolWorkflowInput, dict[str, Any], str]) -> str:
        if isinstance(input, str):
            return input
        return ToolWorkflowInput.model_validate(input).question

    async def run(self, input: Union[ToolWorkflowInput, dict[str, Any], str]) -> str:
        """Answer ``input["question"]``."""
        return await self.orchestrator.run(self._question(input))

    async def run_detailed(
        self,
        input: Union[ToolWorkflowInput, dict[str, Any], str]
    ) -> OrchestrationResult:
        return await self.orchestrator.run_detailed(self._question(input))

    def get_available_tools(self) -> list[str]:
        return self.registry.list_names()


class ParallelToolCallingWorkflow(ToolCallingWorkflow):
    """Tool-calling workflow that runs each round's tool calls concurrently."""

    orchestrator_class = ParallelToolCallingOrchestrator


class SimpleWorkflow:
    """Single prompt/response exchange, no tools."""

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        gateway: Optional[ModelGateway] = None,
        settings: Optional[OpenRouterSettings] = None
    ) -> None:
        self.gateway = _build_gateway(config, gateway, settings)

    def build_messages(self, input: WorkflowInput) -> list[ConversationMessage]:
        return [
            ConversationMessage.system(SYSTEM_PROMPT),
            ConversationMessage.user(
                HUMAN_PROMPT.format(topic=input.topic, question=input.question)
            ),
        ]

    async def run(self, input: Union[WorkflowInput, dict[str, Any]]) -> str:
        """Ask a question about a topic and return the model's text answer."""
        workflow_input = WorkflowInput.model_validate(input)
        logger.info("Running simple workflow", topic=workflow_input.topic)

        response = await self.gateway.complete(self.build_messages(workflow_input))
        return response.text()
