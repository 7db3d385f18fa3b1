"""Orchestrator.

Model gateway, the tool-calling loop and the workflow facades built on it.
"""

from orchestrator.llm import ModelGateway, MockModelGateway, create_model_gateway
from orchestrator.loop import (
    MAX_ITERATIONS_MESSAGE,
    LoopState,
    OrchestrationResult,
    ParallelToolCallingOrchestrator,
    ToolCallingOrchestrator,
)
from orchestrator.workflow import (
    ParallelToolCallingWorkflow,
    SimpleWorkflow,
    ToolCallingWorkflow,
)

__all__ = [
    "ModelGateway",
    "MockModelGateway",
    "create_model_gateway",
    "MAX_ITERATIONS_MESSAGE",
    "LoopState",
    "OrchestrationResult",
    "ParallelToolCallingOrchestrator",
    "ToolCallingOrchestrator",
    "ParallelToolCallingWorkflow",
    "SimpleWorkflow",
    "ToolCallingWorkflow",
]
