"""Tool-calling orchestration loop.

Drives the request/respond/execute/append cycle:
1. Send the conversation and tool definitions to the model
2. If the model answers without tool calls, return the answer
3. Otherwise resolve every requested tool call and append the results
4. Repeat until the iteration budget is spent

Two variants share the loop and differ only in how one round of tool
calls is executed: one at a time, or all at once with ``asyncio.gather``.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from shared.logging import bind_context, clear_context, get_logger
from shared.models import (
    ConversationMessage,
    ModelResponse,
    ToolCallRequest,
    ToolResult,
)
from orchestrator.llm import ModelGateway
from tools.registry import ToolRegistry

logger = get_logger(__name__)


DEFAULT_MAX_ITERATIONS = 5
MAX_ITERATIONS_MESSAGE = "Maximum iterations reached. Please try a simpler question."


class LoopState(str, Enum):
    """States of a single orchestration run."""
    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    EXHAUSTED = "exhausted"


@dataclass
class OrchestrationRun:
    """Mutable state owned by one ``run`` call."""

    run_id: str
    conversation: list[ConversationMessage]
    state: LoopState = LoopState.AWAITING_MODEL
    iteration: int = 0
    model_calls: int = 0
    answer: Optional[str] = None


@dataclass
class OrchestrationResult:
    """Result of a complete orchestration run."""

    answer: str
    state: LoopState
    iterations: int
    model_calls: int
    conversation: list[ConversationMessage] = field(default_factory=list)


class ToolCallingOrchestrator:
    """
    Sequential tool-calling loop.

    Tool calls within a round run one after another in the order the
    model listed them. Tool failures never escape the loop: they become
    error text the model can react to. Gateway failures propagate.
    """

    label = "tool-workflow"

    def __init__(
        self,
        gateway: ModelGateway,
        registry: ToolRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.gateway = gateway
        self.registry = registry
        self.max_iterations = max_iterations

    async def run(self, question: str) -> str:
        """Answer a question, calling tools as the model requests."""
        result = await self.run_detailed(question)
        return result.answer

    async def run_detailed(self, question: str) -> OrchestrationResult:
        """Run the loop and return the answer with the full conversation."""
        run = OrchestrationRun(
            run_id=str(uuid.uuid4()),
            conversation=[ConversationMessage.user(question)]
        )
        bind_context(workflow=self.label, run_id=run.run_id)
        try:
            await self._drive(run, logger)
        finally:
            clear_context()

        return OrchestrationResult(
            answer=run.answer,
            state=run.state,
            iterations=run.iteration,
            model_calls=run.model_calls,
            conversation=run.conversation
        )

    async def _drive(self, run: OrchestrationRun, log) -> None:
        log.info("Starting workflow", question=run.conversation[0].content)

        tools = self.registry.get_tools_for_llm() or None

        while run.iteration < self.max_iterations:
            log.info(
                "Iteration started",
                iteration=run.iteration + 1,
                max_iterations=self.max_iterations
            )

            try:
                response = await self.gateway.complete(
                    messages=list(run.conversation),
                    tools=tools
                )
            except Exception as e:
                log.error("Model call failed", iteration=run.iteration + 1, error=str(e))
                raise
            run.model_calls += 1

            if not response.has_tool_calls:
                log.info("No tool calls needed, returning response")
                run.state = LoopState.DONE
                run.answer = response.text()
                return

            run.state = LoopState.EXECUTING_TOOLS
            run.conversation.append(response.to_message())
            self._log_requests(log, response)

            await self._execute_round(run, response.tool_calls, log)

            run.iteration += 1
            run.state = LoopState.AWAITING_MODEL
            log.info("Iteration completed", iteration=run.iteration)

        log.warning("Maximum iterations reached", max_iterations=self.max_iterations)
        run.state = LoopState.EXHAUSTED
        run.answer = MAX_ITERATIONS_MESSAGE

    def _log_requests(self, log, response: ModelResponse) -> None:
        log.info("Model requested tool calls", count=len(response.tool_calls))
        for request in response.tool_calls:
            if request.is_well_formed:
                log.info("Tool call requested", tool=request.name, arguments=request.arguments)

    async def _execute_round(
        self,
        run: OrchestrationRun,
        requests: list[ToolCallRequest],
        log
    ) -> None:
        """Resolve each request in order, appending results as they arrive."""
        for request in requests:
            result = await self._resolve(request, log)
            if result is not None:
                run.conversation.append(ConversationMessage.tool_result(result))

    async def _resolve(self, request: ToolCallRequest, log) -> Optional[ToolResult]:
        """
        Execute one tool call.

        Returns None for malformed requests (no id or no name); every other
        request yields a result, successful or not.
        """
        if not request.is_well_formed:
            log.debug("Skipping malformed tool call", call_id=request.id, tool=request.name)
            return None

        tool = self.registry.get(request.name)
        if tool is None:
            log.error("Tool not found", tool=request.name)
            return ToolResult(
                call_id=request.id,
                content=f"Error: Tool {request.name} not found"
            )

        log.debug("Calling tool", tool=request.name, arguments=request.arguments)

        try:
            content = await tool.invoke(request.arguments)
        except Exception as e:
            log.error("Error executing tool", tool=request.name, error=str(e))
            return ToolResult(call_id=request.id, content=f"Error executing tool: {e}")

        log.info("Tool returned", tool=request.name, result=content)
        return ToolResult(call_id=request.id, content=content)


class ParallelToolCallingOrchestrator(ToolCallingOrchestrator):
    """
    Tool-calling loop that runs each round's tool calls concurrently.

    Results are appended in the order the model requested them once the
    whole round has settled, whatever order the calls finish in.
    """

    label = "parallel-tool-workflow"

    async def _execute_round(
        self,
        run: OrchestrationRun,
        requests: list[ToolCallRequest],
        log
    ) -> None:
        results = await asyncio.gather(
            *(self._resolve(request, log) for request in requests)
        )

        for result in results:
            if result is not None:
                run.conversation.append(ConversationMessage.tool_result(result))
