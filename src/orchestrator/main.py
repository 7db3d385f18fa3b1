"""Example runner.

Runs the demo workflows against OpenRouter:

    handson-tools simple
    handson-tools tools "What is 15 multiplied by 23?"
    handson-tools parallel

Requires OPENROUTER_API_KEY.
"""

import argparse
import asyncio
import sys
from typing import Optional

from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging
from orchestrator.workflow import (
    ParallelToolCallingWorkflow,
    SimpleWorkflow,
    ToolCallingWorkflow,
)

logger = get_logger(__name__)


TOOL_EXAMPLES = [
    "What is 15 multiplied by 23?",
    "What is the weather in London?",
    'Convert "Hello World" to uppercase',
    "What is 100 divided by 4?",
    "Calculate 25 plus 17, then convert the result to uppercase and tell me its length",
    "What is the weather in both London and Tokyo, and also calculate 12 multiplied by 8?",
]

PARALLEL_EXAMPLES = [
    "What is the weather in both London and Tokyo, and also calculate 12 multiplied by 8?",
    "Get weather for Paris and New York, then calculate 50 divided by 2",
    "What is 15 plus 25, multiply 7 by 9, and get the weather in Tokyo?",
]


def handle_example_error(error: BaseException, exit_on_error: bool = True) -> None:
    """Report an example failure, optionally exiting with status 1."""
    print(f"Error: {error}", file=sys.stderr)
    if exit_on_error:
        sys.exit(1)


async def run_simple(topic: str, question: str, settings: Settings) -> None:
    try:
        workflow = SimpleWorkflow(settings=settings.openrouter)
        result = await workflow.run({"topic": topic, "question": question})
        print("Response:", result)
    except Exception as e:
        handle_example_error(e)


async def run_tool_examples(workflow: ToolCallingWorkflow, questions: list[str]) -> None:
    print("Available tools:", ", ".join(workflow.get_available_tools()))
    print()

    for question in questions:
        print(f"Question: {question}")
        try:
            result = await workflow.run({"question": question})
            print(f"Answer: {result}")
        except Exception as e:
            handle_example_error(e, exit_on_error=False)
        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handson-tools",
        description="Run the tool-calling demo workflows."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    simple = subparsers.add_parser("simple", help="Single prompt, no tools")
    simple.add_argument("--topic", default="LangChain")
    simple.add_argument(
        "--question",
        default="What is LangChain and what can it be used for?"
    )

    for name, help_text in (
        ("tools", "Tool calling, one call at a time"),
        ("parallel", "Tool calling, concurrent calls per round"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("questions", nargs="*", help="Questions to ask (default: examples)")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the ``handson-tools`` command."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings.log_level, json_output=settings.environment == "production")

    if args.command == "simple":
        asyncio.run(run_simple(args.topic, args.question, settings))
        return

    parallel = args.command == "parallel" or settings.workflow.parallel
    workflow_class = ParallelToolCallingWorkflow if parallel else ToolCallingWorkflow
    questions = args.questions or (
        PARALLEL_EXAMPLES if args.command == "parallel" else TOOL_EXAMPLES
    )
    logger.info("Running examples", workflow=workflow_class.__name__, count=len(questions))

    try:
        workflow = workflow_class(
            max_iterations=settings.workflow.max_iterations,
            settings=settings.openrouter
        )
    except ValueError as e:
        handle_example_error(e)
        return

    asyncio.run(run_tool_examples(workflow, questions))


if __name__ == "__main__":
    main()
