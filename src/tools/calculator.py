"""Calculator tool - basic arithmetic on two numbers."""

from typing import Any

from shared.models import ToolDescriptor
from shared.schema import object_schema


CALCULATOR_SCHEMA = object_schema({
    "operation": {
        "type": "string",
        "enum": ["add", "subtract", "multiply", "divide"],
        "description": "The arithmetic operation to perform",
    },
    "a": {"type": "number", "description": "First number"},
    "b": {"type": "number", "description": "Second number"},
})


def format_number(value: float) -> str:
    """Render integral floats without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


async def calculate(arguments: dict[str, Any]) -> str:
    operation = arguments["operation"]
    a = arguments["a"]
    b = arguments["b"]

    if operation == "add":
        return format_number(a + b)
    if operation == "subtract":
        return format_number(a - b)
    if operation == "multiply":
        return format_number(a * b)
    if operation == "divide":
        if b == 0:
            return "Error: Division by zero"
        return format_number(a / b)
    return "Error: Unknown operation"


calculator_tool = ToolDescriptor(
    name="calculator",
    description="Performs basic arithmetic operations: add, subtract, multiply, divide",
    input_schema=CALCULATOR_SCHEMA,
    handler=calculate,
)
