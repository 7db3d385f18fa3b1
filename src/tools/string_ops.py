"""String manipulation tool."""

from typing import Any

from shared.models import ToolDescriptor
from shared.schema import object_schema


STRING_SCHEMA = object_schema({
    "operation": {
        "type": "string",
        "enum": ["uppercase", "lowercase", "reverse", "length"],
        "description": "The string operation to perform",
    },
    "text": {"type": "string", "description": "The text to process"},
})


async def transform_string(arguments: dict[str, Any]) -> str:
    operation = arguments["operation"]
    text = arguments["text"]

    if operation == "uppercase":
        return text.upper()
    if operation == "lowercase":
        return text.lower()
    if operation == "reverse":
        return text[::-1]
    if operation == "length":
        return str(len(text))
    return "Error: Unknown operation"


string_tool = ToolDescriptor(
    name="string_operations",
    description="Performs string operations: uppercase, lowercase, reverse, length",
    input_schema=STRING_SCHEMA,
    handler=transform_string,
)
