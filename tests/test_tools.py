"""Tests for the tool registry and built-in tools."""

import pytest

from shared.models import ToolDescriptor, ToolInputError
from tools import create_default_registry, get_default_tools
from tools.registry import ToolRegistry


async def _echo(arguments):
    return arguments.get("text", "")


def make_tool(name: str, handler=_echo, **kwargs) -> ToolDescriptor:
    return ToolDescriptor(name=name, description=f"{name} tool", handler=handler, **kwargs)


class TestToolRegistry:
    """Tests for the ToolRegistry."""

    def test_lookup_registered_tool(self):
        tool = make_tool("echo")
        registry = ToolRegistry([tool])

        assert registry.get("echo") is tool
        assert "echo" in registry
        assert len(registry) == 1

    def test_lookup_unknown_tool_returns_none(self):
        registry = ToolRegistry([make_tool("echo")])

        assert registry.get("missing") is None
        assert "missing" not in registry

    def test_duplicate_names_raise(self):
        """Test that constructing with duplicate names raises error."""
        with pytest.raises(ValueError, match="already registered"):
            ToolRegistry([make_tool("echo"), make_tool("echo")])

    def test_list_names_keeps_registration_order(self):
        registry = ToolRegistry([make_tool("b"), make_tool("a"), make_tool("c")])

        assert registry.list_names() == ["b", "a", "c"]

    def test_empty_registry(self):
        registry = ToolRegistry()

        assert registry.list_names() == []
        assert registry.get_tools_for_llm() == []

    def test_get_tools_for_llm(self):
        """Test getting tools in LLM format."""
        registry = ToolRegistry([
            make_tool(
                "echo",
                input_schema={
                    "type": "object",
                    "properties": {"text": {"type": "string"}},
                    "required": ["text"]
                }
            ),
            make_tool("bare"),
        ])

        tools = registry.get_tools_for_llm()

        assert tools[0]["type"] == "function"
        assert tools[0]["function"]["name"] == "echo"
        assert tools[0]["function"]["description"] == "echo tool"
        assert tools[0]["function"]["parameters"]["required"] == ["text"]
        assert tools[1]["function"]["parameters"] == {
            "type": "object",
            "properties": {},
            "required": []
        }

    def test_default_registry(self):
        registry = create_default_registry()

        assert registry.list_names() == ["calculator", "get_weather", "string_operations"]


class TestToolDescriptor:
    """Tests for ToolDescriptor.invoke."""

    @pytest.mark.asyncio
    async def test_invoke_passes_arguments(self):
        tool = make_tool("echo")

        assert await tool.invoke({"text": "hi"}) == "hi"

    @pytest.mark.asyncio
    async def test_invoke_rejects_arguments_outside_schema(self):
        calls = []

        async def handler(arguments):
            calls.append(arguments)
            return "ok"

        tool = make_tool(
            "strict",
            handler=handler,
            input_schema={
                "type": "object",
                "properties": {"count": {"type": "integer"}},
                "required": ["count"]
            }
        )

        with pytest.raises(ToolInputError, match="Invalid arguments for tool 'strict'"):
            await tool.invoke({"count": "three"})
        assert calls == []

    @pytest.mark.asyncio
    async def test_handler_receives_only_declared_arguments(self):
        calls = []

        async def handler(arguments):
            calls.append(arguments)
            return "ok"

        tool = make_tool(
            "strip",
            handler=handler,
            input_schema={
                "type": "object",
                "properties": {"count": {"type": "integer"}},
                "required": ["count"]
            }
        )

        await tool.invoke({"count": 3, "extra": True})
        assert calls == [{"count": 3}]

    @pytest.mark.asyncio
    async def test_non_string_result_is_json_encoded(self):
        async def handler(arguments):
            return {"value": 1}

        tool = make_tool("structured", handler=handler)

        assert await tool.invoke({}) == '{"value":1}'

    def test_descriptor_is_immutable(self):
        tool = make_tool("echo")

        with pytest.raises(Exception):
            tool.name = "other"


class TestCalculatorTool:
    """Tests for the calculator tool."""

    def setup_method(self):
        from tools.calculator import calculator_tool
        self.tool = calculator_tool

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation,a,b,expected",
        [
            ("add", 12, 8, "20"),
            ("subtract", 5, 7.5, "-2.5"),
            ("multiply", 15, 23, "345"),
            ("divide", 100, 4, "25"),
            ("divide", 1, 4, "0.25"),
        ],
    )
    async def test_operations(self, operation, a, b, expected):
        result = await self.tool.invoke({"operation": operation, "a": a, "b": b})
        assert result == expected

    @pytest.mark.asyncio
    async def test_division_by_zero(self):
        result = await self.tool.invoke({"operation": "divide", "a": 1, "b": 0})
        assert result == "Error: Division by zero"

    @pytest.mark.asyncio
    async def test_unknown_operation_rejected_by_schema(self):
        with pytest.raises(ToolInputError):
            await self.tool.invoke({"operation": "modulo", "a": 1, "b": 2})

    @pytest.mark.asyncio
    async def test_missing_argument_rejected(self):
        with pytest.raises(ToolInputError, match="'b' is a required property"):
            await self.tool.invoke({"operation": "add", "a": 1})


class TestWeatherTool:
    """Tests for the weather tool."""

    @pytest.mark.asyncio
    async def test_known_city(self):
        from tools.weather import weather_tool

        assert await weather_tool.invoke({"city": "London"}) == "Cloudy, 15°C"

    @pytest.mark.asyncio
    async def test_unknown_city(self):
        from tools.weather import weather_tool

        result = await weather_tool.invoke({"city": "Atlantis"})
        assert result == "Weather data not available for Atlantis"

    @pytest.mark.asyncio
    async def test_undeclared_arguments_are_ignored(self):
        from tools.weather import weather_tool

        result = await weather_tool.invoke({"city": "Paris", "unit": "celsius"})
        assert result == "Partly cloudy, 20°C"


class TestStringTool:
    """Tests for the string operations tool."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation,expected",
        [
            ("uppercase", "HELLO WORLD"),
            ("lowercase", "hello world"),
            ("reverse", "dlroW olleH"),
            ("length", "11"),
        ],
    )
    async def test_operations(self, operation, expected):
        from tools.string_ops import string_tool

        result = await string_tool.invoke({"operation": operation, "text": "Hello World"})
        assert result == expected


def test_default_tools_have_unique_names():
    names = [tool.name for tool in get_default_tools()]
    assert len(names) == len(set(names))
