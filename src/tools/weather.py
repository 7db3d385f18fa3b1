"""Weather tool backed by static sample data."""

from typing import Any

from shared.models import ToolDescriptor
from shared.schema import object_schema


MOCK_WEATHER = {
    "New York": "Sunny, 72°F",
    "London": "Cloudy, 15°C",
    "Tokyo": "Rainy, 18°C",
    "Paris": "Partly cloudy, 20°C",
}

WEATHER_SCHEMA = object_schema({
    "city": {"type": "string", "description": "The city name"},
})


async def get_weather(arguments: dict[str, Any]) -> str:
    city = arguments["city"]
    return MOCK_WEATHER.get(city, f"Weather data not available for {city}")


weather_tool = ToolDescriptor(
    name="get_weather",
    description="Gets the current weather for a given city",
    input_schema=WEATHER_SCHEMA,
    handler=get_weather,
)
