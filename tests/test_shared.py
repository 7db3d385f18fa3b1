"""Tests for shared models and configuration."""

import pytest

from shared.config import (
    MissingCredentialError,
    ModelConfig,
    OpenRouterSettings,
    Settings,
    get_api_key,
    load_yaml_config,
    resolve_openrouter_settings,
)
from shared.models import (
    ConversationMessage,
    MessageRole,
    ModelResponse,
    ToolCallRequest,
    ToolResult,
    flatten_content,
)
from shared.schema import object_schema, validate_schema


class TestFlattenContent:
    """Tests for model content normalization."""

    def test_string_unchanged(self):
        assert flatten_content("The answer is 20.") == "The answer is 20."

    def test_fragments_joined_by_newline(self):
        content = ["first", {"type": "text", "text": "second"}, 3]

        assert flatten_content(content) == 'first\n{"type":"text","text":"second"}\n3'

    def test_other_shapes_json_encoded(self):
        assert flatten_content({"answer": 42}) == '{"answer":42}'
        assert flatten_content(7) == "7"

    def test_none_is_empty(self):
        assert flatten_content(None) == ""

    def test_non_ascii_kept(self):
        assert flatten_content([{"t": "15°C"}]) == '{"t":"15°C"}'


class TestModels:
    """Tests for conversation models."""

    def test_tool_call_well_formed(self):
        assert ToolCallRequest(id="c1", name="calculator").is_well_formed
        assert not ToolCallRequest(id="c1").is_well_formed
        assert not ToolCallRequest(name="calculator").is_well_formed
        assert not ToolCallRequest(id="", name="calculator").is_well_formed

    def test_tool_call_openai_format(self):
        request = ToolCallRequest(id="c1", name="get_weather", arguments={"city": "Paris"})

        assert request.to_openai() == {
            "id": "c1",
            "type": "function",
            "function": {"name": "get_weather", "arguments": '{"city": "Paris"}'},
        }

    def test_response_to_message(self):
        request = ToolCallRequest(id="c1", name="calculator")
        message = ModelResponse(content="Let me check.", tool_calls=[request]).to_message()

        assert message.role == MessageRole.ASSISTANT
        assert message.content == "Let me check."
        assert message.tool_calls == [request]

    def test_tool_result_message(self):
        message = ConversationMessage.tool_result(ToolResult(call_id="c1", content="20"))

        assert message.role == MessageRole.TOOL
        assert message.tool_call_id == "c1"
        assert message.content == "20"


class TestSchema:
    """Tests for JSON Schema helpers."""

    def test_object_schema_requires_all_properties(self):
        schema = object_schema({"a": {"type": "number"}, "b": {"type": "number"}})

        assert schema["required"] == ["a", "b"]
        assert "additionalProperties" not in schema

    def test_validate_reports_each_error(self):
        schema = object_schema({"a": {"type": "number"}, "b": {"type": "number"}})

        is_valid, errors = validate_schema({"a": "one", "c": 1}, schema)

        assert not is_valid
        assert len(errors) == 2
        assert any(e.startswith("a: ") for e in errors)

    def test_empty_schema_accepts_anything(self):
        assert validate_schema({"anything": True}, {}) == (True, [])


class TestConfig:
    """Tests for settings and credential resolution."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("OPENROUTER_MODEL", raising=False)
        monkeypatch.delenv("OPENROUTER_BASE_URL", raising=False)
        settings = OpenRouterSettings(_env_file=None)

        assert settings.base_url == "https://openrouter.ai/api/v1"
        assert settings.model == "openai/gpt-3.5-turbo"
        assert settings.temperature == 0.7
        assert settings.app_title == "Hands-on LangChain"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_MODEL", "anthropic/claude-3-haiku")
        monkeypatch.setenv("OPENROUTER_HTTP_REFERER", "https://example.com")

        settings = OpenRouterSettings(_env_file=None)

        assert settings.model == "anthropic/claude-3-haiku"
        assert settings.http_referer == "https://example.com"

    def test_config_key_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("OPENROUTER_API_KEY", "env-key")

        assert get_api_key(ModelConfig(api_key="explicit")) == "explicit"
        assert get_api_key(ModelConfig()) == "env-key"

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)

        with pytest.raises(MissingCredentialError, match="OPENROUTER_API_KEY"):
            get_api_key(None, OpenRouterSettings(_env_file=None))

    def test_resolve_applies_overrides(self):
        base = OpenRouterSettings(api_key="k", model="base/model", _env_file=None)

        resolved = resolve_openrouter_settings(
            ModelConfig(model_name="openai/gpt-4o", temperature=0.2),
            base
        )

        assert resolved.model == "openai/gpt-4o"
        assert resolved.temperature == 0.2
        assert resolved.api_key == "k"
        assert base.model == "base/model"

    def test_model_config_rejects_bad_temperature(self):
        with pytest.raises(ValueError):
            ModelConfig(temperature=5)

    def test_settings_from_yaml(self, tmp_path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text(
            "log_level: DEBUG\n"
            "workflow:\n"
            "  max_iterations: 3\n"
            "  parallel: true\n"
        )

        settings = Settings.from_yaml(config_file)

        assert settings.log_level == "DEBUG"
        assert settings.workflow.max_iterations == 3
        assert settings.workflow.parallel is True

    def test_settings_from_missing_yaml(self, tmp_path):
        settings = Settings.from_yaml(tmp_path / "absent.yaml")

        assert settings.workflow.max_iterations == 5
        assert load_yaml_config(tmp_path / "absent.yaml") == {}
