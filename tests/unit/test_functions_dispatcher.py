"""Tests for the tool dispatcher."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel

from craftagent.functions import (
    FunctionRegistry,
    ResultStatus,
    ToolCallResult,
    ToolDefinition,
    ToolDispatcher,
)


class WeatherArgs(BaseModel):
    city: str
    days: int = 1


def make_dispatcher(handler, parameters=WeatherArgs) -> ToolDispatcher:
    registry = FunctionRegistry()
    registry.register(ToolDefinition(name="weather", handler=handler, parameters=parameters))
    return ToolDispatcher(registry)


class TestDispatch:
    """Tests for ToolDispatcher.invoke."""

    @pytest.mark.asyncio
    async def test_unknown_tool_returns_error(self):
        """Test unknown names give an error result instead of raising."""
        dispatcher = ToolDispatcher(FunctionRegistry())

        result = await dispatcher.invoke("nope", None, {})

        assert result.status == ResultStatus.ERROR
        assert "not found" in result.message

    @pytest.mark.asyncio
    async def test_missing_field_names_it_and_skips_handler(self):
        """Test a missing required field is reported and the handler never runs."""
        handler = AsyncMock(return_value={"message": "sunny"})
        dispatcher = make_dispatcher(handler)

        result = await dispatcher.invoke("weather", None, {})

        assert result.is_error
        assert "city" in result.message
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_type_rejected(self):
        """Test type mismatches are validation errors."""
        handler = AsyncMock()
        dispatcher = make_dispatcher(handler)

        result = await dispatcher.invoke("weather", None, {"city": "Oslo", "days": "many"})

        assert result.is_error
        assert "days" in result.message
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_json_string_arguments(self):
        """Test arguments arrive as a JSON string from the model."""
        handler = AsyncMock(return_value={"message": "sunny"})
        dispatcher = make_dispatcher(handler)

        result = await dispatcher.invoke("weather", "ctx", '{"city": "Oslo"}')

        assert result.status == ResultStatus.SUCCESS
        context, args = handler.call_args.args
        assert context == "ctx"
        assert args == WeatherArgs(city="Oslo", days=1)

    @pytest.mark.asyncio
    async def test_invalid_json_arguments(self):
        """Test malformed JSON is an error result."""
        dispatcher = make_dispatcher(AsyncMock())

        result = await dispatcher.invoke("weather", None, "{city:")

        assert result.is_error
        assert "JSON" in result.message

    @pytest.mark.asyncio
    async def test_non_object_arguments(self):
        """Test a JSON array is not accepted as arguments."""
        dispatcher = make_dispatcher(AsyncMock())

        result = await dispatcher.invoke("weather", None, "[1, 2]")

        assert result.is_error

    @pytest.mark.asyncio
    async def test_deeply_nested_json_arguments(self):
        """Test JSON too deep to decode is a validation error, not a crash."""
        handler = AsyncMock()
        dispatcher = make_dispatcher(handler)

        result = await dispatcher.invoke("weather", None, "[" * 100000)

        assert result.is_error
        assert "not valid JSON" in result.message
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_failure_becomes_error(self):
        """Test failures outside the handler still come back as an error result."""
        registry = MagicMock()
        registry.get.side_effect = RuntimeError("registry unavailable")
        dispatcher = ToolDispatcher(registry)

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.status == ResultStatus.ERROR
        assert "registry unavailable" in result.message

    @pytest.mark.asyncio
    async def test_empty_arguments_for_no_parameter_tool(self):
        """Test None and empty string mean no arguments."""
        registry = FunctionRegistry()
        registry.register(ToolDefinition(name="ping", handler=lambda agent, args: {"message": "pong"}))
        dispatcher = ToolDispatcher(registry)

        assert (await dispatcher.invoke("ping", None, None)).message == "pong"
        assert (await dispatcher.invoke("ping", None, "")).message == "pong"


class TestResultNormalization:
    """Tests for how handler return values become results."""

    @pytest.mark.asyncio
    async def test_bare_string_is_error(self):
        """Test a plain string return is an error message."""
        dispatcher = make_dispatcher(AsyncMock(return_value="City not found"))

        result = await dispatcher.invoke("weather", None, {"city": "Atlantis"})

        assert result.status == ResultStatus.ERROR
        assert result.message == "City not found"

    @pytest.mark.asyncio
    async def test_dict_without_status_is_success(self):
        """Test structured results default to success."""
        dispatcher = make_dispatcher(AsyncMock(return_value={"message": {"temp": 20}}))

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.status == ResultStatus.SUCCESS
        assert result.message == {"temp": 20}
        assert result.stop is False

    @pytest.mark.asyncio
    async def test_dict_with_explicit_status_and_stop(self):
        """Test explicit status and stop flag are kept."""
        dispatcher = make_dispatcher(
            AsyncMock(return_value={"status": "error", "message": "busy", "stop": True})
        )

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.is_error
        assert result.stop is True

    @pytest.mark.asyncio
    async def test_result_object_passes_through(self):
        """Test a ToolCallResult is returned unchanged."""
        expected = ToolCallResult(message="done", stop=True)
        dispatcher = make_dispatcher(AsyncMock(return_value=expected))

        assert await dispatcher.invoke("weather", None, {"city": "Oslo"}) is expected

    @pytest.mark.asyncio
    async def test_sync_handler(self):
        """Test plain functions work as handlers."""
        dispatcher = make_dispatcher(lambda agent, args: {"message": args.city.upper()})

        result = await dispatcher.invoke("weather", None, {"city": "oslo"})

        assert result.message == "OSLO"

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_error(self):
        """Test exceptions never escape the dispatcher."""
        dispatcher = make_dispatcher(AsyncMock(side_effect=RuntimeError("boom")))

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.is_error
        assert "boom" in result.message

    @pytest.mark.asyncio
    async def test_unsupported_return_type(self):
        """Test returning something unusable is an error result."""
        dispatcher = make_dispatcher(AsyncMock(return_value=42))

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.is_error
        assert "int" in result.message

    @pytest.mark.asyncio
    async def test_malformed_dict(self):
        """Test unknown keys in a result dict are rejected."""
        dispatcher = make_dispatcher(AsyncMock(return_value={"message": "x", "bogus": 1}))

        result = await dispatcher.invoke("weather", None, {"city": "Oslo"})

        assert result.is_error


class TestToolCallResult:
    """Tests for the result wire format."""

    def test_content_omits_stop(self):
        """Test the stop flag is never sent to the model."""
        content = json.loads(ToolCallResult(message="attacking", stop=True).to_content())
        assert content == {"status": "success", "message": "attacking"}

    def test_content_with_warning(self):
        """Test a warning is added when given."""
        content = json.loads(ToolCallResult.error("nope").to_content(warning="slow down"))
        assert content == {"status": "error", "message": "nope", "warning": "slow down"}
