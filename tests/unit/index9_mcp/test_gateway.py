# -*- coding: utf-8 -*-
"""Location: ./tests/unit/index9_mcp/test_gateway.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Tests for the tool gateway dispatcher.
"""

# Standard
import json
import logging
from unittest.mock import AsyncMock, MagicMock

# Third-Party
from fastmcp.exceptions import ToolError
import pytest

# First-Party
from index9_mcp import schemas
from index9_mcp.errors import BackendTimeoutError, ErrorKind, NotFoundError, RateLimitedError, ToolValidationError
from index9_mcp.gateway import envelope, RATE_LIMIT_MESSAGE, ToolGateway
from index9_mcp.rate_limiter import RateLimiter


def _gateway(settings, max_requests: int = 100) -> ToolGateway:
    client = MagicMock()
    client.aclose = AsyncMock()
    return ToolGateway(settings, rate_limiter=RateLimiter(60000, max_requests), client=client)


def _find_result() -> schemas.FindModelsOutput:
    return schemas.FindModelsOutput.model_validate(
        {
            "results": [
                {
                    "id": "openai/gpt-4o-mini",
                    "name": "GPT-4o mini",
                    "description": None,
                    "score": 0.93,
                    "provider": "openai",
                    "context_window": 128000,
                    "pricing": {"input": 0.15, "output": 0.6},
                    "capabilities": {"vision": True, "audio": False, "tool_calling": True, "json_mode": True, "video": False},
                    "matched_features": ["cheap", "coding"],
                }
            ],
            "total": 1,
        }
    )


def test_envelope_views_are_identical():
    result = envelope(_find_result())

    assert len(result.content) == 1
    assert result.content[0].type == "text"
    assert json.loads(result.content[0].text) == result.structured_content
    assert result.structured_content["results"][0]["matched_features"] == ["cheap", "coding"]


@pytest.mark.asyncio
async def test_dispatch_success_returns_envelope(settings):
    gateway = _gateway(settings)
    handler = AsyncMock(return_value=_find_result())
    request = schemas.FindModelsRequest(query="cheap coding model")

    result = await gateway.dispatch("find_models", handler, request)

    handler.assert_awaited_once_with(gateway.client, request)
    assert json.loads(result.content[0].text) == result.structured_content
    assert result.structured_content["total"] == 1


@pytest.mark.asyncio
async def test_rate_limited_call_never_reaches_handler(settings):
    gateway = _gateway(settings, max_requests=1)
    handler = AsyncMock(return_value=_find_result())
    request = schemas.FindModelsRequest()

    await gateway.dispatch("find_models", handler, request)
    with pytest.raises(ToolError, match="Rate limit exceeded") as exc_info:
        await gateway.dispatch("find_models", handler, request)

    assert str(exc_info.value) == RATE_LIMIT_MESSAGE
    assert isinstance(exc_info.value.__cause__, RateLimitedError)
    assert handler.await_count == 1


@pytest.mark.asyncio
async def test_rate_limit_is_per_tool(settings):
    gateway = _gateway(settings, max_requests=1)
    handler = AsyncMock(return_value=_find_result())

    await gateway.dispatch("find_models", handler, schemas.FindModelsRequest())
    await gateway.dispatch("search_models", handler, schemas.FindModelsRequest())

    assert handler.await_count == 2


@pytest.mark.asyncio
async def test_credential_gate_returns_guidance_without_handler(settings_factory):
    gateway = _gateway(settings_factory(open_router_api_key=None))
    handler = AsyncMock()

    result = await gateway.dispatch("test_model", handler, schemas.TestModelRequest(model_ids=["a/x"]), requires_credential=True)

    handler.assert_not_awaited()
    payload = result.structured_content
    assert payload["error"] is True
    assert payload["kind"] == ErrorKind.MISSING_CREDENTIAL.value
    assert "OPEN_ROUTER_API_KEY" in payload["message"]
    assert any("openrouter.ai/keys" in step for step in payload["setup_steps"])
    assert json.loads(result.content[0].text) == payload


@pytest.mark.asyncio
async def test_credential_gate_still_counts_against_quota(settings_factory):
    gateway = _gateway(settings_factory(open_router_api_key=None), max_requests=1)
    request = schemas.TestModelRequest(model_ids=["a/x"])

    await gateway.dispatch("test_model", AsyncMock(), request, requires_credential=True)
    with pytest.raises(ToolError, match="Rate limit exceeded"):
        await gateway.dispatch("test_model", AsyncMock(), request, requires_credential=True)


@pytest.mark.asyncio
async def test_credential_gate_only_applies_when_requested(settings_factory):
    gateway = _gateway(settings_factory(open_router_api_key=None))
    handler = AsyncMock(return_value=_find_result())

    result = await gateway.dispatch("find_models", handler, schemas.FindModelsRequest())

    handler.assert_awaited_once()
    assert "error" not in result.structured_content


@pytest.mark.asyncio
async def test_credential_gate_is_logged(settings_factory, caplog):
    gateway = _gateway(settings_factory(open_router_api_key=None))

    with caplog.at_level(logging.WARNING, logger="index9_mcp.gateway"):
        await gateway.dispatch("test_model", AsyncMock(), schemas.TestModelRequest(model_ids=["a/x"]), requires_credential=True)

    assert any("test_model" in r.getMessage() and "missing_credential" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_rate_limit_rejection_is_logged_with_message(settings, caplog):
    gateway = _gateway(settings, max_requests=1)
    handler = AsyncMock(return_value=_find_result())

    await gateway.dispatch("find_models", handler, schemas.FindModelsRequest())
    with caplog.at_level(logging.WARNING, logger="index9_mcp.gateway"):
        with pytest.raises(ToolError):
            await gateway.dispatch("find_models", handler, schemas.FindModelsRequest())

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("find_models" in m and RATE_LIMIT_MESSAGE in m for m in warnings)


@pytest.mark.asyncio
async def test_success_skips_quota_lookup_when_debug_disabled(settings, caplog):
    gateway = _gateway(settings)
    gateway.rate_limiter.remaining = MagicMock(return_value=99)

    with caplog.at_level(logging.INFO, logger="index9_mcp.gateway"):
        await gateway.dispatch("find_models", AsyncMock(return_value=_find_result()), schemas.FindModelsRequest())
    gateway.rate_limiter.remaining.assert_not_called()

    with caplog.at_level(logging.DEBUG, logger="index9_mcp.gateway"):
        await gateway.dispatch("find_models", AsyncMock(return_value=_find_result()), schemas.FindModelsRequest())
    gateway.rate_limiter.remaining.assert_called_once_with("find_models")
    assert any("99 calls left" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_handler_failure_is_logged_and_reraised(settings, caplog):
    gateway = _gateway(settings)
    handler = AsyncMock(side_effect=NotFoundError("model not found"))

    with caplog.at_level(logging.ERROR, logger="index9_mcp.gateway"):
        with pytest.raises(ToolError, match="model not found") as exc_info:
            await gateway.dispatch("get_model", handler, schemas.GetModelRequest(model_id="nope/nothing"))

    assert isinstance(exc_info.value.__cause__, NotFoundError)
    assert any(r.levelno == logging.ERROR and "get_model" in r.getMessage() and "model not found" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [BackendTimeoutError("Request timeout"), ToolValidationError("At least 2 unique model IDs are required for comparison")],
)
async def test_failure_message_is_preserved(settings, error):
    gateway = _gateway(settings)

    with pytest.raises(ToolError) as exc_info:
        await gateway.dispatch("compare_models", AsyncMock(side_effect=error), schemas.CompareModelsRequest(model_ids=["a/x"]))

    assert str(exc_info.value) == error.message
    assert exc_info.value.__cause__ is error


@pytest.mark.asyncio
async def test_unexpected_exception_is_wrapped(settings, caplog):
    gateway = _gateway(settings)

    with caplog.at_level(logging.ERROR, logger="index9_mcp.gateway"):
        with pytest.raises(ToolError, match="boom"):
            await gateway.dispatch("find_models", AsyncMock(side_effect=RuntimeError("boom")), schemas.FindModelsRequest())

    assert any("find_models" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_aclose_closes_backend(settings):
    gateway = _gateway(settings)
    await gateway.aclose()
    gateway.client.aclose.assert_awaited_once()
