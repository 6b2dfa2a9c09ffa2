# -*- coding: utf-8 -*-
"""Location: ./tests/unit/index9_mcp/test_tools.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Tests for the catalog and testing tool handlers.
"""

# Standard
from unittest.mock import AsyncMock, MagicMock

# Third-Party
import pytest
from pytest_httpx import HTTPXMock

# First-Party
from index9_mcp import schemas
from index9_mcp.errors import ToolValidationError
from index9_mcp.tools import catalog, testing


def _mock_client(settings=None):
    client = MagicMock()
    client.settings = settings
    for name in ("list_models", "search_models", "find_models", "get_model", "compare_models", "recommend_model", "test_model"):
        setattr(client, name, AsyncMock())
    return client


class TestCompareModels:
    @pytest.mark.asyncio
    async def test_duplicates_are_removed_before_the_call(self):
        client = _mock_client()
        client.compare_models.return_value = schemas.CompareModelsOutput(models=[])

        await catalog.compare_models(client, schemas.CompareModelsRequest(model_ids=["a/x", "a/x", "b/y"]))

        client.compare_models.assert_awaited_once_with(["a/x", "b/y"])

    @pytest.mark.asyncio
    async def test_single_identifier_is_rejected_without_network(self, backend, httpx_mock: HTTPXMock):
        with pytest.raises(ToolValidationError, match="At least 2 unique model IDs"):
            await catalog.compare_models(backend, schemas.CompareModelsRequest(model_ids=["a/x"]))
        assert httpx_mock.get_requests() == []

    @pytest.mark.asyncio
    async def test_duplicates_only_is_rejected(self):
        client = _mock_client()
        with pytest.raises(ToolValidationError):
            await catalog.compare_models(client, schemas.CompareModelsRequest(model_ids=["a/x", "a/x", " a/x "]))
        client.compare_models.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_more_than_ten_unique_is_rejected(self):
        client = _mock_client()
        with pytest.raises(ToolValidationError, match="At most 10"):
            await catalog.compare_models(client, schemas.CompareModelsRequest(model_ids=[f"p/m{i}" for i in range(11)]))
        client.compare_models.assert_not_awaited()

    def test_unique_model_ids_keeps_first_seen_order(self):
        assert catalog.unique_model_ids(["b/y", "a/x", "b/y", "c/z"]) == ["b/y", "a/x", "c/z"]


class TestSearchModels:
    @pytest.mark.asyncio
    async def test_blank_query_is_rejected(self):
        client = _mock_client()
        with pytest.raises(ToolValidationError, match="must not be empty"):
            await catalog.search_models(client, schemas.SearchModelsRequest(query="   "))
        client.search_models.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_query_is_trimmed(self):
        client = _mock_client()
        client.search_models.return_value = schemas.SearchModelsOutput(results=[])

        result = await catalog.search_models(client, schemas.SearchModelsRequest(query="  vision model ", limit=5, threshold=0.4))

        client.search_models.assert_awaited_once_with("vision model", 5, 0.4)
        assert result.results == []


class TestListModels:
    @pytest.mark.asyncio
    async def test_projects_catalog_fields(self, backend, httpx_mock: HTTPXMock, catalog_entry):
        httpx_mock.add_response(json={"models": [catalog_entry(), catalog_entry("anthropic/claude-sonnet-4", name="Claude Sonnet 4")]})

        result = await catalog.list_models(backend, schemas.ListModelsRequest(provider="openai"))

        first = result.model_dump()["models"][0]
        assert set(first) == {"id", "name", "provider", "context_window", "max_output_tokens", "input_modalities", "pricing", "capabilities", "architecture"}
        assert first["pricing"] == {"input": 2.5, "output": 10.0}
        assert first["architecture"] == {"tokenizer": "GPT"}
        assert "description" not in first
        assert result.models[1].name == "Claude Sonnet 4"


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_find_models_forwards_filters(self):
        client = _mock_client()
        client.find_models.return_value = schemas.FindModelsOutput(results=[], total=0)

        await catalog.find_models(client, schemas.FindModelsRequest(query="coding", capabilities=["tool_calling"], limit=5))

        client.find_models.assert_awaited_once_with({"query": "coding", "capabilities": ["tool_calling"], "sort_by": "relevance", "limit": 5, "offset": 0})

    @pytest.mark.asyncio
    async def test_get_model_strips_identifier(self):
        client = _mock_client()
        await catalog.get_model(client, schemas.GetModelRequest(model_id=" openai/gpt-4o "))
        client.get_model.assert_awaited_once_with("openai/gpt-4o")

    @pytest.mark.asyncio
    async def test_recommend_model_forwards_constraints(self):
        client = _mock_client()
        request = schemas.RecommendModelRequest(use_case="summarize legal contracts", min_context=100000, required_capabilities=["json_mode"])

        await catalog.recommend_model(client, request)

        client.recommend_model.assert_awaited_once_with(
            "summarize legal contracts",
            max_price_per_m=None,
            min_context=100000,
            required_capabilities=["json_mode"],
            limit=5,
        )


class TestTestModel:
    @pytest.mark.asyncio
    async def test_forwards_key_and_parameters(self, settings):
        client = _mock_client(settings)

        await testing.test_model(client, schemas.TestModelRequest(model_ids=["a/x", "a/x", "b/y"], test_type="code", max_tokens=500))

        client.test_model.assert_awaited_once_with(
            ["a/x", "b/y"],
            test_type="code",
            open_router_api_key="sk-or-test",
            prompt=None,
            max_tokens=500,
            temperature=None,
            system_prompt=None,
        )

    @pytest.mark.asyncio
    async def test_handler_does_not_gate_on_missing_key(self, settings_factory):
        client = _mock_client(settings_factory(open_router_api_key=None))

        await testing.test_model(client, schemas.TestModelRequest(model_ids=["a/x"]))

        assert client.test_model.await_args.kwargs["open_router_api_key"] is None
