# -*- coding: utf-8 -*-
"""Location: ./tests/unit/index9_mcp/conftest.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Shared fixtures for the index9 MCP gateway tests.
"""

# Third-Party
import pytest
import pytest_asyncio

# First-Party
from index9_mcp.client import BackendClient
from index9_mcp.config import get_settings, Settings

API_URL = "https://index9.test/api"


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {
        "index9_api_url": API_URL,
        "index9_api_timeout": 30000,
        "test_model_timeout": 120000,
        "rate_limit_window_ms": 60000,
        "rate_limit_max_requests": 100,
        "open_router_api_key": "sk-or-test",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def backend(settings):
    client = BackendClient(settings)
    yield client
    await client.aclose()


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def catalog_entry():
    """Factory for a normalized catalog record as the backend lists it."""

    def _make(model_id: str = "openai/gpt-4o", **overrides) -> dict:
        entry = {
            "id": model_id,
            "name": "GPT-4o",
            "provider": model_id.split("/")[0],
            "context_window": 128000,
            "max_output_tokens": 16384,
            "input_modalities": ["text", "image"],
            "output_modalities": ["text"],
            "pricing": {"input": 2.5, "output": 10.0},
            "capabilities": {"vision": True, "audio": False, "tool_calling": True, "json_mode": True},
            "architecture": {"tokenizer": "GPT", "instruct_type": None},
            "description": "Flagship multimodal model",
            "supported_parameters": ["tools", "temperature"],
        }
        entry.update(overrides)
        return entry

    return _make


@pytest.fixture
def model_detail():
    """Full get_model payload for openai/gpt-4o."""
    return {
        "id": "openai/gpt-4o",
        "name": "GPT-4o",
        "provider": "openai",
        "description": "Flagship multimodal model",
        "family": "gpt-4o",
        "version": "2024-11-20",
        "release_date": "2024-05-13",
        "limits": {"context_window": 128000, "max_output_tokens": 16384},
        "pricing": {"input": 2.5, "output": 10.0},
        "extended_pricing": None,
        "capabilities": {
            "vision": True,
            "audio": False,
            "tool_calling": True,
            "json_mode": True,
            "video": False,
            "function_calling": True,
            "custom": [],
        },
        "supported_parameters": ["tools"],
        "is_moderated": True,
        "input_modalities": ["text", "image"],
        "output_modalities": ["text"],
        "architecture": {"tokenizer": "GPT", "instruct_type": None},
        "per_request_limits": None,
        "deployments": [{"platform": "openrouter", "model_id": "openai/gpt-4o", "is_available": True, "pricing": {"input": 2.5, "output": 10.0}}],
    }


@pytest.fixture
def run_payload():
    """Factory for a live test response."""

    def _make(*model_ids: str) -> dict:
        return {
            "test_type": "quick",
            "prompt": "What is 2 + 2?",
            "results": [
                {
                    "model_id": model_id,
                    "model_name": model_id.split("/")[1],
                    "latency_ms": 812,
                    "output": "4",
                    "tokens_used": {"prompt_tokens": 12, "completion_tokens": 1, "total_tokens": 13},
                    "cost_estimate": {"input_cost": 0.00003, "output_cost": 0.00001, "total_cost": 0.00004},
                    "tool_calls_detected": False,
                    "error": None,
                }
                for model_id in (model_ids or ("openai/gpt-4o",))
            ],
        }

    return _make
