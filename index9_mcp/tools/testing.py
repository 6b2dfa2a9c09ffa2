# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/tools/testing.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Live model testing handler.
Runs against third-party model APIs through the backend, so it uses the
long-timeout client and forwards the configured OpenRouter key.
"""

# Future
from __future__ import annotations

# First-Party
from index9_mcp.client import BackendClient
from index9_mcp.errors import ToolValidationError
from index9_mcp.schemas import TestModelOutput, TestModelRequest
from index9_mcp.tools.catalog import unique_model_ids

OPEN_ROUTER_KEYS_URL = "https://openrouter.ai/keys"

SETUP_STEPS = [
    f"Get your API key from {OPEN_ROUTER_KEYS_URL}",
    "Add OPEN_ROUTER_API_KEY to your MCP client configuration (e.g., in Cursor settings or Claude Desktop config)",
    "Restart your MCP client",
]

MISSING_KEY_MESSAGE = (
    "Error: OPEN_ROUTER_API_KEY is required to use test_model. "
    "This tool runs live tests against AI models via OpenRouter API.\n\n"
    "To use this tool:\n" + "\n".join(f"{i}. {step}" for i, step in enumerate(SETUP_STEPS, start=1)) + "\n\n"
    "Charges are billed directly to your OpenRouter account."
)


async def test_model(client: BackendClient, request: TestModelRequest) -> TestModelOutput:
    """Run the requested test against every model in one backend call.

    Args:
        client: Backend client; its settings carry the OpenRouter key, which the
            gateway checks before this handler runs.
        request: Models and test parameters.

    Returns:
        TestModelOutput: Per-model output, latency, token usage and cost.

    Raises:
        ToolValidationError: If no usable model identifier remains.
    """
    key = client.settings.open_router_api_key
    model_ids = unique_model_ids(request.model_ids)
    if not model_ids:
        raise ToolValidationError("At least one model ID is required")
    prompt = request.prompt.strip() if request.prompt else None
    return await client.test_model(
        model_ids,
        test_type=request.test_type,
        open_router_api_key=key.get_secret_value() if key is not None else None,
        prompt=prompt or None,
        max_tokens=request.max_tokens,
        temperature=request.temperature,
        system_prompt=request.system_prompt,
    )
