# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/gateway.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Tool gateway dispatcher.

Every tool call goes through ``ToolGateway.dispatch``:

1. admission check against the per-tool rate limiter,
2. credential gate for tools that need an OpenRouter key,
3. handler invocation (one backend call),
4. envelope construction: a JSON text block plus the same payload as
   structured content.

Failures are logged with the tool name and re-raised as ``ToolError`` so the
MCP layer reports them as tool errors. A missing credential is the exception:
it comes back as a normal result whose payload is flagged as an error and
explains how to configure the key.
"""

# Standard
import json
import logging
from typing import Awaitable, Callable, Optional, TypeVar

# Third-Party
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import BaseModel

# First-Party
from index9_mcp.client import BackendClient
from index9_mcp.config import Settings
from index9_mcp.errors import GatewayError, MissingCredentialError, RateLimitedError
from index9_mcp.rate_limiter import RateLimiter
from index9_mcp.schemas import CredentialGuidance
from index9_mcp.tools.testing import MISSING_KEY_MESSAGE, SETUP_STEPS

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
Handler = Callable[[BackendClient, RequestT], Awaitable[BaseModel]]

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


def envelope(result: BaseModel) -> ToolResult:
    """Wrap a result model in the dual text/structured response.

    Both views are produced from one serialized payload so they cannot diverge.

    Args:
        result: Handler output.

    Returns:
        ToolResult: Text block holding the JSON payload plus the payload as structured content.
    """
    payload = result.model_dump(mode="json")
    return ToolResult(content=[TextContent(type="text", text=json.dumps(payload, indent=2))], structured_content=payload)


def credential_guidance(error: MissingCredentialError) -> ToolResult:
    """Build the soft-failure response for a missing OpenRouter key.

    Args:
        error: The credential failure being reported.

    Returns:
        ToolResult: Error-flagged payload with setup instructions.
    """
    return envelope(CredentialGuidance(kind=error.kind.value, message=error.message, setup_steps=SETUP_STEPS))


class ToolGateway:
    """Applies quota, credential gate, error policy and envelope to tool handlers."""

    def __init__(self, settings: Settings, rate_limiter: Optional[RateLimiter] = None, client: Optional[BackendClient] = None):
        """Initialize the gateway.

        Args:
            settings: Gateway settings.
            rate_limiter: Shared admission counter; built from settings when omitted.
            client: Backend client; built from settings when omitted.
        """
        self.settings = settings
        self.rate_limiter = rate_limiter or RateLimiter(settings.rate_limit_window_ms, settings.rate_limit_max_requests)
        self.client = client or BackendClient(settings)

    async def dispatch(self, tool_name: str, handler: Handler, request: BaseModel, *, requires_credential: bool = False) -> ToolResult:
        """Run one tool call through the gateway.

        Args:
            tool_name: Registered tool name; also the rate-limit key.
            handler: Coroutine mapping (client, request) to a result model.
            request: Validated tool input.
            requires_credential: Whether the tool needs an OpenRouter key.

        Returns:
            ToolResult: The response envelope.

        Raises:
            ToolError: On rate limiting or any handler failure.
        """
        if not self.rate_limiter.admit(tool_name):
            logger.warning(f"Tool {tool_name} rejected [{RateLimitedError.kind.value}]: {RATE_LIMIT_MESSAGE}")
            raise ToolError(RATE_LIMIT_MESSAGE) from RateLimitedError(RATE_LIMIT_MESSAGE)

        if requires_credential and not self.settings.has_open_router_key:
            missing = MissingCredentialError(MISSING_KEY_MESSAGE)
            logger.warning(f"Tool {tool_name} not run [{missing.kind.value}]: OPEN_ROUTER_API_KEY is not set")
            return credential_guidance(missing)

        try:
            result = await handler(self.client, request)
        except GatewayError as exc:
            logger.error(f"Tool {tool_name} execution failed [{exc.kind.value}]: {exc.message}")
            raise ToolError(exc.message) from exc
        except Exception as exc:
            logger.exception(f"Tool {tool_name} execution failed: {exc}")
            raise ToolError(str(exc) or type(exc).__name__) from exc

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Tool {tool_name} succeeded ({self.rate_limiter.remaining(tool_name)} calls left in window)")
        return envelope(result)

    async def aclose(self) -> None:
        """Release backend connections."""
        await self.client.aclose()
