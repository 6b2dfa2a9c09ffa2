# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/client.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

HTTP client for the index9 catalog API.

Two ``httpx.AsyncClient`` instances share one base URL and differ only in
timeout: a short one for catalog reads and a long one for live model tests.
Every operation performs exactly one request (no retry, no caching) and either
returns a parsed result model or raises a normalized ``GatewayError``. The
configured timeout bounds the whole request, body included, not just each
network phase.
"""

# Standard
import asyncio
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

# Third-Party
import httpx
from pydantic import BaseModel, ValidationError

# First-Party
from index9_mcp import __version__
from index9_mcp.config import Settings
from index9_mcp.errors import BackendTimeoutError, GatewayError, NotFoundError, RemoteError, UnknownBackendError, UnreachableError
from index9_mcp.schemas import (
    CatalogListing,
    CompareModelsOutput,
    FindModelsOutput,
    GetModelOutput,
    RecommendModelOutput,
    SearchModelsOutput,
    TestModelOutput,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

NOT_FOUND_MESSAGE = "Resource not found"
TIMEOUT_MESSAGE = "Request timeout"
UNREACHABLE_MESSAGE = "Unable to connect to API server"


def _body_message(body: Any) -> Optional[str]:
    """Extract the ``message`` field of an error body.

    Args:
        body: Decoded response body, if any.

    Returns:
        Optional[str]: The message, or None when absent or empty.

    Examples:
        >>> _body_message({"message": "model not found"})
        'model not found'
        >>> _body_message({"message": ""}) is None
        True
        >>> _body_message("plain text") is None
        True
    """
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def classify_failure(status: Optional[int], body: Any = None, error: Optional[BaseException] = None) -> GatewayError:
    """Map the outcome of a failed call to a normalized error.

    Checks, in order: 404, error body with a message, timeout, connection
    failure, anything else.

    Args:
        status: HTTP status code, or None when no response arrived.
        body: Decoded response body, if any.
        error: Transport exception, if any.

    Returns:
        GatewayError: The normalized failure.

    Examples:
        >>> classify_failure(404, {"message": "model not found"}).message
        'model not found'
        >>> classify_failure(404, None).message
        'Resource not found'
        >>> classify_failure(500, {"message": "boom"}).kind.value
        'remote_error'
        >>> classify_failure(None, None, httpx.ReadTimeout("slow")).kind.value
        'timeout'
        >>> classify_failure(None, None, httpx.ConnectError("refused")).kind.value
        'unreachable'
        >>> classify_failure(502, "<html>bad gateway</html>").message
        'Request failed with status code 502'
    """
    message = _body_message(body)
    if status == 404:
        return NotFoundError(message or NOT_FOUND_MESSAGE)
    if status is not None and message:
        return RemoteError(message)
    if isinstance(error, httpx.TimeoutException):
        return BackendTimeoutError(TIMEOUT_MESSAGE)
    if isinstance(error, httpx.ConnectError):
        return UnreachableError(UNREACHABLE_MESSAGE)
    if status is not None:
        return UnknownBackendError(f"Request failed with status code {status}")
    if error is not None:
        return UnknownBackendError(str(error) or type(error).__name__)
    return UnknownBackendError("Unknown error")


def _decode(response: httpx.Response) -> Any:
    """Decode a JSON body, tolerating non-JSON error pages.

    Args:
        response: The HTTP response.

    Returns:
        Any: Parsed JSON, or the raw text when the body is not JSON.
    """
    try:
        return response.json()
    except ValueError:
        return response.text


def _compact(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` values.

    Args:
        params: Request parameters.

    Returns:
        Dict[str, Any]: Parameters with a value.

    Examples:
        >>> _compact({"a": 1, "b": None})
        {'a': 1}
    """
    return {k: v for k, v in params.items() if v is not None}


class BackendClient:
    """Async client for the index9 catalog and test API."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the client.

        Args:
            settings: Gateway settings providing base URL and timeouts.
            transport: Optional httpx transport, used by tests.
        """
        self.settings = settings
        self._transport = transport
        self._read_client: Optional[httpx.AsyncClient] = None
        self._test_client: Optional[httpx.AsyncClient] = None

    def _build(self, timeout_seconds: float) -> httpx.AsyncClient:
        """Create an httpx client with the given timeout.

        Args:
            timeout_seconds: Total timeout for each request phase.

        Returns:
            httpx.AsyncClient: The configured client.
        """
        return httpx.AsyncClient(
            base_url=self.settings.index9_api_url,
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json", "User-Agent": f"index9-mcp/{__version__}"},
            transport=self._transport,
        )

    @property
    def read_client(self) -> httpx.AsyncClient:
        """Client used for catalog reads.

        Returns:
            httpx.AsyncClient: The short-timeout client.
        """
        if self._read_client is None:
            self._read_client = self._build(self.settings.api_timeout_seconds)
        return self._read_client

    @property
    def test_client(self) -> httpx.AsyncClient:
        """Client used for live model tests.

        Returns:
            httpx.AsyncClient: The long-timeout client.
        """
        if self._test_client is None:
            self._test_client = self._build(self.settings.test_timeout_seconds)
        return self._test_client

    async def aclose(self) -> None:
        """Close both underlying clients."""
        for client in (self._read_client, self._test_client):
            if client is not None:
                await client.aclose()
        self._read_client = None
        self._test_client = None

    async def _request(
        self,
        method: str,
        path: str,
        result_type: Type[ModelT],
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        long_running: bool = False,
    ) -> ModelT:
        """Issue one request and parse the response.

        Args:
            method: HTTP method.
            path: Path relative to the base URL.
            result_type: Model the response body is validated into.
            params: Query parameters.
            json: JSON body.
            long_running: Use the long-timeout client.

        Returns:
            ModelT: The parsed result.

        Raises:
            GatewayError: Normalized failure for any transport, HTTP or payload error.
        """
        client = self.test_client if long_running else self.read_client
        deadline = self.settings.test_timeout_seconds if long_running else self.settings.api_timeout_seconds
        logger.debug(f"{method} {path}")
        try:
            response = await asyncio.wait_for(
                client.request(method, path, params=_compact(params) if params else None, json=_compact(json) if json is not None else None),
                timeout=deadline,
            )
        except asyncio.TimeoutError as exc:
            raise BackendTimeoutError(TIMEOUT_MESSAGE) from exc
        except httpx.HTTPError as exc:
            raise classify_failure(None, None, exc) from exc

        if response.is_error:
            raise classify_failure(response.status_code, _decode(response))

        try:
            data = response.json()
        except ValueError as exc:
            raise UnknownBackendError("API server returned a non-JSON response") from exc
        try:
            return result_type.model_validate(data)
        except ValidationError as exc:
            logger.debug(f"Unexpected payload from {path}: {exc}")
            raise UnknownBackendError(f"Unexpected response shape from {path}") from exc

    async def list_models(self, params: Dict[str, Any]) -> CatalogListing:
        """List catalog entries matching the given filters.

        Args:
            params: Query filters.

        Returns:
            CatalogListing: Matching catalog entries.
        """
        return await self._request("GET", "/models", CatalogListing, params=params)

    async def search_models(self, query: str, limit: Optional[int] = None, threshold: Optional[float] = None) -> SearchModelsOutput:
        """Semantic search over the catalog.

        Args:
            query: Natural language query.
            limit: Maximum number of results.
            threshold: Minimum similarity score.

        Returns:
            SearchModelsOutput: Ranked hits.
        """
        return await self._request("POST", "/models/search", SearchModelsOutput, json={"query": query, "limit": limit, "threshold": threshold})

    async def find_models(self, params: Dict[str, Any]) -> FindModelsOutput:
        """Unified search and filter.

        Args:
            params: Query and filters.

        Returns:
            FindModelsOutput: Ranked results and total count.
        """
        return await self._request("POST", "/models/find", FindModelsOutput, json=params)

    async def get_model(self, model_id: str) -> GetModelOutput:
        """Fetch one model by identifier.

        Args:
            model_id: Identifier in ``provider/model-name`` form.

        Returns:
            GetModelOutput: Full model specification.
        """
        return await self._request("GET", f"/models/{quote(model_id, safe='')}", GetModelOutput)

    async def compare_models(self, model_ids: List[str]) -> CompareModelsOutput:
        """Compare several models in one call.

        Args:
            model_ids: De-duplicated identifiers.

        Returns:
            CompareModelsOutput: Side-by-side records.
        """
        return await self._request("POST", "/models/compare", CompareModelsOutput, json={"model_ids": model_ids})

    async def recommend_model(
        self,
        use_case: str,
        max_price_per_m: Optional[float] = None,
        min_context: Optional[int] = None,
        required_capabilities: Optional[List[str]] = None,
        limit: Optional[int] = None,
    ) -> RecommendModelOutput:
        """Recommend models for a use case.

        Args:
            use_case: Free-text use case.
            max_price_per_m: Maximum input price per million tokens.
            min_context: Minimum context window.
            required_capabilities: Capabilities the model must support.
            limit: Maximum number of recommendations.

        Returns:
            RecommendModelOutput: Ranked recommendations.
        """
        body = {
            "use_case": use_case,
            "max_price_per_m": max_price_per_m,
            "min_context": min_context,
            "required_capabilities": required_capabilities,
            "limit": limit,
        }
        return await self._request("POST", "/models/recommend", RecommendModelOutput, json=body)

    async def test_model(
        self,
        model_ids: List[str],
        test_type: Optional[str] = None,
        open_router_api_key: Optional[str] = None,
        prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system_prompt: Optional[str] = None,
    ) -> TestModelOutput:
        """Run a live test against 1-5 models via the long-timeout client.

        Args:
            model_ids: Identifiers to test.
            test_type: Preset scenario.
            open_router_api_key: Caller's OpenRouter key.
            prompt: Custom prompt overriding the preset.
            max_tokens: Response token ceiling.
            temperature: Sampling temperature.
            system_prompt: System message.

        Returns:
            TestModelOutput: Per-model results.
        """
        body = {
            "model_ids": model_ids,
            "test_type": test_type,
            "custom_prompt": prompt,
            "open_router_api_key": open_router_api_key or None,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system_prompt": system_prompt,
        }
        return await self._request("POST", "/test", TestModelOutput, json=body, long_running=True)
