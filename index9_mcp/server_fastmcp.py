# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/server_fastmcp.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

FastMCP entry point for the index9 model catalog gateway.

Registers the catalog and live-testing tools and serves them over stdio (or
streamable HTTP). All tool calls are routed through ``ToolGateway``.
"""

# Standard
import argparse
from contextlib import asynccontextmanager
import logging
import sys
from typing import AsyncIterator, List, Optional

# Third-Party
from fastmcp import FastMCP
from fastmcp.tools.tool import ToolResult
from mcp.types import ToolAnnotations
from pydantic import Field, ValidationError

# First-Party
from index9_mcp import __version__
from index9_mcp.config import get_settings, Settings
from index9_mcp.gateway import ToolGateway
from index9_mcp.schemas import (
    Capability,
    CompareModelsOutput,
    CompareModelsRequest,
    CredentialGuidance,
    FindModelsOutput,
    FindModelsRequest,
    GetModelOutput,
    GetModelRequest,
    ListModelsOutput,
    ListModelsRequest,
    Modality,
    OutputModality,
    output_schema,
    RecommendModelOutput,
    RecommendModelRequest,
    SearchModelsOutput,
    SearchModelsRequest,
    SortOrder,
    TestModelOutput,
    TestModelRequest,
    TestType,
)
from index9_mcp.tools import catalog, testing

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Discover, compare and test 300+ AI models. Start with find_models (or search_models) to obtain model IDs "
    "in 'provider/model-name' form, use get_model or compare_models for full specifications, and test_model to "
    "validate real performance before a final choice."
)

READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)

LIST_MODELS_DESCRIPTION = """List AI models from the catalog with optional exact filters (provider, context window, modality, price, tool calling, JSON mode, tokenizer).

Returns a compact record per model: ID, name, provider, context window, max output tokens, input modalities, input/output pricing per million tokens, core capabilities and tokenizer.
Use find_models for ranked natural language search and get_model for full specifications."""

SEARCH_MODELS_DESCRIPTION = """Semantic search over the model catalog using a natural language description (e.g. 'fast cheap coding model').

Returns hits ordered by similarity with pricing, context window and core capabilities. Raise 'threshold' to keep only close matches."""

FIND_MODELS_DESCRIPTION = """Search and filter 300+ AI models using natural language queries or precise criteria. Returns ranked results with pricing, context windows, and capabilities.

You MUST call this function first to discover model IDs needed by 'get_model' and 'test_model' UNLESS the user explicitly provides a model ID in the format 'provider/model-name' (e.g., 'openai/gpt-4o').

Usage Strategy:
1. For exploratory searches, use natural language queries (e.g., 'vision model with 128k context')
2. For precise filtering, combine filters (provider, min_context, max_price_per_m, capabilities)
3. Sort by relevance (default), price, context size, or release date

Response Format:
- Each result includes: model ID, name, description, pricing (per million tokens), context window, capabilities, and relevance score
- Check 'total' to decide whether to paginate with 'offset'
- If no matches exist, suggest relaxing filters or trying a different query"""

GET_MODEL_DESCRIPTION = """Fetch complete specifications for a specific model by ID: per-token pricing (input/output), context window, max output tokens, capabilities, architecture, training cutoff, per-request limits and extended pricing.

Call this after 'find_models', or when the user provides a model ID in the format 'provider/model-name'.
Returns a not-found error for unknown IDs; use 'find_models' to discover valid IDs."""

COMPARE_MODELS_DESCRIPTION = """Compare 2-10 models side by side in one call: limits, pricing, capabilities and deployments.

Duplicate IDs are ignored. Unknown IDs are reported under 'not_found', with close matches under 'suggestions'."""

RECOMMEND_MODEL_DESCRIPTION = """Recommend models for a described use case, optionally constrained by price, context window and required capabilities.

Each recommendation carries a score, confidence, matched features and pricing."""

TEST_MODEL_DESCRIPTION = """Execute live API calls to 1-5 models simultaneously via OpenRouter. Compare real performance with custom prompts or preset test types. Returns actual output text, latency (ms), token usage, cost estimates (USD), and detected tool calls.

Requires OPEN_ROUTER_API_KEY in the MCP client configuration. Costs are billed to your OpenRouter account.

Test Types:
- 'quick': simple tasks, fastest and cheapest, use for initial screening
- 'code': function generation
- 'reasoning': logic puzzles
- 'instruction': following complex multi-step directions
- 'tool_calling': function calling capability
- Custom prompt: overrides the test type

Best Practices:
- Start with 'quick' to screen candidates cost-effectively
- Test 2-3 top candidates side by side with identical prompts
- Set max_tokens to the expected response length"""


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Send logs to stderr so stdout stays reserved for the MCP transport.

    Args:
        settings: Gateway settings; WARNING level is used when omitted.
    """
    level = logging.WARNING
    if settings is not None:
        level = getattr(logging, settings.log_level)
        if settings.debug_mcp:
            level = min(level, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stderr)], force=True)


def create_server(settings: Optional[Settings] = None, gateway: Optional[ToolGateway] = None) -> FastMCP:
    """Build the FastMCP server and register all tools.

    Args:
        settings: Gateway settings; the cached process settings when omitted.
        gateway: Dispatcher to route calls through; built from settings when omitted.

    Returns:
        FastMCP: The configured server.
    """
    settings = settings or get_settings()
    gateway = gateway or ToolGateway(settings)

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        logger.info("MCP server ready - awaiting requests")
        try:
            yield
        finally:
            await gateway.aclose()

    mcp = FastMCP("index9", version=__version__, instructions=SERVER_INSTRUCTIONS, lifespan=lifespan)

    @mcp.tool(
        name="list_models",
        title="List AI Models",
        description=LIST_MODELS_DESCRIPTION,
        output_schema=output_schema(ListModelsOutput),
        annotations=READ_ONLY,
    )
    async def list_models(
        provider: Optional[str] = Field(None, description="Exact provider name (e.g., 'openai', 'anthropic'). Case-sensitive."),
        min_context: Optional[int] = Field(None, ge=0, description="Minimum context window size in tokens"),
        modality: Optional[Modality] = Field(None, description="Required input modality"),
        max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum input price per million tokens in USD"),
        supports_tool_calling: Optional[bool] = Field(None, description="Only models that support tool calling"),
        supports_json_mode: Optional[bool] = Field(None, description="Only models that support JSON mode"),
        tokenizer: Optional[str] = Field(None, description="Tokenizer family (e.g., 'GPT', 'Claude', 'Llama3')"),
        output_modality: Optional[OutputModality] = Field(None, description="Required output modality"),
        limit: int = Field(20, ge=1, le=100, description="Maximum number of models to return (1-100)"),
    ) -> ToolResult:
        request = ListModelsRequest(
            provider=provider,
            min_context=min_context,
            modality=modality,
            max_price_per_m=max_price_per_m,
            supports_tool_calling=supports_tool_calling,
            supports_json_mode=supports_json_mode,
            tokenizer=tokenizer,
            output_modality=output_modality,
            limit=limit,
        )
        return await gateway.dispatch("list_models", catalog.list_models, request)

    @mcp.tool(
        name="search_models",
        title="Semantic Model Search",
        description=SEARCH_MODELS_DESCRIPTION,
        output_schema=output_schema(SearchModelsOutput),
        annotations=READ_ONLY,
    )
    async def search_models(
        query: str = Field(..., max_length=500, description="Natural language description of the desired model"),
        limit: int = Field(10, ge=1, le=50, description="Maximum number of results (1-50)"),
        threshold: Optional[float] = Field(None, ge=0, le=1, description="Minimum similarity score (0-1)"),
    ) -> ToolResult:
        request = SearchModelsRequest(query=query, limit=limit, threshold=threshold)
        return await gateway.dispatch("search_models", catalog.search_models, request)

    @mcp.tool(
        name="find_models",
        title="Find AI Models",
        description=FIND_MODELS_DESCRIPTION,
        output_schema=output_schema(FindModelsOutput),
        annotations=READ_ONLY,
    )
    async def find_models(
        query: Optional[str] = Field(
            None,
            max_length=500,
            description="Natural language search query describing desired model characteristics (e.g., 'fastest coding model under $1'). Optional - omit to use filters only.",
        ),
        provider: Optional[str] = Field(None, description="Filter by exact provider name (e.g., 'openai', 'anthropic', 'google', 'meta'). Case-sensitive."),
        min_context: Optional[int] = Field(None, ge=0, description="Minimum context window size in tokens (e.g., 8192, 32000, 128000)"),
        max_context: Optional[int] = Field(None, ge=0, description="Maximum context window size in tokens"),
        max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum price per million input tokens in USD (e.g., 0.5 for $0.50/M tokens)"),
        capabilities: Optional[List[Capability]] = Field(None, description="Required capabilities; the model must support ALL of them"),
        sort_by: SortOrder = Field("relevance", description="Sort order: relevance, price_asc, price_desc, date_desc or context_desc"),
        limit: int = Field(10, ge=1, le=100, description="Maximum number of results to return (1-100)"),
        offset: int = Field(0, ge=0, description="Number of results to skip for pagination (0-based)"),
    ) -> ToolResult:
        request = FindModelsRequest(
            query=query,
            provider=provider,
            min_context=min_context,
            max_context=max_context,
            max_price_per_m=max_price_per_m,
            capabilities=capabilities,
            sort_by=sort_by,
            limit=limit,
            offset=offset,
        )
        return await gateway.dispatch("find_models", catalog.find_models, request)

    @mcp.tool(
        name="get_model",
        title="Get Model Details",
        description=GET_MODEL_DESCRIPTION,
        output_schema=output_schema(GetModelOutput),
        annotations=READ_ONLY,
    )
    async def get_model(
        model_id: str = Field(..., min_length=1, description="Exact model identifier in format 'provider/model-name' (e.g., 'openai/gpt-4o'). Case-sensitive."),
    ) -> ToolResult:
        return await gateway.dispatch("get_model", catalog.get_model, GetModelRequest(model_id=model_id))

    @mcp.tool(
        name="compare_models",
        title="Compare AI Models",
        description=COMPARE_MODELS_DESCRIPTION,
        output_schema=output_schema(CompareModelsOutput),
        annotations=READ_ONLY,
    )
    async def compare_models(
        model_ids: List[str] = Field(..., min_length=1, description="2-10 model IDs in format 'provider/model-name'; duplicates are ignored"),
    ) -> ToolResult:
        return await gateway.dispatch("compare_models", catalog.compare_models, CompareModelsRequest(model_ids=model_ids))

    @mcp.tool(
        name="recommend_model",
        title="Recommend AI Models",
        description=RECOMMEND_MODEL_DESCRIPTION,
        output_schema=output_schema(RecommendModelOutput),
        annotations=READ_ONLY,
    )
    async def recommend_model(
        use_case: str = Field(..., min_length=1, max_length=1000, description="What the model will be used for (e.g., 'customer support chatbot with tool use')"),
        max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum price per million input tokens in USD"),
        min_context: Optional[int] = Field(None, ge=0, description="Minimum context window size in tokens"),
        required_capabilities: Optional[List[Capability]] = Field(None, description="Capabilities the model must support"),
        limit: int = Field(5, ge=1, le=20, description="Maximum number of recommendations (1-20)"),
    ) -> ToolResult:
        request = RecommendModelRequest(
            use_case=use_case,
            max_price_per_m=max_price_per_m,
            min_context=min_context,
            required_capabilities=required_capabilities,
            limit=limit,
        )
        return await gateway.dispatch("recommend_model", catalog.recommend_model, request)

    @mcp.tool(
        name="test_model",
        title="Test AI Models",
        description=TEST_MODEL_DESCRIPTION,
        output_schema=output_schema(TestModelOutput, CredentialGuidance),
        annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=True),
    )
    async def test_model(
        model_ids: List[str] = Field(..., min_length=1, max_length=5, description="Array of 1-5 model IDs to test simultaneously in format 'provider/model-name'"),
        test_type: TestType = Field("quick", description="Preset test scenario, ignored if a custom 'prompt' is provided"),
        prompt: Optional[str] = Field(None, description="Custom user message sent to all models; overrides 'test_type'"),
        max_tokens: int = Field(1000, ge=1, le=8192, description="Maximum tokens for each model response (1-8192)"),
        temperature: Optional[float] = Field(None, ge=0, le=2, description="Sampling temperature (0-2)"),
        system_prompt: Optional[str] = Field(None, max_length=4000, description="System message to set model behavior"),
    ) -> ToolResult:
        request = TestModelRequest(
            model_ids=model_ids,
            test_type=test_type,
            prompt=prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            system_prompt=system_prompt,
        )
        return await gateway.dispatch("test_model", testing.test_model, request, requires_credential=True)

    return mcp


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the server until it is interrupted.

    Args:
        argv: Command line arguments; ``sys.argv`` when omitted.
    """
    parser = argparse.ArgumentParser(description="index9 FastMCP Server")
    parser.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8011)
    args = parser.parse_args(argv)

    configure_logging()
    try:
        settings = get_settings()
    except ValidationError as exc:
        logger.error(f"Invalid configuration: {exc}")
        sys.exit(1)
    configure_logging(settings)

    try:
        server = create_server(settings)
        if args.transport == "http":
            logger.info(f"Starting index9 MCP Server on HTTP {args.host}:{args.port}")
            server.run(transport="http", host=args.host, port=args.port)
        else:
            logger.info("Starting index9 MCP Server on stdio")
            server.run()
    except KeyboardInterrupt:
        logger.info("Shutting down MCP server")
    except Exception as exc:
        logger.exception(f"MCP server failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
