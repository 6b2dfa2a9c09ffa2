# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/schemas.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Pydantic models used by the index9 MCP gateway.

Request models hold validated tool input and are frozen once built. Output
models give every tool its own result type; backend fields the models do not
name are preserved and forwarded unchanged.
"""

# Future
from __future__ import annotations

# Standard
from typing import Any, Dict, List, Literal, Optional

# Third-Party
from pydantic import BaseModel, ConfigDict, Field

Capability = Literal["vision", "audio", "tool_calling", "json_mode", "video"]
SortOrder = Literal["relevance", "price_asc", "price_desc", "date_desc", "context_desc"]
TestType = Literal["quick", "code", "reasoning", "instruction", "tool_calling"]
Modality = Literal["text", "vision", "audio", "video", "image"]
OutputModality = Literal["text", "image", "embeddings"]


class RequestModel(BaseModel):
    """Base for validated tool input."""

    model_config = ConfigDict(extra="forbid", frozen=True, protected_namespaces=())

    def to_params(self) -> Dict[str, Any]:
        """Serialize for the backend, dropping unset optional values.

        Returns:
            Dict[str, Any]: JSON-ready parameters without ``None`` values.
        """
        return self.model_dump(mode="json", exclude_none=True)


class BackendModel(BaseModel):
    """Base for backend payloads; unknown fields are kept."""

    model_config = ConfigDict(extra="allow", protected_namespaces=())


class ProjectionModel(BaseModel):
    """Base for payloads that are deliberately projected to named fields."""

    model_config = ConfigDict(extra="ignore", protected_namespaces=())


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ListModelsRequest(RequestModel):
    """Filters for the catalog listing."""

    provider: Optional[str] = Field(None, description="Exact provider name, e.g. 'openai'")
    min_context: Optional[int] = Field(None, ge=0, description="Minimum context window in tokens")
    modality: Optional[Modality] = Field(None, description="Required input modality")
    max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum input price per million tokens (USD)")
    supports_tool_calling: Optional[bool] = Field(None, description="Only models with tool calling")
    supports_json_mode: Optional[bool] = Field(None, description="Only models with JSON mode")
    tokenizer: Optional[str] = Field(None, description="Tokenizer family, e.g. 'GPT' or 'Claude'")
    output_modality: Optional[OutputModality] = Field(None, description="Required output modality")
    limit: int = Field(20, ge=1, le=100, description="Maximum number of models to return")


class SearchModelsRequest(RequestModel):
    """Semantic search input."""

    query: str = Field(..., max_length=500, description="Natural language description of the desired model")
    limit: int = Field(10, ge=1, le=50, description="Maximum number of results")
    threshold: Optional[float] = Field(None, ge=0, le=1, description="Minimum similarity score")


class FindModelsRequest(RequestModel):
    """Unified search and filter input."""

    query: Optional[str] = Field(None, max_length=500, description="Natural language search query")
    provider: Optional[str] = Field(None, description="Exact provider name")
    min_context: Optional[int] = Field(None, ge=0, description="Minimum context window in tokens")
    max_context: Optional[int] = Field(None, ge=0, description="Maximum context window in tokens")
    max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum input price per million tokens (USD)")
    capabilities: Optional[List[Capability]] = Field(None, description="Capabilities the model must all support")
    sort_by: SortOrder = Field("relevance", description="Sort order")
    limit: int = Field(10, ge=1, le=100, description="Maximum number of results")
    offset: int = Field(0, ge=0, description="Results to skip for pagination")


class GetModelRequest(RequestModel):
    """Single model lookup."""

    model_id: str = Field(..., min_length=1, description="Model identifier in 'provider/model-name' form")


class CompareModelsRequest(RequestModel):
    """Side-by-side comparison input, before de-duplication."""

    model_ids: List[str] = Field(..., min_length=1, description="Model identifiers to compare")


class RecommendModelRequest(RequestModel):
    """Use-case driven recommendation input."""

    use_case: str = Field(..., min_length=1, max_length=1000, description="What the model will be used for")
    max_price_per_m: Optional[float] = Field(None, ge=0, description="Maximum input price per million tokens (USD)")
    min_context: Optional[int] = Field(None, ge=0, description="Minimum context window in tokens")
    required_capabilities: Optional[List[Capability]] = Field(None, description="Capabilities the model must support")
    limit: int = Field(5, ge=1, le=20, description="Maximum number of recommendations")


class TestModelRequest(RequestModel):
    """Live test input."""

    model_ids: List[str] = Field(..., min_length=1, max_length=5, description="1-5 model identifiers to test")
    test_type: TestType = Field("quick", description="Preset test scenario, ignored when a prompt is given")
    prompt: Optional[str] = Field(None, description="Custom user message sent to every model")
    max_tokens: int = Field(1000, ge=1, le=8192, description="Maximum tokens per model response")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="Sampling temperature")
    system_prompt: Optional[str] = Field(None, max_length=4000, description="System message")


# ---------------------------------------------------------------------------
# Shared result fragments
# ---------------------------------------------------------------------------


class ModelPricing(BackendModel):
    """Per-million-token prices in USD."""

    input: Optional[float] = None
    output: Optional[float] = None


class ExtendedPricing(BackendModel):
    """Multimodal and cache pricing."""

    image: Optional[float] = None
    audio: Optional[float] = None
    web_search: Optional[float] = None
    cache_read: Optional[float] = None
    cache_write: Optional[float] = None
    discount: Optional[float] = None
    internal_reasoning: Optional[float] = None


class ModelArchitecture(BackendModel):
    """Tokenizer and instruction format."""

    tokenizer: Optional[str] = None
    instruct_type: Optional[str] = None


class Deployment(BackendModel):
    """A platform serving the model."""

    platform: str
    model_id: str
    is_available: bool = True
    pricing: ModelPricing = Field(default_factory=ModelPricing)


# ---------------------------------------------------------------------------
# list_models
# ---------------------------------------------------------------------------


class CatalogCapabilities(BackendModel):
    """Capability flags of a normalized catalog entry."""

    vision: Optional[bool] = None
    audio: Optional[bool] = None
    tool_calling: Optional[bool] = None
    json_mode: Optional[bool] = None


class CatalogModel(BackendModel):
    """Normalized catalog entry as the backend lists it."""

    id: str
    name: str
    provider: str
    context_window: Optional[int] = None
    max_output_tokens: Optional[int] = None
    input_modalities: List[str] = Field(default_factory=list)
    output_modalities: List[str] = Field(default_factory=list)
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    capabilities: CatalogCapabilities = Field(default_factory=CatalogCapabilities)
    architecture: ModelArchitecture = Field(default_factory=ModelArchitecture)


class CatalogListing(BackendModel):
    """Backend response for the catalog listing."""

    models: List[CatalogModel]


class ListedPricing(ProjectionModel):
    """Input and output prices only."""

    input: Optional[float] = None
    output: Optional[float] = None


class ListedCapabilities(ProjectionModel):
    """Capability flags shown in listings."""

    vision: Optional[bool] = None
    audio: Optional[bool] = None
    tool_calling: Optional[bool] = None
    json_mode: Optional[bool] = None


class ListedArchitecture(ProjectionModel):
    """Architecture summary shown in listings."""

    tokenizer: Optional[str] = None


class ListedModel(ProjectionModel):
    """Catalog entry as returned by list_models."""

    id: str
    name: str
    provider: str
    context_window: Optional[int] = None
    max_output_tokens: Optional[int] = None
    input_modalities: List[str] = Field(default_factory=list)
    pricing: ListedPricing = Field(default_factory=ListedPricing)
    capabilities: ListedCapabilities = Field(default_factory=ListedCapabilities)
    architecture: ListedArchitecture = Field(default_factory=ListedArchitecture)


class ListModelsOutput(ProjectionModel):
    """Result of list_models."""

    models: List[ListedModel]


# ---------------------------------------------------------------------------
# search_models
# ---------------------------------------------------------------------------


class SearchCapabilities(BackendModel):
    """Capability flags returned by semantic search."""

    vision: Optional[bool] = None
    tool_calling: Optional[bool] = None


class SearchResult(BackendModel):
    """One semantic search hit."""

    id: str
    name: str
    description: Optional[str] = None
    similarity: float
    provider: str
    context_window: Optional[int] = None
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    capabilities: SearchCapabilities = Field(default_factory=SearchCapabilities)


class SearchModelsOutput(ProjectionModel):
    """Result of search_models."""

    results: List[SearchResult]


# ---------------------------------------------------------------------------
# find_models
# ---------------------------------------------------------------------------


class FindCapabilities(BackendModel):
    """Capability flags returned by find_models."""

    vision: Optional[bool] = None
    audio: Optional[bool] = None
    tool_calling: Optional[bool] = None
    json_mode: Optional[bool] = None
    video: Optional[bool] = None


class FindResult(BackendModel):
    """One ranked find_models hit."""

    id: str
    name: str
    description: Optional[str] = None
    score: float
    provider: str
    context_window: Optional[int] = None
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    capabilities: FindCapabilities = Field(default_factory=FindCapabilities)
    matched_features: Optional[List[str]] = None
    hugging_face_id: Optional[str] = None
    release_date: Optional[str] = None


class FindModelsOutput(BackendModel):
    """Result of find_models."""

    results: List[FindResult]
    total: Optional[int] = None


# ---------------------------------------------------------------------------
# get_model
# ---------------------------------------------------------------------------


class ModelLimits(BackendModel):
    """Token limits."""

    context_window: Optional[int] = None
    max_output_tokens: Optional[int] = None


class PerRequestLimits(BackendModel):
    """Per-request token ceilings."""

    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None


class ModelDetailCapabilities(BackendModel):
    """Full capability record."""

    vision: bool = False
    audio: bool = False
    tool_calling: bool = False
    json_mode: bool = False
    video: bool = False
    function_calling: bool = False
    custom: List[str] = Field(default_factory=list)


class GetModelOutput(BackendModel):
    """Complete model specification."""

    id: str
    name: str
    provider: str
    description: Optional[str] = None
    family: Optional[str] = None
    version: Optional[str] = None
    release_date: Optional[str] = None
    limits: ModelLimits = Field(default_factory=ModelLimits)
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    extended_pricing: Optional[ExtendedPricing] = None
    capabilities: ModelDetailCapabilities = Field(default_factory=ModelDetailCapabilities)
    supported_parameters: List[str] = Field(default_factory=list)
    is_moderated: bool = False
    input_modalities: List[str] = Field(default_factory=list)
    output_modalities: List[str] = Field(default_factory=list)
    architecture: ModelArchitecture = Field(default_factory=ModelArchitecture)
    per_request_limits: Optional[PerRequestLimits] = None
    deployments: List[Deployment] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# compare_models
# ---------------------------------------------------------------------------


class CompareCapabilities(BackendModel):
    """Capability flags returned by comparison."""

    vision: Optional[bool] = None
    tool_calling: Optional[bool] = None
    custom: List[str] = Field(default_factory=list)


class ComparedModel(BackendModel):
    """One side of a comparison."""

    id: str
    name: str
    provider: str
    limits: ModelLimits = Field(default_factory=ModelLimits)
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    capabilities: CompareCapabilities = Field(default_factory=CompareCapabilities)
    deployments: List[Deployment] = Field(default_factory=list)


class Suggestion(BackendModel):
    """A close match for an unknown identifier."""

    id: str
    name: str
    similarity: float


class CompareModelsOutput(BackendModel):
    """Result of compare_models."""

    models: List[ComparedModel]
    not_found: Optional[List[str]] = None
    suggestions: Optional[Dict[str, List[Suggestion]]] = None


# ---------------------------------------------------------------------------
# recommend_model
# ---------------------------------------------------------------------------


class Recommendation(BackendModel):
    """One recommended model."""

    id: str
    name: str
    score: float
    context_window: Optional[int] = None
    pricing: ModelPricing = Field(default_factory=ModelPricing)
    confidence: Optional[Literal["high", "medium", "low"]] = None
    matched_features: Optional[List[str]] = None
    pricing_available: bool = True


class RecommendModelOutput(BackendModel):
    """Result of recommend_model."""

    use_case: str
    recommendations: List[Recommendation]
    suggestions: Optional[List[str]] = None
    warning: Optional[str] = None


# ---------------------------------------------------------------------------
# test_model
# ---------------------------------------------------------------------------


class TokensUsed(BackendModel):
    """Token accounting for one model run."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class CostEstimate(BackendModel):
    """Estimated USD cost of one model run."""

    input_cost: Optional[float] = None
    output_cost: Optional[float] = None
    total_cost: Optional[float] = None


class ToolCall(BackendModel):
    """A tool call emitted by the model under test."""

    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class TestResult(BackendModel):
    """Outcome of one model run."""

    model_id: str
    model_name: str
    latency_ms: float
    output: Optional[str] = None
    tokens_used: Optional[TokensUsed] = None
    cost_estimate: CostEstimate = Field(default_factory=CostEstimate)
    tool_calls_detected: Optional[bool] = None
    tool_calls: Optional[List[ToolCall]] = None
    error: Optional[str] = None


class TestModelOutput(BackendModel):
    """Result of test_model."""

    test_type: str
    prompt: str
    results: List[TestResult]


class CredentialGuidance(ProjectionModel):
    """Soft failure returned by test_model when no OpenRouter key is configured."""

    error: Literal[True] = True
    kind: Literal["missing_credential"] = "missing_credential"
    message: str
    setup_steps: List[str]


def output_schema(*models: type[BaseModel]) -> Dict[str, Any]:
    """Build a tool output schema from one or more result models.

    Several models produce an object schema whose ``anyOf`` lists each shape.

    Args:
        *models: Result model classes.

    Returns:
        Dict[str, Any]: JSON schema with ``type: object`` at the root.

    Examples:
        >>> output_schema(GetModelRequest)["type"]
        'object'
        >>> sorted(output_schema(TestModelOutput, CredentialGuidance))[:2]
        ['$defs', 'anyOf']
    """
    if len(models) == 1:
        return models[0].model_json_schema(mode="serialization")
    defs: Dict[str, Any] = {}
    refs = []
    for model in models:
        schema = model.model_json_schema(mode="serialization", ref_template="#/$defs/{model}")
        defs.update(schema.pop("$defs", {}))
        defs[model.__name__] = schema
        refs.append({"$ref": f"#/$defs/{model.__name__}"})
    return {"$defs": defs, "anyOf": refs, "type": "object"}
