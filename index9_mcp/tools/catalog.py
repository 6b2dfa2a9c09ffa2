# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/tools/catalog.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Catalog tool handlers: listing, search, lookup, comparison and recommendation.
"""

# Future
from __future__ import annotations

# Standard
from typing import List

# First-Party
from index9_mcp.client import BackendClient
from index9_mcp.errors import ToolValidationError
from index9_mcp.schemas import (
    CompareModelsOutput,
    CompareModelsRequest,
    FindModelsOutput,
    FindModelsRequest,
    GetModelOutput,
    GetModelRequest,
    ListedModel,
    ListModelsOutput,
    ListModelsRequest,
    RecommendModelOutput,
    RecommendModelRequest,
    SearchModelsOutput,
    SearchModelsRequest,
)

MIN_COMPARE_MODELS = 2
MAX_COMPARE_MODELS = 10


def unique_model_ids(model_ids: List[str]) -> List[str]:
    """De-duplicate identifiers, keeping first-seen order and dropping blanks.

    Args:
        model_ids: Raw identifiers.

    Returns:
        List[str]: Unique, stripped identifiers.

    Examples:
        >>> unique_model_ids(["a/x", "a/x", "b/y"])
        ['a/x', 'b/y']
        >>> unique_model_ids([" a/x", "a/x ", ""])
        ['a/x']
    """
    seen: dict[str, None] = {}
    for model_id in model_ids:
        cleaned = model_id.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


async def list_models(client: BackendClient, request: ListModelsRequest) -> ListModelsOutput:
    listing = await client.list_models(request.to_params())
    return ListModelsOutput(models=[ListedModel.model_validate(m.model_dump()) for m in listing.models])


async def search_models(client: BackendClient, request: SearchModelsRequest) -> SearchModelsOutput:
    query = request.query.strip()
    if not query:
        raise ToolValidationError("Search query is required and must not be empty")
    result = await client.search_models(query, request.limit, request.threshold)
    return SearchModelsOutput(results=result.results)


async def find_models(client: BackendClient, request: FindModelsRequest) -> FindModelsOutput:
    return await client.find_models(request.to_params())


async def get_model(client: BackendClient, request: GetModelRequest) -> GetModelOutput:
    model_id = request.model_id.strip()
    if not model_id:
        raise ToolValidationError("model_id must not be empty")
    return await client.get_model(model_id)


async def compare_models(client: BackendClient, request: CompareModelsRequest) -> CompareModelsOutput:
    """Compare 2-10 distinct models in a single backend call.

    Args:
        client: Backend client.
        request: Identifiers, possibly with duplicates.

    Returns:
        CompareModelsOutput: Side-by-side records.

    Raises:
        ToolValidationError: If fewer than two or more than ten distinct identifiers remain.
    """
    model_ids = unique_model_ids(request.model_ids)
    if len(model_ids) < MIN_COMPARE_MODELS:
        raise ToolValidationError(f"At least {MIN_COMPARE_MODELS} unique model IDs are required for comparison")
    if len(model_ids) > MAX_COMPARE_MODELS:
        raise ToolValidationError(f"At most {MAX_COMPARE_MODELS} unique model IDs can be compared at once")
    return await client.compare_models(model_ids)


async def recommend_model(client: BackendClient, request: RecommendModelRequest) -> RecommendModelOutput:
    use_case = request.use_case.strip()
    if not use_case:
        raise ToolValidationError("use_case is required and must not be empty")
    return await client.recommend_model(
        use_case,
        max_price_per_m=request.max_price_per_m,
        min_context=request.min_context,
        required_capabilities=list(request.required_capabilities) if request.required_capabilities else None,
        limit=request.limit,
    )
