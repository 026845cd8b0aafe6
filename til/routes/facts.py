"""
JSON API routes for facts and categories.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from til.config import get_settings
from til.models import (
    ALERT_MESSAGE, ALL_CATEGORIES, CATEGORY_COLORS, CategoryResponse,
    CreateFactRequest, FactResponse, VoteRequest, parse_category_filter
)
from til.store import FactNotFoundError, FactStore, StoreError, get_store


router = APIRouter(prefix="/facts", tags=["Facts"])
categories_router = APIRouter(prefix="/categories", tags=["Categories"])

settings = get_settings()


# =============================================================================
# List / Get
# =============================================================================


@router.get("", response_model=List[FactResponse])
def list_facts(
    category: str = Query(default=ALL_CATEGORIES),
    store: FactStore = Depends(get_store)
) -> List[FactResponse]:
    """
    List facts, most interesting first.

    Pass ``category`` to only get facts from one category.
    At most ``fact_limit`` facts are returned.
    """
    try:
        category_filter = parse_category_filter(category)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Unknown category: {category}")

    try:
        return store.list_facts(category_filter, limit=settings.fact_limit)
    except StoreError:
        raise HTTPException(status_code=502, detail=ALERT_MESSAGE)


@router.get("/{fact_id}", response_model=FactResponse)
def get_fact(
    fact_id: int,
    store: FactStore = Depends(get_store)
) -> FactResponse:
    """Get a single fact."""
    try:
        fact = store.get_fact(fact_id)
    except StoreError:
        raise HTTPException(status_code=502, detail=ALERT_MESSAGE)

    if not fact:
        raise HTTPException(status_code=404, detail="Fact not found")
    return fact


# =============================================================================
# Create
# =============================================================================


@router.post("", response_model=FactResponse, status_code=201)
def create_fact(
    request: CreateFactRequest,
    store: FactStore = Depends(get_store)
) -> FactResponse:
    """Share a new fact."""
    try:
        return store.create_fact(request.text, request.source, request.category)
    except StoreError:
        raise HTTPException(status_code=502, detail=ALERT_MESSAGE)


# =============================================================================
# Vote
# =============================================================================


@router.post("/{fact_id}/votes", response_model=FactResponse)
def vote_on_fact(
    fact_id: int,
    request: VoteRequest,
    store: FactStore = Depends(get_store)
) -> FactResponse:
    """
    Vote on a fact.

    Adds one to the stored count for the chosen vote type and
    returns the updated fact.
    """
    try:
        fact = store.get_fact(fact_id)
        if not fact:
            raise HTTPException(status_code=404, detail="Fact not found")

        return store.update_votes(
            fact_id, request.vote, fact.votes_for(request.vote) + 1
        )
    except FactNotFoundError:
        raise HTTPException(status_code=404, detail="Fact not found")
    except StoreError:
        raise HTTPException(status_code=502, detail=ALERT_MESSAGE)


# =============================================================================
# Categories
# =============================================================================


@categories_router.get("", response_model=List[CategoryResponse])
def list_categories() -> List[CategoryResponse]:
    """All categories with their display colors."""
    return [
        CategoryResponse(name=category, color=color)
        for category, color in CATEGORY_COLORS.items()
    ]
