"""
HTML pages for the fact board.

Every page is rendered from a FactBoard loaded for the category the
reader is looking at. Writes go through the board and the result is
redirected back to the board (303) once the store accepted them, so a
refresh does not repeat them. Invalid drafts and failed writes are
rendered straight away with the form values or the alert.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from til.board import FactBoard
from til.config import get_settings
from til.models import (
    ALL_CATEGORIES, CATEGORY_COLORS, MAX_FACT_LENGTH, VOTE_ICONS, FactDraft,
    VoteType
)
from til.store import FactStore, get_store


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

router = APIRouter(tags=["Board"], include_in_schema=False)
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

settings = get_settings()


def _load_board(store: FactStore, category: str) -> FactBoard:
    board = FactBoard(store, fact_limit=settings.fact_limit)
    try:
        board.load(category)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")
    return board


def _redirect_to_board(board: FactBoard) -> RedirectResponse:
    return RedirectResponse(
        url=f"/?category={board.current_category}", status_code=303
    )


def _render(request: Request, board: FactBoard, errors=None) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "app_name": settings.app_name,
            "board": board,
            "errors": errors or [],
            "categories": CATEGORY_COLORS,
            "vote_icons": VOTE_ICONS,
            "all_categories": ALL_CATEGORIES,
            "max_length": MAX_FACT_LENGTH,
        },
    )


@router.get("/", response_class=HTMLResponse)
def show_board(
    request: Request,
    category: str = ALL_CATEGORIES,
    form: bool = False,
    store: FactStore = Depends(get_store)
):
    """The board, filtered by category, with the share form open on ``form=1``."""
    board = _load_board(store, category)
    board.show_form = form
    return _render(request, board)


@router.post("/facts", response_class=HTMLResponse)
def share_fact(
    request: Request,
    text: str = Form(""),
    source: str = Form(""),
    category: str = Form(""),
    current_category: str = Form(ALL_CATEGORIES),
    store: FactStore = Depends(get_store)
):
    """Share a fact from the form. Invalid input keeps the form open."""
    board = _load_board(store, current_category)
    board.show_form = True

    draft = FactDraft(text=text, source=source, category=category)
    errors = draft.validation_errors()
    if errors:
        board.draft = draft
        return _render(request, board, errors=errors)

    if board.submit(draft) is None:
        return _render(request, board)
    return _redirect_to_board(board)


@router.post("/facts/{fact_id}/vote", response_class=HTMLResponse)
def vote_on_fact(
    request: Request,
    fact_id: int,
    vote: VoteType = Form(...),
    current_category: str = Form(ALL_CATEGORIES),
    store: FactStore = Depends(get_store)
):
    """Vote on a fact shown on the current board."""
    board = _load_board(store, current_category)
    try:
        updated = board.vote(fact_id, vote)
    except LookupError:
        raise HTTPException(status_code=404, detail="Fact not found")

    if updated is None:
        return _render(request, board)
    return _redirect_to_board(board)
