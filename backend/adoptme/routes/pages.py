"""
AdoptMe Backend — Browser Pages
=================================

What:  Serves the two UI pages (browse, interests).
How:   Plain HTML files from adoptme/static; the pages fetch /api/pets
       themselves and keep the "interested" ids in localStorage, so the
       server never learns about interests.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Pages"], include_in_schema=False)


@lru_cache(maxsize=None)
def _page(name: str) -> str:
    return (STATIC_DIR / name).read_text(encoding="utf-8")


@router.get("/")
async def index() -> RedirectResponse:
    return RedirectResponse(url="/browse")


@router.get("/browse", response_class=HTMLResponse)
async def browse_page() -> HTMLResponse:
    """All pets, each with an "I'm Interested" toggle."""
    return HTMLResponse(_page("browse.html"))


@router.get("/interests", response_class=HTMLResponse)
async def interests_page() -> HTMLResponse:
    """Only the pets whose ids are in the browser's interest list."""
    return HTMLResponse(_page("interests.html"))
