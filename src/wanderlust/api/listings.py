"""Listing and review routes."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from wanderlust.api.dependencies import get_container, get_identity, require_writer
from wanderlust.api.forms import read_body
from wanderlust.api.views import render
from wanderlust.domain.users import Identity

router = APIRouter(prefix="/listings", tags=["listings"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("", response_class=HTMLResponse)
async def index(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> HTMLResponse:
    """Render every listing."""
    listings = get_container(request).listing_service.list_all()
    return render(request, "listings/index.html", identity, {"listings": listings})


@router.get(
    "/new", response_class=HTMLResponse, dependencies=[Depends(require_writer)]
)
async def new_listing_form(
    request: Request, identity: Identity | None = Depends(get_identity)
) -> HTMLResponse:
    """Render the creation form."""
    return render(request, "listings/new.html", identity)


@router.post("", dependencies=[Depends(require_writer)])
async def create_listing(request: Request) -> RedirectResponse:
    """Create a listing from the submitted form."""
    body = await read_body(request)
    get_container(request).listing_service.create(body.get("listing"))
    return _redirect("/listings")


@router.get("/{listing_id}", response_class=HTMLResponse)
async def show_listing(
    listing_id: str,
    request: Request,
    identity: Identity | None = Depends(get_identity),
) -> HTMLResponse:
    """Render one listing with its reviews."""
    detail = get_container(request).listing_service.get(listing_id)
    return render(
        request,
        "listings/show.html",
        identity,
        {"listing": detail.listing, "reviews": detail.reviews},
    )


@router.get(
    "/{listing_id}/edit",
    response_class=HTMLResponse,
    dependencies=[Depends(require_writer)],
)
async def edit_listing_form(
    listing_id: str,
    request: Request,
    identity: Identity | None = Depends(get_identity),
) -> HTMLResponse:
    """Render the edit form for a listing."""
    listing = get_container(request).listing_service.get_for_edit(listing_id)
    return render(request, "listings/edit.html", identity, {"listing": listing})


@router.put("/{listing_id}", dependencies=[Depends(require_writer)])
async def update_listing(listing_id: str, request: Request) -> RedirectResponse:
    """Apply the submitted changes to a listing."""
    body = await read_body(request)
    listing = get_container(request).listing_service.update(
        listing_id, body.get("listing")
    )
    return _redirect(f"/listings/{listing.id}")


@router.delete("/{listing_id}", dependencies=[Depends(require_writer)])
async def delete_listing(listing_id: str, request: Request) -> RedirectResponse:
    """Delete a listing."""
    get_container(request).listing_service.delete(listing_id)
    return _redirect("/listings")


@router.post("/{listing_id}/reviews", dependencies=[Depends(require_writer)])
async def create_review(
    listing_id: str,
    request: Request,
    identity: Identity | None = Depends(get_identity),
) -> RedirectResponse:
    """Post a review and attach it to the listing."""
    body = await read_body(request)
    review_service = get_container(request).review_service
    review_service.create(listing_id, body.get("review"), identity)
    return _redirect(f"/listings/{listing_id}")


@router.delete(
    "/{listing_id}/reviews/{review_id}", dependencies=[Depends(require_writer)]
)
async def delete_review(
    listing_id: str, review_id: str, request: Request
) -> RedirectResponse:
    """Delete a review and detach it from the listing."""
    get_container(request).review_service.delete(listing_id, review_id)
    return _redirect(f"/listings/{listing_id}")
