"""Domain models for listings and reviews."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

DEFAULT_IMAGE_FILENAME = "listingimage"
DEFAULT_IMAGE_URL = (
    "https://images.unsplash.com/photo-1625505826533-5c80aca7d157"
    "?ixlib=rb-4.0.3&ixid=M3wxMjA3fDB8MHxzZWFyY2h8MTJ8fGdvYXxlbnwwfHwwfHx8MA%3D%3D"
    "&auto=format&fit=crop&w=800&q=60"
)


@dataclass(frozen=True)
class Image:
    """Image attached to a listing."""

    filename: str = DEFAULT_IMAGE_FILENAME
    url: str = DEFAULT_IMAGE_URL


@dataclass(frozen=True)
class Listing:
    """A rentable property."""

    id: UUID
    title: str
    description: str | None
    image: Image
    price: float | None
    location: str | None
    country: str | None
    review_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class Review:
    """A rating and comment left on a listing."""

    id: UUID
    rating: int
    comment: str
    author: str | None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ListingDetail:
    """Listing with its review references resolved."""

    listing: Listing
    reviews: list[Review]
