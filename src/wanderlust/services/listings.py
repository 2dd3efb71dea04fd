"""Listing store operations."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from wanderlust.domain.errors import NotFound
from wanderlust.domain.listings import (
    DEFAULT_IMAGE_FILENAME,
    DEFAULT_IMAGE_URL,
    Listing,
    ListingDetail,
    Review,
)
from wanderlust.validation import ListingPayload, parse_identifier, validate_listing

logger = logging.getLogger(__name__)


class ListingRepository(Protocol):
    """Persistence interface for listings."""

    def list_listings(self) -> list[Listing]:
        """Return every listing in store order."""

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""

    def create_listing(self, fields: dict[str, object]) -> Listing:
        """Insert a listing and return it."""

    def update_listing(
        self, listing_id: UUID, fields: dict[str, object]
    ) -> Listing | None:
        """Replace the given fields and return the listing, if present."""

    def delete_listing(self, listing_id: UUID) -> Listing | None:
        """Delete a listing and return what was removed, if present."""

    def set_review_ids(self, listing_id: UUID, review_ids: list[UUID]) -> None:
        """Overwrite the review reference list of a listing."""

    def list_listings_referencing(self, review_id: UUID) -> list[Listing]:
        """Return listings whose reference list contains the review id."""


class ReviewRepository(Protocol):
    """Persistence interface for reviews."""

    def create_review(self, fields: dict[str, object]) -> Review:
        """Insert a review and return it."""

    def get_reviews(self, review_ids: list[UUID]) -> list[Review]:
        """Return the reviews that exist among the given ids."""

    def delete_review(self, review_id: UUID) -> bool:
        """Delete a review and report whether a row was removed."""

    def delete_reviews(self, review_ids: list[UUID]) -> None:
        """Delete several reviews at once."""


@dataclass
class ListingService:
    """Application service for listing CRUD."""

    repository: ListingRepository
    review_repository: ReviewRepository
    cascade_review_delete: bool = False

    def list_all(self) -> list[Listing]:
        """Return all listings."""
        return self.repository.list_listings()

    def get(self, raw_id: str) -> ListingDetail:
        """Return a listing with its reviews resolved in reference order."""
        listing = self._require(raw_id)
        found = {
            review.id: review
            for review in self.review_repository.get_reviews(listing.review_ids)
        }
        reviews = [
            found[review_id] for review_id in listing.review_ids if review_id in found
        ]
        if len(reviews) != len(listing.review_ids):
            logger.warning(
                "Listing has dangling review references",
                extra={
                    "listing_id": str(listing.id),
                    "missing": len(listing.review_ids) - len(reviews),
                },
            )
        return ListingDetail(listing=listing, reviews=reviews)

    def get_for_edit(self, raw_id: str) -> Listing:
        """Return a listing without resolving its reviews."""
        return self._require(raw_id)

    def create(self, raw: Mapping[str, object] | None) -> UUID:
        """Validate and persist a new listing, returning its id."""
        payload = validate_listing(raw)
        listing = self.repository.create_listing(_listing_fields(payload))
        logger.info("Created listing", extra={"listing_id": str(listing.id)})
        return listing.id

    def update(self, raw_id: str, raw: Mapping[str, object] | None) -> Listing:
        """Validate and apply an update to an existing listing."""
        listing_id = parse_identifier("listing", raw_id)
        payload = validate_listing(raw)
        updated = self.repository.update_listing(
            listing_id, _listing_fields(payload, partial=True)
        )
        if updated is None:
            raise NotFound("listing")
        return updated

    def delete(self, raw_id: str) -> None:
        """Delete a listing, optionally removing the reviews it references."""
        listing_id = parse_identifier("listing", raw_id)
        deleted = self.repository.delete_listing(listing_id)
        if deleted is None:
            raise NotFound("listing")
        if self.cascade_review_delete and deleted.review_ids:
            self.review_repository.delete_reviews(deleted.review_ids)
        logger.info(
            "Deleted listing",
            extra={"listing_id": str(listing_id), "reviews": len(deleted.review_ids)},
        )

    def _require(self, raw_id: str) -> Listing:
        listing_id = parse_identifier("listing", raw_id)
        listing = self.repository.get_listing(listing_id)
        if listing is None:
            raise NotFound("listing")
        return listing


def normalize_image_url(url: str | None) -> str:
    """Return the stored image URL, substituting the default for blanks."""
    if not url:
        return DEFAULT_IMAGE_URL
    return url


def _listing_fields(
    payload: ListingPayload, partial: bool = False
) -> dict[str, object]:
    """Flatten a validated payload into storage fields.

    A partial update only carries the fields present in the submission.
    """
    image = payload.image
    fields: dict[str, object] = {
        "title": payload.title,
        "description": payload.description,
        "image_filename": (image.filename if image else None)
        or DEFAULT_IMAGE_FILENAME,
        "image_url": normalize_image_url(image.url if image else None),
        "price": payload.price,
        "location": payload.location,
        "country": payload.country,
    }
    if not partial:
        return fields
    submitted = payload.model_fields_set | {"title"}
    if image is not None:
        submitted.add("image_url")
        if "filename" in image.model_fields_set:
            submitted.add("image_filename")
    return {key: value for key, value in fields.items() if key in submitted}
