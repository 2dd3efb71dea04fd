"""Review store operations scoped to a parent listing."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from wanderlust.domain.errors import NotFound, StorageFailure
from wanderlust.domain.listings import Listing, Review
from wanderlust.domain.users import Identity
from wanderlust.services.listings import ListingRepository, ReviewRepository
from wanderlust.validation import parse_identifier, validate_review

logger = logging.getLogger(__name__)


@dataclass
class ReviewService:
    """Creates and removes reviews and keeps listing references in step.

    Each operation is two separate writes with no transaction around them.
    A failure between the writes leaves an orphaned review (on create) or a
    dangling reference (on delete); both are logged and surfaced as
    StorageFailure.
    """

    repository: ReviewRepository
    listing_repository: ListingRepository

    def create(
        self,
        raw_listing_id: str,
        raw: Mapping[str, object] | None,
        identity: Identity | None = None,
    ) -> Review:
        """Validate a review, store it and attach it to the listing."""
        listing_id = parse_identifier("listing", raw_listing_id)
        payload = validate_review(raw)
        listing = self._require_listing(listing_id)
        author = payload.author or (identity.username if identity else None)
        review = self.repository.create_review(
            {"rating": payload.rating, "comment": payload.comment, "author": author}
        )
        try:
            self.listing_repository.set_review_ids(
                listing.id, [*listing.review_ids, review.id]
            )
        except StorageFailure:
            logger.exception(
                "Review stored but not attached to listing",
                extra={"listing_id": str(listing.id), "review_id": str(review.id)},
            )
            raise
        logger.info(
            "Created review",
            extra={"listing_id": str(listing.id), "review_id": str(review.id)},
        )
        return review

    def delete(self, raw_listing_id: str, raw_review_id: str) -> None:
        """Delete a review and pull its id from every referencing listing."""
        listing_id = parse_identifier("listing", raw_listing_id)
        review_id = parse_identifier("review", raw_review_id)
        self._require_listing(listing_id)
        removed = self.repository.delete_review(review_id)
        try:
            referencing = self.listing_repository.list_listings_referencing(
                review_id
            )
            if not removed and not referencing:
                raise NotFound("review")
            for listing in referencing:
                self._detach(listing, review_id)
        except StorageFailure:
            logger.exception(
                "Review deleted but still referenced by a listing",
                extra={"listing_id": str(listing_id), "review_id": str(review_id)},
            )
            raise
        logger.info(
            "Deleted review",
            extra={"listing_id": str(listing_id), "review_id": str(review_id)},
        )

    def _detach(self, listing: Listing, review_id: UUID) -> None:
        remaining = [ref for ref in listing.review_ids if ref != review_id]
        self.listing_repository.set_review_ids(listing.id, remaining)

    def _require_listing(self, listing_id: UUID) -> Listing:
        listing = self.listing_repository.get_listing(listing_id)
        if listing is None:
            raise NotFound("listing")
        return listing
