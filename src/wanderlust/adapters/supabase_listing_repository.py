"""Supabase-backed listing repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from wanderlust.adapters.supabase_errors import execute
from wanderlust.domain.errors import StorageFailure
from wanderlust.domain.listings import (
    DEFAULT_IMAGE_FILENAME,
    DEFAULT_IMAGE_URL,
    Image,
    Listing,
)
from wanderlust.services.listings import ListingRepository


@dataclass
class SupabaseListingRepository(ListingRepository):
    """Supabase implementation for listing persistence."""

    client: Client

    def list_listings(self) -> list[Listing]:
        """Return all listings ordered by creation time."""
        response = execute(
            self.client.table("listings").select("*").order("created_at"),
            "list listings",
        )
        return [_parse_listing(row) for row in response.data or []]

    def get_listing(self, listing_id: UUID) -> Listing | None:
        """Return a listing by id, if present."""
        response = execute(
            self.client.table("listings")
            .select("*")
            .eq("id", str(listing_id))
            .limit(1),
            "get listing",
        )
        if not response.data:
            return None
        return _parse_listing(response.data[0])

    def create_listing(self, fields: dict[str, object]) -> Listing:
        """Insert a listing row and return it."""
        response = execute(
            self.client.table("listings").insert({**fields, "review_ids": []}),
            "create listing",
        )
        if not response.data:
            raise StorageFailure("Failed to create listing in Supabase")
        return _parse_listing(response.data[0])

    def update_listing(
        self, listing_id: UUID, fields: dict[str, object]
    ) -> Listing | None:
        """Update listing columns and return the row, if present."""
        response = execute(
            self.client.table("listings").update(fields).eq("id", str(listing_id)),
            "update listing",
        )
        if not response.data:
            return None
        return _parse_listing(response.data[0])

    def delete_listing(self, listing_id: UUID) -> Listing | None:
        """Delete a listing row and return it, if present."""
        response = execute(
            self.client.table("listings").delete().eq("id", str(listing_id)),
            "delete listing",
        )
        if not response.data:
            return None
        return _parse_listing(response.data[0])

    def set_review_ids(self, listing_id: UUID, review_ids: list[UUID]) -> None:
        """Overwrite the review reference column."""
        execute(
            self.client.table("listings")
            .update({"review_ids": [str(review_id) for review_id in review_ids]})
            .eq("id", str(listing_id)),
            "update listing reviews",
        )

    def list_listings_referencing(self, review_id: UUID) -> list[Listing]:
        """Return listings whose review_ids array contains the id."""
        response = execute(
            self.client.table("listings")
            .select("*")
            .contains("review_ids", [str(review_id)]),
            "find listings by review",
        )
        return [_parse_listing(row) for row in response.data or []]


def _parse_listing(row: dict[str, object]) -> Listing:
    """Parse a listing row into a domain model."""
    price = row.get("price")
    return Listing(
        id=UUID(str(row["id"])),
        title=str(row.get("title", "")),
        description=row.get("description"),
        image=Image(
            filename=str(row.get("image_filename") or DEFAULT_IMAGE_FILENAME),
            url=str(row.get("image_url") or DEFAULT_IMAGE_URL),
        ),
        price=float(price) if price is not None else None,
        location=row.get("location"),
        country=row.get("country"),
        review_ids=[UUID(str(value)) for value in row.get("review_ids") or []],
    )
