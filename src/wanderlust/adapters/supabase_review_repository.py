"""Supabase-backed review repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wanderlust.adapters.supabase_errors import execute
from wanderlust.domain.errors import StorageFailure
from wanderlust.domain.listings import Review
from wanderlust.services.listings import ReviewRepository


@dataclass
class SupabaseReviewRepository(ReviewRepository):
    """Supabase implementation for review persistence."""

    client: Client

    def create_review(self, fields: dict[str, object]) -> Review:
        """Insert a review row and return it."""
        response = execute(
            self.client.table("reviews").insert(fields), "create review"
        )
        if not response.data:
            raise StorageFailure("Failed to create review in Supabase")
        return _parse_review(response.data[0])

    def get_reviews(self, review_ids: list[UUID]) -> list[Review]:
        """Return existing reviews among the given ids."""
        if not review_ids:
            return []
        response = execute(
            self.client.table("reviews")
            .select("*")
            .in_("id", [str(review_id) for review_id in review_ids]),
            "get reviews",
        )
        return [_parse_review(row) for row in response.data or []]

    def delete_review(self, review_id: UUID) -> bool:
        """Delete a review row."""
        response = execute(
            self.client.table("reviews").delete().eq("id", str(review_id)),
            "delete review",
        )
        return bool(response.data)

    def delete_reviews(self, review_ids: list[UUID]) -> None:
        """Delete several review rows."""
        execute(
            self.client.table("reviews")
            .delete()
            .in_("id", [str(review_id) for review_id in review_ids]),
            "delete reviews",
        )


def _parse_review(row: dict[str, object]) -> Review:
    """Parse a review row into a domain model."""
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else None
    )
    return Review(
        id=UUID(str(row["id"])),
        rating=int(row.get("rating", 0)),
        comment=str(row.get("comment", "")),
        author=row.get("author"),
        created_at=created_at,
    )
