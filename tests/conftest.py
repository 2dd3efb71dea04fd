"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from wanderlust.config import Settings
from wanderlust.containers import AppContainer
from wanderlust.domain.errors import DuplicateUser, StorageFailure
from wanderlust.domain.listings import Image, Listing, Review
from wanderlust.domain.users import UserRecord
from wanderlust.services.auth import AuthService, UserRepository
from wanderlust.services.listings import (
    ListingRepository,
    ListingService,
    ReviewRepository,
)
from wanderlust.services.reviews import ReviewService

_LISTING_COLUMNS = ("title", "description", "price", "location", "country")


@dataclass
class InMemoryListingRepository(ListingRepository):
    """In-memory listing repository for tests."""

    listings: dict[UUID, Listing] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    fail_reference_updates: bool = False
    fail_reference_lookups: bool = False

    def list_listings(self) -> list[Listing]:
        self.calls.append("list_listings")
        return list(self.listings.values())

    def get_listing(self, listing_id: UUID) -> Listing | None:
        self.calls.append("get_listing")
        return self.listings.get(listing_id)

    def create_listing(self, fields: dict[str, object]) -> Listing:
        self.calls.append("create_listing")
        listing = Listing(
            id=uuid4(),
            title=str(fields["title"]),
            description=fields.get("description"),
            image=Image(
                filename=str(fields["image_filename"]), url=str(fields["image_url"])
            ),
            price=fields.get("price"),
            location=fields.get("location"),
            country=fields.get("country"),
        )
        self.listings[listing.id] = listing
        return listing

    def update_listing(
        self, listing_id: UUID, fields: dict[str, object]
    ) -> Listing | None:
        self.calls.append("update_listing")
        current = self.listings.get(listing_id)
        if current is None:
            return None
        image = Image(
            filename=str(fields.get("image_filename", current.image.filename)),
            url=str(fields.get("image_url", current.image.url)),
        )
        changes = {key: fields[key] for key in _LISTING_COLUMNS if key in fields}
        updated = replace(current, image=image, **changes)
        self.listings[listing_id] = updated
        return updated

    def delete_listing(self, listing_id: UUID) -> Listing | None:
        self.calls.append("delete_listing")
        return self.listings.pop(listing_id, None)

    def set_review_ids(self, listing_id: UUID, review_ids: list[UUID]) -> None:
        self.calls.append("set_review_ids")
        if self.fail_reference_updates:
            raise StorageFailure("reference update failed")
        current = self.listings[listing_id]
        self.listings[listing_id] = replace(current, review_ids=list(review_ids))

    def list_listings_referencing(self, review_id: UUID) -> list[Listing]:
        self.calls.append("list_listings_referencing")
        if self.fail_reference_lookups:
            raise StorageFailure("reference lookup failed")
        return [
            listing
            for listing in self.listings.values()
            if review_id in listing.review_ids
        ]

    def add(self, title: str = "Cabin", **fields: object) -> Listing:
        """Seed a listing directly, bypassing validation."""
        listing = Listing(
            id=uuid4(),
            title=title,
            description=fields.get("description"),
            image=fields.get("image", Image()),
            price=fields.get("price"),
            location=fields.get("location"),
            country=fields.get("country"),
            review_ids=list(fields.get("review_ids", [])),
        )
        self.listings[listing.id] = listing
        return listing


@dataclass
class InMemoryReviewRepository(ReviewRepository):
    """In-memory review repository for tests."""

    reviews: dict[UUID, Review] = field(default_factory=dict)

    def create_review(self, fields: dict[str, object]) -> Review:
        review = Review(
            id=uuid4(),
            rating=int(fields["rating"]),
            comment=str(fields["comment"]),
            author=fields.get("author"),
            created_at=datetime.now(tz=UTC),
        )
        self.reviews[review.id] = review
        return review

    def get_reviews(self, review_ids: list[UUID]) -> list[Review]:
        return [self.reviews[rid] for rid in review_ids if rid in self.reviews]

    def delete_review(self, review_id: UUID) -> bool:
        return self.reviews.pop(review_id, None) is not None

    def delete_reviews(self, review_ids: list[UUID]) -> None:
        for review_id in review_ids:
            self.reviews.pop(review_id, None)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[str, UserRecord] = field(default_factory=dict)

    def get_by_username(self, username: str) -> UserRecord | None:
        return self.users.get(username)

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        if username in self.users or any(
            user.email == email for user in self.users.values()
        ):
            raise DuplicateUser()
        user = UserRecord(
            id=uuid4(), username=username, email=email, password_hash=password_hash
        )
        self.users[username] = user
        return user


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        session_secret="test-session-secret",
        bcrypt_rounds=4,
        environment="test",
    )


@pytest.fixture
def listing_repository() -> InMemoryListingRepository:
    return InMemoryListingRepository()


@pytest.fixture
def review_repository() -> InMemoryReviewRepository:
    return InMemoryReviewRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def container(
    settings: Settings,
    listing_repository: InMemoryListingRepository,
    review_repository: InMemoryReviewRepository,
    user_repository: InMemoryUserRepository,
) -> AppContainer:
    listing_service = ListingService(
        repository=listing_repository,
        review_repository=review_repository,
        cascade_review_delete=settings.cascade_review_delete,
    )
    review_service = ReviewService(
        repository=review_repository,
        listing_repository=listing_repository,
    )
    auth_service = AuthService(
        repository=user_repository, bcrypt_rounds=settings.bcrypt_rounds
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        listing_service=listing_service,
        review_service=review_service,
        auth_service=auth_service,
        close_resources=close_resources,
    )
