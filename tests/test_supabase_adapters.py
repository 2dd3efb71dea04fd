"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import uuid4

import httpx
import pytest
from postgrest.exceptions import APIError

from wanderlust.adapters.supabase_listing_repository import SupabaseListingRepository
from wanderlust.adapters.supabase_review_repository import SupabaseReviewRepository
from wanderlust.adapters.supabase_user_repository import SupabaseUserRepository
from wanderlust.domain.errors import DuplicateUser, StorageFailure
from wanderlust.domain.listings import DEFAULT_IMAGE_URL


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    error: Exception | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def contains(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        if self.error is not None:
            raise self.error
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _listing_row(**overrides: object) -> dict[str, object]:
    row: dict[str, object] = {
        "id": str(uuid4()),
        "title": "Cabin",
        "description": None,
        "image_filename": "listingimage",
        "image_url": "https://img.example/cabin.jpg",
        "price": 100,
        "location": "Tahoe",
        "country": "United States",
        "review_ids": [],
    }
    row.update(overrides)
    return row


def test_supabase_listing_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("listings")
    row = _listing_row()
    table.queue("insert", [row])
    table.queue("select", [row])

    repository = SupabaseListingRepository(client)
    created = repository.create_listing({"title": "Cabin"})
    fetched = repository.get_listing(created.id)

    assert table.last_payload == {"title": "Cabin", "review_ids": []}
    assert str(created.id) == row["id"]
    assert fetched is not None
    assert fetched.price == 100.0
    assert fetched.image.url == "https://img.example/cabin.jpg"


def test_supabase_listing_repository_parses_review_ids_and_blank_image() -> None:
    client = FakeSupabaseClient()
    review_id = uuid4()
    client.table("listings").queue(
        "select", [_listing_row(review_ids=[str(review_id)], image_url=None)]
    )

    (listing,) = SupabaseListingRepository(client).list_listings()

    assert listing.review_ids == [review_id]
    assert listing.image.url == DEFAULT_IMAGE_URL


def test_supabase_listing_repository_missing_rows() -> None:
    client = FakeSupabaseClient()
    repository = SupabaseListingRepository(client)

    assert repository.get_listing(uuid4()) is None
    assert repository.update_listing(uuid4(), {"title": "x"}) is None
    assert repository.delete_listing(uuid4()) is None


def test_supabase_listing_repository_review_references() -> None:
    client = FakeSupabaseClient()
    table = client.table("listings")
    listing_id = uuid4()
    review_id = uuid4()
    table.queue("select", [_listing_row(review_ids=[str(review_id)])])

    repository = SupabaseListingRepository(client)
    repository.set_review_ids(listing_id, [review_id])
    referencing = repository.list_listings_referencing(review_id)

    assert table.last_payload == {"review_ids": [str(review_id)]}
    assert ("review_ids", [str(review_id)]) in table.last_filters
    assert referencing[0].review_ids == [review_id]


def test_supabase_review_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("reviews")
    review_id = str(uuid4())
    row = {
        "id": review_id,
        "rating": 4,
        "comment": "Cozy",
        "author": "ann",
        "created_at": "2024-05-01T10:00:00+00:00",
    }
    table.queue("insert", [row])
    table.queue("select", [row])
    table.queue("delete", [row])

    repository = SupabaseReviewRepository(client)
    created = repository.create_review({"rating": 4, "comment": "Cozy"})
    fetched = repository.get_reviews([created.id])
    deleted = repository.delete_review(created.id)

    assert created.created_at is not None
    assert fetched[0].author == "ann"
    assert deleted is True
    assert repository.delete_review(created.id) is False
    assert repository.get_reviews([]) == []


def test_supabase_user_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    row = {
        "id": str(uuid4()),
        "username": "ann",
        "email": "ann@example.com",
        "password_hash": "$2b$04$hash",
    }
    users_table.queue("insert", [row])
    users_table.queue("select", [row])

    repository = SupabaseUserRepository(client)
    created = repository.create_user("ann", "ann@example.com", "$2b$04$hash")
    fetched = repository.get_by_username("ann")

    assert str(created.id) == row["id"]
    assert fetched == created


def test_supabase_user_repository_unique_violation() -> None:
    client = FakeSupabaseClient()
    client.table("users").error = APIError(
        {"message": "duplicate key", "code": "23505", "hint": None, "details": None}
    )

    with pytest.raises(DuplicateUser):
        SupabaseUserRepository(client).create_user("ann", "ann@example.com", "h")


def test_supabase_errors_become_storage_failures() -> None:
    client = FakeSupabaseClient()
    client.table("listings").error = httpx.ConnectError("connection refused")
    client.table("users").error = APIError(
        {"message": "boom", "code": "XX000", "hint": None, "details": None}
    )

    with pytest.raises(StorageFailure):
        SupabaseListingRepository(client).list_listings()
    with pytest.raises(StorageFailure):
        SupabaseUserRepository(client).create_user("ann", "ann@example.com", "h")


def test_supabase_insert_without_rows_is_storage_failure() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(StorageFailure):
        SupabaseListingRepository(client).create_listing({"title": "Cabin"})
    with pytest.raises(StorageFailure):
        SupabaseReviewRepository(client).create_review({"rating": 4})
