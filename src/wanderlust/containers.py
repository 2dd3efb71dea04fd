"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from wanderlust.adapters.supabase_listing_repository import SupabaseListingRepository
from wanderlust.adapters.supabase_review_repository import SupabaseReviewRepository
from wanderlust.adapters.supabase_user_repository import SupabaseUserRepository
from wanderlust.config import Settings
from wanderlust.services.auth import AuthService
from wanderlust.services.listings import ListingService
from wanderlust.services.reviews import ReviewService

logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    listing_service: ListingService
    review_service: ReviewService
    auth_service: AuthService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    listing_repository = SupabaseListingRepository(supabase_client)
    review_repository = SupabaseReviewRepository(supabase_client)
    user_repository = SupabaseUserRepository(supabase_client)
    listing_service = ListingService(
        repository=listing_repository,
        review_repository=review_repository,
        cascade_review_delete=resolved_settings.cascade_review_delete,
    )
    review_service = ReviewService(
        repository=review_repository,
        listing_repository=listing_repository,
    )
    auth_service = AuthService(
        repository=user_repository,
        bcrypt_rounds=resolved_settings.bcrypt_rounds,
    )

    async def close_resources() -> None:
        # supabase.Client has no public close; its pool goes with the process.
        logger.info("Released storage client")

    return AppContainer(
        settings=resolved_settings,
        listing_service=listing_service,
        review_service=review_service,
        auth_service=auth_service,
        close_resources=close_resources,
    )
