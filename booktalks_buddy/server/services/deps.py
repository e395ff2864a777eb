"""
Service Dependencies.

Builds the request-scoped services on top of the request's database session
and exposes them as ``Annotated`` dependency aliases for the API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booktalks_buddy.core.database.session import get_session
from booktalks_buddy.entitlements import EntitlementCalculator, get_entitlements_cache
from booktalks_buddy.server.core.config import settings
from booktalks_buddy.server.core.security import CurrentUser, get_current_user, get_optional_user
from booktalks_buddy.subscriptions import SubscriptionValidator, ValidationOptions, get_status_cache

from .analytics import AnalyticsService
from .book_search import BookSearchClient
from .books import CollectionService, PersonalBookService, ReadingListService
from .clubs import ClubService
from .discussions import DiscussionService
from .events import EventService
from .moderation import ModerationService
from .nominations import NominationService
from .notifications import NotificationService
from .progress import ProgressService
from .questions import QuestionService
from .store import StoreService
from .subscriptions import AccountService, SubscriptionService

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[CurrentUser], Depends(get_optional_user)]


def get_subscription_validator(session: SessionDep) -> SubscriptionValidator:
    config = settings.subscription
    return SubscriptionValidator(
        session,
        cache=get_status_cache(config.cache_ttl_seconds, config.cache_max_size),
        default_options=ValidationOptions(timeout_ms=config.validation_timeout_ms),
    )


ValidatorDep = Annotated[SubscriptionValidator, Depends(get_subscription_validator)]


def get_entitlement_calculator(session: SessionDep, validator: ValidatorDep) -> EntitlementCalculator:
    config = settings.entitlements
    return EntitlementCalculator(
        session,
        validator,
        cache=get_entitlements_cache(config.cache_ttl_seconds, config.cache_max_size),
        role_enforcement_enabled=config.role_enforcement_enabled,
        club_create_limit=config.club_create_limit,
        club_join_limit=config.club_join_limit,
    )


CalculatorDep = Annotated[EntitlementCalculator, Depends(get_entitlement_calculator)]


def get_club_service(session: SessionDep, calculator: CalculatorDep) -> ClubService:
    return ClubService(session, calculator)


def get_question_service(session: SessionDep, calculator: CalculatorDep) -> QuestionService:
    return QuestionService(session, calculator)


def get_progress_service(session: SessionDep, calculator: CalculatorDep) -> ProgressService:
    return ProgressService(session, calculator)


def get_discussion_service(session: SessionDep, calculator: CalculatorDep) -> DiscussionService:
    return DiscussionService(session, calculator)


def get_event_service(session: SessionDep, calculator: CalculatorDep) -> EventService:
    return EventService(session, calculator)


def get_nomination_service(session: SessionDep, calculator: CalculatorDep) -> NominationService:
    return NominationService(session, calculator)


def get_moderation_service(session: SessionDep, calculator: CalculatorDep) -> ModerationService:
    return ModerationService(session, calculator)


def get_store_service(session: SessionDep, calculator: CalculatorDep) -> StoreService:
    return StoreService(session, calculator)


def get_subscription_service(session: SessionDep, calculator: CalculatorDep) -> SubscriptionService:
    return SubscriptionService(session, calculator)


def get_account_service(session: SessionDep, calculator: CalculatorDep) -> AccountService:
    return AccountService(session, calculator)


def get_analytics_service(session: SessionDep, calculator: CalculatorDep) -> AnalyticsService:
    return AnalyticsService(session, calculator)


def get_notification_service(session: SessionDep) -> NotificationService:
    return NotificationService(session)


def get_personal_book_service(session: SessionDep) -> PersonalBookService:
    return PersonalBookService(session)


def get_reading_list_service(session: SessionDep) -> ReadingListService:
    return ReadingListService(session)


def get_collection_service(session: SessionDep) -> CollectionService:
    return CollectionService(session)


_book_search_client: Optional[BookSearchClient] = None


def get_book_search_client() -> BookSearchClient:
    """Process-wide search client sharing one connection pool."""
    global _book_search_client
    if _book_search_client is None:
        _book_search_client = BookSearchClient(settings.book_search)
    return _book_search_client


async def close_book_search_client() -> None:
    global _book_search_client
    if _book_search_client is not None:
        await _book_search_client.aclose()
        _book_search_client = None


ClubServiceDep = Annotated[ClubService, Depends(get_club_service)]
QuestionServiceDep = Annotated[QuestionService, Depends(get_question_service)]
ProgressServiceDep = Annotated[ProgressService, Depends(get_progress_service)]
DiscussionServiceDep = Annotated[DiscussionService, Depends(get_discussion_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
NominationServiceDep = Annotated[NominationService, Depends(get_nomination_service)]
ModerationServiceDep = Annotated[ModerationService, Depends(get_moderation_service)]
StoreServiceDep = Annotated[StoreService, Depends(get_store_service)]
SubscriptionServiceDep = Annotated[SubscriptionService, Depends(get_subscription_service)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
PersonalBookServiceDep = Annotated[PersonalBookService, Depends(get_personal_book_service)]
ReadingListServiceDep = Annotated[ReadingListService, Depends(get_reading_list_service)]
CollectionServiceDep = Annotated[CollectionService, Depends(get_collection_service)]
BookSearchDep = Annotated[BookSearchClient, Depends(get_book_search_client)]
