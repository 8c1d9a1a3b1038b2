from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import uuid

from shared.models.constants import GENDERS, LISTING_CATEGORIES
from shared.models.listing import Listing
from shared.utils.constants import ENTITY_ID_LENGTH, PartitionKeys
from shared.utils.exceptions import (
    EntityNotFoundException,
    ListingNotFoundException,
    ValidationException,
)
from shared.utils.logging_config import get_logger
from marketplace_api.application.interfaces.service_interfaces import (
    CompareOperator,
    JoinOperator,
    TableServiceInterface,
)
from marketplace_api.application.services.search_alert_service import SearchAlertService

logger = get_logger(__name__)


@dataclass
class ListingApproval:
    listing: Listing
    notified: int


class ListingService:
    """
    Service for the listing moderation workflow.

    This service handles:
    - Creating pending listings submitted by trainers
    - Listing approved and pending listings
    - Approving a listing and notifying matching search alerts
    - Discarding listings

    Attributes:
        repository (TableServiceInterface): Repository for listing persistence
        search_alert_service (SearchAlertService): Alert matching and notification
    """

    def __init__(self,
                 listing_repository: TableServiceInterface,
                 search_alert_service: SearchAlertService):
        self.repository = listing_repository
        self.search_alert_service = search_alert_service
        logger.info("ListingService initialized with repository",
                    extra={"repository_type": type(listing_repository).__name__})

    async def create_listing(self, listing: Listing) -> Listing:
        """
        Store a new listing awaiting admin approval.

        Raises:
            ValidationException: If required listing fields are missing or invalid
        """
        validation_errors = []
        if listing.category not in LISTING_CATEGORIES:
            validation_errors.append(f"category must be one of: {', '.join(LISTING_CATEGORIES)}")
        if not listing.title or len(listing.title.strip()) < 3:
            validation_errors.append("title must be at least 3 characters")
        if listing.price is None or listing.price < 0:
            validation_errors.append("price must be zero or a positive number")
        if listing.gender and listing.gender not in GENDERS:
            validation_errors.append(f"gender must be one of: {', '.join(GENDERS)}")
        if listing.min_age is not None and listing.max_age is not None and listing.min_age > listing.max_age:
            validation_errors.append("min_age must not exceed max_age")

        if validation_errors:
            logger.error(
                "Listing validation failed",
                extra={
                    "trainer_id": listing.trainer_id,
                    "validation_errors": validation_errors,
                    "error_type": "ListingValidationFailed"
                }
            )
            raise ValidationException(f"Listing validation failed: {'; '.join(validation_errors)}")

        listing.listing_id = uuid.uuid4().hex[:ENTITY_ID_LENGTH]
        listing.price = float(listing.price)
        listing.is_approved = False
        listing.approved_by = None
        listing.approved_date = None
        listing.created_date = datetime.now(timezone.utc)
        listing.updated_date = listing.created_date

        await self.repository.upsert_entity(
            listing.to_dict(),
            partition_key=PartitionKeys.LISTING.value,
            row_key=listing.listing_id
        )
        logger.info("Listing created",
                    extra={"listing_id": listing.listing_id,
                           "trainer_id": listing.trainer_id,
                           "category": listing.category})
        return listing

    async def get_approved_listings(self,
                                    category: Optional[str] = None,
                                    gender: Optional[str] = None) -> list[Listing]:
        filters = [("is_approved", True, CompareOperator.EQUAL.value)]
        if category:
            filters.append(("category", category, CompareOperator.EQUAL.value))
        if gender:
            filters.append(("gender", gender, CompareOperator.EQUAL.value))
        return await self._query(filters)

    async def get_pending_listings(self) -> list[Listing]:
        return await self._query([("is_approved", False, CompareOperator.EQUAL.value)])

    async def get_listing(self, listing_id: str) -> Listing:
        entity = await self.repository.get_entity(
            partition_key=PartitionKeys.LISTING.value, row_key=listing_id
        )
        if entity is None:
            raise ListingNotFoundException(f"Listing {listing_id} not found")
        return Listing.from_dict(entity)

    async def approve_listing(self, listing_id: str, approver_name: str) -> ListingApproval:
        """
        Approve a listing, then email the subscribers whose saved search it matches.

        The two steps are not atomic: a notification failure leaves the
        listing approved with nobody notified.
        """
        listing = await self.get_listing(listing_id)
        listing.approve(approver_name)
        await self.repository.upsert_entity(
            listing.to_dict(),
            partition_key=PartitionKeys.LISTING.value,
            row_key=listing.listing_id
        )
        logger.info("Listing approved",
                    extra={"listing_id": listing_id, "approver_name": approver_name})

        notified = await self.search_alert_service.notify_matching_alerts(listing)
        return ListingApproval(listing=listing, notified=notified)

    async def discard_listing(self, listing_id: str) -> Listing:
        """Delete a listing and return what was removed."""
        listing = await self.get_listing(listing_id)
        try:
            await self.repository.delete_entity(
                partition_key=PartitionKeys.LISTING.value, row_key=listing_id
            )
        except EntityNotFoundException as e:
            raise ListingNotFoundException(f"Listing {listing_id} not found") from e
        logger.info("Listing discarded", extra={"listing_id": listing_id})
        return listing

    async def _query(self, filters: list[tuple]) -> list[Listing]:
        filters = [("PartitionKey", PartitionKeys.LISTING.value, CompareOperator.EQUAL.value)] + filters
        entities = await self.repository.query_entities_with_filters(
            filters=filters, join_operator=JoinOperator.AND
        )
        return [Listing.from_dict(entity) for entity in entities]
