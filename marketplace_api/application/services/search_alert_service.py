from datetime import datetime, timezone
import uuid

from shared.models.listing import Listing
from shared.models.search_alert import SearchAlert
from shared.utils.constants import ENTITY_ID_LENGTH, PartitionKeys
from shared.utils.exceptions import NotificationException, TableStorageException, ValidationException
from shared.utils.logging_config import get_logger
from marketplace_api.application.interfaces.service_interfaces import (
    EmailServiceInterface,
    JoinOperator,
    TableServiceInterface,
)
from marketplace_api.application.services.search_alert_filters import build_search_alert_filters
from marketplace_api.infrastructure.notifications.search_alert_email import render_search_alert_email

logger = get_logger(__name__)


class SearchAlertService:
    """
    Stores clients' saved searches and emails them when a matching listing
    is approved.

    Attributes:
        repository (TableServiceInterface): Search alert persistence
        email_service (EmailServiceInterface): Outgoing mail transport
    """

    def __init__(self,
                 search_alert_repository: TableServiceInterface,
                 email_service: EmailServiceInterface):
        self.repository = search_alert_repository
        self.email_service = email_service
        logger.info("SearchAlertService initialized",
                    extra={"repository_type": type(search_alert_repository).__name__,
                           "email_service_type": type(email_service).__name__})

    async def create_search_alert(self, alert: SearchAlert) -> SearchAlert:
        """
        Save a client's search criteria.

        Raises:
            ValidationException: If the email is missing or a range is inverted
        """
        validation_errors = []
        if not alert.email or "@" not in alert.email:
            validation_errors.append("a valid email is required")
        if alert.min_price is not None and alert.max_price is not None and alert.min_price > alert.max_price:
            validation_errors.append("min_price must not exceed max_price")
        if alert.min_age is not None and alert.max_age is not None and alert.min_age > alert.max_age:
            validation_errors.append("min_age must not exceed max_age")
        if validation_errors:
            logger.warning("Search alert validation failed",
                           extra={"validation_errors": validation_errors})
            raise ValidationException(f"Search alert validation failed: {'; '.join(validation_errors)}")

        alert.alert_id = uuid.uuid4().hex[:ENTITY_ID_LENGTH]
        alert.email = alert.email.strip().lower()
        # prices are compared as doubles in the table query
        alert.min_price = float(alert.min_price) if alert.min_price is not None else None
        alert.max_price = float(alert.max_price) if alert.max_price is not None else None
        alert.created_date = datetime.now(timezone.utc)

        await self.repository.upsert_entity(
            alert.to_dict(),
            partition_key=PartitionKeys.SEARCH_ALERT.value,
            row_key=alert.alert_id
        )
        logger.info("Search alert created",
                    extra={"alert_id": alert.alert_id, "category": alert.category})
        return alert

    async def find_matching_alerts(self, listing: Listing) -> list[SearchAlert]:
        """Return every saved search the listing satisfies."""
        filters = build_search_alert_filters(listing)
        entities = await self.repository.query_entities_with_filters(
            filters=filters, join_operator=JoinOperator.AND
        )
        return [SearchAlert.from_dict(entity) for entity in entities]

    async def notify_matching_alerts(self, listing: Listing) -> int:
        """
        Email every subscriber whose saved search matches the listing.

        Returns the number of distinct recipients the message was handed to.
        Errors are logged and reported as zero recipients; the caller's
        approval stays in place.
        """
        try:
            alerts = await self.find_matching_alerts(listing)
            if not alerts:
                logger.info("No search alerts match listing", extra={"listing_id": listing.listing_id})
                return 0

            recipients = list(dict.fromkeys(
                alert.email.strip().lower() for alert in alerts if alert.email
            ))
            content = render_search_alert_email(listing)
            sent = await self.email_service.send_email(
                recipients, content.subject, content.text_body, content.html_body
            )
            logger.info("Search alert subscribers notified",
                        extra={"listing_id": listing.listing_id,
                               "matched_alerts": len(alerts),
                               "recipient_count": sent})
            return sent
        except (TableStorageException, NotificationException) as e:
            logger.error("Failed to notify search alert subscribers",
                         extra={"listing_id": listing.listing_id,
                                "error_type": type(e).__name__,
                                "error_details": str(e)},
                         exc_info=True)
            return 0
